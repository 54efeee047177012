"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.product_schemas import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)
from domain.schemas.sales_schemas import (
    DAILY_FIELDS,
    DailySalesUpsert,
    DailySalesResponse,
    WebSalesCountsUpdate,
    WebSalesRowResponse,
)
from domain.schemas.import_schemas import (
    MatchedRow,
    UnmatchedRow,
    ManualSelection,
    ReconcileRequest,
    ConfirmImportRequest,
    SummaryConfirmRow,
    SummaryConfirmRequest,
    LearnRequest,
    MappingResponse,
)
from domain.schemas.ingredient_schemas import (
    IngredientCreate,
    IngredientUpdate,
    IngredientResponse,
)
from domain.schemas.recipe_schemas import (
    RecipeItemIn,
    RecipeCreate,
    RecipeUpdate,
)
from domain.schemas.kpi_schemas import KpiEntryUpsert, KpiEntryResponse

__all__ = [
    # Products
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    # Sales
    "DAILY_FIELDS",
    "DailySalesUpsert",
    "DailySalesResponse",
    "WebSalesCountsUpdate",
    "WebSalesRowResponse",
    # Imports
    "MatchedRow",
    "UnmatchedRow",
    "ManualSelection",
    "ReconcileRequest",
    "ConfirmImportRequest",
    "SummaryConfirmRow",
    "SummaryConfirmRequest",
    "LearnRequest",
    "MappingResponse",
    # Ingredients
    "IngredientCreate",
    "IngredientUpdate",
    "IngredientResponse",
    # Recipes
    "RecipeItemIn",
    "RecipeCreate",
    "RecipeUpdate",
    # KPI
    "KpiEntryUpsert",
    "KpiEntryResponse",
]
