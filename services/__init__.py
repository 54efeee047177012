"""Services package - Business logic layer"""

from services.product_service import ProductService
from services.learning_service import LearningService
from services.daily_sales_service import DailySalesService
from services.web_sales_service import WebSalesService
from services.csv_import_service import CsvImportService
from services.ingredient_service import IngredientService
from services.recipe_service import RecipeService
from services.kpi_service import KpiService

# Note: matching, csv_reader, recipe_costing and fiscal hold plain functions

__all__ = [
    "ProductService",
    "LearningService",
    "DailySalesService",
    "WebSalesService",
    "CsvImportService",
    "IngredientService",
    "RecipeService",
    "KpiService",
]
