"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.product_repository import ProductRepository
from repositories.mapping_repository import MappingRepository
from repositories.daily_sales_repository import DailySalesRepository
from repositories.web_sales_repository import WebSalesRepository
from repositories.ingredient_repository import IngredientRepository
from repositories.recipe_repository import RecipeRepository
from repositories.kpi_repository import KpiRepository

__all__ = [
    "BaseRepository",
    "ProductRepository",
    "MappingRepository",
    "DailySalesRepository",
    "WebSalesRepository",
    "IngredientRepository",
    "RecipeRepository",
    "KpiRepository",
]
