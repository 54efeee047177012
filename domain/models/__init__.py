"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.product import Product, MarketplaceProductMapping
from domain.models.sales import DailySalesReport, WebSalesSummary
from domain.models.recipe import Ingredient, Recipe, RecipeItem
from domain.models.kpi import KpiManualEntry

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Product models
    "Product",
    "MarketplaceProductMapping",
    # Sales models
    "DailySalesReport",
    "WebSalesSummary",
    # Recipe models
    "Ingredient",
    "Recipe",
    "RecipeItem",
    # KPI models
    "KpiManualEntry",
]
