"""API routes package"""

from . import (
    health,
    products,
    daily_sales,
    web_sales,
    imports,
    learning,
    ingredients,
    recipes,
    kpi,
)

__all__ = [
    "health",
    "products",
    "daily_sales",
    "web_sales",
    "imports",
    "learning",
    "ingredients",
    "recipes",
    "kpi",
]
