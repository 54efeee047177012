from typing import Any, Dict, List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
import logging
import uuid

from app.config import settings
from domain.models import Recipe, RecipeItem
from domain.schemas.recipe_schemas import RecipeCreate, RecipeItemIn, RecipeUpdate
from repositories import IngredientRepository, RecipeRepository
from services import recipe_costing
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("backoffice.recipes")


def _build_items(items: Sequence[RecipeItemIn]) -> List[RecipeItem]:
    built = []
    for order, item in enumerate(items):
        row = RecipeItem(
            item_name=item.item_name.strip(),
            item_type=item.item_type.value,
            unit_quantity=item.unit_quantity,
            unit_price=item.unit_price,
            usage_amount=item.usage_amount,
            cost=item.cost,
            display_order=order,
        )
        row.cost = recipe_costing.item_cost(row)
        built.append(row)
    return built


def _refresh_totals(recipe: Recipe) -> None:
    """Recompute the cached cost columns from the recipe's lines"""
    totals = recipe_costing.calculate_totals(recipe.items)
    recipe.total_cost = int(totals["total_cost"])
    recipe.total_weight = totals["total_weight"]
    recipe.unit_cost = recipe_costing.unit_cost(
        totals["total_cost"], recipe.production_quantity
    )


def _item_dict(item: RecipeItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "item_name": item.item_name,
        "item_type": item.item_type,
        "unit_quantity": item.unit_quantity,
        "unit_price": item.unit_price,
        "usage_amount": item.usage_amount,
        "cost": item.cost,
        "display_order": item.display_order,
    }


def _header_dict(recipe: Recipe) -> Dict[str, Any]:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "category": recipe.category,
        "is_intermediate": recipe.is_intermediate,
        "status": recipe.status,
        "development_date": recipe.development_date,
        "manufacturing_notes": recipe.manufacturing_notes,
        "filling_quantity": recipe.filling_quantity,
        "storage_method": recipe.storage_method,
        "selling_price": recipe.selling_price,
        "production_quantity": recipe.production_quantity,
        "total_cost": recipe.total_cost,
        "unit_cost": recipe.unit_cost,
        "total_weight": recipe.total_weight,
        "source_file": recipe.source_file,
    }


class RecipeService:
    @staticmethod
    def list_recipes(
        db: Session,
        search: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        One page of recipes with item count and profit margin.

        Returns:
            (entries, total number of matching recipes)
        """
        recipes, total = RecipeRepository(db).search(
            search, category, status, skip=(page - 1) * page_size, limit=page_size
        )
        entries = []
        for r in recipes:
            entry = _header_dict(r)
            entry["item_count"] = len(r.items)
            profit = recipe_costing.calculate_profit(r.selling_price, r.total_cost or 0)
            entry["profit_margin"] = profit["profit_rate"]
            entries.append(entry)
        return entries, total

    @staticmethod
    def get_recipe(db: Session, recipe_id: uuid.UUID) -> Recipe:
        recipe = RecipeRepository(db).get_by_id(recipe_id)
        if not recipe:
            raise NotFoundError(f"Recipe not found: {recipe_id}")
        return recipe

    @staticmethod
    def get_recipe_detail(db: Session, recipe_id: uuid.UUID) -> Dict[str, Any]:
        """Header, lines, lines grouped by type, totals and profit"""
        recipe = RecipeService.get_recipe(db, recipe_id)
        totals = recipe_costing.calculate_totals(recipe.items)
        detail = _header_dict(recipe)
        detail["items"] = [_item_dict(i) for i in recipe.items]
        detail["groups"] = [
            {**g, "items": [_item_dict(i) for i in g["items"]]}
            for g in recipe_costing.group_items(recipe.items)
        ]
        detail["totals"] = totals
        detail["profit"] = recipe_costing.calculate_profit(
            recipe.selling_price, totals["total_cost"]
        )
        return detail

    @staticmethod
    def create_recipe(db: Session, data: RecipeCreate) -> Dict[str, Any]:
        name = data.name.strip()
        if not name:
            raise ServiceValidationError("Recipe name must not be empty")

        fields = data.model_dump(exclude={"items"})
        fields["name"] = name
        fields["status"] = data.status.value
        if not fields.get("production_quantity"):
            fields["production_quantity"] = settings.default_production_quantity

        recipe = Recipe(**fields)
        recipe.items = _build_items(data.items)
        _refresh_totals(recipe)
        try:
            db.add(recipe)
            db.commit()
            db.refresh(recipe)
        except Exception:
            db.rollback()
            logger.exception("Error creating recipe '%s'", name)
            raise
        logger.info(f"Created recipe '{name}' with {len(recipe.items)} items")
        return RecipeService.get_recipe_detail(db, recipe.id)

    @staticmethod
    def update_recipe(
        db: Session, recipe_id: uuid.UUID, data: RecipeUpdate
    ) -> Dict[str, Any]:
        """Update header fields; when items are given they replace the old lines"""
        recipe = RecipeService.get_recipe(db, recipe_id)
        fields = data.model_dump(exclude_unset=True, exclude={"items"})
        if "name" in fields:
            name = (fields["name"] or "").strip()
            if not name:
                raise ServiceValidationError("Recipe name must not be empty")
            fields["name"] = name
        if fields.get("status") is not None:
            fields["status"] = data.status.value
        if "production_quantity" in fields and not fields["production_quantity"]:
            fields["production_quantity"] = settings.default_production_quantity

        try:
            for key, value in fields.items():
                setattr(recipe, key, value)
            if data.items is not None:
                recipe.items = _build_items(data.items)
            _refresh_totals(recipe)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error updating recipe %s", recipe_id)
            raise
        return RecipeService.get_recipe_detail(db, recipe_id)

    @staticmethod
    def delete_recipe(db: Session, recipe_id: uuid.UUID) -> bool:
        if not RecipeRepository(db).delete(recipe_id):
            raise NotFoundError(f"Recipe not found: {recipe_id}")
        return True

    @staticmethod
    def cost_breakdown(
        db: Session, recipe_id: uuid.UUID, batch_sizes: Sequence[int] = ()
    ) -> Dict[str, Any]:
        """Unit economics plus a material plan for each requested batch size"""
        recipe = RecipeService.get_recipe(db, recipe_id)
        if any(b <= 0 for b in batch_sizes):
            raise ServiceValidationError("Batch sizes must be positive")
        sizes = list(batch_sizes) or [recipe.production_quantity or settings.default_production_quantity]

        totals = recipe_costing.calculate_totals(recipe.items)
        return {
            "recipe_id": recipe.id,
            "name": recipe.name,
            "totals": totals,
            "unit_cost": recipe_costing.unit_cost(
                totals["total_cost"], recipe.production_quantity
            ),
            "profit": recipe_costing.calculate_profit(
                recipe.selling_price, totals["total_cost"]
            ),
            "batches": [recipe_costing.batch_plan(recipe.items, n) for n in sizes],
        }

    @staticmethod
    def nutrition(db: Session, recipe_id: uuid.UUID) -> Dict[str, Any]:
        recipe = RecipeService.get_recipe(db, recipe_id)
        names = [i.item_name for i in recipe.items]
        masters = {i.name: i for i in IngredientRepository(db).get_by_names(names)}
        result = recipe_costing.calculate_nutrition(recipe.items, masters)
        result["recipe_id"] = recipe.id
        result["name"] = recipe.name
        return result

    @staticmethod
    def list_categories(db: Session) -> List[str]:
        return RecipeRepository(db).get_categories()
