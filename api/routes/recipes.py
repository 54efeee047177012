"""Recipe and cost accounting routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from api.responses import paginated_response
from domain.enums import RecipeStatus
from domain.models import get_db_session
from domain.schemas.recipe_schemas import RecipeCreate, RecipeUpdate
from services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["Recipes"])
logger = logging.getLogger("backoffice.api.recipes")


@router.get("")
def list_recipes(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    status_filter: Optional[RecipeStatus] = Query(None, alias="status"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db_session),
):
    """Paginated recipe list with item counts and profit margins"""
    entries, total = RecipeService.list_recipes(
        db,
        search,
        category,
        status_filter.value if status_filter else None,
        page,
        page_size,
    )
    return paginated_response(entries, total, page, page_size)


@router.get("/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db_session)):
    return RecipeService.list_categories(db)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_recipe(payload: RecipeCreate, db: Session = Depends(get_db_session)):
    """Create a recipe; line costs and totals are calculated on save"""
    return RecipeService.create_recipe(db, payload)


@router.get("/{recipe_id}")
def get_recipe(recipe_id: UUID, db: Session = Depends(get_db_session)):
    """Recipe with lines, lines grouped by type, totals and profit"""
    return RecipeService.get_recipe_detail(db, recipe_id)


@router.put("/{recipe_id}")
def update_recipe(
    recipe_id: UUID, payload: RecipeUpdate, db: Session = Depends(get_db_session)
):
    return RecipeService.update_recipe(db, recipe_id, payload)


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: UUID, db: Session = Depends(get_db_session)):
    RecipeService.delete_recipe(db, recipe_id)
    return {"status": "ok", "removed": str(recipe_id)}


@router.get("/{recipe_id}/cost")
def cost_breakdown(
    recipe_id: UUID,
    batch: List[int] = Query(default=[], description="Batch sizes, e.g. ?batch=100&batch=400"),
    db: Session = Depends(get_db_session),
):
    """Unit cost, profit and material plans for each batch size"""
    return RecipeService.cost_breakdown(db, recipe_id, batch)


@router.get("/{recipe_id}/nutrition")
def nutrition(recipe_id: UUID, db: Session = Depends(get_db_session)):
    """Nutrition totals and per-100 g values from the ingredient master"""
    return RecipeService.nutrition(db, recipe_id)
