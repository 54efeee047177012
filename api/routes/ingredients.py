"""Ingredient master routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from domain.models import get_db_session
from domain.schemas.ingredient_schemas import (
    IngredientCreate,
    IngredientUpdate,
    IngredientResponse,
)
from services.ingredient_service import IngredientService

router = APIRouter(prefix="/ingredients", tags=["Ingredients"])
logger = logging.getLogger("backoffice.api.ingredients")


@router.get("", response_model=List[IngredientResponse])
def list_ingredients(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db_session),
):
    items = IngredientService.list_ingredients(db, search, category)
    return [IngredientResponse.model_validate(i) for i in items]


@router.post("", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
def create_ingredient(payload: IngredientCreate, db: Session = Depends(get_db_session)):
    ingredient = IngredientService.create_ingredient(db, payload)
    return IngredientResponse.model_validate(ingredient)


@router.get("/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient(ingredient_id: UUID, db: Session = Depends(get_db_session)):
    return IngredientResponse.model_validate(
        IngredientService.get_ingredient(db, ingredient_id)
    )


@router.patch("/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(
    ingredient_id: UUID,
    payload: IngredientUpdate,
    db: Session = Depends(get_db_session),
):
    ingredient = IngredientService.update_ingredient(db, ingredient_id, payload)
    return IngredientResponse.model_validate(ingredient)


@router.delete("/{ingredient_id}")
def delete_ingredient(ingredient_id: UUID, db: Session = Depends(get_db_session)):
    IngredientService.delete_ingredient(db, ingredient_id)
    return {"status": "ok", "removed": str(ingredient_id)}
