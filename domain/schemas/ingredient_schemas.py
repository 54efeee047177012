from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID


class IngredientCreate(BaseModel):
    """Ingredient master row; nutrition values are per 100 g"""

    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    unit_quantity: Optional[float] = Field(None, gt=0, description="Grams per purchase unit")
    price_incl_tax: Optional[int] = Field(None, ge=0)
    price_excl_tax: Optional[int] = Field(None, ge=0)
    calories: Optional[float] = None
    protein: Optional[float] = None
    fat: Optional[float] = None
    carbohydrate: Optional[float] = None
    sodium: Optional[float] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None


class IngredientUpdate(IngredientCreate):
    name: Optional[str] = Field(None, min_length=1)


class IngredientResponse(IngredientCreate):
    id: UUID
    price_per_gram: Optional[float] = None

    model_config = {"from_attributes": True}
