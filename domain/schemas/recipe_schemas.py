from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date

from domain.enums import RecipeItemType, RecipeStatus


class RecipeItemIn(BaseModel):
    """One recipe line as entered"""

    item_name: str = Field(..., min_length=1)
    item_type: RecipeItemType = RecipeItemType.INGREDIENT
    unit_quantity: Optional[float] = None
    unit_price: Optional[float] = None
    usage_amount: Optional[float] = None
    cost: Optional[int] = Field(
        None, description="Only used when the cost cannot be derived (expenses)"
    )


class RecipeCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    is_intermediate: bool = False
    status: RecipeStatus = RecipeStatus.ACTIVE
    development_date: Optional[date] = None
    manufacturing_notes: Optional[str] = None
    filling_quantity: Optional[float] = None
    storage_method: Optional[str] = None
    selling_price: Optional[int] = Field(None, ge=0)
    production_quantity: Optional[int] = Field(None, gt=0)
    source_file: Optional[str] = None
    items: List[RecipeItemIn] = Field(default_factory=list)


class RecipeUpdate(BaseModel):
    """Header fields to change; items are replaced when provided"""

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    is_intermediate: Optional[bool] = None
    status: Optional[RecipeStatus] = None
    development_date: Optional[date] = None
    manufacturing_notes: Optional[str] = None
    filling_quantity: Optional[float] = None
    storage_method: Optional[str] = None
    selling_price: Optional[int] = Field(None, ge=0)
    production_quantity: Optional[int] = Field(None, gt=0)
    items: Optional[List[RecipeItemIn]] = None
