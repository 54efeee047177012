from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from domain.enums import Marketplace


class ProductCreate(BaseModel):
    """Schema for registering a product in the master"""

    name: str = Field(..., min_length=1, description="Product name (unique)")
    price: int = Field(..., gt=0, description="Unit price in yen")
    series_name: Optional[str] = None
    marketplace: Optional[Marketplace] = Field(
        None, description="Marketplace whose CSV title should be learned"
    )
    marketplace_title: Optional[str] = Field(
        None, description="CSV title to map to the new product"
    )


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[int] = Field(None, gt=0)
    series_name: Optional[str] = None


class ProductResponse(BaseModel):
    id: UUID
    name: str
    series: int
    series_name: Optional[str] = None
    product_number: str
    price: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
