"""Product master routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List, Optional

from domain.models import get_db_session
from domain.schemas.product_schemas import ProductCreate, ProductUpdate, ProductResponse
from services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])
logger = logging.getLogger("backoffice.api.products")


@router.get("", response_model=List[ProductResponse])
def list_products(
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
    db: Session = Depends(get_db_session),
):
    """List products ordered by series number"""
    products = ProductService.list_products(db, search)
    return [ProductResponse.model_validate(p) for p in products]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db_session)):
    """
    Register a product. The series number and product number (P<series>)
    are assigned automatically.

    If marketplace and marketplace_title are given, the title is learned so
    the next CSV import of that marketplace matches it directly.
    """
    product = ProductService.create_product(db, payload)
    return ProductResponse.model_validate(product)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: UUID, db: Session = Depends(get_db_session)):
    return ProductResponse.model_validate(ProductService.get_product(db, product_id))


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: UUID, payload: ProductUpdate, db: Session = Depends(get_db_session)
):
    product = ProductService.update_product(db, product_id, payload)
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}")
def delete_product(product_id: UUID, db: Session = Depends(get_db_session)):
    """Delete a product with its web sales rows and learned titles"""
    ProductService.delete_product(db, product_id)
    return {"status": "ok", "removed": str(product_id)}
