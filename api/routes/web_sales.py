"""Monthly web sales summary routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from domain.models import get_db_session
from domain.schemas.sales_schemas import WebSalesCountsUpdate, WebSalesRowResponse
from services.web_sales_service import WebSalesService

router = APIRouter(prefix="/web-sales", tags=["Web Sales"])
logger = logging.getLogger("backoffice.api.web_sales")


@router.get("")
def get_month(
    month: str = Query(..., description="YYYY-MM"),
    db: Session = Depends(get_db_session),
):
    """Every product with its marketplace counts, sales amount and the month totals"""
    return WebSalesService.get_month(db, month)


@router.get("/ranking")
def ranking(
    month: str = Query(..., description="YYYY-MM"),
    limit: int = Query(default=20, ge=1, le=500),
    db: Session = Depends(get_db_session),
):
    """Products by sales amount, best first"""
    return WebSalesService.ranking(db, month, limit)


@router.patch("/{product_id}", response_model=WebSalesRowResponse)
def set_counts(
    product_id: UUID,
    payload: WebSalesCountsUpdate,
    month: str = Query(..., description="YYYY-MM"),
    db: Session = Depends(get_db_session),
):
    """Set some marketplace counts of one product; omitted marketplaces are unchanged"""
    row = WebSalesService.set_counts(db, product_id, month, payload)
    return WebSalesRowResponse.model_validate(row)


@router.delete("")
def delete_month(
    month: str = Query(..., description="YYYY-MM"),
    db: Session = Depends(get_db_session),
):
    deleted = WebSalesService.delete_month(db, month)
    return {"status": "ok", "deleted": deleted}
