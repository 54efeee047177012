"""Daily floor sales report routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from datetime import date
from typing import List

from domain.models import get_db_session
from domain.schemas.sales_schemas import DailySalesUpsert, DailySalesResponse
from services.daily_sales_service import DailySalesService

router = APIRouter(prefix="/daily-sales", tags=["Daily Sales"])
logger = logging.getLogger("backoffice.api.daily_sales")


@router.get("", response_model=List[DailySalesResponse])
def list_month(
    month: str = Query(..., description="YYYY-MM"),
    db: Session = Depends(get_db_session),
):
    """All reports of a month, oldest first"""
    return DailySalesService.list_month(db, month)


@router.get("/{report_date}", response_model=DailySalesResponse)
def get_daily(report_date: date, db: Session = Depends(get_db_session)):
    """The day's report; every field is null when nothing was entered"""
    return DailySalesService.get_daily(db, report_date)


@router.put("/{report_date}", response_model=DailySalesResponse)
def upsert_daily(
    report_date: date, payload: DailySalesUpsert, db: Session = Depends(get_db_session)
):
    """Create or replace the day's report"""
    return DailySalesService.upsert_daily(db, report_date, payload)


@router.delete("/{report_date}")
def delete_daily(report_date: date, db: Session = Depends(get_db_session)):
    DailySalesService.delete_daily(db, report_date)
    return {"status": "ok", "removed": report_date.isoformat()}


@router.get("/{report_date}/month-to-date")
def month_to_date(report_date: date, db: Session = Depends(get_db_session)):
    """Totals from the first of the month through report_date"""
    return DailySalesService.month_to_date(db, report_date)
