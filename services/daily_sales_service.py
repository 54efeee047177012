from typing import Any, Dict, List
from datetime import date
from sqlalchemy.orm import Session
import logging

from domain.enums import Marketplace
from domain.models import DailySalesReport
from domain.schemas.sales_schemas import DAILY_FIELDS, DailySalesUpsert
from repositories import DailySalesRepository
from core.utils.helpers import month_end, normalize_month
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("backoffice.daily_sales")


def _to_dict(report_date: date, row: DailySalesReport = None) -> Dict[str, Any]:
    data = {"date": report_date}
    for field in DAILY_FIELDS:
        data[field] = getattr(row, field) if row is not None else None
    return data


class DailySalesService:
    @staticmethod
    def get_daily(db: Session, report_date: date) -> Dict[str, Any]:
        """The day's report, or an all-null record when nothing was entered yet"""
        row = DailySalesRepository(db).get_by_date(report_date)
        return _to_dict(report_date, row)

    @staticmethod
    def upsert_daily(
        db: Session, report_date: date, data: DailySalesUpsert
    ) -> Dict[str, Any]:
        """
        Create or replace the report for a date.

        Every field is written, so omitted or blank fields become null.

        Raises:
            ServiceValidationError: any value is negative
        """
        values = data.model_dump()
        negative = sorted(k for k, v in values.items() if v is not None and v < 0)
        if negative:
            raise ServiceValidationError(
                "Values must not be negative",
                details={"fields": negative},
            )

        repo = DailySalesRepository(db)
        try:
            row = repo.get_by_date(report_date)
            if row is None:
                row = DailySalesReport(date=report_date)
                db.add(row)
            for field in DAILY_FIELDS:
                setattr(row, field, values.get(field))
            db.commit()
            db.refresh(row)
        except Exception:
            db.rollback()
            logger.exception("Error saving daily report for %s", report_date)
            raise
        logger.info(f"Saved daily report for {report_date}")
        return _to_dict(report_date, row)

    @staticmethod
    def delete_daily(db: Session, report_date: date) -> bool:
        if not DailySalesRepository(db).delete_by_date(report_date):
            raise NotFoundError(f"No daily report for {report_date}")
        return True

    @staticmethod
    def month_to_date(db: Session, report_date: date) -> Dict[str, Any]:
        """
        Sums of every field from the 1st of the month through report_date.

        Returns:
            Dict with start, end, days_reported, per-field totals and the web
            totals (all marketplace counts and amounts added together)
        """
        start = report_date.replace(day=1)
        rows = DailySalesRepository(db).get_range(start, report_date)

        totals = {field: sum(getattr(r, field) or 0 for r in rows) for field in DAILY_FIELDS}
        web_count = sum(totals[m.count_column] for m in Marketplace)
        web_amount = sum(totals[m.amount_column] for m in Marketplace)

        return {
            "start": start,
            "end": report_date,
            "days_reported": len(rows),
            "totals": totals,
            "web_count_total": web_count,
            "web_amount_total": web_amount,
        }

    @staticmethod
    def list_month(db: Session, month: str) -> List[Dict[str, Any]]:
        start = normalize_month(month)
        rows = DailySalesRepository(db).get_range(start, month_end(start))
        return [_to_dict(r.date, r) for r in rows]

    @staticmethod
    def floor_sales_by_month(db: Session, start: date, end: date) -> Dict[date, int]:
        """Floor register sales per month (first-of-month keys) between two months"""
        rows = DailySalesRepository(db).get_range(start, month_end(end))
        totals: Dict[date, int] = {}
        for r in rows:
            key = r.date.replace(day=1)
            totals[key] = totals.get(key, 0) + (r.floor_sales or 0)
        return totals
