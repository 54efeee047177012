"""
Daily Sales Repository - Data access layer for the daily floor sales report
"""

from typing import List, Optional
from datetime import date
from sqlalchemy import and_
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import DailySalesReport


class DailySalesRepository(BaseRepository[DailySalesReport]):
    """Repository for daily sales report rows (one per date)"""

    def __init__(self, db: Session):
        super().__init__(db, DailySalesReport)

    def get_by_date(self, report_date: date) -> Optional[DailySalesReport]:
        return (
            self.db.query(DailySalesReport)
            .filter(DailySalesReport.date == report_date)
            .first()
        )

    def get_range(self, start: date, end: date) -> List[DailySalesReport]:
        """Rows with start <= date <= end, oldest first"""
        return (
            self.db.query(DailySalesReport)
            .filter(
                and_(DailySalesReport.date >= start, DailySalesReport.date <= end)
            )
            .order_by(DailySalesReport.date)
            .all()
        )

    def delete_by_date(self, report_date: date) -> bool:
        row = self.get_by_date(report_date)
        if row:
            self.db.delete(row)
            self.db.commit()
            return True
        return False
