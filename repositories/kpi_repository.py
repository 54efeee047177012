"""
KPI Repository - manually entered monthly KPI figures
"""

from typing import List, Optional
from datetime import date
from sqlalchemy import and_
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import KpiManualEntry


class KpiRepository(BaseRepository[KpiManualEntry]):
    """Repository for kpi_manual_entries"""

    def __init__(self, db: Session):
        super().__init__(db, KpiManualEntry)

    def get_entry(
        self, metric: str, channel_code: str, month: date
    ) -> Optional[KpiManualEntry]:
        return (
            self.db.query(KpiManualEntry)
            .filter(
                and_(
                    KpiManualEntry.metric == metric,
                    KpiManualEntry.channel_code == channel_code,
                    KpiManualEntry.month == month,
                )
            )
            .first()
        )

    def get_range(
        self, start: date, end: date, metric: Optional[str] = None
    ) -> List[KpiManualEntry]:
        """Entries with start <= month <= end, optionally for one metric"""
        q = self.db.query(KpiManualEntry).filter(
            and_(KpiManualEntry.month >= start, KpiManualEntry.month <= end)
        )
        if metric:
            q = q.filter(KpiManualEntry.metric == metric)
        return q.order_by(KpiManualEntry.month).all()

    def latest_month(self) -> Optional[date]:
        row = (
            self.db.query(KpiManualEntry.month)
            .order_by(KpiManualEntry.month.desc())
            .first()
        )
        return row[0] if row else None

    def upsert(
        self, metric: str, channel_code: str, month: date, amount: int
    ) -> KpiManualEntry:
        entry = self.get_entry(metric, channel_code, month)
        if entry:
            entry.amount = amount
        else:
            entry = KpiManualEntry(
                metric=metric, channel_code=channel_code, month=month, amount=amount
            )
            self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry
