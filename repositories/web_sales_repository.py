"""
Web Sales Repository - monthly per-product marketplace unit counts
"""

from typing import Dict, List, Optional
from datetime import date
from uuid import UUID
from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.enums import Marketplace
from domain.models import WebSalesSummary, Product


class WebSalesRepository(BaseRepository[WebSalesSummary]):
    """Repository for web_sales_summary rows"""

    def __init__(self, db: Session):
        super().__init__(db, WebSalesSummary)

    def get_by_product_month(
        self, product_id: UUID, report_month: date
    ) -> Optional[WebSalesSummary]:
        return (
            self.db.query(WebSalesSummary)
            .filter(
                and_(
                    WebSalesSummary.product_id == product_id,
                    WebSalesSummary.report_month == report_month,
                )
            )
            .first()
        )

    def get_by_month(self, report_month: date) -> List[WebSalesSummary]:
        return (
            self.db.query(WebSalesSummary)
            .filter(WebSalesSummary.report_month == report_month)
            .all()
        )

    def get_or_create(self, product_id: UUID, report_month: date) -> WebSalesSummary:
        """Existing row for (product, month) or a new zero-filled one (not committed)"""
        row = self.get_by_product_month(product_id, report_month)
        if row is None:
            row = WebSalesSummary(product_id=product_id, report_month=report_month)
            for marketplace in Marketplace:
                setattr(row, marketplace.count_column, 0)
            self.db.add(row)
        return row

    def delete_by_month(self, report_month: date) -> int:
        count = (
            self.db.query(WebSalesSummary)
            .filter(WebSalesSummary.report_month == report_month)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count

    def monthly_amounts(self, start: date, end: date) -> Dict[date, int]:
        """
        Yen sales per month (sum of all marketplace counts x product price)
        for report months in [start, end].
        """
        total_count = sum(
            func.coalesce(getattr(WebSalesSummary, m.count_column), 0)
            for m in Marketplace
        )
        rows = (
            self.db.query(
                WebSalesSummary.report_month,
                func.sum(total_count * Product.price),
            )
            .join(Product, Product.id == WebSalesSummary.product_id)
            .filter(
                and_(
                    WebSalesSummary.report_month >= start,
                    WebSalesSummary.report_month <= end,
                )
            )
            .group_by(WebSalesSummary.report_month)
            .all()
        )
        return {month: int(amount or 0) for month, amount in rows}
