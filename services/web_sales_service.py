from typing import Any, Dict, List, Mapping, Union
from datetime import date
from sqlalchemy.orm import Session
import logging
import uuid

from domain.enums import Marketplace
from domain.models import WebSalesSummary
from domain.schemas.sales_schemas import WebSalesCountsUpdate
from repositories import ProductRepository, WebSalesRepository
from core.utils.helpers import month_key, normalize_month
from app.exceptions import NotFoundError

logger = logging.getLogger("backoffice.web_sales")

MonthInput = Union[str, date]


class WebSalesService:
    @staticmethod
    def get_month(db: Session, month: MonthInput) -> Dict[str, Any]:
        """
        Monthly web sales for every product in the master.

        Products without a summary row are listed with zero counts. Each row
        carries total_count and amount (total_count x price); the result also
        has per-marketplace totals and grand totals.
        """
        report_month = normalize_month(month)
        products = ProductRepository(db).list_all()
        by_product = {
            r.product_id: r for r in WebSalesRepository(db).get_by_month(report_month)
        }

        rows = []
        totals = {m.value: {"count": 0, "amount": 0} for m in Marketplace}
        for p in products:
            summary = by_product.get(p.id)
            row = {
                "product_id": p.id,
                "product_name": p.name,
                "product_number": p.product_number,
                "series": p.series,
                "price": p.price,
            }
            total_count = 0
            for m in Marketplace:
                count = (getattr(summary, m.count_column) or 0) if summary else 0
                row[m.count_column] = count
                total_count += count
                totals[m.value]["count"] += count
                totals[m.value]["amount"] += count * p.price
            row["total_count"] = total_count
            row["amount"] = total_count * p.price
            rows.append(row)

        return {
            "month": month_key(report_month),
            "rows": rows,
            "marketplace_totals": totals,
            "total_count": sum(r["total_count"] for r in rows),
            "total_amount": sum(r["amount"] for r in rows),
        }

    @staticmethod
    def set_counts(
        db: Session,
        product_id: uuid.UUID,
        month: MonthInput,
        data: WebSalesCountsUpdate,
    ) -> WebSalesSummary:
        """Upsert the given marketplace columns, leaving the others unchanged"""
        report_month = normalize_month(month)
        if not ProductRepository(db).exists(product_id):
            raise NotFoundError(f"Product not found: {product_id}")

        repo = WebSalesRepository(db)
        try:
            row = repo.get_or_create(product_id, report_month)
            for column, value in data.model_dump(exclude_none=True).items():
                setattr(row, column, value)
            db.commit()
            db.refresh(row)
        except Exception:
            db.rollback()
            logger.exception(
                "Error saving web sales for %s %s", product_id, report_month
            )
            raise
        return row

    @staticmethod
    def set_marketplace_counts(
        db: Session,
        month: MonthInput,
        marketplace: Marketplace,
        quantities: Mapping[uuid.UUID, int],
        commit: bool = True,
    ) -> int:
        """
        Replace one marketplace's count for each product in `quantities`.

        Other marketplace columns of the same rows are kept. Returns the
        number of rows written.
        """
        report_month = normalize_month(month)
        repo = WebSalesRepository(db)
        column = Marketplace(marketplace).count_column
        for product_id, qty in quantities.items():
            row = repo.get_or_create(product_id, report_month)
            setattr(row, column, int(qty))
        if commit:
            db.commit()
        else:
            db.flush()
        return len(quantities)

    @staticmethod
    def delete_month(db: Session, month: MonthInput) -> int:
        report_month = normalize_month(month)
        count = WebSalesRepository(db).delete_by_month(report_month)
        logger.info(f"Deleted {count} web sales rows for {report_month}")
        return count

    @staticmethod
    def ranking(db: Session, month: MonthInput, limit: int = 20) -> List[Dict[str, Any]]:
        """Products by sales amount, best first; products with no sales are left out"""
        rows = [r for r in WebSalesService.get_month(db, month)["rows"] if r["amount"] > 0]
        rows.sort(key=lambda r: (-r["amount"], -r["total_count"], r["series"]))
        ranked = []
        for rank, row in enumerate(rows[:limit], start=1):
            ranked.append({"rank": rank, **row})
        return ranked

    @staticmethod
    def monthly_totals(db: Session, start: MonthInput, end: MonthInput) -> Dict[date, int]:
        """Yen amount per report month between two months inclusive"""
        return WebSalesRepository(db).monthly_amounts(
            normalize_month(start), normalize_month(end)
        )
