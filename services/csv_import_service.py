from typing import Any, Dict, Iterable, List, Optional, Sequence
from sqlalchemy.orm import Session
import logging
import uuid

from app.config import settings
from app.exceptions import ServiceValidationError
from core.utils.helpers import (
    clean_int,
    month_from_filename,
    month_key,
    normalize_month,
    normalize_title,
)
from domain.enums import Marketplace, MatchType, SUMMARY_MAPPING_SOURCE
from domain.schemas.import_schemas import (
    ManualSelection,
    MatchedRow,
    SummaryConfirmRow,
    UnmatchedRow,
)
from repositories import MappingRepository, ProductRepository, WebSalesRepository
from services.csv_reader import decode_content, extract_lines, find_header_row, read_rows
from services.matching import find_best_match
from services.web_sales_service import WebSalesService

logger = logging.getLogger("backoffice.imports")

# Column headers of the consolidated in-house sheet
SUMMARY_HEADERS = {
    Marketplace.AMAZON: "Amazon",
    Marketplace.RAKUTEN: "楽天市場",
    Marketplace.YAHOO: "Yahoo!",
    Marketplace.MERCARI: "メルカリ",
    Marketplace.BASE: "BASE",
    Marketplace.QOO10: "Qoo10",
}
SUMMARY_NAME_HEADER = "商品名"


def _resolve_month(month: Optional[str], filename: Optional[str]) -> Optional[str]:
    if month:
        return month_key(normalize_month(month))
    return month_from_filename(filename)


def reconcile(matched: Sequence[MatchedRow], products: Iterable[Any]) -> Dict[str, Any]:
    """
    Fold matched CSV rows into one row per product of the master.

    Products without rows get has_data=False and quantity 0. Several rows
    for the same product are combined: quantities summed, titles joined
    with " / " and the originals kept in duplicate_info.
    """
    groups: Dict[uuid.UUID, List[MatchedRow]] = {}
    for row in matched:
        if row.product_id is not None:
            groups.setdefault(row.product_id, []).append(row)

    results = []
    duplicates = []
    for p in products:
        rows = groups.get(p.id, [])
        entry = {
            "product_id": p.id,
            "product_name": p.name,
            "series": getattr(p, "series", None),
            "quantity": 0,
            "titles": [],
            "match_type": MatchType.NONE.value,
            "confidence": 0,
            "has_data": False,
            "is_duplicate": False,
            "duplicate_info": None,
        }
        if rows:
            weakest = min(rows, key=lambda r: r.confidence)
            entry.update(
                quantity=sum(r.quantity for r in rows),
                titles=[r.title for r in rows],
                match_type=MatchType(weakest.match_type).value,
                confidence=weakest.confidence,
                has_data=True,
            )
        if len(rows) > 1:
            entry["is_duplicate"] = True
            entry["duplicate_info"] = {
                "count": len(rows),
                "titles": [r.title for r in rows],
                "total_quantity": entry["quantity"],
                "original_quantities": [r.quantity for r in rows],
            }
            duplicates.append(entry)
        entry["title"] = " / ".join(entry["titles"])
        results.append(entry)

    with_data = [r for r in results if r["has_data"]]
    return {
        "products": results,
        "duplicates": duplicates,
        "stats": {
            "total_products": len(results),
            "with_data": len(with_data),
            "without_data": len(results) - len(with_data),
            "duplicate_count": len(duplicates),
            "total_quantity": sum(r["quantity"] for r in with_data),
            "original_matched_rows": len(matched),
        },
    }


def quality_check(
    csv_total_quantity: int,
    final_rows: Sequence[Dict[str, Any]],
    unmatched: Sequence[UnmatchedRow],
    manual_selections: Sequence[ManualSelection] = (),
) -> Dict[str, Any]:
    """
    Compare the CSV's total quantity against what is about to be saved.

    discrepancy = CSV total - saved total - quantity of unresolved titles
    """
    selected = {s.title for s in manual_selections}
    manual_qty = sum(u.quantity for u in unmatched if u.title in selected)
    unresolved_qty = sum(u.quantity for u in unmatched if u.title not in selected)
    final_total = sum(r["quantity"] for r in final_rows) + manual_qty
    discrepancy = csv_total_quantity - final_total - unresolved_qty

    if abs(discrepancy) > settings.quantity_error_threshold:
        level = "error"
    elif discrepancy != 0:
        level = "warning"
    else:
        level = "none"

    return {
        "csv_total_quantity": csv_total_quantity,
        "final_total_quantity": final_total,
        "unresolved_quantity": unresolved_qty,
        "discrepancy": discrepancy,
        "is_valid": abs(discrepancy) <= settings.quantity_tolerance,
        "warning_level": level,
    }


class CsvImportService:
    @staticmethod
    def parse_csv(
        db: Session,
        marketplace: Marketplace,
        filename: Optional[str],
        content: bytes,
        month: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Read a marketplace export and match its titles to products.

        Nothing is written. The month comes from the argument, else from the
        filename, else stays None.

        Raises:
            ServiceValidationError: undecodable file, missing header/columns,
                or no data rows
        """
        marketplace = Marketplace(marketplace)
        rows = read_rows(decode_content(content))
        if len(rows) < 2:
            raise ServiceValidationError("CSV needs a header and at least one data row")
        extracted = extract_lines(marketplace, rows)

        products = ProductRepository(db).list_all()
        learned = MappingRepository(db).title_map(marketplace.value)

        matched: List[MatchedRow] = []
        unmatched: List[UnmatchedRow] = []
        for line in extracted.lines:
            match = find_best_match(line.title, products, learned)
            if match:
                matched.append(
                    MatchedRow(
                        title=line.title,
                        quantity=line.quantity,
                        product_id=match.product_id,
                        product_name=match.product_name,
                        match_type=match.match_type,
                        confidence=match.confidence,
                    )
                )
            else:
                unmatched.append(UnmatchedRow(title=line.title, quantity=line.quantity))

        blank_qty = sum(b.quantity for b in extracted.blank_rows)
        matched_qty = sum(m.quantity for m in matched)
        unmatched_qty = sum(u.quantity for u in unmatched)
        summary = {
            "total_rows": extracted.total_rows,
            "processed_rows": len(extracted.lines),
            "matched_rows": len(matched),
            "unmatched_rows": len(unmatched),
            "matched_quantity": matched_qty,
            "unmatched_quantity": unmatched_qty,
            "csv_total_quantity": matched_qty + unmatched_qty + blank_qty,
            "learned_matches": sum(1 for m in matched if m.match_type == MatchType.LEARNED),
        }
        logger.info(
            f"Parsed {marketplace.value} CSV '{filename}': "
            f"{summary['matched_rows']} matched, {summary['unmatched_rows']} unmatched"
        )

        return {
            "marketplace": marketplace.value,
            "month": _resolve_month(month, filename),
            "matched": matched,
            "unmatched": unmatched,
            "blank_titles": {
                "count": len(extracted.blank_rows),
                "quantity": blank_qty,
                "rows": [{"row": b.row_number, "quantity": b.quantity} for b in extracted.blank_rows],
            },
            "summary": summary,
        }

    @staticmethod
    def reconcile(
        db: Session,
        matched: Sequence[MatchedRow],
        unmatched: Sequence[UnmatchedRow] = (),
        manual_selections: Sequence[ManualSelection] = (),
        csv_total_quantity: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Reconcile against the product master, with a quality check when the CSV total is known"""
        result = reconcile(matched, ProductRepository(db).list_all())
        if csv_total_quantity is not None:
            final_rows = [r for r in result["products"] if r["has_data"]]
            result["quality"] = quality_check(
                csv_total_quantity, final_rows, unmatched, manual_selections
            )
        return result

    @staticmethod
    def _check_products(db: Session, product_ids: Iterable[uuid.UUID]) -> None:
        wanted = {pid for pid in product_ids if pid is not None}
        found = {p.id for p in ProductRepository(db).get_many(wanted)}
        missing = sorted(str(pid) for pid in wanted - found)
        if missing:
            raise ServiceValidationError(
                "Unknown product ids", details={"product_ids": missing}
            )

    @staticmethod
    def confirm_import(
        db: Session,
        marketplace: Marketplace,
        month: Optional[str],
        matched: Sequence[MatchedRow],
        manual_selections: Sequence[ManualSelection] = (),
        learn_matches: bool = True,
    ) -> Dict[str, Any]:
        """
        Save a reviewed import into web_sales_summary.

        Manual selections are learned, quantities are summed per product and
        each product's <marketplace>_count for the month is replaced. Other
        marketplace columns are left as they are. Everything happens in one
        transaction.

        Raises:
            ServiceValidationError: missing month or unknown product ids
        """
        marketplace = Marketplace(marketplace)
        if not month:
            raise ServiceValidationError("Report month is required", code="MONTH_REQUIRED")
        report_month = normalize_month(month)

        CsvImportService._check_products(
            db,
            [s.product_id for s in manual_selections] + [m.product_id for m in matched],
        )

        mapping_repo = MappingRepository(db)
        learned = mapping_repo.title_map(marketplace.value)
        quantities: Dict[uuid.UUID, int] = {}
        skipped = 0
        learned_count = 0
        try:
            for sel in manual_selections:
                title = sel.title.strip()
                if title:
                    mapping_repo.upsert(marketplace.value, title, sel.product_id, commit=False)
                    learned_count += 1

            if learn_matches:
                for row in matched:
                    if row.product_id is None or row.match_type in (MatchType.LEARNED, MatchType.NONE):
                        continue
                    title = row.title.strip()
                    if title and learned.get(title) != row.product_id:
                        mapping_repo.upsert(marketplace.value, title, row.product_id, commit=False)
                        learned[title] = row.product_id
                        learned_count += 1

            for item in list(matched) + list(manual_selections):
                if item.product_id is None or item.quantity <= 0:
                    skipped += 1
                    continue
                quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

            written = WebSalesService.set_marketplace_counts(
                db, report_month, marketplace, quantities, commit=False
            )
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error confirming %s import for %s", marketplace.value, report_month)
            raise

        total_quantity = sum(quantities.values())
        logger.info(
            f"Confirmed {marketplace.value} import for {month_key(report_month)}: "
            f"{written} products, {total_quantity} units"
        )
        return {
            "marketplace": marketplace.value,
            "month": month_key(report_month),
            "success_count": written,
            "error_count": skipped,
            "total_products": written,
            "total_quantity": total_quantity,
            "learned_count": learned_count,
        }

    @staticmethod
    def parse_summary_csv(
        db: Session,
        content: bytes,
        filename: Optional[str] = None,
        month: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Read the consolidated sheet (商品名 + one column per marketplace).

        Marketplace columns that are missing from the header are reported and
        counted as 0.
        """
        rows = read_rows(decode_content(content))
        header_idx = find_header_row(rows, SUMMARY_NAME_HEADER)
        header = rows[header_idx]
        name_col = next(i for i, cell in enumerate(header) if SUMMARY_NAME_HEADER in cell)

        normalized_header = [normalize_title(cell) for cell in header]
        columns: Dict[Marketplace, int] = {}
        for marketplace, label in SUMMARY_HEADERS.items():
            key = normalize_title(label)
            if key in normalized_header:
                columns[marketplace] = normalized_header.index(key)
        if not columns:
            raise ServiceValidationError(
                "No marketplace columns found in summary CSV", details={"header": header}
            )

        products = ProductRepository(db).list_all()
        learned = MappingRepository(db).title_map(SUMMARY_MAPPING_SOURCE)

        result_rows = []
        blank_qty = 0
        for cells in rows[header_idx + 1:]:
            counts = {
                m.value: clean_int(cells[idx]) if idx < len(cells) else 0
                for m, idx in columns.items()
            }
            for m in Marketplace:
                counts.setdefault(m.value, 0)
            total = sum(counts.values())
            if total <= 0:
                continue
            title = cells[name_col] if name_col < len(cells) else ""
            if not title:
                blank_qty += total
                continue

            match = find_best_match(title, products, learned)
            result_rows.append(
                {
                    "title": title,
                    "counts": counts,
                    "total": total,
                    "product_id": match.product_id if match else None,
                    "product_name": match.product_name if match else None,
                    "match_type": (match.match_type if match else MatchType.NONE).value,
                    "confidence": match.confidence if match else 0,
                }
            )

        matched_rows = [r for r in result_rows if r["product_id"] is not None]
        return {
            "month": _resolve_month(month, filename),
            "rows": result_rows,
            "missing_columns": [m.value for m in SUMMARY_HEADERS if m not in columns],
            "summary": {
                "total_rows": len(result_rows),
                "matched_rows": len(matched_rows),
                "unmatched_rows": len(result_rows) - len(matched_rows),
                "blank_title_quantity": blank_qty,
                "csv_total_quantity": sum(r["total"] for r in result_rows) + blank_qty,
            },
        }

    @staticmethod
    def confirm_summary_import(
        db: Session, month: Optional[str], rows: Sequence[SummaryConfirmRow]
    ) -> Dict[str, Any]:
        """Write all six marketplace columns for each chosen product, replacing the month's values"""
        if not month:
            raise ServiceValidationError("Report month is required", code="MONTH_REQUIRED")
        report_month = normalize_month(month)
        CsvImportService._check_products(db, [r.product_id for r in rows])

        mapping_repo = MappingRepository(db)
        web_repo = WebSalesRepository(db)
        learned = mapping_repo.title_map(SUMMARY_MAPPING_SOURCE)

        totals: Dict[uuid.UUID, Dict[Marketplace, int]] = {}
        skipped = 0
        learned_count = 0
        try:
            for row in rows:
                if row.product_id is None:
                    skipped += 1
                    continue
                title = row.title.strip()
                if title and learned.get(title) != row.product_id:
                    mapping_repo.upsert(SUMMARY_MAPPING_SOURCE, title, row.product_id, commit=False)
                    learned[title] = row.product_id
                    learned_count += 1
                per_product = totals.setdefault(row.product_id, {m: 0 for m in Marketplace})
                for m, qty in row.counts.items():
                    per_product[Marketplace(m)] += max(int(qty), 0)

            for product_id, counts in totals.items():
                summary = web_repo.get_or_create(product_id, report_month)
                for m, qty in counts.items():
                    setattr(summary, m.count_column, qty)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error confirming summary import for %s", report_month)
            raise

        total_quantity = sum(sum(c.values()) for c in totals.values())
        logger.info(
            f"Confirmed summary import for {month_key(report_month)}: "
            f"{len(totals)} products, {total_quantity} units"
        )
        return {
            "month": month_key(report_month),
            "success_count": len(totals),
            "error_count": skipped,
            "total_products": len(totals),
            "total_quantity": total_quantity,
            "learned_count": learned_count,
        }
