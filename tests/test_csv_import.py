"""
Tests for marketplace CSV imports.

Covers:
- decoding (UTF-8 with BOM and Shift-JIS) and ragged row reading
- per-marketplace column layouts
- parse -> reconcile -> quality check -> confirm flow against the database
- the consolidated summary sheet
"""

import pytest
from datetime import date
from sqlalchemy.orm import Session

from app.exceptions import ServiceValidationError
from domain.enums import Marketplace, MatchType, SUMMARY_MAPPING_SOURCE
from domain.schemas.import_schemas import (
    ManualSelection,
    MatchedRow,
    SummaryConfirmRow,
    UnmatchedRow,
)
from repositories import MappingRepository, WebSalesRepository
from services.csv_import_service import CsvImportService, quality_check, reconcile
from services.csv_reader import decode_content, extract_lines, read_rows
from services.web_sales_service import WebSalesService
from test_constants import AMAZON_CSV, RAKUTEN_CSV
from test_fixtures import db_session, seed_products


def _row(*cells, width=None):
    cells = list(cells)
    if width:
        cells += [""] * (width - len(cells))
    return ",".join(cells)


# =============================================================================
# READING
# =============================================================================


def test_decode_utf8_bom_and_cp932():
    text = "商品名,数量\nチャーシュー,3\n"
    assert decode_content(text.encode("utf-8-sig")) == text
    assert decode_content(text.encode("cp932")) == text


def test_decode_rejects_binary():
    with pytest.raises(ServiceValidationError):
        decode_content(b"abc\x81\x00\x81")


def test_read_rows_pads_ragged_rows_and_drops_blank_lines():
    rows = read_rows("a,b,c\n\n1,2\n,,\nx,\"y,z\",w,extra\n")
    assert rows[0][:3] == ["a", "b", "c"]
    assert rows[1][:2] == ["1", "2"]
    assert rows[1][2] == ""
    assert rows[2][:4] == ["x", "y,z", "w", "extra"]
    assert len(rows) == 3
    assert len({len(r) for r in rows}) == 1


def test_read_rows_empty_text():
    assert read_rows("") == []
    assert read_rows("\n\n") == []


# =============================================================================
# LAYOUTS
# =============================================================================


def test_amazon_columns_found_by_header():
    extracted = extract_lines(Marketplace.AMAZON, read_rows(AMAZON_CSV))
    assert [(l.title, l.quantity) for l in extracted.lines] == [
        ("【公式】チャーシュー 500g", 1024),
        ("国産ギョーザ 20個入", 15),
        ("謎の商品", 3),
    ]
    assert extracted.total_rows == 4


def test_amazon_missing_quantity_header():
    rows = read_rows("タイトル,数量\nチャーシュー,1\n")
    with pytest.raises(ServiceValidationError):
        extract_lines(Marketplace.AMAZON, rows)


def test_rakuten_header_is_first_row_with_product_name():
    extracted = extract_lines(Marketplace.RAKUTEN, read_rows(RAKUTEN_CSV))
    assert [(l.title, l.quantity) for l in extracted.lines] == [
        ("特製味噌ラーメン 2食セット", 12),
        ("チャーシュー", 5),
    ]


def test_rakuten_without_header_row():
    with pytest.raises(ServiceValidationError):
        extract_lines(Marketplace.RAKUTEN, read_rows("a,b,c,d,e\n1,2,3,4,5\n"))


def test_yahoo_skips_short_rows():
    csv = "\n".join(
        [
            _row("商品名", "a", "b", "c", "d", "数量"),
            _row("チャーシュー", "", "", "", "", "4"),
            _row("短い行", "1"),
        ]
    )
    extracted = extract_lines(Marketplace.YAHOO, read_rows(csv))
    assert [(l.title, l.quantity) for l in extracted.lines] == [("チャーシュー", 4)]


def test_base_and_qoo10_fixed_columns():
    base = "\n".join(
        [_row(*[f"h{i}" for i in range(22)]), _row(*([""] * 17), "ラーメン", "", "", "", "2")]
    )
    assert [(l.title, l.quantity) for l in extract_lines(Marketplace.BASE, read_rows(base)).lines] == [
        ("ラーメン", 2)
    ]

    qoo10 = "\n".join(
        [
            _row(*[f"h{i}" for i in range(15)]),
            _row(*([""] * 13), "チャーシュー", "6"),
            _row(*([""] * 13), "チャーシュー"),
        ]
    )
    extracted = extract_lines(Marketplace.QOO10, read_rows(qoo10))
    assert [(l.title, l.quantity) for l in extracted.lines] == [("チャーシュー", 6)]


def test_mercari_blank_quantity_counts_as_one_and_titles_are_aggregated():
    header = _row(*[f"h{i}" for i in range(11)])
    csv = "\n".join(
        [
            header,
            _row(*([""] * 8), "チャーシュー", "", "sold"),
            _row(*([""] * 8), "チャーシュー", "2", "sold"),
            _row(*([""] * 8), "ラーメン", "1", "sold"),
        ]
    )
    extracted = extract_lines(Marketplace.MERCARI, read_rows(csv))
    assert [(l.title, l.quantity) for l in extracted.lines] == [
        ("チャーシュー", 3),
        ("ラーメン", 1),
    ]


def test_mercari_blank_quantity_in_last_column():
    header = _row(*[f"h{i}" for i in range(10)])
    csv = "\n".join(
        [
            header,
            _row(*([""] * 8), "チャーシュー", ""),
            _row(*([""] * 8), "チャーシュー", "2"),
            _row(*([""] * 7), "短い行"),
        ]
    )
    extracted = extract_lines(Marketplace.MERCARI, read_rows(csv))
    assert [(l.title, l.quantity) for l in extracted.lines] == [("チャーシュー", 3)]


def test_blank_titles_are_reported_separately():
    csv = "\n".join(
        [
            _row("商品名", "a", "b", "c", "d", "数量"),
            _row("", "", "", "", "", "7"),
            _row("チャーシュー", "", "", "", "", "1"),
        ]
    )
    extracted = extract_lines(Marketplace.YAHOO, read_rows(csv))
    assert len(extracted.lines) == 1
    assert [(b.row_number, b.quantity) for b in extracted.blank_rows] == [(2, 7)]


def test_header_only_csv_is_rejected():
    with pytest.raises(ServiceValidationError):
        extract_lines(Marketplace.BASE, read_rows("a,b,c\n"))


# =============================================================================
# RECONCILE AND QUALITY CHECK
# =============================================================================


def test_reconcile_combines_duplicates_and_lists_every_product(db_session: Session):
    products = seed_products(db_session)
    chashu = products["チャーシュー"]
    matched = [
        MatchedRow(title="チャーシュー", quantity=3, product_id=chashu.id, match_type=MatchType.EXACT, confidence=100),
        MatchedRow(title="【公式】チャーシュー", quantity=2, product_id=chashu.id, match_type=MatchType.HIGH, confidence=90),
    ]

    result = reconcile(matched, products.values())

    rows = {r["product_name"]: r for r in result["products"]}
    assert len(rows) == 4
    combined = rows["チャーシュー"]
    assert combined["quantity"] == 5
    assert combined["title"] == "チャーシュー / 【公式】チャーシュー"
    assert combined["is_duplicate"] is True
    assert combined["duplicate_info"]["original_quantities"] == [3, 2]
    assert combined["match_type"] == "high"
    assert rows["ラーメン"]["has_data"] is False
    assert rows["ラーメン"]["match_type"] == "none"
    assert result["stats"] == {
        "total_products": 4,
        "with_data": 1,
        "without_data": 3,
        "duplicate_count": 1,
        "total_quantity": 5,
        "original_matched_rows": 2,
    }


@pytest.mark.parametrize(
    "csv_total,level,valid",
    [(30, "none", True), (33, "warning", True), (40, "warning", False), (60, "error", False)],
)
def test_quality_check_levels(csv_total, level, valid):
    final_rows = [{"quantity": 20}]
    unmatched = [UnmatchedRow(title="A", quantity=6), UnmatchedRow(title="B", quantity=4)]
    selections = [ManualSelection(title="A", product_id="00000000-0000-0000-0000-000000000001", quantity=6)]

    result = quality_check(csv_total, final_rows, unmatched, selections)

    assert result["final_total_quantity"] == 26
    assert result["unresolved_quantity"] == 4
    assert result["discrepancy"] == csv_total - 30
    assert result["warning_level"] == level
    assert result["is_valid"] is valid


# =============================================================================
# PARSE AND CONFIRM AGAINST THE DATABASE
# =============================================================================


def test_parse_amazon_csv(db_session: Session):
    products = seed_products(db_session)

    result = CsvImportService.parse_csv(
        db_session, Marketplace.AMAZON, "amazon_2025.7.csv", AMAZON_CSV.encode("utf-8-sig")
    )

    assert result["month"] == "2025-07"
    by_title = {m.title: m for m in result["matched"]}
    assert by_title["【公式】チャーシュー 500g"].product_id == products["チャーシュー"].id
    assert by_title["【公式】チャーシュー 500g"].match_type == MatchType.HIGH
    assert by_title["国産ギョーザ 20個入"].match_type == MatchType.EXACT
    assert [u.title for u in result["unmatched"]] == ["謎の商品"]
    assert result["summary"]["csv_total_quantity"] == 1042
    assert result["summary"]["matched_quantity"] == 1039


def test_parse_and_month_table_cover_whole_large_master(db_session: Session):
    master = [{"name": f"商品{i:04d}", "price": 100} for i in range(1005)]
    products = seed_products(db_session, master)
    csv = (
        "（親）ASIN,（子）ASIN,タイトル,セッション数,注文された商品点数,注文商品の売上額\n"
        "B1004,B1004A,商品1004,3,2,¥200\n"
    )

    result = CsvImportService.parse_csv(
        db_session, Marketplace.AMAZON, "amazon_2025.7.csv", csv.encode("utf-8-sig")
    )

    [row] = result["matched"]
    assert row.product_id == products["商品1004"].id
    assert row.match_type == MatchType.EXACT
    assert len(WebSalesService.get_month(db_session, "2025-07")["rows"]) == 1005
    reconciled = CsvImportService.reconcile(db_session, result["matched"])
    assert len(reconciled["products"]) == 1005


def test_parse_shift_jis_rakuten_csv(db_session: Session):
    products = seed_products(db_session)

    result = CsvImportService.parse_csv(
        db_session, Marketplace.RAKUTEN, "rakuten_202507.csv", RAKUTEN_CSV.encode("cp932")
    )

    assert result["month"] == "2025-07"
    assert [(m.product_id, m.match_type, m.quantity) for m in result["matched"]] == [
        (products["特製味噌ラーメン"].id, MatchType.HIGH, 12),
        (products["チャーシュー"].id, MatchType.EXACT, 5),
    ]
    assert result["blank_titles"]["count"] == 0


def test_parse_uses_learned_titles(db_session: Session):
    products = seed_products(db_session)
    MappingRepository(db_session).upsert("amazon", "謎の商品", products["ラーメン"].id)

    result = CsvImportService.parse_csv(
        db_session, Marketplace.AMAZON, "export.csv", AMAZON_CSV.encode("utf-8"), month="2025-08-01"
    )

    assert result["month"] == "2025-08"
    learned = [m for m in result["matched"] if m.match_type == MatchType.LEARNED]
    assert [(m.title, m.product_id) for m in learned] == [("謎の商品", products["ラーメン"].id)]
    assert result["unmatched"] == []
    assert result["summary"]["learned_matches"] == 1


def test_confirm_replaces_marketplace_count_and_keeps_others(db_session: Session):
    products = seed_products(db_session)
    chashu = products["チャーシュー"]
    month = date(2025, 7, 1)
    repo = WebSalesRepository(db_session)
    row = repo.get_or_create(chashu.id, month)
    row.amazon_count = 99
    row.rakuten_count = 7
    db_session.commit()

    matched = [
        MatchedRow(title="【公式】チャーシュー", quantity=3, product_id=chashu.id, match_type=MatchType.HIGH, confidence=90),
        MatchedRow(title="チャーシュー 訳あり", quantity=2, product_id=chashu.id, match_type=MatchType.MEDIUM, confidence=82),
        MatchedRow(title="在庫なし", quantity=0, product_id=chashu.id, match_type=MatchType.EXACT, confidence=100),
    ]
    selections = [ManualSelection(title="謎の商品", product_id=products["ラーメン"].id, quantity=4)]

    result = CsvImportService.confirm_import(
        db_session, Marketplace.AMAZON, "2025-07", matched, selections
    )

    assert result["month"] == "2025-07"
    assert result["success_count"] == 2
    assert result["error_count"] == 1
    assert result["total_quantity"] == 9

    db_session.expire_all()
    saved = repo.get_by_product_month(chashu.id, month)
    assert saved.amazon_count == 5
    assert saved.rakuten_count == 7
    assert repo.get_by_product_month(products["ラーメン"].id, month).amazon_count == 4

    learned = MappingRepository(db_session).title_map("amazon")
    assert learned["謎の商品"] == products["ラーメン"].id
    assert learned["【公式】チャーシュー"] == chashu.id


def test_confirm_requires_month(db_session: Session):
    with pytest.raises(ServiceValidationError):
        CsvImportService.confirm_import(db_session, Marketplace.AMAZON, None, [])


def test_confirm_with_unknown_product_writes_nothing(db_session: Session):
    seed_products(db_session)
    selections = [ManualSelection(title="謎", product_id="00000000-0000-0000-0000-0000000000ff", quantity=1)]

    with pytest.raises(ServiceValidationError):
        CsvImportService.confirm_import(db_session, Marketplace.AMAZON, "2025-07", [], selections)

    assert MappingRepository(db_session).get_by_marketplace("amazon") == []
    assert WebSalesRepository(db_session).get_by_month(date(2025, 7, 1)) == []


# =============================================================================
# SUMMARY SHEET
# =============================================================================

SUMMARY_CSV = (
    "商品名,Amazon,楽天市場,Yahoo!,メルカリ,BASE,Qoo10\n"
    "チャーシュー,10,5,0,1,0,2\n"
    "謎の商品,1,0,0,0,0,0\n"
    "ラーメン,0,0,0,0,0,0\n"
)


def test_parse_summary_csv(db_session: Session):
    products = seed_products(db_session)

    result = CsvImportService.parse_summary_csv(db_session, SUMMARY_CSV.encode("utf-8-sig"), "summary_2025-07.csv")

    assert result["month"] == "2025-07"
    assert result["missing_columns"] == []
    rows = {r["title"]: r for r in result["rows"]}
    assert set(rows) == {"チャーシュー", "謎の商品"}
    assert rows["チャーシュー"]["product_id"] == products["チャーシュー"].id
    assert rows["チャーシュー"]["counts"] == {
        "amazon": 10, "rakuten": 5, "yahoo": 0, "mercari": 1, "base": 0, "qoo10": 2,
    }
    assert rows["謎の商品"]["product_id"] is None
    assert result["summary"]["csv_total_quantity"] == 19


def test_confirm_summary_writes_all_columns(db_session: Session):
    products = seed_products(db_session)
    chashu = products["チャーシュー"]
    rows = [
        SummaryConfirmRow(title="チャーシュー", product_id=chashu.id, counts={"amazon": 10, "rakuten": 5}),
        SummaryConfirmRow(title="焼豚", product_id=chashu.id, counts={"amazon": 1}),
        SummaryConfirmRow(title="謎の商品", product_id=None, counts={"amazon": 1}),
    ]

    result = CsvImportService.confirm_summary_import(db_session, "2025-07", rows)

    assert result["success_count"] == 1
    assert result["error_count"] == 1
    assert result["total_quantity"] == 16
    saved = WebSalesRepository(db_session).get_by_product_month(chashu.id, date(2025, 7, 1))
    assert (saved.amazon_count, saved.rakuten_count, saved.qoo10_count) == (11, 5, 0)
    assert MappingRepository(db_session).title_map(SUMMARY_MAPPING_SOURCE)["焼豚"] == chashu.id
