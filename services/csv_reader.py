"""
Marketplace CSV reading: decoding, row extraction and per-marketplace layouts.
"""

from dataclasses import dataclass
from io import StringIO
from typing import Dict, List, Optional, Tuple
import logging

import pandas as pd

from app.config import settings
from app.exceptions import ServiceValidationError
from core.utils.helpers import clean_int
from domain.enums import Marketplace

logger = logging.getLogger("backoffice.imports")


@dataclass(frozen=True)
class CsvLayout:
    """Where a marketplace export keeps the product title and quantity"""

    title_col: Optional[int] = None
    qty_col: Optional[int] = None
    # Columns located by header text instead of position
    title_header: Optional[str] = None
    qty_header: Optional[str] = None
    # Header is the first row containing this text (else row 0)
    header_marker: Optional[str] = None
    min_columns: int = 0
    blank_qty_as_one: bool = False
    aggregate_titles: bool = False

    @property
    def required_width(self) -> int:
        """Filled width a data row needs; a blank trailing quantity still counts when it means one"""
        if self.blank_qty_as_one and self.qty_col is not None and self.qty_col == self.min_columns - 1:
            return self.min_columns - 1
        return self.min_columns


LAYOUTS: Dict[Marketplace, CsvLayout] = {
    Marketplace.AMAZON: CsvLayout(title_header="タイトル", qty_header="注文された商品点数"),
    Marketplace.RAKUTEN: CsvLayout(title_col=0, qty_col=4, header_marker="商品名"),
    Marketplace.YAHOO: CsvLayout(title_col=0, qty_col=5, min_columns=6),
    Marketplace.BASE: CsvLayout(title_col=17, qty_col=21),
    Marketplace.QOO10: CsvLayout(title_col=13, qty_col=14, min_columns=15),
    Marketplace.MERCARI: CsvLayout(
        title_col=8,
        qty_col=9,
        min_columns=10,
        blank_qty_as_one=True,
        aggregate_titles=True,
    ),
}


@dataclass
class CsvLine:
    row_number: int
    title: str
    quantity: int


@dataclass
class ExtractedCsv:
    lines: List[CsvLine]
    blank_rows: List[CsvLine]
    total_rows: int


def decode_content(content: bytes) -> str:
    """Decode with the first configured encoding that works (UTF-8 BOM, then CP932)"""
    for encoding in settings.csv_encodings:
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"CSV is not {encoding}")
    raise ServiceValidationError(
        "Could not decode CSV file", details={"encodings": settings.csv_encodings}
    )


def read_rows(text: str) -> List[List[str]]:
    """
    Read CSV text into rows of stripped strings.

    Ragged rows are padded with "" up to the widest row; rows with no
    content are dropped.
    """
    lines = text.splitlines()
    if not any(line.strip() for line in lines):
        return []
    width = max(line.count(",") for line in lines) + 1
    try:
        df = pd.read_csv(
            StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        ).fillna("")
    except pd.errors.ParserError as e:
        raise ServiceValidationError(f"Could not parse CSV: {e}") from e
    rows = [[str(cell).strip() for cell in record] for record in df.values.tolist()]
    return [r for r in rows if any(r)]


def used_width(cells: List[str]) -> int:
    """Number of columns up to the last non-empty cell"""
    for idx in range(len(cells) - 1, -1, -1):
        if cells[idx]:
            return idx + 1
    return 0


def find_header_row(rows: List[List[str]], marker: str) -> int:
    for idx, cells in enumerate(rows):
        if any(marker in cell for cell in cells):
            return idx
    raise ServiceValidationError(f"Header row containing '{marker}' not found")


def find_column(header: List[str], text: str) -> int:
    for idx, cell in enumerate(header):
        if text in cell:
            return idx
    raise ServiceValidationError(
        f"Column '{text}' not found in CSV header", details={"header": header}
    )


def resolve_columns(layout: CsvLayout, header: List[str]) -> Tuple[int, int]:
    title_col = layout.title_col
    qty_col = layout.qty_col
    if layout.title_header:
        title_col = find_column(header, layout.title_header)
    if layout.qty_header:
        qty_col = find_column(header, layout.qty_header)
    return title_col, qty_col


def _cell(cells: List[str], idx: int) -> str:
    return cells[idx] if idx < len(cells) else ""


def extract_lines(marketplace: Marketplace, rows: List[List[str]]) -> ExtractedCsv:
    """
    Pull (title, quantity) pairs out of a marketplace export.

    Rows with quantity <= 0 are skipped; rows with a quantity but no title
    are returned separately in blank_rows.
    """
    layout = LAYOUTS[Marketplace(marketplace)]
    header_idx = find_header_row(rows, layout.header_marker) if layout.header_marker else 0
    data_rows = rows[header_idx + 1:]
    if not data_rows:
        raise ServiceValidationError("CSV has no data rows")

    title_col, qty_col = resolve_columns(layout, rows[header_idx])

    lines: List[CsvLine] = []
    blank_rows: List[CsvLine] = []
    for offset, cells in enumerate(data_rows):
        row_number = header_idx + offset + 2
        if layout.min_columns and used_width(cells) < layout.required_width:
            continue

        raw_qty = _cell(cells, qty_col)
        if layout.blank_qty_as_one and not raw_qty:
            quantity = 1
        else:
            quantity = clean_int(raw_qty)
        if quantity <= 0:
            continue

        title = _cell(cells, title_col)
        if not title:
            blank_rows.append(CsvLine(row_number, "", quantity))
            continue
        lines.append(CsvLine(row_number, title, quantity))

    if layout.aggregate_titles:
        lines = aggregate_by_title(lines)

    return ExtractedCsv(lines=lines, blank_rows=blank_rows, total_rows=len(data_rows))


def aggregate_by_title(lines: List[CsvLine]) -> List[CsvLine]:
    """One line per title with summed quantity, in first-seen order"""
    merged: Dict[str, CsvLine] = {}
    for line in lines:
        if line.title in merged:
            merged[line.title].quantity += line.quantity
        else:
            merged[line.title] = CsvLine(line.row_number, line.title, line.quantity)
    return list(merged.values())
