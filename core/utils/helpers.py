"""
Back office utility functions
"""

from __future__ import annotations
import re
import unicodedata
from datetime import date, datetime
from typing import Optional, Union

from app.exceptions import ServiceValidationError


# Text & title utilities

# Brackets and punctuation that marketplaces sprinkle around product titles
TITLE_NOISE = re.compile(r"[\s【】「」『』（）()\[\]{}<>〈〉《》・･/／|｜,，.。、\-‐－_＿:;!！?？~〜★☆♪※#＃&＆+＋*＊\"'`]+")


def normalize_text(s: str) -> str:
    """Basic normalization: NFKC, trim, collapse spaces."""
    s = unicodedata.normalize("NFKC", s or "")
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def normalize_title(title: str) -> str:
    """Matching key for a product name or CSV title.

    NFKC folds full-width letters and digits, then everything is lower-cased
    and whitespace, brackets and punctuation are removed.
    """
    s = unicodedata.normalize("NFKC", title or "").lower()
    return TITLE_NOISE.sub("", s)


# Number utilities

NUMBER_NOISE = re.compile(r"[,，\s¥￥円]")


def clean_number(value) -> float:
    """Parse a CSV cell as a number; blanks and garbage count as 0."""
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return value
    s = unicodedata.normalize("NFKC", str(value))
    s = NUMBER_NOISE.sub("", s)
    if not s:
        return 0
    try:
        return float(s)
    except ValueError:
        return 0


def clean_int(value) -> int:
    return int(round(clean_number(value)))


# Month utilities

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})(?:-(\d{1,2}))?$")
FILENAME_MONTH_PATTERNS = (
    re.compile(r"(20\d{2})[.\-_/年](\d{1,2})(?!\d)"),
    re.compile(r"(20\d{2})(0[1-9]|1[0-2])(?!\d)"),
)


def normalize_month(value: Union[str, date, datetime, None]) -> date:
    """Coerce 'YYYY-MM', 'YYYY-MM-DD' or a date to the first day of its month."""
    if isinstance(value, datetime):
        return value.date().replace(day=1)
    if isinstance(value, date):
        return value.replace(day=1)
    m = MONTH_PATTERN.match((value or "").strip())
    if not m:
        raise ServiceValidationError(
            f"Invalid month '{value}': expected YYYY-MM or YYYY-MM-DD",
            code="INVALID_MONTH",
        )
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ServiceValidationError(
            f"Invalid month '{value}': month must be 1-12", code="INVALID_MONTH"
        )
    if m.group(3):
        try:
            date(year, month, int(m.group(3)))
        except ValueError as e:
            raise ServiceValidationError(
                f"Invalid month '{value}': {e}", code="INVALID_MONTH"
            ) from e
    return date(year, month, 1)


def month_from_filename(filename: Optional[str]) -> Optional[str]:
    """Guess the report month ('YYYY-MM') from names like 'amazon_2025.7.csv'."""
    if not filename:
        return None
    for pattern in FILENAME_MONTH_PATTERNS:
        m = pattern.search(filename)
        if m:
            month = int(m.group(2))
            if 1 <= month <= 12:
                return f"{m.group(1)}-{month:02d}"
    return None


def add_months(d: date, months: int) -> date:
    """First day of the month `months` away from d."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_end(d: date) -> date:
    """Last day of d's month"""
    return date.fromordinal(add_months(d, 1).toordinal() - 1)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def percentage(numerator: float, denominator: Optional[float], digits: int = 1) -> Optional[float]:
    if not denominator:
        return None
    return round(numerator / denominator * 100, digits)
