"""
Fiscal calendar and monthly channel shaping for the KPI views.

Fiscal year N runs from month `fiscal_start_month` of year N-1 up to the
month before it in year N (August to July by default).
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging

from app.config import settings
from core.utils.helpers import add_months, month_key
from domain.enums import KpiChannel

logger = logging.getLogger("backoffice.kpi")

CHANNELS = list(KpiChannel)


def _start_month(start_month: Optional[int]) -> int:
    return start_month or settings.fiscal_start_month


def fiscal_start(fiscal_year: int, start_month: Optional[int] = None) -> date:
    start = _start_month(start_month)
    # A January start means the fiscal year equals the calendar year
    return date(fiscal_year - 1 if start > 1 else fiscal_year, start, 1)


def fiscal_months(fiscal_year: int, start_month: Optional[int] = None) -> List[date]:
    """The 12 first-of-month dates of a fiscal year"""
    first = fiscal_start(fiscal_year, start_month)
    return [add_months(first, i) for i in range(12)]


def fiscal_year_of(d: date, start_month: Optional[int] = None) -> int:
    start = _start_month(start_month)
    if start > 1 and d.month >= start:
        return d.year + 1
    return d.year


def fiscal_window_from_latest(latest: date, start_month: Optional[int] = None) -> Dict[str, Any]:
    """The fiscal year containing `latest`, with its bounds and label (e.g. FY26)"""
    fy = fiscal_year_of(latest, start_month)
    months = fiscal_months(fy, start_month)
    return {
        "fiscal_year": fy,
        "label": f"FY{fy % 100:02d}",
        "start": months[0],
        "end": months[-1],
        "months": [month_key(m) for m in months],
    }


def shape_monthly(
    rows: Iterable[Mapping[str, Any]], months: Iterable[str]
) -> List[Dict[str, Any]]:
    """
    Pivot {month, channel_code, amount} rows into one entry per month.

    Each entry has by_channel in KpiChannel order (missing = 0) and the
    month_total.
    """
    amounts: Dict[tuple, int] = {}
    for row in rows:
        channel = KpiChannel(row["channel_code"])
        amounts[(row["month"], channel)] = row["amount"]

    shaped = []
    for month in months:
        by_channel = [amounts.get((month, c), 0) for c in CHANNELS]
        shaped.append({"month": month, "by_channel": by_channel, "month_total": sum(by_channel)})
    return shaped


def assert_channel_sums(shaped: Iterable[Mapping[str, Any]]) -> None:
    """Raise ValueError when any month's channel amounts do not add up to its total"""
    diffs = []
    for row in shaped:
        total = sum(row["by_channel"])
        if total != row["month_total"]:
            diffs.append({"month": row["month"], "sum": total, "total": row["month_total"]})
    if diffs:
        logger.error(f"Channel sums differ from month totals: {diffs}")
        raise ValueError("Monthly channel amounts do not add up to the month total")
    logger.debug("Channel sums match month totals")


def channel_totals(shaped: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    shaped = list(shaped)
    return [
        {"channel": c.value, "total": sum(row["by_channel"][idx] for row in shaped)}
        for idx, c in enumerate(CHANNELS)
    ]
