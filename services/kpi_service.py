from typing import Any, Dict, List, Optional, Sequence
from datetime import date
from sqlalchemy.orm import Session
import logging

from domain.enums import CHANNEL_METRICS, KpiChannel, KpiMetric
from domain.models import KpiManualEntry
from domain.schemas.kpi_schemas import KpiEntryUpsert
from repositories import KpiRepository, WebSalesRepository
from services import fiscal
from services.daily_sales_service import DailySalesService
from core.utils.helpers import month_key, normalize_month, percentage
from app.exceptions import ServiceValidationError

logger = logging.getLogger("backoffice.kpi")


class _EntryIndex:
    """Manual entries keyed by (metric, channel_code, month)"""

    def __init__(self, entries: Sequence[KpiManualEntry]):
        self._values = {(e.metric, e.channel_code, e.month): e.amount for e in entries}

    def get(self, metric: KpiMetric, channel: str, month: date) -> Optional[int]:
        return self._values.get((metric.value, channel, month))


class KpiService:
    @staticmethod
    def save_entry(db: Session, data: KpiEntryUpsert) -> KpiManualEntry:
        """
        Create or overwrite one monthly figure.

        Raises:
            ServiceValidationError: negative amount, or a channel metric
                without channel
        """
        if data.amount < 0:
            raise ServiceValidationError("Amount must not be negative")
        if data.metric in CHANNEL_METRICS:
            if data.channel is None:
                raise ServiceValidationError(
                    f"Channel is required for metric '{data.metric.value}'"
                )
            channel_code = data.channel.value
        else:
            channel_code = ""

        month = normalize_month(data.month)
        try:
            entry = KpiRepository(db).upsert(data.metric.value, channel_code, month, data.amount)
        except Exception:
            db.rollback()
            logger.exception("Error saving KPI %s %s %s", data.metric.value, channel_code, month)
            raise
        logger.info(f"Saved KPI {data.metric.value}/{channel_code or '-'} {month_key(month)} = {data.amount}")
        return entry

    @staticmethod
    def list_entries(
        db: Session, start: str, end: str, metric: Optional[KpiMetric] = None
    ) -> List[KpiManualEntry]:
        return KpiRepository(db).get_range(
            normalize_month(start), normalize_month(end), metric.value if metric else None
        )

    @staticmethod
    def actuals(
        db: Session,
        channel: KpiChannel,
        months: Sequence[date],
        entries: Optional[_EntryIndex] = None,
    ) -> Dict[date, int]:
        """
        Monthly sales of one channel.

        WEB comes from the web sales summary and STORE from daily floor
        sales; WHOLESALE and SHOKU only have manual `actual` entries. A
        manual `actual` overrides the computed figure for any channel.
        """
        if not months:
            return {}
        start, end = min(months), max(months)
        if entries is None:
            entries = _EntryIndex(KpiRepository(db).get_range(start, end, KpiMetric.ACTUAL.value))

        if channel == KpiChannel.WEB:
            computed = WebSalesRepository(db).monthly_amounts(start, end)
        elif channel == KpiChannel.STORE:
            computed = DailySalesService.floor_sales_by_month(db, start, end)
        else:
            computed = {}

        result = {}
        for m in months:
            manual = entries.get(KpiMetric.ACTUAL, channel.value, m)
            result[m] = manual if manual is not None else computed.get(m, 0)
        return result

    @staticmethod
    def summary(db: Session, fiscal_year: int) -> Dict[str, Any]:
        """
        Fiscal-year KPI table.

        Per channel and month: actual, target, last year and two years ago
        (seeded historical_actual preferred over computed history). Also
        the monthly totals, sales activity, manufacturing and FY totals with
        achievement rate.
        """
        months = fiscal.fiscal_months(fiscal_year)
        last_year = fiscal.fiscal_months(fiscal_year - 1)
        two_years = fiscal.fiscal_months(fiscal_year - 2)
        entries = _EntryIndex(KpiRepository(db).get_range(two_years[0], months[-1]))

        channels = []
        actual_rows = []
        for channel in fiscal.CHANNELS:
            actual = KpiService.actuals(db, channel, two_years + last_year + months, entries)

            def history(m: date) -> int:
                seeded = entries.get(KpiMetric.HISTORICAL_ACTUAL, channel.value, m)
                return seeded if seeded is not None else actual[m]

            rows = []
            for i, m in enumerate(months):
                rows.append(
                    {
                        "month": month_key(m),
                        "actual": actual[m],
                        "target": entries.get(KpiMetric.TARGET, channel.value, m) or 0,
                        "last_year": history(last_year[i]),
                        "two_years_ago": history(two_years[i]),
                    }
                )
                actual_rows.append(
                    {"month": month_key(m), "channel_code": channel.value, "amount": actual[m]}
                )

            totals = {
                key: sum(r[key] for r in rows)
                for key in ("actual", "target", "last_year", "two_years_ago")
            }
            channels.append(
                {
                    "channel": channel.value,
                    "months": rows,
                    "totals": totals,
                    "achievement_rate": percentage(totals["actual"], totals["target"]),
                    "yoy_rate": percentage(totals["actual"], totals["last_year"]),
                }
            )

        shaped = fiscal.shape_monthly(actual_rows, [month_key(m) for m in months])
        fiscal.assert_channel_sums(shaped)

        total = []
        for i, m in enumerate(months):
            total.append(
                {
                    "month": month_key(m),
                    "actual": shaped[i]["month_total"],
                    "target": sum(c["months"][i]["target"] for c in channels),
                    "last_year": sum(c["months"][i]["last_year"] for c in channels),
                    "two_years_ago": sum(c["months"][i]["two_years_ago"] for c in channels),
                }
            )

        sales_activity = [
            {
                "month": month_key(m),
                "target": entries.get(KpiMetric.ACQUISITION_TARGET, "", m) or 0,
                "actual": entries.get(KpiMetric.ACQUISITION_ACTUAL, "", m) or 0,
            }
            for m in months
        ]
        manufacturing = [
            {
                "month": month_key(m),
                "target": entries.get(KpiMetric.MANUFACTURING_TARGET, "", m) or 0,
                "actual": entries.get(KpiMetric.MANUFACTURING_ACTUAL, "", m) or 0,
                "last_year": entries.get(KpiMetric.MANUFACTURING_ACTUAL, "", last_year[i]) or 0,
            }
            for i, m in enumerate(months)
        ]

        fy_actual = sum(t["actual"] for t in total)
        fy_target = sum(t["target"] for t in total)
        window = fiscal.fiscal_window_from_latest(months[0])
        return {
            "fiscal_year": fiscal_year,
            "label": window["label"],
            "months": window["months"],
            "channels": channels,
            "total": total,
            "channel_totals": fiscal.channel_totals(shaped),
            "sales_activity": sales_activity,
            "manufacturing": manufacturing,
            "fy_totals": {
                "actual": fy_actual,
                "target": fy_target,
                "last_year": sum(t["last_year"] for t in total),
                "achievement_rate": percentage(fy_actual, fy_target),
            },
        }

    @staticmethod
    def fiscal_window(db: Session, latest: Optional[str] = None) -> Dict[str, Any]:
        """Window of the fiscal year containing `latest` (else the newest KPI month, else today)"""
        if latest:
            month = normalize_month(latest)
        else:
            month = KpiRepository(db).latest_month() or date.today().replace(day=1)
        return fiscal.fiscal_window_from_latest(month)
