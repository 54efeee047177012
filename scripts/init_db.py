#!/usr/bin/env python3
"""
Standalone database initialization script.

Creates the back office tables on the configured database (DATABASE_URL)
and can seed KPI figures from a CSV with columns month, channel, amount
and optionally metric (default: target).
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd
from sqlalchemy import inspect

from app.exceptions import ServiceValidationError
from domain.enums import KpiChannel, KpiMetric
from domain.models import SessionLocal, engine, init_database
from domain.schemas.kpi_schemas import KpiEntryUpsert
from services.kpi_service import KpiService

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")


def create_tables() -> bool:
    try:
        init_database()
        tables = inspect(engine).get_table_names()
        logger.info(f"Created {len(tables)} tables: {', '.join(sorted(tables))}")
        return True
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        return False


def seed_kpi(path: str) -> int:
    """Upsert KPI rows from a CSV; returns the number saved"""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = {"month", "channel", "amount"} - set(df.columns)
    if missing:
        raise ValueError(f"KPI CSV is missing columns: {sorted(missing)}")

    saved = 0
    db = SessionLocal()
    try:
        for idx, row in df.iterrows():
            try:
                entry = KpiEntryUpsert(
                    metric=KpiMetric(row.get("metric") or KpiMetric.TARGET.value),
                    channel=KpiChannel(row["channel"]) if row["channel"] else None,
                    month=row["month"],
                    amount=int(float(row["amount"] or 0)),
                )
                KpiService.save_entry(db, entry)
                saved += 1
            except (ValueError, ServiceValidationError) as e:
                logger.warning(f"Skipping KPI row {idx + 2}: {e}")
    finally:
        db.close()
    return saved


def main() -> int:
    p = argparse.ArgumentParser(description="Create back office tables (idempotent).")
    p.add_argument("--kpi-csv", help="CSV of KPI figures to seed (month,channel,amount[,metric])")
    args = p.parse_args()

    if not create_tables():
        return 1

    if args.kpi_csv:
        if not os.path.exists(args.kpi_csv):
            logger.error(f"File not found: {args.kpi_csv}")
            return 1
        logger.info(f"Seeded {seed_kpi(args.kpi_csv)} KPI entries")
    return 0


if __name__ == "__main__":
    sys.exit(main())
