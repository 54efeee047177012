"""KPI target and summary routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging
from typing import List, Optional

from domain.enums import KpiMetric
from domain.models import get_db_session
from domain.schemas.kpi_schemas import KpiEntryUpsert, KpiEntryResponse
from services.kpi_service import KpiService

router = APIRouter(prefix="/kpi", tags=["KPI"])
logger = logging.getLogger("backoffice.api.kpi")


@router.get("/entries", response_model=List[KpiEntryResponse])
def list_entries(
    start: str = Query(..., description="YYYY-MM"),
    end: str = Query(..., description="YYYY-MM"),
    metric: Optional[KpiMetric] = Query(None),
    db: Session = Depends(get_db_session),
):
    entries = KpiService.list_entries(db, start, end, metric)
    return [KpiEntryResponse.model_validate(e) for e in entries]


@router.put("/entries", response_model=KpiEntryResponse)
def save_entry(payload: KpiEntryUpsert, db: Session = Depends(get_db_session)):
    """Create or overwrite a monthly target, actual or activity figure"""
    return KpiEntryResponse.model_validate(KpiService.save_entry(db, payload))


@router.get("/summary")
def summary(
    fiscal_year: int = Query(..., ge=2000, le=2100),
    db: Session = Depends(get_db_session),
):
    """Channel by month table of actuals, targets and history for a fiscal year"""
    return KpiService.summary(db, fiscal_year)


@router.get("/fiscal-window")
def fiscal_window(
    latest: Optional[str] = Query(None, description="YYYY-MM inside the wanted fiscal year"),
    db: Session = Depends(get_db_session),
):
    return KpiService.fiscal_window(db, latest)
