"""Marketplace CSV import routes"""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
import logging
from typing import Optional

from domain.enums import Marketplace
from domain.models import get_db_session
from domain.schemas.import_schemas import (
    ConfirmImportRequest,
    ReconcileRequest,
    SummaryConfirmRequest,
)
from services.csv_import_service import CsvImportService

router = APIRouter(prefix="/imports", tags=["CSV Import"])
logger = logging.getLogger("backoffice.api.imports")


@router.post("/summary/parse")
async def parse_summary(
    file: UploadFile = File(...),
    month: Optional[str] = Form(None),
    db: Session = Depends(get_db_session),
):
    """Parse the consolidated sheet (商品名 plus one column per marketplace)"""
    content = await file.read()
    return CsvImportService.parse_summary_csv(db, content, file.filename, month)


@router.post("/summary/confirm")
def confirm_summary(payload: SummaryConfirmRequest, db: Session = Depends(get_db_session)):
    """Write all marketplace counts of the reviewed summary rows"""
    return CsvImportService.confirm_summary_import(db, payload.month, payload.rows)


@router.post("/{marketplace}/parse")
async def parse_csv(
    marketplace: Marketplace,
    file: UploadFile = File(...),
    month: Optional[str] = Form(None),
    db: Session = Depends(get_db_session),
):
    """
    Parse a marketplace export and match titles to products.

    Nothing is saved; review the result, then post it to /confirm.
    """
    content = await file.read()
    return CsvImportService.parse_csv(db, marketplace, file.filename, content, month)


@router.post("/{marketplace}/reconcile")
def reconcile(
    marketplace: Marketplace,
    payload: ReconcileRequest,
    db: Session = Depends(get_db_session),
):
    """One row per product with duplicates combined, plus a quantity check"""
    return CsvImportService.reconcile(
        db,
        payload.matched,
        payload.unmatched,
        payload.manual_selections,
        payload.csv_total_quantity,
    )


@router.post("/{marketplace}/confirm")
def confirm(
    marketplace: Marketplace,
    payload: ConfirmImportRequest,
    db: Session = Depends(get_db_session),
):
    """Save the month's counts for this marketplace (replacing earlier values)"""
    return CsvImportService.confirm_import(
        db,
        marketplace,
        payload.month,
        payload.matched,
        payload.manual_selections,
        payload.learn_matches,
    )
