"""Learned CSV title routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from domain.models import get_db_session
from domain.schemas.import_schemas import LearnRequest, MappingResponse
from services.learning_service import LearningService

router = APIRouter(prefix="/learning", tags=["Learning"])
logger = logging.getLogger("backoffice.api.learning")


@router.delete("/mappings/{mapping_id}")
def delete_mapping(mapping_id: UUID, db: Session = Depends(get_db_session)):
    LearningService.delete_mapping(db, mapping_id)
    return {"status": "ok", "removed": str(mapping_id)}


@router.get("/{marketplace}", response_model=List[MappingResponse])
def list_mappings(marketplace: str, db: Session = Depends(get_db_session)):
    """Learned titles of a marketplace (or 'summary')"""
    mappings = LearningService.list_mappings(db, marketplace)
    return [MappingResponse.model_validate(m) for m in mappings]


@router.post(
    "/{marketplace}", response_model=MappingResponse, status_code=status.HTTP_201_CREATED
)
def learn(marketplace: str, payload: LearnRequest, db: Session = Depends(get_db_session)):
    mapping = LearningService.learn(db, marketplace, payload.title, payload.product_id)
    return MappingResponse.model_validate(mapping)


@router.delete("/{marketplace}")
def reset(marketplace: str, db: Session = Depends(get_db_session)):
    """Forget every learned title of the marketplace"""
    deleted = LearningService.reset(db, marketplace)
    return {"status": "ok", "deleted": deleted}
