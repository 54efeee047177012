from typing import List, Union
from sqlalchemy.orm import Session
import logging
import uuid

from domain.enums import Marketplace, SUMMARY_MAPPING_SOURCE
from domain.models import MarketplaceProductMapping
from repositories import MappingRepository, ProductRepository
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("backoffice.learning")

MAPPING_SOURCES = {m.value for m in Marketplace} | {SUMMARY_MAPPING_SOURCE}


def mapping_source(marketplace: Union[Marketplace, str]) -> str:
    """Validate a marketplace (or the summary sheet key) and return its stored value"""
    value = marketplace.value if isinstance(marketplace, Marketplace) else str(marketplace)
    if value not in MAPPING_SOURCES:
        raise ServiceValidationError(
            f"Unknown marketplace: {marketplace}", code="INVALID_MARKETPLACE"
        )
    return value


class LearningService:
    """Learned CSV title -> product assignments, per marketplace"""

    @staticmethod
    def learn(
        db: Session,
        marketplace: Union[Marketplace, str],
        title: str,
        product_id: uuid.UUID,
        commit: bool = True,
    ) -> MarketplaceProductMapping:
        """
        Remember that `title` in `marketplace` CSVs means `product_id`.

        An existing mapping for the same title is re-pointed.

        Raises:
            ServiceValidationError: blank title or unknown marketplace
            NotFoundError: product does not exist
        """
        source = mapping_source(marketplace)
        title = (title or "").strip()
        if not title:
            raise ServiceValidationError("Title must not be empty")

        if not ProductRepository(db).exists(product_id):
            raise NotFoundError(f"Product not found: {product_id}")

        try:
            mapping = MappingRepository(db).upsert(source, title, product_id, commit=commit)
        except Exception:
            db.rollback()
            logger.exception("Error learning %s title '%s'", source, title)
            raise
        logger.info(f"Learned {source} title '{title}' -> {product_id}")
        return mapping

    @staticmethod
    def list_mappings(
        db: Session, marketplace: Union[Marketplace, str]
    ) -> List[MarketplaceProductMapping]:
        return MappingRepository(db).get_by_marketplace(mapping_source(marketplace))

    @staticmethod
    def delete_mapping(db: Session, mapping_id: uuid.UUID) -> bool:
        if not MappingRepository(db).delete(mapping_id):
            raise NotFoundError(f"Mapping not found: {mapping_id}")
        return True

    @staticmethod
    def reset(db: Session, marketplace: Union[Marketplace, str]) -> int:
        """Forget every learned title of one marketplace; returns the number removed"""
        source = mapping_source(marketplace)
        count = MappingRepository(db).delete_by_marketplace(source)
        logger.info(f"Reset {count} learned {source} titles")
        return count
