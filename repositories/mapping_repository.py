"""
Mapping Repository - learned marketplace title -> product assignments
"""

from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy import and_
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MarketplaceProductMapping


class MappingRepository(BaseRepository[MarketplaceProductMapping]):
    """Repository for learned CSV title mappings"""

    def __init__(self, db: Session):
        super().__init__(db, MarketplaceProductMapping)

    def get_by_marketplace(self, marketplace: str) -> List[MarketplaceProductMapping]:
        """Get all learned titles of one marketplace"""
        return (
            self.db.query(MarketplaceProductMapping)
            .filter(MarketplaceProductMapping.marketplace == marketplace)
            .order_by(MarketplaceProductMapping.title)
            .all()
        )

    def title_map(self, marketplace: str) -> Dict[str, UUID]:
        """Learned titles of one marketplace as {title: product_id}"""
        return {
            m.title: m.product_id
            for m in self.get_by_marketplace(marketplace)
            if m.title and m.title.strip()
        }

    def get_by_title(
        self, marketplace: str, title: str
    ) -> Optional[MarketplaceProductMapping]:
        return (
            self.db.query(MarketplaceProductMapping)
            .filter(
                and_(
                    MarketplaceProductMapping.marketplace == marketplace,
                    MarketplaceProductMapping.title == title,
                )
            )
            .first()
        )

    def upsert(
        self, marketplace: str, title: str, product_id: UUID, commit: bool = True
    ) -> MarketplaceProductMapping:
        """Create or re-point the mapping for (marketplace, title)"""
        mapping = self.get_by_title(marketplace, title)
        if mapping:
            mapping.product_id = product_id
        else:
            mapping = MarketplaceProductMapping(
                marketplace=marketplace, title=title, product_id=product_id
            )
            self.db.add(mapping)
        if commit:
            self.db.commit()
            self.db.refresh(mapping)
        else:
            self.db.flush()
        return mapping

    def delete_by_marketplace(self, marketplace: str) -> int:
        """Delete all learned titles of one marketplace"""
        count = (
            self.db.query(MarketplaceProductMapping)
            .filter(MarketplaceProductMapping.marketplace == marketplace)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count
