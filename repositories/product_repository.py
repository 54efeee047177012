"""
Product Repository - Data access layer for the product master
"""

from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Product


class ProductRepository(BaseRepository[Product]):
    """Repository for product master data access"""

    def __init__(self, db: Session):
        super().__init__(db, Product)

    def list_all(self) -> List[Product]:
        """The whole product master ordered by series number"""
        return self.db.query(Product).order_by(Product.series).all()

    def get_by_name(self, name: str) -> Optional[Product]:
        """Get product by exact name"""
        return self.db.query(Product).filter(Product.name == name).first()

    def get_many(self, product_ids: Iterable[UUID]) -> List[Product]:
        """Get products for a set of IDs"""
        ids = list(product_ids)
        if not ids:
            return []
        return self.db.query(Product).filter(Product.id.in_(ids)).all()

    def search_by_name(self, query: str, limit: int = 100) -> List[Product]:
        """Search products by name (case-insensitive partial match)"""
        search_pattern = f"%{query.lower()}%"
        return (
            self.db.query(Product)
            .filter(func.lower(Product.name).like(search_pattern))
            .order_by(Product.series)
            .limit(limit)
            .all()
        )

    def max_series(self) -> Optional[int]:
        """Highest series number in use, or None for an empty master"""
        return self.db.query(func.max(Product.series)).scalar()
