"""
Ingredient Repository - Data access layer for the ingredient master
"""

from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Ingredient


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for ingredient master data access"""

    def __init__(self, db: Session):
        super().__init__(db, Ingredient)

    def get_all(self, skip: int = 0, limit: int = 1000) -> List[Ingredient]:
        return (
            self.db.query(Ingredient)
            .order_by(Ingredient.name)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_name(self, name: str) -> Optional[Ingredient]:
        return self.db.query(Ingredient).filter(Ingredient.name == name).first()

    def get_by_names(self, names: Iterable[str]) -> List[Ingredient]:
        """Batch lookup used when resolving recipe lines to master rows"""
        unique = list({n for n in names if n})
        if not unique:
            return []
        return self.db.query(Ingredient).filter(Ingredient.name.in_(unique)).all()

    def search(
        self, query: Optional[str] = None, category: Optional[str] = None, limit: int = 200
    ) -> List[Ingredient]:
        q = self.db.query(Ingredient)
        if query:
            q = q.filter(func.lower(Ingredient.name).like(f"%{query.lower()}%"))
        if category:
            q = q.filter(Ingredient.category == category)
        return q.order_by(Ingredient.name).limit(limit).all()
