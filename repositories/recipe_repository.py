"""
Recipe Repository - Data access layer for recipes and their lines
"""

from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from repositories.base import BaseRepository
from domain.models import Recipe


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for recipes"""

    def __init__(self, db: Session):
        super().__init__(db, Recipe)

    def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Recipe], int]:
        """Filtered page of recipes and the total number of matches"""
        q = self.db.query(Recipe)
        if query:
            q = q.filter(func.lower(Recipe.name).like(f"%{query.lower()}%"))
        if category:
            q = q.filter(Recipe.category == category)
        if status:
            q = q.filter(Recipe.status == status)

        total = q.count()
        recipes = (
            q.options(selectinload(Recipe.items))
            .order_by(Recipe.name)
            .offset(skip)
            .limit(limit)
            .all()
        )
        return recipes, total

    def get_categories(self) -> List[str]:
        rows = (
            self.db.query(Recipe.category)
            .filter(Recipe.category.isnot(None))
            .distinct()
            .order_by(Recipe.category)
            .all()
        )
        return [r[0] for r in rows if r[0]]
