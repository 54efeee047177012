from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from domain.models import Ingredient
from domain.schemas.ingredient_schemas import IngredientCreate, IngredientUpdate
from repositories import IngredientRepository
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError

logger = logging.getLogger("backoffice.ingredients")


class IngredientService:
    """Ingredient master: purchase unit, price and nutrition per 100 g"""

    @staticmethod
    def list_ingredients(
        db: Session, search: Optional[str] = None, category: Optional[str] = None
    ) -> List[Ingredient]:
        return IngredientRepository(db).search(search, category)

    @staticmethod
    def get_ingredient(db: Session, ingredient_id: uuid.UUID) -> Ingredient:
        ingredient = IngredientRepository(db).get_by_id(ingredient_id)
        if not ingredient:
            raise NotFoundError(f"Ingredient not found: {ingredient_id}")
        return ingredient

    @staticmethod
    def create_ingredient(db: Session, data: IngredientCreate) -> Ingredient:
        repo = IngredientRepository(db)
        name = data.name.strip()
        if not name:
            raise ServiceValidationError("Ingredient name must not be empty")
        if repo.get_by_name(name):
            raise ConflictError(f"Ingredient already exists: {name}")

        fields = data.model_dump()
        fields["name"] = name
        try:
            ingredient = repo.create(Ingredient(**fields))
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(f"Ingredient already exists: {name}") from e
        logger.info(f"Created ingredient '{name}'")
        return ingredient

    @staticmethod
    def update_ingredient(
        db: Session, ingredient_id: uuid.UUID, data: IngredientUpdate
    ) -> Ingredient:
        repo = IngredientRepository(db)
        ingredient = IngredientService.get_ingredient(db, ingredient_id)

        fields = data.model_dump(exclude_unset=True)
        if "name" in fields:
            name = (fields["name"] or "").strip()
            if not name:
                raise ServiceValidationError("Ingredient name must not be empty")
            other = repo.get_by_name(name)
            if other and other.id != ingredient.id:
                raise ConflictError(f"Ingredient already exists: {name}")
            fields["name"] = name

        for key, value in fields.items():
            setattr(ingredient, key, value)
        return repo.update(ingredient)

    @staticmethod
    def delete_ingredient(db: Session, ingredient_id: uuid.UUID) -> bool:
        if not IngredientRepository(db).delete(ingredient_id):
            raise NotFoundError(f"Ingredient not found: {ingredient_id}")
        return True
