from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging
import uuid

from app.config import settings
from domain.models import Product
from domain.schemas.product_schemas import ProductCreate, ProductUpdate
from repositories import ProductRepository
from services.learning_service import LearningService
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError

logger = logging.getLogger("backoffice.products")


class ProductService:
    @staticmethod
    def list_products(db: Session, search: Optional[str] = None) -> List[Product]:
        repo = ProductRepository(db)
        if search:
            return repo.search_by_name(search)
        return repo.list_all()

    @staticmethod
    def get_product(db: Session, product_id: uuid.UUID) -> Product:
        product = ProductRepository(db).get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product not found: {product_id}")
        return product

    @staticmethod
    def create_product(db: Session, data: ProductCreate) -> Product:
        """
        Register a product with the next free series number.

        When a marketplace title is supplied it is learned for that
        marketplace as well; a failure there is logged and the product is
        still returned.

        Raises:
            ServiceValidationError: blank name, or a title without marketplace
            ConflictError: a product with the same name exists
        """
        repo = ProductRepository(db)
        name = (data.name or "").strip()
        if not name:
            raise ServiceValidationError("Product name must not be empty")
        if data.marketplace_title and not data.marketplace:
            raise ServiceValidationError(
                "marketplace is required when marketplace_title is given"
            )
        if repo.get_by_name(name):
            raise ConflictError(f"Product already exists: {name}")

        max_series = repo.max_series()
        series = max_series + 1 if max_series is not None else settings.first_series_number

        product = Product(
            name=name,
            series=series,
            series_name=data.series_name,
            product_number=f"P{series}",
            price=data.price,
        )
        try:
            product = repo.create(product)
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(str(e.orig)) from e
        logger.info(f"Created product {product.product_number} '{name}'")

        title = (data.marketplace_title or "").strip()
        if title:
            try:
                LearningService.learn(db, data.marketplace, title, product.id)
            except (SQLAlchemyError, ServiceValidationError, NotFoundError) as e:
                logger.warning(
                    f"Product {product.id} created but learning '{title}' failed: {e}"
                )
        return product

    @staticmethod
    def update_product(
        db: Session, product_id: uuid.UUID, data: ProductUpdate
    ) -> Product:
        repo = ProductRepository(db)
        product = ProductService.get_product(db, product_id)

        fields = {
            k: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k == "series_name"
        }
        if "name" in fields:
            name = (fields["name"] or "").strip()
            if not name:
                raise ServiceValidationError("Product name must not be empty")
            other = repo.get_by_name(name)
            if other and other.id != product.id:
                raise ConflictError(f"Product already exists: {name}")
            fields["name"] = name

        for key, value in fields.items():
            setattr(product, key, value)
        try:
            return repo.update(product)
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(str(e.orig)) from e

    @staticmethod
    def delete_product(db: Session, product_id: uuid.UUID) -> bool:
        """Delete a product together with its web sales rows and learned titles"""
        product = ProductService.get_product(db, product_id)
        try:
            db.delete(product)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error deleting product %s", product_id)
            raise
        logger.info(f"Deleted product {product_id}")
        return True
