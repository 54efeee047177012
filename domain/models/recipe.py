"""
Recipe cost-accounting models.
"""

from sqlalchemy import (
    Column,
    Text,
    Integer,
    Float,
    Boolean,
    Date,
    TIMESTAMP,
    ForeignKey,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Ingredient(Base):
    """
    Ingredient master - purchase unit, price and nutrition per 100 g.

    Recipe lines reference ingredients by name, the way the purchasing
    sheets they are imported from do.
    """

    __tablename__ = "ingredients"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    category = Column(Text)
    unit_quantity = Column(Float)
    price_incl_tax = Column(Integer)
    price_excl_tax = Column(Integer)
    calories = Column(Float)
    protein = Column(Float)
    fat = Column(Float)
    carbohydrate = Column(Float)
    sodium = Column(Float)
    supplier = Column(Text)
    notes = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (UniqueConstraint("name", name="uq_ingredients_name"),)

    @property
    def price_per_gram(self):
        price = self.price_excl_tax if self.price_excl_tax is not None else self.price_incl_tax
        if price is None or not self.unit_quantity:
            return None
        return price / self.unit_quantity

    def __repr__(self):
        return f"<Ingredient(id={self.id}, name='{self.name}')>"


class Recipe(Base):
    """Product recipe with cached cost totals"""

    __tablename__ = "recipes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    category = Column(Text)
    is_intermediate = Column(Boolean, nullable=False, default=False)
    status = Column(Text, nullable=False, default="active")
    development_date = Column(Date)
    manufacturing_notes = Column(Text)
    filling_quantity = Column(Float)
    storage_method = Column(Text)
    selling_price = Column(Integer)
    production_quantity = Column(Integer, nullable=False, default=400)
    total_cost = Column(Integer)
    unit_cost = Column(Float)
    total_weight = Column(Float)
    source_file = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    items = relationship(
        "RecipeItem",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeItem.display_order",
    )


class RecipeItem(Base):
    """One line of a recipe: ingredient, intermediate, packaging material or expense"""

    __tablename__ = "recipe_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipe_id = Column(
        Uuid,
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_name = Column(Text, nullable=False)
    item_type = Column(Text, nullable=False, default="ingredient")
    unit_quantity = Column(Float)
    unit_price = Column(Float)
    usage_amount = Column(Float)
    cost = Column(Integer)
    display_order = Column(Integer, nullable=False, default=0)

    recipe = relationship("Recipe", back_populates="items")
