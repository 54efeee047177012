"""
Product master and marketplace title learning models.
"""

from sqlalchemy import (
    Column,
    Text,
    Integer,
    TIMESTAMP,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Product(Base):
    """
    Product master - single source of truth for everything sold.

    Marketplace CSV rows, web sales summaries and learned titles all
    reference products by id.
    """

    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    series = Column(Integer, nullable=False)
    series_name = Column(Text)
    product_number = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    mappings = relationship(
        "MarketplaceProductMapping",
        back_populates="product",
        cascade="all, delete-orphan",
    )
    web_sales = relationship(
        "WebSalesSummary",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("name", name="uq_products_name"),
        UniqueConstraint("series", name="uq_products_series"),
        CheckConstraint("price > 0", name="ck_products_price_positive"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', series={self.series})>"


class MarketplaceProductMapping(Base):
    """Learned CSV title -> product assignments, one namespace per marketplace"""

    __tablename__ = "marketplace_product_mapping"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    marketplace = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    product_id = Column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="mappings")

    __table_args__ = (
        UniqueConstraint("marketplace", "title", name="uq_mapping_marketplace_title"),
    )
