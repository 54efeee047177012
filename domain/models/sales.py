"""
Daily floor sales and monthly marketplace sales models.
"""

from sqlalchemy import (
    Column,
    Integer,
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


class DailySalesReport(Base):
    """One row per business day: floor register totals and marketplace counts/amounts"""

    __tablename__ = "daily_sales_report"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False, unique=True, index=True)

    floor_sales = Column(Integer)
    cash_income = Column(Integer)
    register_count = Column(Integer)

    amazon_count = Column(Integer)
    rakuten_count = Column(Integer)
    yahoo_count = Column(Integer)
    mercari_count = Column(Integer)
    base_count = Column(Integer)
    qoo10_count = Column(Integer)

    amazon_amount = Column(Integer)
    rakuten_amount = Column(Integer)
    yahoo_amount = Column(Integer)
    mercari_amount = Column(Integer)
    base_amount = Column(Integer)
    qoo10_amount = Column(Integer)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class WebSalesSummary(Base):
    """Units sold per product per month on each marketplace"""

    __tablename__ = "web_sales_summary"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id = Column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    report_month = Column(Date, nullable=False, index=True)

    amazon_count = Column(Integer, nullable=False, default=0)
    rakuten_count = Column(Integer, nullable=False, default=0)
    yahoo_count = Column(Integer, nullable=False, default=0)
    mercari_count = Column(Integer, nullable=False, default=0)
    base_count = Column(Integer, nullable=False, default=0)
    qoo10_count = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    product = relationship("Product", back_populates="web_sales")

    __table_args__ = (
        UniqueConstraint(
            "product_id", "report_month", name="uq_web_sales_product_month"
        ),
    )
