from pydantic import BaseModel, BeforeValidator, Field
from typing import Annotated, Optional
from datetime import date
from uuid import UUID

# Numeric fields of a daily report, in display order
DAILY_FIELDS = (
    "floor_sales",
    "cash_income",
    "register_count",
    "amazon_count",
    "amazon_amount",
    "rakuten_count",
    "rakuten_amount",
    "yahoo_count",
    "yahoo_amount",
    "mercari_count",
    "mercari_amount",
    "base_count",
    "base_amount",
    "qoo10_count",
    "qoo10_amount",
)


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Form fields arrive as "" when left empty
OptionalAmount = Annotated[Optional[int], BeforeValidator(_blank_to_none)]


class DailySalesUpsert(BaseModel):
    """Daily report body; blank fields are stored as null"""

    floor_sales: OptionalAmount = None
    cash_income: OptionalAmount = None
    register_count: OptionalAmount = None
    amazon_count: OptionalAmount = None
    amazon_amount: OptionalAmount = None
    rakuten_count: OptionalAmount = None
    rakuten_amount: OptionalAmount = None
    yahoo_count: OptionalAmount = None
    yahoo_amount: OptionalAmount = None
    mercari_count: OptionalAmount = None
    mercari_amount: OptionalAmount = None
    base_count: OptionalAmount = None
    base_amount: OptionalAmount = None
    qoo10_count: OptionalAmount = None
    qoo10_amount: OptionalAmount = None


class DailySalesResponse(DailySalesUpsert):
    date: date

    model_config = {"from_attributes": True}


class WebSalesCountsUpdate(BaseModel):
    """Per-marketplace unit counts; omitted marketplaces are left unchanged"""

    amazon_count: Optional[int] = Field(None, ge=0)
    rakuten_count: Optional[int] = Field(None, ge=0)
    yahoo_count: Optional[int] = Field(None, ge=0)
    mercari_count: Optional[int] = Field(None, ge=0)
    base_count: Optional[int] = Field(None, ge=0)
    qoo10_count: Optional[int] = Field(None, ge=0)


class WebSalesRowResponse(BaseModel):
    product_id: UUID
    report_month: date
    amazon_count: int = 0
    rakuten_count: int = 0
    yahoo_count: int = 0
    mercari_count: int = 0
    base_count: int = 0
    qoo10_count: int = 0

    model_config = {"from_attributes": True}
