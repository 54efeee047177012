from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from uuid import UUID

from domain.enums import KpiChannel, KpiMetric


class KpiEntryUpsert(BaseModel):
    metric: KpiMetric
    channel: Optional[KpiChannel] = None
    month: str = Field(..., description="YYYY-MM or YYYY-MM-01")
    amount: int


class KpiEntryResponse(BaseModel):
    id: UUID
    metric: str
    channel_code: str
    month: date
    amount: int

    model_config = {"from_attributes": True}
