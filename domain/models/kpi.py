"""
KPI manual entry model (targets, seeded history, activity and manufacturing figures).
"""

from sqlalchemy import (
    Column,
    Text,
    BigInteger,
    Date,
    TIMESTAMP,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class KpiManualEntry(Base):
    """A monthly figure entered by hand; channel_code is '' for channel-less metrics"""

    __tablename__ = "kpi_manual_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    metric = Column(Text, nullable=False)
    channel_code = Column(Text, nullable=False, default="")
    month = Column(Date, nullable=False, index=True)
    amount = Column(BigInteger, nullable=False, default=0)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "metric", "channel_code", "month", name="uq_kpi_metric_channel_month"
        ),
    )
