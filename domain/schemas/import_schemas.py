from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from uuid import UUID

from domain.enums import Marketplace, MatchType


class MatchedRow(BaseModel):
    """A CSV title with its quantity and the product it resolved to"""

    title: str
    quantity: int
    product_id: Optional[UUID] = None
    product_name: Optional[str] = None
    match_type: MatchType = MatchType.NONE
    confidence: int = 0


class UnmatchedRow(BaseModel):
    title: str
    quantity: int


class ManualSelection(BaseModel):
    """User's choice of product for a title the matcher could not resolve"""

    title: str
    product_id: UUID
    quantity: int = Field(0, ge=0)


class ReconcileRequest(BaseModel):
    matched: List[MatchedRow] = Field(default_factory=list)
    unmatched: List[UnmatchedRow] = Field(default_factory=list)
    manual_selections: List[ManualSelection] = Field(default_factory=list)
    csv_total_quantity: Optional[int] = Field(
        None, description="Total quantity from the parse summary, enables the quality check"
    )


class ConfirmImportRequest(BaseModel):
    month: str = Field(..., description="Report month, YYYY-MM or YYYY-MM-01")
    matched: List[MatchedRow] = Field(default_factory=list)
    manual_selections: List[ManualSelection] = Field(default_factory=list)
    learn_matches: bool = True


class SummaryConfirmRow(BaseModel):
    title: str
    product_id: Optional[UUID] = None
    counts: Dict[Marketplace, int] = Field(default_factory=dict)


class SummaryConfirmRequest(BaseModel):
    month: str
    rows: List[SummaryConfirmRow] = Field(default_factory=list)


class LearnRequest(BaseModel):
    title: str = Field(..., min_length=1)
    product_id: UUID


class MappingResponse(BaseModel):
    id: UUID
    marketplace: str
    title: str
    product_id: UUID

    model_config = {"from_attributes": True}
