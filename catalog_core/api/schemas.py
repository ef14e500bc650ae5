"""API request/response models"""

from pydantic import BaseModel, Field
from typing import Any, List, Optional


class ResultRecordOut(BaseModel):
    """A normalized search hit"""
    source_kind: str
    id: str
    title: str
    subtitle: str = ""
    icon: str = ""
    navigation_target: str = ""
    raw_payload: Any = None


class SearchResponse(BaseModel):
    """Merged omni-search results with degradation metadata"""
    query: str
    results: List[ResultRecordOut]
    total_count: int
    degraded_sources: List[str] = []
    degraded: bool = False
    cached: bool = False
    search_time_ms: Optional[float] = None


class CatalogItemOut(BaseModel):
    id: str
    name: str
    price: float
    category_id: Optional[str] = None
    eligibility_flags: List[str] = []
    available: bool = True
    description: str = ""


class CategoryOut(BaseModel):
    id: str
    name: str


class CatalogResponse(BaseModel):
    """Filtered catalog for a plan"""
    plan_id: str
    plan_description: str = ""
    items: List[CatalogItemOut]
    categories: List[CategoryOut]


MAX_LINE_QUANTITY = 100


class LineIn(BaseModel):
    item_id: str
    quantity: int = Field(default=1, ge=1, le=MAX_LINE_QUANTITY)


class SelectionRequest(BaseModel):
    """A selection to price or confirm"""
    plan_id: Optional[str] = None
    nights: int = Field(default=1, ge=1)
    guests: int = Field(default=1, ge=1)
    lines: List[LineIn] = []


class LineOut(BaseModel):
    item: CatalogItemOut
    quantity: int
    line_total: float


class TotalsOut(BaseModel):
    items_total: float
    per_night_total: float
    whole_stay_total: float


class QuoteResponse(BaseModel):
    """Priced selection"""
    plan_id: str
    nights: int
    guests: int
    lines: List[LineOut]
    totals: TotalsOut
