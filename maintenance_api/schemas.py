from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class FilterCriteriaModel(BaseModel):
    search_text: str = ""
    month: str = Field(default="all", max_length=8)


class MonthOption(BaseModel):
    id: str
    name: str


class MetaMonthsResponse(BaseModel):
    months: List[MonthOption]


class MetaListResponse(BaseModel):
    values: List[str]


class StoreStatusResponse(BaseModel):
    status: str
    count: Optional[int] = None
    error: Optional[str] = None
