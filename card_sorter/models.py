from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .sorting import SortKey


class ReportSummary(BaseModel):
    rows: int = 0
    columns: int = 0
    filtered_out: int = 0
    warnings: int = 0


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class DatasetResponse(BaseModel):
    filename: str
    variant: str
    encoding: Optional[str] = Field(default=None, examples=["utf-8"])
    delimiter: str = Field(default=",")
    columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    sort: List[SortKey] = Field(default_factory=list)
    downloadable: bool = False
    summary: ReportSummary
    warnings: List[ReportItem] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
