# app/schemas.py
# Role: Pydantic request/response models for the portfolio API.

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr

# No lax coercion on input: "100" and true are not numbers, 2.0 is not a month
StrictNumber = Union[StrictInt, StrictFloat]


class AssetCreate(BaseModel):
    """POST /portfolio body. Name and value are checked in the route so a
    missing one gives the same 400 as an empty one."""

    asset_name: Optional[StrictStr] = None
    asset_value: Optional[StrictNumber] = None
    month: Optional[StrictInt] = None
    year: Optional[StrictInt] = None
    created_at: Optional[datetime] = None


class AssetUpdate(BaseModel):
    """PUT /portfolio/{id} body; only the fields actually sent are applied."""

    asset_name: Optional[StrictStr] = None
    asset_value: Optional[StrictNumber] = None
    month: Optional[StrictInt] = None
    year: Optional[StrictInt] = None


class AssetOut(BaseModel):
    id: int
    asset_name: str
    asset_value: float
    month: int
    year: int
    created_at: datetime
    updated_at: datetime


class MonthYear(BaseModel):
    month: int
    year: int


class MessageOut(BaseModel):
    message: str


class RepairOut(BaseModel):
    message: str
    found: int
    fixed: int


MonthlyTotals = List[Optional[float]]
