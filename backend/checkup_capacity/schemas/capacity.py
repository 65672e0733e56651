# backend/checkup_capacity/schemas/capacity.py
"""
Pydantic schemas for the capacity API.

Read responses are built as plain dicts (they are hashed for the ETag);
these models cover request bodies and the admin responses.
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class DayToggleRequest(BaseModel):
    """PUT /capacity/day body."""
    date: str = Field(description="Date in YYYY-MM-DD format")
    resource: Optional[str] = Field(None, description="basic / egd / col / special / free-form key")
    close: bool = False

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        v = v.strip()
        if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", v):
            raise ValueError("Invalid date format, expected YYYY-MM-DD")
        try:
            day = datetime.strptime(v, "%Y-%m-%d").date()
        except ValueError:
            raise ValueError("Invalid date format, expected YYYY-MM-DD")
        if day == datetime.max.date():
            raise ValueError("Date out of range")
        return v


class DayToggleResponse(BaseModel):
    ok: bool = True
    date: str
    resource: str
    closed: bool


class CapacityDefaultsRead(BaseModel):
    BASIC: int = 0
    NHIS: int = 0
    SPECIAL: int = 0


class CapacityDefaultsUpdate(BaseModel):
    """Partial update; omitted keys keep their value."""
    BASIC: Optional[int] = None
    NHIS: Optional[int] = None
    SPECIAL: Optional[int] = None


class SlotTemplateCreate(BaseModel):
    dow: int = Field(ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    start: str = Field(description="HH:MM")
    end: str = Field(description="HH:MM")
    capacity: int = Field(ge=0, description="Capacity of each slot")

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, v: str) -> str:
        v = v.strip()
        if not _HHMM.match(v):
            raise ValueError("Invalid time format, expected HH:MM")
        return v

    @model_validator(mode="after")
    def check_interval(self):
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class SlotTemplateRead(BaseModel):
    id: int
    dow: int
    start: str
    end: str
    capacity: int

    model_config = {"from_attributes": True}
