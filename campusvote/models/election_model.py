from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator

from campusvote.schemas import CamelModel


class ElectionStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    CLOSED = "closed"


def as_utc(value: datetime) -> datetime:
    # pymongo hands back naive UTC datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def check_date_window(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date and end_date and as_utc(end_date) < as_utc(start_date):
        raise ValueError("endDate must not be before startDate")


class ElectionCreate(CamelModel):
    name: str = Field(..., min_length=1, examples=["Student Council 2025"])
    description: str = ""
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def check_dates(self):
        check_date_window(self.start_date, self.end_date)
        return self


class ElectionUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return value if value is None else as_utc(value)

    @model_validator(mode="after")
    def check_dates(self):
        check_date_window(self.start_date, self.end_date)
        return self


class StatusUpdateRequest(CamelModel):
    status: ElectionStatus


class ElectionOut(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    description: str = ""
    start_date: datetime
    end_date: datetime
    status: ElectionStatus
    results_published: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_date", "end_date", "created_at", "updated_at")
    @classmethod
    def to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return value if value is None else as_utc(value)


class ElectionSummary(ElectionOut):
    total_votes: int = 0
    candidate_count: int = 0
