from datetime import datetime
from typing import Optional

from pydantic import Field

from campusvote.schemas import CamelModel


class CandidateCreate(CamelModel):
    name: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    year: str = Field(..., min_length=1)
    photo: Optional[str] = None  # URL to photo
    election_id: str


class CandidateUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    department: Optional[str] = Field(None, min_length=1)
    year: Optional[str] = Field(None, min_length=1)
    photo: Optional[str] = None
    election_id: Optional[str] = None


class CandidateOut(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    department: str
    year: str
    photo: Optional[str] = None
    election_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
