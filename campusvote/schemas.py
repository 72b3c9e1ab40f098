from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python and MongoDB, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


# --- Auth Schemas ---
class SignupRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    department: Optional[str] = None
    year: Optional[str] = None
    roll_number: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class UserOut(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    email: EmailStr
    role: str
    department: Optional[str] = None
    year: Optional[str] = None
    roll_number: Optional[str] = None


class AuthResponse(UserOut):
    token: str


# --- Dashboard Schemas ---
class ElectionVotes(CamelModel):
    name: str
    votes: int


class ElectionCandidates(CamelModel):
    name: str
    candidates: int


class DashboardStats(CamelModel):
    total_votes: int
    total_elections: int
    total_candidates: int
    active_elections: int
    upcoming_elections: int
    closed_elections: int
    votes_per_election: List[ElectionVotes]
    candidates_per_election: List[ElectionCandidates]
