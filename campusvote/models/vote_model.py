from typing import List

from campusvote.models.election_model import ElectionOut
from campusvote.schemas import CamelModel


class Vote(CamelModel):
    election_id: str
    candidate_id: str


class VoteAck(CamelModel):
    ok: bool = True
    message: str = "Vote cast successfully"


class VoteStatus(CamelModel):
    has_voted: bool


class CandidateResult(CamelModel):
    candidate_id: str
    name: str
    department: str
    votes: int
    percentage: int = 0


class ElectionResults(CamelModel):
    election: ElectionOut
    results: List[CandidateResult]
    total_votes: int
    winners: List[str]
    is_tie: bool
