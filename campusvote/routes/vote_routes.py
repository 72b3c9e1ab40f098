from typing import List

from fastapi import APIRouter, Depends, Query

from campusvote import voting
from campusvote.dependencies import get_current_identity, get_storage
from campusvote.models.vote_model import Vote, VoteAck, VoteStatus
from campusvote.security import Identity
from campusvote.storage_mongo import MongoStorage

vote_router = APIRouter(prefix="/api/votes", tags=["Vote"])


@vote_router.post("", response_model=VoteAck, status_code=201)
def cast_vote(
    vote: Vote,
    identity: Identity = Depends(get_current_identity),
    storage: MongoStorage = Depends(get_storage),
):
    """
    Casts a vote for the authenticated student.
    The response never echoes the chosen candidate.
    """
    return voting.cast_vote(storage, identity, vote.election_id, vote.candidate_id)


@vote_router.get("/status", response_model=VoteStatus)
def check_vote(
    election_id: str = Query(..., alias="electionId"),
    identity: Identity = Depends(get_current_identity),
    storage: MongoStorage = Depends(get_storage),
):
    return voting.get_vote_status(storage, identity, election_id)


@vote_router.get("/history", response_model=List[str])
def vote_history(
    identity: Identity = Depends(get_current_identity),
    storage: MongoStorage = Depends(get_storage),
):
    return voting.get_vote_history(storage, identity)
