from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from campusvote import crud
from campusvote.dependencies import get_current_identity, get_storage, require_admin
from campusvote.models.election_model import (
    ElectionCreate,
    ElectionOut,
    ElectionStatus,
    ElectionSummary,
    ElectionUpdate,
    StatusUpdateRequest,
)
from campusvote.models.vote_model import ElectionResults
from campusvote.security import Identity
from campusvote.storage_mongo import MongoStorage
from campusvote.tally import compute_election_summaries, compute_results

router = APIRouter(prefix="/api/elections", tags=["Election"])


@router.get("", response_model=List[ElectionSummary])
def get_elections(
    status: Optional[ElectionStatus] = Query(None),
    storage: MongoStorage = Depends(get_storage),
):
    """All elections, newest first, each with its vote and candidate counts."""
    query = {"status": status.value} if status else None
    return compute_election_summaries(storage, query)


@router.post("", response_model=ElectionOut, status_code=201)
def create_election(
    election: ElectionCreate,
    _: Identity = Depends(require_admin),
    storage: MongoStorage = Depends(get_storage),
):
    return crud.create_election(storage, election)


@router.put("/{election_id}", response_model=ElectionOut)
def update_election(
    election_id: str,
    election: ElectionUpdate,
    _: Identity = Depends(require_admin),
    storage: MongoStorage = Depends(get_storage),
):
    return crud.update_election(storage, election_id, election)


@router.patch("/{election_id}/status", response_model=ElectionOut)
def update_election_status(
    election_id: str,
    status_update: StatusUpdateRequest,
    _: Identity = Depends(require_admin),
    storage: MongoStorage = Depends(get_storage),
):
    return crud.update_election_status(storage, election_id, status_update.status)


@router.delete("/{election_id}")
def delete_election(
    election_id: str,
    _: Identity = Depends(require_admin),
    storage: MongoStorage = Depends(get_storage),
):
    crud.delete_election(storage, election_id)
    return {"message": "Election removed"}


@router.get("/{election_id}/results", response_model=ElectionResults)
def get_election_results(
    election_id: str,
    sort: Optional[str] = Query(None, pattern="^votes$"),
    _: Identity = Depends(get_current_identity),
    storage: MongoStorage = Depends(get_storage),
):
    """Per-candidate tally; pass ``sort=votes`` for descending vote order."""
    return compute_results(storage, election_id, sort_by_votes=sort == "votes")
