from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from campusvote import crud
from campusvote.dependencies import get_storage, require_admin
from campusvote.models.candidate_model import CandidateCreate, CandidateOut, CandidateUpdate
from campusvote.security import Identity
from campusvote.storage_mongo import MongoStorage

router = APIRouter(prefix="/api/candidates", tags=["Candidate"])


@router.get("", response_model=List[CandidateOut])
def get_candidates(
    election_id: Optional[str] = Query(None, alias="electionId"),
    storage: MongoStorage = Depends(get_storage),
):
    return crud.list_candidates(storage, election_id)


@router.post("", response_model=CandidateOut, status_code=201)
def add_candidate(
    candidate: CandidateCreate,
    _: Identity = Depends(require_admin),
    storage: MongoStorage = Depends(get_storage),
):
    return crud.create_candidate(storage, candidate)


@router.put("/{candidate_id}", response_model=CandidateOut)
def update_candidate(
    candidate_id: str,
    candidate: CandidateUpdate,
    _: Identity = Depends(require_admin),
    storage: MongoStorage = Depends(get_storage),
):
    return crud.update_candidate(storage, candidate_id, candidate)


@router.delete("/{candidate_id}")
def delete_candidate(
    candidate_id: str,
    _: Identity = Depends(require_admin),
    storage: MongoStorage = Depends(get_storage),
):
    crud.delete_candidate(storage, candidate_id)
    return {"message": "Candidate removed"}
