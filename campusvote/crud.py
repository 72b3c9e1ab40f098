import logging
from typing import List, Optional

from campusvote.errors import Conflict, InvalidState, NotFound, Unauthorized, ValidationError
from campusvote.models.candidate_model import CandidateCreate, CandidateUpdate
from campusvote.models.election_model import (
    ElectionCreate,
    ElectionStatus,
    ElectionUpdate,
    check_date_window,
)
from campusvote.schemas import SignupRequest
from campusvote.security import ROLE_STUDENT, hash_password, verify_password
from campusvote.storage_mongo import MongoStorage

logger = logging.getLogger(__name__)


def public_user(user: dict) -> dict:
    user = dict(user)
    user.pop("hashed_password", None)
    return user


# Create a new user with hashed password; signups are always students
def create_user(storage: MongoStorage, data: SignupRequest, role: str = ROLE_STUDENT) -> dict:
    user = data.model_dump(exclude={"password"})
    user["email"] = user["email"].lower()
    user["hashed_password"] = hash_password(data.password)
    user["role"] = role
    created = storage.users.create(user)
    logger.info(f"Registered {role} {created['email']}")
    return public_user(created)


# Login user
def authenticate_user(storage: MongoStorage, email: str, password: str) -> dict:
    user = storage.users.get_by_email(email)
    if not user or not verify_password(password, user["hashed_password"]):
        raise Unauthorized("Invalid email or password")
    return public_user(user)


def get_election_or_404(storage: MongoStorage, election_id: str) -> dict:
    election = storage.elections.get(election_id)
    if not election:
        raise NotFound("Election not found")
    return election


# An active election can still receive ballots
def ensure_not_active(election: dict, action: str) -> None:
    if election["status"] == ElectionStatus.ACTIVE.value:
        raise InvalidState(f"Cannot {action}")


def create_election(storage: MongoStorage, data: ElectionCreate) -> dict:
    election = data.model_dump()
    election["status"] = ElectionStatus.UPCOMING.value
    election["results_published"] = False
    created = storage.elections.create(election)
    logger.info(f"Created election {created['_id']} with status: {created['status']}")
    return created


def update_election(storage: MongoStorage, election_id: str, data: ElectionUpdate) -> dict:
    election = get_election_or_404(storage, election_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    try:
        check_date_window(
            changes.get("start_date", election["start_date"]),
            changes.get("end_date", election["end_date"]),
        )
    except ValueError as e:
        raise ValidationError(str(e))
    updated = storage.elections.update(election_id, changes)
    logger.info(f"Election {election_id} updated: {sorted(changes)}")
    return updated


# Status is admin driven; closing an election publishes its results
def update_election_status(storage: MongoStorage, election_id: str, status: str) -> dict:
    if status not in [s.value for s in ElectionStatus]:
        raise ValidationError("Status must be 'upcoming', 'active' or 'closed'")
    get_election_or_404(storage, election_id)
    changes = {"status": status}
    if status == ElectionStatus.CLOSED.value:
        changes["results_published"] = True
    updated = storage.elections.update(election_id, changes)
    logger.info(f"Election {election_id} status set to {status}")
    return updated


def delete_election(storage: MongoStorage, election_id: str) -> None:
    ensure_not_active(get_election_or_404(storage, election_id), "delete an active election")
    if storage.ballots.count({"election_id": election_id}):
        raise Conflict("Cannot delete an election that already has votes recorded")
    removed = storage.candidates.delete_many({"election_id": election_id})
    storage.elections.delete(election_id)
    logger.info(f"Election {election_id} removed with {removed} candidates")


def list_candidates(storage: MongoStorage, election_id: Optional[str] = None) -> List[dict]:
    query = {"election_id": election_id} if election_id else {}
    return storage.candidates.list(query, sort=[("name", 1)])


def create_candidate(storage: MongoStorage, data: CandidateCreate) -> dict:
    get_election_or_404(storage, data.election_id)
    created = storage.candidates.create(data.model_dump())
    logger.info(f"Candidate {created['_id']} added to election {data.election_id}")
    return created


def update_candidate(storage: MongoStorage, candidate_id: str, data: CandidateUpdate) -> dict:
    candidate = storage.candidates.get(candidate_id)
    if not candidate:
        raise NotFound("Candidate not found")
    changes = data.model_dump(exclude_unset=True)
    for field in ("name", "department", "year", "election_id"):
        if changes.get(field, "") is None:
            changes.pop(field)

    new_election_id = changes.get("election_id")
    if new_election_id and new_election_id != candidate["election_id"]:
        get_election_or_404(storage, new_election_id)
        current = get_election_or_404(storage, candidate["election_id"])
        ensure_not_active(current, "move a candidate out of an active election")
        if storage.ballots.count({"candidate_id": candidate_id}):
            raise Conflict("Cannot move a candidate that already has votes recorded")

    updated = storage.candidates.update(candidate_id, changes)
    logger.info(f"Candidate {candidate_id} updated: {sorted(changes)}")
    return updated


def delete_candidate(storage: MongoStorage, candidate_id: str) -> None:
    candidate = storage.candidates.get(candidate_id)
    if not candidate:
        raise NotFound("Candidate not found")
    election = get_election_or_404(storage, candidate["election_id"])
    ensure_not_active(election, "delete a candidate from an active election")
    if storage.ballots.count({"candidate_id": candidate_id}):
        raise Conflict("Cannot delete a candidate that already has votes recorded")
    storage.candidates.delete(candidate_id)
    logger.info(f"Candidate {candidate_id} removed")
