"""Vote casting.

The one invariant the system has lives here and in the ``votes`` collection's
unique index: at most one ballot per (voter, election).
"""
import logging
from typing import List

from campusvote.errors import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from campusvote.models.election_model import ElectionStatus
from campusvote.security import ROLE_STUDENT, Identity
from campusvote.storage_mongo import MongoStorage, to_object_id

logger = logging.getLogger(__name__)


def cast_vote(storage: MongoStorage, identity: Identity, election_id: str, candidate_id: str) -> dict:
    """Record one ballot for ``identity`` or raise the first failing precondition.

    Order: id format, election exists, election active, candidate exists,
    candidate in election, no prior ballot. The prior-ballot check is a fast
    path only; the unique index turns a lost race into ``Conflict`` as well.
    """
    if identity.role != ROLE_STUDENT:
        raise Forbidden("Only students can vote")

    to_object_id(election_id, "election ID")
    to_object_id(candidate_id, "candidate ID")

    election = storage.elections.get(election_id)
    if not election:
        raise NotFound("Election not found")
    if election["status"] != ElectionStatus.ACTIVE.value:
        logger.warning(f"Vote attempt on {election['status']} election {election_id} by {identity.user_id}")
        raise InvalidState("Election is not open for voting")

    candidate = storage.candidates.get(candidate_id)
    if not candidate:
        raise NotFound("Candidate not found")
    if candidate["election_id"] != election["_id"]:
        raise ValidationError("Candidate does not belong to this election")

    if storage.ballots.exists(identity.user_id, election_id):
        raise Conflict("You have already voted in this election")

    storage.ballots.create(
        {
            "voter_id": identity.user_id,
            "election_id": election_id,
            "candidate_id": candidate_id,
        }
    )
    logger.info(f"Ballot recorded for voter {identity.user_id} in election {election_id}")
    return {"ok": True, "message": "Vote cast successfully"}


def get_vote_status(storage: MongoStorage, identity: Identity, election_id: str) -> dict:
    return {"has_voted": storage.ballots.exists(identity.user_id, election_id)}


def get_vote_history(storage: MongoStorage, identity: Identity) -> List[str]:
    return storage.ballots.election_ids_for_voter(identity.user_id)
