# campusvote/storage_mongo.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from campusvote.config import (
    CANDIDATES_COLLECTION_NAME,
    ELECTIONS_COLLECTION_NAME,
    USERS_COLLECTION_NAME,
    VOTES_COLLECTION_NAME,
)
from campusvote.errors import Conflict, ValidationError

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: Any, field: str = "id") -> ObjectId:
    """Parse a client supplied id, raising ValidationError on bad format."""
    if isinstance(value, ObjectId):
        return value
    # ObjectId(None) would mint a new id
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {field} format.")
    try:
        return ObjectId(value)
    except InvalidId:
        raise ValidationError(f"Invalid {field} format.")


class BaseStore:
    """Read/create contract over one collection.

    Documents leave the store with ``_id`` and every reference field rendered
    as strings, so nothing above this layer handles ObjectId.
    """

    reference_fields: tuple = ()

    def __init__(self, collection: Collection):
        self.collection = collection

    def _to_public(self, doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if doc is None:
            return None
        doc = dict(doc)
        doc["_id"] = str(doc["_id"])
        for field in self.reference_fields:
            if isinstance(doc.get(field), ObjectId):
                doc[field] = str(doc[field])
        return doc

    def _to_query(self, filter: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        query = dict(filter or {})
        for field in ("_id",) + self.reference_fields:
            if field in query and not isinstance(query[field], dict):
                query[field] = to_object_id(query[field], field)
        return query

    def get(self, id: Any) -> Optional[Dict[str, Any]]:
        return self._to_public(self.collection.find_one({"_id": to_object_id(id)}))

    def list(self, filter: Optional[Dict[str, Any]] = None, sort=None) -> List[Dict[str, Any]]:
        cursor = self.collection.find(self._to_query(filter))
        if sort:
            cursor = cursor.sort(sort)
        return [self._to_public(doc) for doc in cursor]

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        doc = self._to_query(fields)
        doc.setdefault("created_at", utcnow())
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return self._to_public(doc)

    def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        return self.collection.count_documents(self._to_query(filter))

    def count_by(self, key: str, match: Optional[Dict[str, Any]] = None) -> Dict[Any, int]:
        """Group the collection by ``key`` and count documents per value."""
        pipeline = []
        if match:
            pipeline.append({"$match": self._to_query(match)})
        pipeline.append({"$group": {"_id": f"${key}", "count": {"$sum": 1}}})
        counts = {}
        for row in self.collection.aggregate(pipeline):
            value = row["_id"]
            if isinstance(value, ObjectId):
                value = str(value)
            counts[value] = row["count"]
        return counts


class MutableStore(BaseStore):
    """Adds the administrator update/delete paths."""

    def update(self, id: Any, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        changes = self._to_query(fields)
        changes["updated_at"] = utcnow()
        updated = self.collection.find_one_and_update(
            {"_id": to_object_id(id)},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_public(updated)

    def delete(self, id: Any) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(id)})
        return result.deleted_count > 0

    def delete_many(self, filter: Dict[str, Any]) -> int:
        return self.collection.delete_many(self._to_query(filter)).deleted_count


class ElectionStore(MutableStore):
    pass


class CandidateStore(MutableStore):
    reference_fields = ("election_id",)


class BallotStore(BaseStore):
    """Ballots are created once and never updated or deleted."""

    reference_fields = ("voter_id", "election_id", "candidate_id")

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        fields = dict(fields)
        fields.setdefault("cast_at", utcnow())
        try:
            return super().create(fields)
        except DuplicateKeyError:
            logger.warning(
                f"Duplicate ballot rejected for voter {fields.get('voter_id')} "
                f"in election {fields.get('election_id')}"
            )
            raise Conflict("You have already voted in this election")

    def exists(self, voter_id: Any, election_id: Any) -> bool:
        query = self._to_query({"voter_id": voter_id, "election_id": election_id})
        return self.collection.find_one(query, {"_id": 1}) is not None

    def election_ids_for_voter(self, voter_id: Any) -> List[str]:
        cursor = self.collection.find(
            self._to_query({"voter_id": voter_id}), {"election_id": 1}
        )
        return [str(doc["election_id"]) for doc in cursor]


class UserStore(MutableStore):
    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self._to_public(self.collection.find_one({"email": email.lower()}))

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return super().create(fields)
        except DuplicateKeyError:
            logger.warning(f"User with email {fields.get('email')} already exists.")
            raise Conflict("Email is already registered")


class MongoStorage:
    """All stores of one database, with the indexes they rely on."""

    def __init__(self, db: Database):
        self.db = db
        self.elections = ElectionStore(db[ELECTIONS_COLLECTION_NAME])
        self.candidates = CandidateStore(db[CANDIDATES_COLLECTION_NAME])
        self.ballots = BallotStore(db[VOTES_COLLECTION_NAME])
        self.users = UserStore(db[USERS_COLLECTION_NAME])
        self.ensure_indexes()
        logger.info(f"MongoStorage ready on database: {db.name}")

    def ensure_indexes(self) -> None:
        # one ballot per (voter, election)
        self.ballots.collection.create_index(
            [("voter_id", ASCENDING), ("election_id", ASCENDING)],
            unique=True,
            name="one_ballot_per_voter_per_election",
        )
        self.ballots.collection.create_index("election_id")
        self.candidates.collection.create_index("election_id")
        self.users.collection.create_index("email", unique=True)
