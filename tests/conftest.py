from datetime import datetime, timezone
from typing import Callable, Iterator

import mongomock
import pytest
from fastapi.testclient import TestClient

from campusvote.dependencies import get_storage
from campusvote.main import app
from campusvote.security import ROLE_ADMIN, ROLE_STUDENT, Identity, create_access_token
from campusvote.storage_mongo import MongoStorage


@pytest.fixture()
def storage() -> MongoStorage:
    return MongoStorage(mongomock.MongoClient(tz_aware=True)["campus_vote_test"])


@pytest.fixture()
def make_user(storage: MongoStorage) -> Callable[..., dict]:
    counter = iter(range(1, 1000))

    def _make(role: str = ROLE_STUDENT, **fields) -> dict:
        n = next(counter)
        doc = {
            "name": f"User {n}",
            "email": f"user{n}@campus.edu",
            "hashed_password": "not-a-real-hash",
            "role": role,
        }
        doc.update(fields)
        return storage.users.create(doc)

    return _make


@pytest.fixture()
def student(make_user) -> dict:
    return make_user(ROLE_STUDENT, department="CSE", year="3", roll_number="CSE-042")


@pytest.fixture()
def admin(make_user) -> dict:
    return make_user(ROLE_ADMIN, name="Election Office")


@pytest.fixture()
def student_identity(student: dict) -> Identity:
    return Identity(user_id=student["_id"], role=ROLE_STUDENT)


@pytest.fixture()
def make_election(storage: MongoStorage) -> Callable[..., dict]:
    def _make(name: str = "Student Council", status: str = "active", **fields) -> dict:
        doc = {
            "name": name,
            "description": "",
            "start_date": datetime(2025, 3, 1, tzinfo=timezone.utc),
            "end_date": datetime(2025, 3, 3, tzinfo=timezone.utc),
            "status": status,
            "results_published": status == "closed",
        }
        doc.update(fields)
        return storage.elections.create(doc)

    return _make


@pytest.fixture()
def make_candidate(storage: MongoStorage) -> Callable[..., dict]:
    def _make(election_id: str, name: str, department: str = "CSE", year: str = "3") -> dict:
        return storage.candidates.create(
            {"name": name, "department": department, "year": year, "election_id": election_id}
        )

    return _make


@pytest.fixture()
def cast(storage: MongoStorage) -> Callable[[str, str, str], dict]:
    """Insert a ballot directly, bypassing the voting rules."""

    def _cast(voter_id: str, election_id: str, candidate_id: str) -> dict:
        return storage.ballots.create(
            {"voter_id": voter_id, "election_id": election_id, "candidate_id": candidate_id}
        )

    return _cast


@pytest.fixture()
def client(storage: MongoStorage) -> Iterator[TestClient]:
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user: dict) -> dict:
    token = create_access_token({"sub": user["_id"], "role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def student_headers(student: dict) -> dict:
    return auth_headers(student)


@pytest.fixture()
def admin_headers(admin: dict) -> dict:
    return auth_headers(admin)


@pytest.fixture()
def headers_for() -> Callable[[dict], dict]:
    return auth_headers
