"""Vote casting rules and the one-ballot-per-election invariant."""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from bson import ObjectId

from campusvote import voting
from campusvote.errors import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from campusvote.security import ROLE_ADMIN, Identity


@pytest.fixture()
def election(make_election) -> dict:
    return make_election(status="active")


@pytest.fixture()
def alice(make_candidate, election) -> dict:
    return make_candidate(election["_id"], "Alice")


@pytest.fixture()
def bob(make_candidate, election) -> dict:
    return make_candidate(election["_id"], "Bob")


class TestCastVote:
    def test_records_one_ballot(self, storage, student_identity, election, alice):
        ack = voting.cast_vote(storage, student_identity, election["_id"], alice["_id"])

        assert ack == {"ok": True, "message": "Vote cast successfully"}
        ballots = storage.ballots.list({"election_id": election["_id"]})
        assert len(ballots) == 1
        assert ballots[0]["voter_id"] == student_identity.user_id
        assert ballots[0]["candidate_id"] == alice["_id"]
        assert ballots[0]["cast_at"] is not None

    def test_ack_does_not_echo_choice(self, storage, student_identity, election, alice):
        ack = voting.cast_vote(storage, student_identity, election["_id"], alice["_id"])

        assert alice["_id"] not in ack.values()
        assert "Alice" not in ack["message"]

    def test_second_vote_in_same_election_conflicts(self, storage, student_identity, election, alice, bob):
        """Status flips to voted, and a second attempt for any candidate is refused."""
        voting.cast_vote(storage, student_identity, election["_id"], alice["_id"])
        assert voting.get_vote_status(storage, student_identity, election["_id"]) == {"has_voted": True}

        with pytest.raises(Conflict):
            voting.cast_vote(storage, student_identity, election["_id"], bob["_id"])
        assert storage.ballots.count({"election_id": election["_id"]}) == 1

    def test_lost_race_still_conflicts(self, storage, student_identity, election, alice, monkeypatch):
        """A request that passed the pre-check before another insert landed is stopped by the index."""
        voting.cast_vote(storage, student_identity, election["_id"], alice["_id"])
        monkeypatch.setattr(storage.ballots, "exists", lambda voter_id, election_id: False)

        with pytest.raises(Conflict):
            voting.cast_vote(storage, student_identity, election["_id"], alice["_id"])
        assert storage.ballots.count({"election_id": election["_id"]}) == 1

    def test_simultaneous_casts_record_one_ballot(self, storage, student_identity, election, alice, bob, monkeypatch):
        """Every request clears the pre-check together; only one insert may land."""
        attempts = 6
        barrier = threading.Barrier(attempts, timeout=5)
        exists = storage.ballots.exists

        def exists_then_wait(voter_id, election_id):
            found = exists(voter_id, election_id)
            barrier.wait()
            return found

        monkeypatch.setattr(storage.ballots, "exists", exists_then_wait)

        def attempt(candidate):
            try:
                voting.cast_vote(storage, student_identity, election["_id"], candidate["_id"])
                return "ok"
            except Conflict:
                return "conflict"

        with ThreadPoolExecutor(max_workers=attempts) as pool:
            outcomes = list(pool.map(attempt, [alice, bob] * (attempts // 2)))

        assert sorted(outcomes) == ["conflict"] * (attempts - 1) + ["ok"]
        assert storage.ballots.count({"election_id": election["_id"]}) == 1

    def test_same_voter_may_vote_in_other_elections(
        self, storage, student_identity, election, alice, make_election, make_candidate
    ):
        other = make_election("Sports Secretary")
        carol = make_candidate(other["_id"], "Carol")

        voting.cast_vote(storage, student_identity, election["_id"], alice["_id"])
        voting.cast_vote(storage, student_identity, other["_id"], carol["_id"])

        assert sorted(voting.get_vote_history(storage, student_identity)) == sorted(
            [election["_id"], other["_id"]]
        )

    @pytest.mark.parametrize("status", ["upcoming", "closed"])
    def test_non_active_election_is_invalid_state(self, storage, student_identity, make_election, make_candidate, status):
        election = make_election(status=status)
        candidate = make_candidate(election["_id"], "Alice")

        with pytest.raises(InvalidState):
            voting.cast_vote(storage, student_identity, election["_id"], candidate["_id"])
        assert storage.ballots.count() == 0

    def test_unknown_election_is_not_found(self, storage, student_identity, alice):
        with pytest.raises(NotFound):
            voting.cast_vote(storage, student_identity, str(ObjectId()), alice["_id"])
        assert storage.ballots.count() == 0

    def test_unknown_candidate_is_not_found(self, storage, student_identity, election):
        with pytest.raises(NotFound):
            voting.cast_vote(storage, student_identity, election["_id"], str(ObjectId()))
        assert storage.ballots.count() == 0

    def test_candidate_from_other_election_is_rejected(
        self, storage, student_identity, election, make_election, make_candidate
    ):
        other = make_election("Sports Secretary")
        outsider = make_candidate(other["_id"], "Dave")

        with pytest.raises(ValidationError):
            voting.cast_vote(storage, student_identity, election["_id"], outsider["_id"])
        assert storage.ballots.count() == 0

    def test_malformed_ids_are_rejected(self, storage, student_identity, election):
        with pytest.raises(ValidationError):
            voting.cast_vote(storage, student_identity, "not-an-id", "also-not")
        with pytest.raises(ValidationError):
            voting.cast_vote(storage, student_identity, election["_id"], "also-not")

    def test_inactive_checked_before_candidate(self, storage, student_identity, make_election):
        """First failing precondition wins."""
        election = make_election(status="closed")

        with pytest.raises(InvalidState):
            voting.cast_vote(storage, student_identity, election["_id"], str(ObjectId()))

    def test_admins_cannot_vote(self, storage, admin, election, alice):
        identity = Identity(user_id=admin["_id"], role=ROLE_ADMIN)

        with pytest.raises(Forbidden):
            voting.cast_vote(storage, identity, election["_id"], alice["_id"])


class TestVoteStatus:
    def test_not_voted(self, storage, student_identity, election):
        assert voting.get_vote_status(storage, student_identity, election["_id"]) == {"has_voted": False}

    def test_unknown_election_reports_not_voted(self, storage, student_identity):
        assert voting.get_vote_status(storage, student_identity, str(ObjectId())) == {"has_voted": False}

    def test_other_voters_ballot_does_not_count(self, storage, student_identity, make_user, election, alice, cast):
        someone = make_user()
        cast(someone["_id"], election["_id"], alice["_id"])

        assert voting.get_vote_status(storage, student_identity, election["_id"]) == {"has_voted": False}


class TestVoteHistory:
    def test_empty(self, storage, student_identity):
        assert voting.get_vote_history(storage, student_identity) == []
