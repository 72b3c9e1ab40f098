from campusvote.models.election_model import ElectionStatus
from campusvote.storage_mongo import MongoStorage
from campusvote.tally import compute_election_summaries


def admin_dashboard_stats(storage: MongoStorage) -> dict:
    status_counts = storage.elections.count_by("status")
    summaries = compute_election_summaries(storage)
    return {
        "total_votes": storage.ballots.count(),
        "total_elections": len(summaries),
        "total_candidates": storage.candidates.count(),
        "active_elections": status_counts.get(ElectionStatus.ACTIVE.value, 0),
        "upcoming_elections": status_counts.get(ElectionStatus.UPCOMING.value, 0),
        "closed_elections": status_counts.get(ElectionStatus.CLOSED.value, 0),
        "votes_per_election": [
            {"name": s["name"], "votes": s["total_votes"]} for s in summaries
        ],
        "candidates_per_election": [
            {"name": s["name"], "candidates": s["candidate_count"]} for s in summaries
        ],
    }
