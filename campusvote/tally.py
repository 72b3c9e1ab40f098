"""Tallying ballots into per-candidate results."""
from typing import Dict, List, Optional

from campusvote.errors import NotFound
from campusvote.storage_mongo import MongoStorage


def tally(candidates: List[dict], counts: Dict[str, int]) -> List[dict]:
    """Left-join candidates with ballot counts; every candidate appears once."""
    total = sum(counts.get(c["_id"], 0) for c in candidates)
    results = []
    for candidate in candidates:
        votes = counts.get(candidate["_id"], 0)
        results.append(
            {
                "candidate_id": candidate["_id"],
                "name": candidate["name"],
                "department": candidate["department"],
                "votes": votes,
                "percentage": int(votes * 100 / total + 0.5) if total else 0,
            }
        )
    return results


def winners(results: List[dict]) -> List[dict]:
    """All candidates sharing the top count. No winner while nobody has votes."""
    if not results:
        return []
    top = max(r["votes"] for r in results)
    if top == 0:
        return []
    return [r for r in results if r["votes"] == top]


def compute_results(storage: MongoStorage, election_id: str, sort_by_votes: bool = False) -> dict:
    election = storage.elections.get(election_id)
    if not election:
        raise NotFound("Election not found")

    candidates = storage.candidates.list({"election_id": election_id})
    counts = storage.ballots.count_by("candidate_id", match={"election_id": election_id})
    results = tally(candidates, counts)
    if sort_by_votes:
        results.sort(key=lambda r: (-r["votes"], r["name"]))

    top = winners(results)
    return {
        "election": election,
        "results": results,
        "total_votes": sum(r["votes"] for r in results),
        "winners": [r["candidate_id"] for r in top],
        "is_tie": len(top) > 1,
    }


def compute_election_summaries(storage: MongoStorage, filter: Optional[dict] = None) -> List[dict]:
    """Every election with its ballot and candidate counts, from two groupings."""
    vote_counts = storage.ballots.count_by("election_id")
    candidate_counts = storage.candidates.count_by("election_id")
    summaries = []
    for election in storage.elections.list(filter, sort=[("start_date", -1)]):
        summary = dict(election)
        summary["total_votes"] = vote_counts.get(election["_id"], 0)
        summary["candidate_count"] = candidate_counts.get(election["_id"], 0)
        summaries.append(summary)
    return summaries
