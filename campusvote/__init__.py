"""Campus election API: elections, candidates, one-vote-per-election ballots and tallies."""

__version__ = "1.0.0"
