"""Voting domain models - votes, tallies and quorum."""

from app.models.voting.entities import QuorumStatus, Tally
from app.models.voting.vote import VOTE_DDL, VoteChoice

__all__ = [
    "VOTE_DDL",
    "VoteChoice",
    "Tally",
    "QuorumStatus",
]
