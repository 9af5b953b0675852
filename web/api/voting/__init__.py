"""Voting API."""

from web.api.voting.views import (
    activate_initiative,
    cast_vote,
    close_initiative,
    get_non_voters,
    get_tally,
    remove_vote,
    reopen_initiative,
)

__all__ = [
    "activate_initiative",
    "close_initiative",
    "reopen_initiative",
    "cast_vote",
    "remove_vote",
    "get_tally",
    "get_non_voters",
]
