"""Vote table (one row per legislator and initiative, latest choice only) and choices."""

from enum import StrEnum

VOTE_DDL = """
CREATE TABLE IF NOT EXISTS vote (
    initiative_id INTEGER NOT NULL,
    legislator_id INTEGER NOT NULL,
    choice VARCHAR NOT NULL CHECK (choice IN ('favor', 'against', 'abstain')),
    cast_at TIMESTAMP NOT NULL,
    PRIMARY KEY (initiative_id, legislator_id)
)
"""


class VoteChoice(StrEnum):
    """Possible vote values."""

    FAVOR = "favor"
    AGAINST = "against"
    ABSTAIN = "abstain"
