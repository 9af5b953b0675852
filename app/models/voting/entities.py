"""Voting domain entities - computed tallies and quorum checks."""

from dataclasses import dataclass

from app.models.common import BaseEntity


@dataclass
class Tally(BaseEntity):
    """Vote counts for one initiative."""

    favor: int = 0
    against: int = 0
    abstain: int = 0

    @property
    def total(self) -> int:
        return self.favor + self.against + self.abstain


@dataclass
class QuorumStatus(BaseEntity):
    """Present count against the threshold required for a vote."""

    present: int
    required: int
    total: int

    @property
    def met(self) -> bool:
        return self.present >= self.required

    @property
    def shortfall(self) -> int:
        return max(self.required - self.present, 0)

    def to_dict(self) -> dict:
        return {**super().to_dict(), "met": self.met, "shortfall": self.shortfall}
