"""Tests for registry and session listings."""

from app.models import Legislator, SessionState, utcnow
from app.repositories import LegislatorRepository, SessionRepository


class TestLegislatorRepository:
    def test_upsert_and_list(self, db):
        repo = LegislatorRepository()
        repo.upsert([Legislator(2, "B", "Red", 1, True), Legislator(1, "A", "Blue", None, False)])

        assert [leg.id for leg in repo.list_all()] == [2, 1]
        assert [leg.id for leg in repo.list_all(active_only=True)] == [2]
        assert repo.count_active() == 1


class TestSessionRepository:
    def test_list_by_state(self, db):
        repo = SessionRepository()
        first = repo.create("S-1", None, utcnow())
        second = repo.create("S-2", 11, utcnow())

        assert [s.id for s in repo.list_all()] == [first, second]
        assert [s.code for s in repo.list_all(SessionState.PREPARED)] == ["S-1", "S-2"]
        assert repo.list_all(SessionState.STARTED) == []
