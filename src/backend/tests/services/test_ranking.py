"""
Tests for the ranking engine.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.exceptions import InvalidInput, NotFound, RankingConflict, Unauthorized
from services.identity import Identity
from services.ranking import RankingService, reorder


@pytest.mark.unit
class TestReorder:
    """Test the pure reordering rules."""

    def test_insert_in_the_middle(self) -> None:
        assert reorder(["A", "B", "C"], "D", 2) == ["A", "D", "B", "C"]

    def test_insert_at_head_shifts_everything_back(self) -> None:
        assert reorder(["A", "B", "C"], "D", 1) == ["D", "A", "B", "C"]

    def test_position_past_the_end_appends(self) -> None:
        assert reorder(["A", "B", "C"], "D", 10) == ["A", "B", "C", "D"]

    def test_position_length_plus_one_appends(self) -> None:
        assert reorder(["A", "B", "C"], "D", 4) == ["A", "B", "C", "D"]

    def test_existing_id_past_the_end_is_relocated(self) -> None:
        assert reorder(["A", "B", "C"], "B", 10) == ["A", "C", "B"]

    def test_zero_removes(self) -> None:
        assert reorder(["A", "B", "C"], "B", 0) == ["A", "C"]

    def test_negative_behaves_like_zero(self) -> None:
        assert reorder(["A", "B", "C"], "B", -3) == reorder(["A", "B", "C"], "B", 0)

    def test_absent_position_removes(self) -> None:
        assert reorder(["A", "B", "C"], "A", None) == ["B", "C"]

    def test_removing_missing_id_is_noop(self) -> None:
        assert reorder(["A", "B", "C"], "Z", 0) == ["A", "B", "C"]

    def test_move_forward_keeps_length(self) -> None:
        result = reorder(["A", "B", "C", "D"], "D", 1)
        assert result == ["D", "A", "B", "C"]
        assert len(result) == 4

    def test_move_backward_lands_on_requested_slot(self) -> None:
        result = reorder(["A", "B", "C", "D"], "A", 3)
        assert result == ["B", "C", "A", "D"]
        assert result.index("A") == 2

    def test_move_to_last_slot(self) -> None:
        assert reorder(["A", "B", "C"], "A", 3) == ["B", "C", "A"]

    def test_same_slot_is_unchanged(self) -> None:
        assert reorder(["A", "B", "C"], "B", 2) == ["A", "B", "C"]

    def test_insert_into_empty_ranking(self) -> None:
        assert reorder([], "A", 5) == ["A"]

    def test_input_is_not_mutated(self) -> None:
        ranking = ["A", "B", "C"]
        reorder(ranking, "C", 1)
        assert ranking == ["A", "B", "C"]

    def test_never_produces_duplicates(self) -> None:
        ranking: list[str] = []
        for proposal_id, position in [("A", 1), ("B", 1), ("A", 2), ("C", 9), ("B", 3), ("A", 1)]:
            ranking = reorder(ranking, proposal_id, position)
            assert len(ranking) == len(set(ranking))
        assert ranking == ["A", "C", "B"]


@pytest.fixture
def users() -> MagicMock:
    repo = MagicMock()
    repo.get_ranking_state = AsyncMock(return_value=(["A", "B", "C"], 4))
    repo.update_ranking = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def proposals() -> MagicMock:
    repo = MagicMock()
    repo.exists = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def identity() -> Identity:
    return Identity(user_id="user-1", email="voter@example.com")


@pytest.mark.unit
class TestRankingService:
    """Test RankingService.apply_vote."""

    async def test_vote_without_identity_is_unauthorized(self, users, proposals) -> None:
        service = RankingService(users, proposals)

        with pytest.raises(Unauthorized):
            await service.apply_vote(None, "D", 1)

        users.get_ranking_state.assert_not_awaited()
        users.update_ranking.assert_not_awaited()

    async def test_removal_without_identity_is_unauthorized(self, users, proposals) -> None:
        service = RankingService(users, proposals)

        with pytest.raises(Unauthorized):
            await service.apply_vote(None, "A", 0)

        users.update_ranking.assert_not_awaited()

    async def test_insert_writes_against_seen_version(self, users, proposals, identity) -> None:
        service = RankingService(users, proposals)

        assert await service.apply_vote(identity, "D", 2) is True

        users.update_ranking.assert_awaited_once_with("user-1", ["A", "D", "B", "C"], 4)

    async def test_removing_absent_id_succeeds_without_write(self, users, proposals, identity) -> None:
        service = RankingService(users, proposals)

        assert await service.apply_vote(identity, "Z", None) is True

        users.update_ranking.assert_not_awaited()
        proposals.exists.assert_not_awaited()

    async def test_unknown_proposal_is_not_found(self, users, proposals, identity) -> None:
        proposals.exists = AsyncMock(return_value=False)
        service = RankingService(users, proposals)

        with pytest.raises(NotFound):
            await service.apply_vote(identity, "missing", 1)

        users.update_ranking.assert_not_awaited()

    async def test_missing_user_is_not_found(self, users, proposals, identity) -> None:
        users.get_ranking_state = AsyncMock(return_value=None)
        service = RankingService(users, proposals)

        with pytest.raises(NotFound):
            await service.apply_vote(identity, "A", 1)

    async def test_empty_proposal_id_is_invalid(self, users, proposals, identity) -> None:
        service = RankingService(users, proposals)

        with pytest.raises(InvalidInput):
            await service.apply_vote(identity, "", 1)

    async def test_concurrent_write_is_retried_on_fresh_state(self, users, proposals, identity) -> None:
        users.get_ranking_state = AsyncMock(
            side_effect=[(["A", "B", "C"], 4), (["A", "B", "C", "E"], 5)]
        )
        users.update_ranking = AsyncMock(side_effect=[False, True])
        service = RankingService(users, proposals)

        assert await service.apply_vote(identity, "B", 10) is True

        assert users.update_ranking.await_count == 2
        users.update_ranking.assert_awaited_with("user-1", ["A", "C", "E", "B"], 5)

    async def test_exhausted_retries_raise_conflict(self, users, proposals, identity) -> None:
        users.update_ranking = AsyncMock(return_value=False)
        service = RankingService(users, proposals, max_retries=3)

        with pytest.raises(RankingConflict):
            await service.apply_vote(identity, "D", 1)

        assert users.update_ranking.await_count == 3

    async def test_get_ranking_requires_identity(self, users, proposals) -> None:
        service = RankingService(users, proposals)

        with pytest.raises(Unauthorized):
            await service.get_ranking(None)

    async def test_get_ranking_returns_stored_order(self, users, proposals, identity) -> None:
        service = RankingService(users, proposals)

        assert await service.get_ranking(identity) == ["A", "B", "C"]
