"""
Tests for TeamPlayerService: membership creation, duplicate detection,
departures and listing.
"""
import asyncio
import pytest
from datetime import timedelta
from unittest.mock import AsyncMock

from roster.models.results import FailureKind
from roster.models.schemas import UpdateTeamPlayerRequest
from roster.repositories.exceptions import DuplicateAssignmentError, RepositoryError
from roster.services.team_player_service import TeamPlayerService
from roster.tests.factories import ACTOR_ID, make_team_request
from roster.utils.constants import DUPLICATE_ASSIGNMENT_KEY
from roster.utils.datetime_utils import utcnow


def mock_service():
    team_player_repository = AsyncMock()
    player_repository = AsyncMock()
    return TeamPlayerService(team_player_repository, player_repository), team_player_repository, player_repository


class TestAddPlayerToTeam:

    @pytest.mark.asyncio
    async def test_add_creates_active_membership(self, team_player_service, stored_player, actor_id):
        result = await team_player_service.add_player_to_team(
            make_team_request(stored_player.id, team_name="  Eagles "), actor_id
        )

        assert result.success
        membership = result.data
        assert membership.team_player_id > 0
        assert membership.player_id == stored_player.id
        assert membership.team_name == "Eagles"
        assert membership.is_active is True
        assert membership.left_date is None
        assert membership.duration_days == 30
        assert membership.created_by == actor_id

    @pytest.mark.asyncio
    async def test_unknown_player_is_not_found(self, team_player_service):
        result = await team_player_service.add_player_to_team(make_team_request(555), ACTOR_ID)

        assert result.failure_kind == FailureKind.NOT_FOUND
        assert result.error_messages == ["Player with ID 555 could not be found."]

    @pytest.mark.asyncio
    async def test_validation_failure_skips_storage(self):
        service, team_player_repository, player_repository = mock_service()

        result = await service.add_player_to_team(make_team_request(1, team_name=""), ACTOR_ID)

        assert result.validation_errors == {"team_name": ["Team name is required."]}
        player_repository.exists.assert_not_awaited()
        team_player_repository.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_then_leave_then_readd(
        self, team_player_service, stored_player, stored_team_player, actor_id
    ):
        """A second active assignment conflicts until the first one has left."""
        duplicate = await team_player_service.add_player_to_team(
            make_team_request(stored_player.id), actor_id
        )
        assert not duplicate.success
        assert duplicate.failure_kind == FailureKind.CONFLICT
        assert DUPLICATE_ASSIGNMENT_KEY in duplicate.validation_errors

        removed = await team_player_service.remove_player_from_team(
            stored_team_player.team_player_id, utcnow() - timedelta(days=1), actor_id
        )
        assert removed.success
        assert removed.data.is_active is False

        readded = await team_player_service.add_player_to_team(
            make_team_request(stored_player.id), actor_id
        )
        assert readded.success
        assert readded.data.team_player_id != stored_team_player.team_player_id

    @pytest.mark.asyncio
    async def test_same_team_other_championship_is_allowed(
        self, team_player_service, stored_player, stored_team_player, actor_id
    ):
        result = await team_player_service.add_player_to_team(
            make_team_request(stored_player.id, championship_name="Autumn League 2024"), actor_id
        )
        assert result.success

    @pytest.mark.asyncio
    async def test_race_on_insert_is_conflict(self):
        service, team_player_repository, player_repository = mock_service()
        player_repository.exists.return_value = True
        team_player_repository.has_active_duplicate.return_value = False
        team_player_repository.add.side_effect = DuplicateAssignmentError("duplicate", "add", "TeamPlayer")

        result = await service.add_player_to_team(make_team_request(1), ACTOR_ID)

        assert result.failure_kind == FailureKind.CONFLICT
        assert list(result.validation_errors) == [DUPLICATE_ASSIGNMENT_KEY]

    @pytest.mark.asyncio
    async def test_storage_failure_is_transient(self):
        service, team_player_repository, player_repository = mock_service()
        player_repository.exists.side_effect = RepositoryError("boom")

        result = await service.add_player_to_team(make_team_request(1), ACTOR_ID)

        assert result.failure_kind == FailureKind.TRANSIENT
        assert result.error_messages == ["Unable to save team assignment. Please try again."]

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        service, team_player_repository, player_repository = mock_service()
        player_repository.exists.side_effect = asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await service.add_player_to_team(make_team_request(1), ACTOR_ID)
        team_player_repository.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_actor_raises(self):
        service, _, _ = mock_service()
        with pytest.raises(ValueError):
            await service.add_player_to_team(make_team_request(1), "")


class TestUpdateTeamAssignment:

    @pytest.mark.asyncio
    async def test_mismatched_id_skips_storage(self):
        service, team_player_repository, player_repository = mock_service()

        result = await service.update_team_assignment(
            5, UpdateTeamPlayerRequest(team_player_id=6), ACTOR_ID
        )

        assert not result.success
        assert result.error_messages == ["Team player ID mismatch."]
        assert team_player_repository.mock_calls == []
        assert player_repository.mock_calls == []

    @pytest.mark.asyncio
    async def test_without_left_date_touches_audit(self, team_player_service, stored_team_player):
        result = await team_player_service.update_team_assignment(
            stored_team_player.team_player_id,
            UpdateTeamPlayerRequest(team_player_id=stored_team_player.team_player_id),
            "editor-9",
        )

        assert result.success
        assert result.data.is_active is True
        assert result.data.updated_by == "editor-9"
        assert result.data.updated_at >= result.data.created_at

    @pytest.mark.asyncio
    async def test_left_date_ends_membership(self, team_player_service, stored_team_player, actor_id):
        left_date = utcnow() - timedelta(days=2)

        result = await team_player_service.update_team_assignment(
            stored_team_player.team_player_id,
            UpdateTeamPlayerRequest(team_player_id=stored_team_player.team_player_id, left_date=left_date),
            actor_id,
        )

        assert result.success
        assert result.data.is_active is False
        assert result.data.left_date == left_date
        assert result.data.duration_days == 28

    @pytest.mark.asyncio
    async def test_future_left_date_is_validation_failure(self, team_player_service, stored_team_player, actor_id):
        result = await team_player_service.update_team_assignment(
            stored_team_player.team_player_id,
            UpdateTeamPlayerRequest(
                team_player_id=stored_team_player.team_player_id,
                left_date=utcnow() + timedelta(days=5),
            ),
            actor_id,
        )

        assert result.failure_kind == FailureKind.VALIDATION
        assert result.validation_errors == {"left_date": ["Left date cannot be in the future."]}

    @pytest.mark.asyncio
    async def test_leaving_twice_is_conflict(self, team_player_service, stored_team_player, actor_id):
        team_player_id = stored_team_player.team_player_id
        request = UpdateTeamPlayerRequest(team_player_id=team_player_id, left_date=utcnow() - timedelta(days=2))
        first = await team_player_service.update_team_assignment(team_player_id, request, actor_id)
        assert first.success

        second = await team_player_service.update_team_assignment(team_player_id, request, actor_id)

        assert second.failure_kind == FailureKind.CONFLICT
        assert second.error_messages == ["Player has already left the team."]

    @pytest.mark.asyncio
    async def test_not_found(self, team_player_service):
        result = await team_player_service.update_team_assignment(
            31, UpdateTeamPlayerRequest(team_player_id=31), ACTOR_ID
        )
        assert result.error_messages == ["Team assignment with ID 31 could not be found."]


class TestRemovePlayerFromTeam:

    @pytest.mark.asyncio
    async def test_left_before_joined(self, team_player_service, stored_team_player, actor_id):
        result = await team_player_service.remove_player_from_team(
            stored_team_player.team_player_id,
            stored_team_player.joined_date - timedelta(days=1),
            actor_id,
        )
        assert result.validation_errors == {"left_date": ["Left date must be after the joined date."]}

    @pytest.mark.asyncio
    async def test_left_in_future(self, team_player_service, stored_team_player, actor_id):
        result = await team_player_service.remove_player_from_team(
            stored_team_player.team_player_id, utcnow() + timedelta(hours=1), actor_id
        )
        assert result.validation_errors == {"left_date": ["Left date cannot be in the future."]}

    @pytest.mark.asyncio
    async def test_not_found(self, team_player_service):
        result = await team_player_service.remove_player_from_team(8, utcnow(), ACTOR_ID)
        assert result.failure_kind == FailureKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_lookup_failure_is_transient(self):
        service, team_player_repository, _ = mock_service()
        team_player_repository.get_by_id.side_effect = RepositoryError("boom")

        result = await service.remove_player_from_team(3, utcnow(), ACTOR_ID)

        assert result.error_messages == ["Unable to update team assignment. Please try again."]


class TestListTeams:

    @pytest.mark.asyncio
    async def test_active_and_inactive(self, team_player_service, stored_player, stored_team_player, actor_id):
        other = await team_player_service.add_player_to_team(
            make_team_request(stored_player.id, team_name="Hawks", joined_date=utcnow() - timedelta(days=90)),
            actor_id,
        )
        await team_player_service.remove_player_from_team(
            other.data.team_player_id, utcnow() - timedelta(days=45), actor_id
        )

        active = await team_player_service.get_teams_by_player_id(stored_player.id)
        everything = await team_player_service.get_teams_by_player_id(stored_player.id, include_inactive=True)
        active_only = await team_player_service.get_active_teams_by_player_id(stored_player.id)

        assert [t.team_name for t in active.data] == ["Eagles"]
        assert [t.team_name for t in everything.data] == ["Eagles", "Hawks"]
        assert active_only.data == active.data

    @pytest.mark.asyncio
    async def test_get_by_id(self, team_player_service, stored_team_player):
        result = await team_player_service.get_team_assignment_by_id(stored_team_player.team_player_id)
        assert result.data.team_name == "Eagles"

    @pytest.mark.asyncio
    async def test_load_failure_is_transient(self):
        service, team_player_repository, _ = mock_service()
        team_player_repository.get_active_by_player_id.side_effect = RepositoryError("boom")

        result = await service.get_active_teams_by_player_id(1)

        assert result.error_messages == ["Unable to load team assignments. Please refresh the page."]


def test_validate_team_assignment():
    service, team_player_repository, player_repository = mock_service()

    result = service.validate_team_assignment(make_team_request(1, championship_name=" "))

    assert list(result.errors) == ["championship_name"]
    assert team_player_repository.mock_calls == []
