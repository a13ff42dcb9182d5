"""
Tests for domain entities: age calculation, audit stamping and the
Active -> Left membership transition.
"""
import pytest
from datetime import date, datetime, timedelta

import pytz

from roster.models.entities import Player, TeamPlayer, require_actor
from roster.models.results import FailureKind
from roster.utils.datetime_utils import utcnow

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=pytz.UTC)


def make_player(**overrides) -> Player:
    data = {
        "id": 1,
        "user_id": "user-1",
        "name": "Alex Morgan",
        "date_of_birth": date(2000, 8, 20),
        "created_by": "coach-123",
        "created_at": NOW - timedelta(days=10),
    }
    data.update(overrides)
    return Player(**data)


def make_team_player(**overrides) -> TeamPlayer:
    data = {
        "id": 7,
        "player_id": 1,
        "team_name": "Eagles",
        "championship_name": "Spring League 2025",
        "joined_date": NOW - timedelta(days=60),
        "created_by": "coach-123",
        "created_at": NOW - timedelta(days=60),
    }
    data.update(overrides)
    return TeamPlayer(**data)


class TestRequireActor:
    @pytest.mark.parametrize("actor", [None, "", "   "])
    def test_blank_actor_raises(self, actor):
        with pytest.raises(ValueError, match="Actor ID cannot be null, empty, or whitespace."):
            require_actor(actor)

    def test_returns_actor(self):
        assert require_actor("coach-123") == "coach-123"


class TestPlayerAge:
    """Age is one less until this year's birthday."""

    def test_before_birthday(self):
        player = make_player(date_of_birth=date(2000, 8, 20))
        assert player.calculate_age(date(2025, 8, 19)) == 24

    def test_on_birthday(self):
        player = make_player(date_of_birth=date(2000, 8, 20))
        assert player.calculate_age(date(2025, 8, 20)) == 25

    def test_after_birthday(self):
        player = make_player(date_of_birth=date(2000, 8, 20))
        assert player.calculate_age(date(2025, 12, 1)) == 25

    def test_leap_day_birthday(self):
        player = make_player(date_of_birth=date(2004, 2, 29))
        assert player.calculate_age(date(2025, 2, 28)) == 20
        assert player.calculate_age(date(2025, 3, 1)) == 21


class TestMarkModified:
    """Audit updates return a new value and never move time backwards."""

    def test_sets_updated_fields_on_copy(self):
        player = make_player()
        modified = player.mark_modified("editor-9", at=NOW)

        assert modified.updated_by == "editor-9"
        assert modified.updated_at == NOW
        assert player.updated_at is None
        assert modified.created_at == player.created_at
        assert modified.created_by == player.created_by

    def test_clamps_to_created_at(self):
        player = make_player(created_at=NOW)
        modified = player.mark_modified("editor-9", at=NOW - timedelta(hours=1))
        assert modified.updated_at == NOW

    def test_blank_actor_raises(self):
        with pytest.raises(ValueError):
            make_player().mark_modified(" ")

    def test_entities_are_frozen(self):
        player = make_player()
        with pytest.raises(Exception):
            player.name = "Other"


class TestMarkAsLeft:
    """Active -> Left transition outcomes."""

    def test_success_returns_left_copy(self):
        team_player = make_team_player()
        left_date = NOW - timedelta(days=1)

        result = team_player.mark_as_left(left_date, "coach-123", now=NOW)

        assert result.success
        assert result.data.left_date == left_date
        assert result.data.is_active is False
        assert result.data.updated_by == "coach-123"
        assert result.data.updated_at == NOW
        # Original value is unchanged
        assert team_player.is_active is True

    def test_already_left_is_conflict(self):
        team_player = make_team_player(left_date=NOW - timedelta(days=5))

        result = team_player.mark_as_left(NOW - timedelta(days=1), "coach-123", now=NOW)

        assert not result.success
        assert result.failure_kind == FailureKind.CONFLICT
        assert result.error_messages == ["Player has already left the team."]

    def test_left_before_joined_fails(self):
        team_player = make_team_player()

        result = team_player.mark_as_left(team_player.joined_date - timedelta(days=1), "coach-123", now=NOW)

        assert result.failure_kind == FailureKind.VALIDATION
        assert result.validation_errors == {"left_date": ["Left date must be after the joined date."]}

    def test_left_equal_to_joined_fails(self):
        team_player = make_team_player()
        result = team_player.mark_as_left(team_player.joined_date, "coach-123", now=NOW)
        assert "left_date" in result.validation_errors

    def test_left_in_future_fails(self):
        team_player = make_team_player()

        result = team_player.mark_as_left(NOW + timedelta(days=1), "coach-123", now=NOW)

        assert result.validation_errors == {"left_date": ["Left date cannot be in the future."]}

    def test_blank_actor_raises(self):
        with pytest.raises(ValueError):
            make_team_player().mark_as_left(NOW - timedelta(days=1), "", now=NOW)

    def test_naive_left_date_treated_as_utc(self):
        team_player = make_team_player()
        naive = (NOW - timedelta(days=1)).replace(tzinfo=None)

        result = team_player.mark_as_left(naive, "coach-123", now=NOW)

        assert result.success
        assert result.data.left_date == NOW - timedelta(days=1)


class TestDurationDays:
    def test_active_membership_counts_to_as_of(self):
        team_player = make_team_player(joined_date=NOW - timedelta(days=60))
        assert team_player.duration_days(as_of=NOW) == 60

    def test_left_membership_counts_to_left_date(self):
        team_player = make_team_player(
            joined_date=NOW - timedelta(days=60), left_date=NOW - timedelta(days=20)
        )
        assert team_player.duration_days(as_of=NOW) == 40

    def test_defaults_to_now(self):
        team_player = make_team_player(joined_date=utcnow() - timedelta(days=3))
        assert team_player.duration_days() == 3
