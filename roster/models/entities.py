"""
Domain entities for players, team memberships and per-game statistics.

Entities are frozen pydantic models. State changes (audit touches, leaving a
team) return a new value instead of mutating in place, and relationships are
expressed as foreign-key ids. Storage assigns ids; a freshly built entity has
id 0 until the repository returns the persisted copy.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from roster.models.results import FailureKind, OperationResult
from roster.utils.datetime_utils import ensure_utc, utcnow, utctoday


def require_actor(actor_id: Optional[str]) -> str:
    """
    Check the actor id supplied by the caller.

    Raises:
        ValueError: If the actor id is None, empty or whitespace
    """
    if actor_id is None or not str(actor_id).strip():
        raise ValueError("Actor ID cannot be null, empty, or whitespace.")
    return actor_id


class AuditedEntity(BaseModel):
    """Audit fields shared by every entity."""

    model_config = ConfigDict(frozen=True)

    created_at: datetime = Field(default_factory=utcnow)
    created_by: str
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    def mark_modified(self, actor_id: str, at: Optional[datetime] = None):
        """
        Return a copy with updated_at/updated_by set to the given actor.

        The timestamp never moves before created_at, so audit times stay
        non-decreasing even with a skewed clock.
        """
        require_actor(actor_id)
        stamp = ensure_utc(at) if at is not None else utcnow()
        created = ensure_utc(self.created_at)
        if created is not None and stamp < created:
            stamp = created
        return self.model_copy(update={"updated_at": stamp, "updated_by": actor_id})


class Player(AuditedEntity):
    """A player profile owned by a user."""

    id: int = 0
    user_id: str
    name: str
    date_of_birth: date
    gender: Optional[str] = None
    photo_url: Optional[str] = None

    def calculate_age(self, as_of: Optional[date] = None) -> int:
        """Age in whole years; one less until this year's birthday is reached."""
        today = as_of or utctoday()
        age = today.year - self.date_of_birth.year
        if (today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day):
            age -= 1
        return age

    @property
    def age(self) -> int:
        return self.calculate_age()


class TeamSummary(BaseModel):
    """Team/championship names joined onto a statistic by the queries that need them."""

    model_config = ConfigDict(frozen=True)

    team_player_id: int
    team_name: str
    championship_name: str


class TeamPlayer(AuditedEntity):
    """A player's membership in a team for one championship."""

    id: int = 0
    player_id: int
    team_name: str
    championship_name: str
    joined_date: datetime
    left_date: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.left_date is None

    def mark_as_left(
        self,
        left_date: datetime,
        actor_id: str,
        now: Optional[datetime] = None,
    ) -> OperationResult:
        """
        Move this membership from Active to Left.

        Leaving is one-way: a Left record cannot leave again or be reactivated.
        Rule violations come back as failed results; only a blank actor id
        raises.

        Args:
            left_date: When the player left; must be after joined_date and not in the future
            actor_id: Who is recording the change
            now: Reference time, defaults to the current UTC time

        Returns:
            OperationResult carrying the new Left TeamPlayer on success
        """
        require_actor(actor_id)
        current = ensure_utc(now) if now is not None else utcnow()
        left = ensure_utc(left_date)

        if not self.is_active:
            return OperationResult.fail(
                "Player has already left the team.", kind=FailureKind.CONFLICT
            )
        if left <= ensure_utc(self.joined_date):
            return OperationResult.field_failed(
                "left_date", "Left date must be after the joined date."
            )
        if left > current:
            return OperationResult.field_failed(
                "left_date", "Left date cannot be in the future."
            )

        departed = self.model_copy(update={"left_date": left})
        return OperationResult.ok(departed.mark_modified(actor_id, at=current))

    def duration_days(self, as_of: Optional[datetime] = None) -> int:
        """Whole days between joining and leaving (or as_of while still active)."""
        end = self.left_date or as_of or utcnow()
        return (ensure_utc(end).date() - ensure_utc(self.joined_date).date()).days


class PlayerStatistic(AuditedEntity):
    """One game's performance for a team membership."""

    id: int = 0
    team_player_id: int
    game_date: date
    minutes_played: int
    is_starter: bool
    jersey_number: int
    goals: int
    assists: int
    team: Optional[TeamSummary] = None
