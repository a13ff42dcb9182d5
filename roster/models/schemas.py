"""
Pydantic models for service requests and responses.

Request models only describe shape. Field rules (lengths, ranges, dates) are
checked by the validators in roster.validation so that every violation is
reported at once instead of failing on the first one.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from roster.models.entities import Player, PlayerStatistic, TeamPlayer, require_actor
from roster.utils.datetime_utils import ensure_utc, utcnow


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


# ============================================================================
# Players
# ============================================================================


class CreatePlayerRequest(BaseModel):
    """Request to create a new player."""

    user_id: Optional[str] = None
    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    photo_url: Optional[str] = None

    def to_entity(self, created_by: str) -> Player:
        """Build a new Player; call only after validation passed."""
        require_actor(created_by)
        return Player(
            user_id=self.user_id.strip(),
            name=self.name.strip(),
            date_of_birth=self.date_of_birth,
            gender=_strip(self.gender) or None,
            photo_url=_strip(self.photo_url) or None,
            created_at=utcnow(),
            created_by=created_by,
        )


class UpdatePlayerRequest(BaseModel):
    """Request to replace a player's editable fields."""

    id: int
    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    photo_url: Optional[str] = None

    def apply_to(self, existing: Player, updated_by: str) -> Player:
        """
        Replace every editable field of an existing player.

        id, user_id, created_at and created_by are carried over from the
        stored player.
        """
        require_actor(updated_by)
        replaced = existing.model_copy(
            update={
                "name": self.name.strip(),
                "date_of_birth": self.date_of_birth,
                "gender": _strip(self.gender) or None,
                "photo_url": _strip(self.photo_url) or None,
            }
        )
        return replaced.mark_modified(updated_by)


class PlayerResponse(BaseModel):
    """Player data returned to callers."""

    id: int
    user_id: str
    name: str
    date_of_birth: date
    age: int
    gender: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime
    created_by: str
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    @classmethod
    def from_entity(cls, player: Player) -> "PlayerResponse":
        return cls(
            id=player.id,
            user_id=player.user_id,
            name=player.name.strip(),
            date_of_birth=player.date_of_birth,
            age=player.age,
            gender=_strip(player.gender),
            photo_url=_strip(player.photo_url),
            created_at=player.created_at,
            created_by=player.created_by,
            updated_at=player.updated_at,
            updated_by=player.updated_by,
        )


# ============================================================================
# Team memberships
# ============================================================================


class CreateTeamPlayerRequest(BaseModel):
    """Request to add a player to a team within a championship."""

    player_id: int
    team_name: Optional[str] = None
    championship_name: Optional[str] = None
    joined_date: Optional[datetime] = None

    def to_entity(self, created_by: str) -> TeamPlayer:
        require_actor(created_by)
        return TeamPlayer(
            player_id=self.player_id,
            team_name=self.team_name.strip(),
            championship_name=self.championship_name.strip(),
            joined_date=ensure_utc(self.joined_date),
            created_at=utcnow(),
            created_by=created_by,
        )


class UpdateTeamPlayerRequest(BaseModel):
    """Request to update a membership. A left_date ends the membership."""

    team_player_id: int
    left_date: Optional[datetime] = None


class TeamPlayerResponse(BaseModel):
    """Team membership data returned to callers."""

    team_player_id: int
    player_id: int
    team_name: str
    championship_name: str
    joined_date: datetime
    left_date: Optional[datetime] = None
    is_active: bool
    duration_days: int
    created_at: datetime
    created_by: str
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    @classmethod
    def from_entity(cls, team_player: TeamPlayer) -> "TeamPlayerResponse":
        return cls(
            team_player_id=team_player.id,
            player_id=team_player.player_id,
            team_name=team_player.team_name.strip(),
            championship_name=team_player.championship_name.strip(),
            joined_date=team_player.joined_date,
            left_date=team_player.left_date,
            is_active=team_player.is_active,
            duration_days=team_player.duration_days(),
            created_at=team_player.created_at,
            created_by=team_player.created_by,
            updated_at=team_player.updated_at,
            updated_by=team_player.updated_by,
        )


# ============================================================================
# Per-game statistics
# ============================================================================


class CreatePlayerStatisticRequest(BaseModel):
    """Request to record one game for a team membership."""

    team_player_id: int
    game_date: Optional[date] = None
    minutes_played: int
    is_starter: bool
    jersey_number: int
    goals: int
    assists: int

    def to_entity(self, created_by: str) -> PlayerStatistic:
        require_actor(created_by)
        return PlayerStatistic(
            team_player_id=self.team_player_id,
            game_date=self.game_date,
            minutes_played=self.minutes_played,
            is_starter=self.is_starter,
            jersey_number=self.jersey_number,
            goals=self.goals,
            assists=self.assists,
            created_at=utcnow(),
            created_by=created_by,
        )


class UpdatePlayerStatisticRequest(BaseModel):
    """Request to replace a recorded game."""

    player_statistic_id: int
    team_player_id: int
    game_date: Optional[date] = None
    minutes_played: int
    is_starter: bool
    jersey_number: int
    goals: int
    assists: int

    def apply_to(self, existing: PlayerStatistic, updated_by: str) -> PlayerStatistic:
        """Replace every field of a stored statistic, keeping its id and created audit fields."""
        require_actor(updated_by)
        replaced = PlayerStatistic(
            id=existing.id,
            team_player_id=self.team_player_id,
            game_date=self.game_date,
            minutes_played=self.minutes_played,
            is_starter=self.is_starter,
            jersey_number=self.jersey_number,
            goals=self.goals,
            assists=self.assists,
            created_at=existing.created_at,
            created_by=existing.created_by,
            updated_at=existing.updated_at,
            updated_by=existing.updated_by,
        )
        return replaced.mark_modified(updated_by)


class PlayerStatisticResponse(BaseModel):
    """Statistic data returned to callers."""

    player_statistic_id: int
    team_player_id: int
    team_name: Optional[str] = None
    championship_name: Optional[str] = None
    game_date: date
    minutes_played: int
    is_starter: bool
    jersey_number: int
    goals: int
    assists: int
    created_at: datetime
    created_by: str
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    @classmethod
    def from_entity(cls, statistic: PlayerStatistic) -> "PlayerStatisticResponse":
        team = statistic.team
        return cls(
            player_statistic_id=statistic.id,
            team_player_id=statistic.team_player_id,
            team_name=team.team_name.strip() if team else None,
            championship_name=team.championship_name.strip() if team else None,
            game_date=statistic.game_date,
            minutes_played=statistic.minutes_played,
            is_starter=statistic.is_starter,
            jersey_number=statistic.jersey_number,
            goals=statistic.goals,
            assists=statistic.assists,
            created_at=statistic.created_at,
            created_by=statistic.created_by,
            updated_at=statistic.updated_at,
            updated_by=statistic.updated_by,
        )


class StatisticAggregate(BaseModel):
    """Totals and per-game averages over a set of statistics."""

    model_config = ConfigDict(frozen=True)

    game_count: int = 0
    total_goals: int = 0
    total_assists: int = 0
    total_minutes: int = 0
    avg_goals: float = 0.0
    avg_assists: float = 0.0
    avg_minutes: float = 0.0

    @classmethod
    def from_totals(
        cls,
        game_count: int,
        total_goals: int,
        total_assists: int,
        total_minutes: int,
    ) -> "StatisticAggregate":
        """Build an aggregate from precomputed totals; averages are 0.0 when there are no games."""
        if game_count <= 0:
            return cls()
        return cls(
            game_count=game_count,
            total_goals=total_goals,
            total_assists=total_assists,
            total_minutes=total_minutes,
            avg_goals=total_goals / game_count,
            avg_assists=total_assists / game_count,
            avg_minutes=total_minutes / game_count,
        )
