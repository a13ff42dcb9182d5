"""
SQLAlchemy-backed storage for team memberships.
"""

from typing import List, Optional
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database.models import (
    TeamPlayer as TeamPlayerRow,
    PlayerStatistic as PlayerStatisticRow,
)
from roster.models.entities import TeamPlayer
from roster.repositories.exceptions import DuplicateAssignmentError, repository_operation
from roster.utils.datetime_utils import ensure_utc
import logging

logger = logging.getLogger(__name__)

ENTITY_TYPE = "TeamPlayer"
ACTIVE_ASSIGNMENT_INDEX = "uq_team_players_active_assignment"


def team_player_to_entity(row: TeamPlayerRow) -> TeamPlayer:
    return TeamPlayer(
        id=row.id,
        player_id=row.player_id,
        team_name=row.team_name,
        championship_name=row.championship_name,
        joined_date=ensure_utc(row.joined_date),
        left_date=ensure_utc(row.left_date),
        created_at=ensure_utc(row.created_at),
        created_by=row.created_by,
        updated_at=ensure_utc(row.updated_at),
        updated_by=row.updated_by,
    )


def _copy_fields(team_player: TeamPlayer, row: TeamPlayerRow) -> None:
    row.player_id = team_player.player_id
    row.team_name = team_player.team_name
    row.championship_name = team_player.championship_name
    row.joined_date = team_player.joined_date
    row.left_date = team_player.left_date
    row.created_at = team_player.created_at
    row.created_by = team_player.created_by
    row.updated_at = team_player.updated_at
    row.updated_by = team_player.updated_by


def is_duplicate_assignment(error: IntegrityError) -> bool:
    """True if the integrity error came from the active-assignment unique index."""
    message = str(error.orig).lower()
    # PostgreSQL names the index; SQLite names the table and columns
    return ACTIVE_ASSIGNMENT_INDEX in message or (
        "unique" in message and "team_players" in message
    )


class SqlAlchemyTeamPlayerRepository:
    """Team membership repository bound to one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all_by_player_id(self, player_id: int) -> List[TeamPlayer]:
        """All memberships for a player, most recently joined first."""
        async with repository_operation(
            self.session, f"Failed to retrieve team assignments for player {player_id}.",
            "get_all_by_player_id", ENTITY_TYPE,
        ):
            result = await self.session.execute(
                select(TeamPlayerRow)
                .where(TeamPlayerRow.player_id == player_id)
                .order_by(TeamPlayerRow.joined_date.desc(), TeamPlayerRow.id.desc())
            )
            return [team_player_to_entity(row) for row in result.scalars().all()]

    async def get_active_by_player_id(self, player_id: int) -> List[TeamPlayer]:
        async with repository_operation(
            self.session, f"Failed to retrieve active team assignments for player {player_id}.",
            "get_active_by_player_id", ENTITY_TYPE,
        ):
            result = await self.session.execute(
                select(TeamPlayerRow)
                .where(
                    TeamPlayerRow.player_id == player_id,
                    TeamPlayerRow.left_date.is_(None),
                )
                .order_by(TeamPlayerRow.joined_date.desc(), TeamPlayerRow.id.desc())
            )
            return [team_player_to_entity(row) for row in result.scalars().all()]

    async def get_by_id(self, team_player_id: int) -> Optional[TeamPlayer]:
        async with repository_operation(
            self.session, f"Failed to retrieve team assignment {team_player_id}.",
            "get_by_id", ENTITY_TYPE, team_player_id,
        ):
            result = await self.session.execute(
                select(TeamPlayerRow).where(TeamPlayerRow.id == team_player_id)
            )
            row = result.scalar_one_or_none()
            return team_player_to_entity(row) if row else None

    async def add(self, team_player: TeamPlayer) -> TeamPlayer:
        """
        Insert a membership.

        Raises:
            DuplicateAssignmentError: If an active membership for the same
                player, team and championship already exists
            RepositoryError: On any other storage failure
        """
        async with repository_operation(
            self.session, "Failed to add team assignment.", "add", ENTITY_TYPE
        ):
            row = TeamPlayerRow()
            _copy_fields(team_player, row)
            self.session.add(row)
            try:
                await self.session.flush()
                await self.session.commit()
            except IntegrityError as e:
                if not is_duplicate_assignment(e):
                    raise
                await self.session.rollback()
                raise DuplicateAssignmentError(
                    "Player already has an active assignment to this team and championship.",
                    "add",
                    ENTITY_TYPE,
                ) from e
            return team_player_to_entity(row)

    async def update(self, team_player: TeamPlayer) -> Optional[TeamPlayer]:
        async with repository_operation(
            self.session, f"Failed to update team assignment {team_player.id}.",
            "update", ENTITY_TYPE, team_player.id,
        ):
            row = await self.session.get(TeamPlayerRow, team_player.id)
            if row is None:
                return None
            _copy_fields(team_player, row)
            try:
                await self.session.flush()
                await self.session.commit()
            except IntegrityError as e:
                if not is_duplicate_assignment(e):
                    raise
                await self.session.rollback()
                raise DuplicateAssignmentError(
                    "Player already has an active assignment to this team and championship.",
                    "update",
                    ENTITY_TYPE,
                    team_player.id,
                ) from e
            return team_player_to_entity(row)

    async def delete(self, team_player_id: int) -> bool:
        """Delete a membership and its statistics."""
        async with repository_operation(
            self.session, f"Failed to delete team assignment {team_player_id}.",
            "delete", ENTITY_TYPE, team_player_id,
        ):
            await self.session.execute(
                delete(PlayerStatisticRow).where(
                    PlayerStatisticRow.team_player_id == team_player_id
                )
            )
            result = await self.session.execute(
                delete(TeamPlayerRow).where(TeamPlayerRow.id == team_player_id)
            )
            await self.session.commit()
            return result.rowcount > 0

    async def exists(self, team_player_id: int) -> bool:
        async with repository_operation(
            self.session, f"Failed to check team assignment {team_player_id}.",
            "exists", ENTITY_TYPE, team_player_id,
        ):
            result = await self.session.execute(
                select(TeamPlayerRow.id).where(TeamPlayerRow.id == team_player_id).limit(1)
            )
            return result.scalar_one_or_none() is not None

    async def has_active_duplicate(
        self,
        player_id: int,
        team_name: str,
        championship_name: str,
        exclude_id: Optional[int] = None,
    ) -> bool:
        """True if the player already has an active membership with these exact names."""
        async with repository_operation(
            self.session, "Failed to check for duplicate team assignment.",
            "has_active_duplicate", ENTITY_TYPE, exclude_id,
        ):
            query = select(func.count(TeamPlayerRow.id)).where(
                TeamPlayerRow.player_id == player_id,
                TeamPlayerRow.team_name == team_name,
                TeamPlayerRow.championship_name == championship_name,
                TeamPlayerRow.left_date.is_(None),
            )
            if exclude_id is not None:
                query = query.where(TeamPlayerRow.id != exclude_id)
            result = await self.session.execute(query)
            return (result.scalar() or 0) > 0
