"""
SQLAlchemy-backed storage for players.
"""

from typing import List, Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database.models import (
    Player as PlayerRow,
    TeamPlayer as TeamPlayerRow,
    PlayerStatistic as PlayerStatisticRow,
)
from roster.models.entities import Player
from roster.repositories.exceptions import repository_operation
from roster.utils.datetime_utils import ensure_utc
import logging

logger = logging.getLogger(__name__)

ENTITY_TYPE = "Player"


def player_to_entity(row: PlayerRow) -> Player:
    return Player(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        date_of_birth=row.date_of_birth,
        gender=row.gender,
        photo_url=row.photo_url,
        created_at=ensure_utc(row.created_at),
        created_by=row.created_by,
        updated_at=ensure_utc(row.updated_at),
        updated_by=row.updated_by,
    )


def _copy_fields(player: Player, row: PlayerRow) -> None:
    row.user_id = player.user_id
    row.name = player.name
    row.date_of_birth = player.date_of_birth
    row.gender = player.gender
    row.photo_url = player.photo_url
    row.created_at = player.created_at
    row.created_by = player.created_by
    row.updated_at = player.updated_at
    row.updated_by = player.updated_by


class SqlAlchemyPlayerRepository:
    """Player repository bound to one AsyncSession. Writes commit before returning."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> List[Player]:
        async with repository_operation(
            self.session, "Failed to retrieve players.", "get_all", ENTITY_TYPE
        ):
            result = await self.session.execute(
                select(PlayerRow).order_by(PlayerRow.name, PlayerRow.id)
            )
            return [player_to_entity(row) for row in result.scalars().all()]

    async def get_by_id(self, player_id: int) -> Optional[Player]:
        async with repository_operation(
            self.session, f"Failed to retrieve player {player_id}.", "get_by_id", ENTITY_TYPE, player_id
        ):
            result = await self.session.execute(
                select(PlayerRow).where(PlayerRow.id == player_id)
            )
            row = result.scalar_one_or_none()
            return player_to_entity(row) if row else None

    async def get_by_user_id(self, user_id: str) -> List[Player]:
        async with repository_operation(
            self.session, "Failed to retrieve players for user.", "get_by_user_id", ENTITY_TYPE
        ):
            result = await self.session.execute(
                select(PlayerRow)
                .where(PlayerRow.user_id == user_id)
                .order_by(PlayerRow.name, PlayerRow.id)
            )
            return [player_to_entity(row) for row in result.scalars().all()]

    async def add(self, player: Player) -> Player:
        async with repository_operation(
            self.session, "Failed to add player.", "add", ENTITY_TYPE
        ):
            row = PlayerRow()
            _copy_fields(player, row)
            self.session.add(row)
            await self.session.flush()
            await self.session.commit()
            logger.debug(f"Inserted player {row.id}")
            return player_to_entity(row)

    async def update(self, player: Player) -> Optional[Player]:
        """Replace the stored row for player.id. Returns None if the row is gone."""
        async with repository_operation(
            self.session, f"Failed to update player {player.id}.", "update", ENTITY_TYPE, player.id
        ):
            row = await self.session.get(PlayerRow, player.id)
            if row is None:
                return None
            _copy_fields(player, row)
            await self.session.flush()
            await self.session.commit()
            return player_to_entity(row)

    async def delete(self, player_id: int) -> bool:
        """Delete a player with its memberships and their statistics."""
        async with repository_operation(
            self.session, f"Failed to delete player {player_id}.", "delete", ENTITY_TYPE, player_id
        ):
            team_player_ids = select(TeamPlayerRow.id).where(TeamPlayerRow.player_id == player_id)
            await self.session.execute(
                delete(PlayerStatisticRow)
                .where(PlayerStatisticRow.team_player_id.in_(team_player_ids))
                .execution_options(synchronize_session="fetch")
            )
            await self.session.execute(
                delete(TeamPlayerRow).where(TeamPlayerRow.player_id == player_id)
            )
            result = await self.session.execute(
                delete(PlayerRow).where(PlayerRow.id == player_id)
            )
            await self.session.commit()
            return result.rowcount > 0

    async def exists(self, player_id: int) -> bool:
        async with repository_operation(
            self.session, f"Failed to check player {player_id}.", "exists", ENTITY_TYPE, player_id
        ):
            result = await self.session.execute(
                select(PlayerRow.id).where(PlayerRow.id == player_id).limit(1)
            )
            return result.scalar_one_or_none() is not None
