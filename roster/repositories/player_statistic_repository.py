"""
SQLAlchemy-backed storage for per-game statistics.

Read queries join team_players so that each statistic carries its team and
championship names.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database.models import (
    PlayerStatistic as PlayerStatisticRow,
    TeamPlayer as TeamPlayerRow,
)
from roster.models.entities import PlayerStatistic, TeamSummary
from roster.models.schemas import StatisticAggregate
from roster.repositories.exceptions import repository_operation
from roster.utils.datetime_utils import ensure_utc
import logging

logger = logging.getLogger(__name__)

ENTITY_TYPE = "PlayerStatistic"


def statistic_to_entity(
    row: PlayerStatisticRow,
    team_name: Optional[str] = None,
    championship_name: Optional[str] = None,
) -> PlayerStatistic:
    team = None
    if team_name is not None and championship_name is not None:
        team = TeamSummary(
            team_player_id=row.team_player_id,
            team_name=team_name,
            championship_name=championship_name,
        )
    return PlayerStatistic(
        id=row.id,
        team_player_id=row.team_player_id,
        game_date=row.game_date,
        minutes_played=row.minutes_played,
        is_starter=row.is_starter,
        jersey_number=row.jersey_number,
        goals=row.goals,
        assists=row.assists,
        created_at=ensure_utc(row.created_at),
        created_by=row.created_by,
        updated_at=ensure_utc(row.updated_at),
        updated_by=row.updated_by,
        team=team,
    )


def _copy_fields(statistic: PlayerStatistic, row: PlayerStatisticRow) -> None:
    row.team_player_id = statistic.team_player_id
    row.game_date = statistic.game_date
    row.minutes_played = statistic.minutes_played
    row.is_starter = statistic.is_starter
    row.jersey_number = statistic.jersey_number
    row.goals = statistic.goals
    row.assists = statistic.assists
    row.created_at = statistic.created_at
    row.created_by = statistic.created_by
    row.updated_at = statistic.updated_at
    row.updated_by = statistic.updated_by


def _with_team():
    return select(
        PlayerStatisticRow,
        TeamPlayerRow.team_name,
        TeamPlayerRow.championship_name,
    ).join(TeamPlayerRow, PlayerStatisticRow.team_player_id == TeamPlayerRow.id)


class SqlAlchemyPlayerStatisticRepository:
    """Statistic repository bound to one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _team_names(self, team_player_id: int):
        result = await self.session.execute(
            select(TeamPlayerRow.team_name, TeamPlayerRow.championship_name).where(
                TeamPlayerRow.id == team_player_id
            )
        )
        row = result.first()
        return (row[0], row[1]) if row else (None, None)

    async def get_all_by_player_id(self, player_id: int) -> List[PlayerStatistic]:
        """Every statistic across the player's memberships, newest game first."""
        async with repository_operation(
            self.session, f"Failed to retrieve statistics for player {player_id}.",
            "get_all_by_player_id", ENTITY_TYPE,
        ):
            result = await self.session.execute(
                _with_team()
                .where(TeamPlayerRow.player_id == player_id)
                .order_by(PlayerStatisticRow.game_date.desc(), PlayerStatisticRow.id.desc())
            )
            return [statistic_to_entity(*row) for row in result.all()]

    async def get_all_by_team_player_id(self, team_player_id: int) -> List[PlayerStatistic]:
        async with repository_operation(
            self.session, f"Failed to retrieve statistics for team assignment {team_player_id}.",
            "get_all_by_team_player_id", ENTITY_TYPE,
        ):
            result = await self.session.execute(
                _with_team()
                .where(PlayerStatisticRow.team_player_id == team_player_id)
                .order_by(PlayerStatisticRow.game_date.desc(), PlayerStatisticRow.id.desc())
            )
            return [statistic_to_entity(*row) for row in result.all()]

    async def get_by_id(self, statistic_id: int) -> Optional[PlayerStatistic]:
        async with repository_operation(
            self.session, f"Failed to retrieve statistic {statistic_id}.",
            "get_by_id", ENTITY_TYPE, statistic_id,
        ):
            result = await self.session.execute(
                select(
                    PlayerStatisticRow,
                    TeamPlayerRow.team_name,
                    TeamPlayerRow.championship_name,
                )
                .outerjoin(TeamPlayerRow, PlayerStatisticRow.team_player_id == TeamPlayerRow.id)
                .where(PlayerStatisticRow.id == statistic_id)
            )
            row = result.first()
            return statistic_to_entity(*row) if row else None

    async def get_by_date_range(
        self, player_id: int, start_date: date, end_date: date
    ) -> List[PlayerStatistic]:
        """
        Statistics for a player with start_date <= game_date <= end_date.

        Raises:
            ValueError: If start_date is after end_date
        """
        if start_date > end_date:
            raise ValueError("Start date must be on or before end date.")

        async with repository_operation(
            self.session, f"Failed to retrieve statistics for player {player_id}.",
            "get_by_date_range", ENTITY_TYPE,
        ):
            result = await self.session.execute(
                _with_team()
                .where(
                    TeamPlayerRow.player_id == player_id,
                    PlayerStatisticRow.game_date >= start_date,
                    PlayerStatisticRow.game_date <= end_date,
                )
                .order_by(PlayerStatisticRow.game_date.desc(), PlayerStatisticRow.id.desc())
            )
            return [statistic_to_entity(*row) for row in result.all()]

    async def add(self, statistic: PlayerStatistic) -> PlayerStatistic:
        async with repository_operation(
            self.session, "Failed to add statistic.", "add", ENTITY_TYPE
        ):
            row = PlayerStatisticRow()
            _copy_fields(statistic, row)
            self.session.add(row)
            await self.session.flush()
            team_name, championship_name = await self._team_names(row.team_player_id)
            await self.session.commit()
            return statistic_to_entity(row, team_name, championship_name)

    async def update(self, statistic: PlayerStatistic) -> Optional[PlayerStatistic]:
        async with repository_operation(
            self.session, f"Failed to update statistic {statistic.id}.",
            "update", ENTITY_TYPE, statistic.id,
        ):
            row = await self.session.get(PlayerStatisticRow, statistic.id)
            if row is None:
                return None
            _copy_fields(statistic, row)
            await self.session.flush()
            team_name, championship_name = await self._team_names(row.team_player_id)
            await self.session.commit()
            return statistic_to_entity(row, team_name, championship_name)

    async def delete(self, statistic_id: int) -> bool:
        async with repository_operation(
            self.session, f"Failed to delete statistic {statistic_id}.",
            "delete", ENTITY_TYPE, statistic_id,
        ):
            result = await self.session.execute(
                delete(PlayerStatisticRow).where(PlayerStatisticRow.id == statistic_id)
            )
            await self.session.commit()
            return result.rowcount > 0

    async def exists(self, statistic_id: int) -> bool:
        async with repository_operation(
            self.session, f"Failed to check statistic {statistic_id}.",
            "exists", ENTITY_TYPE, statistic_id,
        ):
            result = await self.session.execute(
                select(PlayerStatisticRow.id).where(PlayerStatisticRow.id == statistic_id).limit(1)
            )
            return result.scalar_one_or_none() is not None

    async def get_aggregates(
        self, player_id: int, team_player_id: Optional[int] = None
    ) -> StatisticAggregate:
        """
        Totals and averages computed in SQL.

        Args:
            player_id: Player whose statistics are aggregated
            team_player_id: Restrict to one membership when given

        Returns:
            StatisticAggregate (all zeros when the player has no games)
        """
        async with repository_operation(
            self.session, f"Failed to aggregate statistics for player {player_id}.",
            "get_aggregates", ENTITY_TYPE,
        ):
            query = (
                select(
                    func.count(PlayerStatisticRow.id),
                    func.coalesce(func.sum(PlayerStatisticRow.goals), 0),
                    func.coalesce(func.sum(PlayerStatisticRow.assists), 0),
                    func.coalesce(func.sum(PlayerStatisticRow.minutes_played), 0),
                )
                .select_from(PlayerStatisticRow)
                .join(TeamPlayerRow, PlayerStatisticRow.team_player_id == TeamPlayerRow.id)
                .where(TeamPlayerRow.player_id == player_id)
            )
            if team_player_id is not None:
                query = query.where(PlayerStatisticRow.team_player_id == team_player_id)

            game_count, total_goals, total_assists, total_minutes = (
                await self.session.execute(query)
            ).one()
            return StatisticAggregate.from_totals(
                game_count=int(game_count),
                total_goals=int(total_goals),
                total_assists=int(total_assists),
                total_minutes=int(total_minutes),
            )
