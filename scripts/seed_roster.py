#!/usr/bin/env python3
"""
Seed the database with a sample player, team assignment and game statistic.

Creates the tables if needed, then goes through the services so the same
validation and audit rules apply as for any other caller. Reuses the sample
player if one with the same owner and name already exists.

Usage:
    DATABASE_URL=sqlite+aiosqlite:///roster.db python scripts/seed_roster.py
"""

import asyncio
import logging
import os
import sys
from datetime import date, timedelta

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from roster.database.db import get_session_factory, init_database
from roster.models.schemas import (
    CreatePlayerRequest,
    CreatePlayerStatisticRequest,
    CreateTeamPlayerRequest,
)
from roster.repositories.player_repository import SqlAlchemyPlayerRepository
from roster.repositories.player_statistic_repository import SqlAlchemyPlayerStatisticRepository
from roster.repositories.team_player_repository import SqlAlchemyTeamPlayerRepository
from roster.services.player_service import PlayerService
from roster.services.player_statistic_service import PlayerStatisticService
from roster.services.team_player_service import TeamPlayerService
from roster.utils.datetime_utils import utcnow, utctoday

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SEED_ACTOR = "seed-script"
SEED_USER_ID = "demo-user"
SEED_PLAYER_NAME = "Jordan Rivera"


async def seed(session) -> None:
    player_repository = SqlAlchemyPlayerRepository(session)
    team_player_repository = SqlAlchemyTeamPlayerRepository(session)
    player_service = PlayerService(player_repository)
    team_player_service = TeamPlayerService(team_player_repository, player_repository)
    statistic_service = PlayerStatisticService(
        SqlAlchemyPlayerStatisticRepository(session), team_player_repository
    )

    existing = await player_service.get_players_by_user_id(SEED_USER_ID)
    if not existing.success:
        raise RuntimeError(f"Could not load players: {existing.error_messages}")
    player = next((p for p in existing.data if p.name == SEED_PLAYER_NAME), None)

    if player is None:
        created = await player_service.create_player(
            CreatePlayerRequest(
                user_id=SEED_USER_ID,
                name=SEED_PLAYER_NAME,
                date_of_birth=date(2008, 4, 12),
                gender="Non-binary",
            ),
            SEED_ACTOR,
        )
        if not created.success:
            raise RuntimeError(f"Could not create player: {created.validation_errors or created.error_messages}")
        player = created.data
        logger.info(f"Created player {player.id}: {player.name}")
    else:
        logger.info(f"Player {player.id} already exists, reusing it")

    assignment = await team_player_service.add_player_to_team(
        CreateTeamPlayerRequest(
            player_id=player.id,
            team_name="Riverside United",
            championship_name="Spring Cup",
            joined_date=utcnow() - timedelta(days=45),
        ),
        SEED_ACTOR,
    )
    if assignment.success:
        team_player_id = assignment.data.team_player_id
        logger.info(f"Added {player.name} to {assignment.data.team_name} ({team_player_id})")
    else:
        active = await team_player_service.get_active_teams_by_player_id(player.id)
        if not active.success or not active.data:
            raise RuntimeError(f"Could not assign team: {assignment.validation_errors or assignment.error_messages}")
        team_player_id = active.data[0].team_player_id
        logger.info(f"Reusing active assignment {team_player_id}")

    statistic = await statistic_service.add_statistic(
        CreatePlayerStatisticRequest(
            team_player_id=team_player_id,
            game_date=utctoday() - timedelta(days=2),
            minutes_played=80,
            is_starter=True,
            jersey_number=7,
            goals=1,
            assists=1,
        ),
        SEED_ACTOR,
    )
    if not statistic.success:
        raise RuntimeError(f"Could not record statistic: {statistic.validation_errors or statistic.error_messages}")

    aggregates = await statistic_service.get_player_aggregates(player.id)
    logger.info(
        f"{player.name}: {aggregates.data.game_count} games, "
        f"{aggregates.data.total_goals} goals, {aggregates.data.avg_minutes:.1f} avg minutes"
    )


async def main():
    logger.info("Seeding roster data...")
    await init_database()
    async with get_session_factory()() as session:
        await seed(session)
    logger.info("Done.")


if __name__ == "__main__":
    asyncio.run(main())
