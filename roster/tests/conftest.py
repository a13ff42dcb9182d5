"""
Shared pytest fixtures for roster tests.

Repository and service tests run against a fresh in-memory SQLite database per
test, created from the ORM metadata.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from roster.database.db import Base
from roster.repositories.player_repository import SqlAlchemyPlayerRepository
from roster.repositories.player_statistic_repository import SqlAlchemyPlayerStatisticRepository
from roster.repositories.team_player_repository import SqlAlchemyTeamPlayerRepository
from roster.services.player_service import PlayerService
from roster.services.player_statistic_service import PlayerStatisticService
from roster.services.team_player_service import TeamPlayerService
from roster.tests.factories import ACTOR_ID, make_player_request, make_team_request


@pytest_asyncio.fixture
async def db_session():
    """Create a test database session."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def actor_id():
    return ACTOR_ID


@pytest.fixture
def player_repository(db_session):
    return SqlAlchemyPlayerRepository(db_session)


@pytest.fixture
def team_player_repository(db_session):
    return SqlAlchemyTeamPlayerRepository(db_session)


@pytest.fixture
def statistic_repository(db_session):
    return SqlAlchemyPlayerStatisticRepository(db_session)


@pytest.fixture
def player_service(player_repository):
    return PlayerService(player_repository)


@pytest.fixture
def team_player_service(team_player_repository, player_repository):
    return TeamPlayerService(team_player_repository, player_repository)


@pytest.fixture
def statistic_service(statistic_repository, team_player_repository):
    return PlayerStatisticService(statistic_repository, team_player_repository)


@pytest_asyncio.fixture
async def stored_player(player_service, actor_id):
    """A player saved through the service."""
    result = await player_service.create_player(make_player_request(), actor_id)
    assert result.success
    return result.data


@pytest_asyncio.fixture
async def stored_team_player(team_player_service, stored_player, actor_id):
    """An active membership for stored_player."""
    result = await team_player_service.add_player_to_team(
        make_team_request(stored_player.id), actor_id
    )
    assert result.success
    return result.data
