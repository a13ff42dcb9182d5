"""
Repository contracts consumed by the services.

Implementations return domain entities (never response models), are fully
async, and own the transaction: a write is committed before the call returns
or not at all. Cancellation is asyncio task cancellation.
"""

from datetime import date
from typing import List, Optional, Protocol, runtime_checkable

from roster.models.entities import Player, PlayerStatistic, TeamPlayer
from roster.models.schemas import StatisticAggregate

__all__ = [
    "PlayerRepository",
    "TeamPlayerRepository",
    "PlayerStatisticRepository",
]


@runtime_checkable
class PlayerRepository(Protocol):
    async def get_all(self) -> List[Player]: ...

    async def get_by_id(self, player_id: int) -> Optional[Player]: ...

    async def get_by_user_id(self, user_id: str) -> List[Player]: ...

    async def add(self, player: Player) -> Player: ...

    async def update(self, player: Player) -> Optional[Player]: ...

    async def delete(self, player_id: int) -> bool: ...

    async def exists(self, player_id: int) -> bool: ...


@runtime_checkable
class TeamPlayerRepository(Protocol):
    async def get_all_by_player_id(self, player_id: int) -> List[TeamPlayer]: ...

    async def get_active_by_player_id(self, player_id: int) -> List[TeamPlayer]: ...

    async def get_by_id(self, team_player_id: int) -> Optional[TeamPlayer]: ...

    async def add(self, team_player: TeamPlayer) -> TeamPlayer: ...

    async def update(self, team_player: TeamPlayer) -> Optional[TeamPlayer]: ...

    async def delete(self, team_player_id: int) -> bool: ...

    async def exists(self, team_player_id: int) -> bool: ...

    async def has_active_duplicate(
        self,
        player_id: int,
        team_name: str,
        championship_name: str,
        exclude_id: Optional[int] = None,
    ) -> bool: ...


@runtime_checkable
class PlayerStatisticRepository(Protocol):
    async def get_all_by_player_id(self, player_id: int) -> List[PlayerStatistic]: ...

    async def get_all_by_team_player_id(self, team_player_id: int) -> List[PlayerStatistic]: ...

    async def get_by_id(self, statistic_id: int) -> Optional[PlayerStatistic]: ...

    async def get_by_date_range(
        self, player_id: int, start_date: date, end_date: date
    ) -> List[PlayerStatistic]: ...

    async def add(self, statistic: PlayerStatistic) -> PlayerStatistic: ...

    async def update(self, statistic: PlayerStatistic) -> Optional[PlayerStatistic]: ...

    async def delete(self, statistic_id: int) -> bool: ...

    async def exists(self, statistic_id: int) -> bool: ...

    async def get_aggregates(
        self, player_id: int, team_player_id: Optional[int] = None
    ) -> StatisticAggregate: ...
