"""
Aggregate statistics over a player's recorded games.
"""

from typing import Iterable

from roster.models.entities import PlayerStatistic
from roster.models.schemas import StatisticAggregate


def aggregate_statistics(statistics: Iterable[PlayerStatistic]) -> StatisticAggregate:
    """
    Compute totals and per-game averages.

    game_count is the number of records; averages use true division and are
    0.0 when there are no games.

    Args:
        statistics: Statistics to aggregate (any iterable, consumed once)

    Returns:
        StatisticAggregate with totals and averages
    """
    if statistics is None:
        raise ValueError("Statistics are required.")

    game_count = 0
    total_goals = 0
    total_assists = 0
    total_minutes = 0
    for statistic in statistics:
        game_count += 1
        total_goals += statistic.goals
        total_assists += statistic.assists
        total_minutes += statistic.minutes_played

    return StatisticAggregate.from_totals(
        game_count=game_count,
        total_goals=total_goals,
        total_assists=total_assists,
        total_minutes=total_minutes,
    )
