"""
Per-game statistics service: record, correct, delete and summarize games.
"""

from datetime import date
from typing import List, Optional

from roster.models.entities import require_actor
from roster.models.results import FailureKind, OperationResult, ValidationResult
from roster.models.schemas import (
    CreatePlayerStatisticRequest,
    PlayerStatisticResponse,
    StatisticAggregate,
    UpdatePlayerStatisticRequest,
)
from roster.repositories.protocols import PlayerStatisticRepository, TeamPlayerRepository
from roster.validation.player_statistic_validator import (
    validate_create_player_statistic,
    validate_update_player_statistic,
)
import logging

logger = logging.getLogger(__name__)


class PlayerStatisticService:
    """Statistic operations over the statistic and team player repositories."""

    def __init__(
        self,
        statistic_repository: PlayerStatisticRepository,
        team_player_repository: TeamPlayerRepository,
    ):
        if statistic_repository is None:
            raise ValueError("Player statistic repository is required.")
        if team_player_repository is None:
            raise ValueError("Team player repository is required.")
        self.statistic_repository = statistic_repository
        self.team_player_repository = team_player_repository

    # ------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------

    async def get_statistics_by_player_id(
        self, player_id: int
    ) -> OperationResult[List[PlayerStatisticResponse]]:
        logger.info(f"Retrieving statistics for player {player_id}")
        try:
            statistics = await self.statistic_repository.get_all_by_player_id(player_id)
            responses = [PlayerStatisticResponse.from_entity(s) for s in statistics]
            logger.info(f"Retrieved {len(responses)} statistics for player {player_id}")
            return OperationResult.ok(responses)
        except Exception as e:
            logger.error(f"Error retrieving statistics for player {player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to load statistics. Please refresh the page.")

    async def get_statistics_by_team_player_id(
        self, team_player_id: int
    ) -> OperationResult[List[PlayerStatisticResponse]]:
        logger.info(f"Retrieving statistics for team player {team_player_id}")
        try:
            statistics = await self.statistic_repository.get_all_by_team_player_id(team_player_id)
            responses = [PlayerStatisticResponse.from_entity(s) for s in statistics]
            logger.info(f"Retrieved {len(responses)} statistics for team player {team_player_id}")
            return OperationResult.ok(responses)
        except Exception as e:
            logger.error(
                f"Error retrieving statistics for team player {team_player_id}: {e}", exc_info=True
            )
            return OperationResult.fail("Unable to load statistics. Please refresh the page.")

    async def get_statistics_by_date_range(
        self, player_id: int, start_date: date, end_date: date
    ) -> OperationResult[List[PlayerStatisticResponse]]:
        """Statistics for a player with game dates in [start_date, end_date]."""
        if start_date is None or end_date is None:
            return OperationResult.field_failed("date_range", "Start and end dates are required.")
        if start_date > end_date:
            logger.warning(f"Invalid date range for player {player_id}: {start_date} > {end_date}")
            return OperationResult.field_failed("start_date", "Start date must be on or before end date.")

        logger.info(f"Retrieving statistics for player {player_id} from {start_date} to {end_date}")
        try:
            statistics = await self.statistic_repository.get_by_date_range(player_id, start_date, end_date)
            responses = [PlayerStatisticResponse.from_entity(s) for s in statistics]
            logger.info(f"Retrieved {len(responses)} statistics for player {player_id} in range")
            return OperationResult.ok(responses)
        except Exception as e:
            logger.error(f"Error retrieving statistics by date range for player {player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to load statistics. Please refresh the page.")

    async def get_statistic_by_id(self, statistic_id: int) -> OperationResult[PlayerStatisticResponse]:
        logger.info(f"Retrieving statistic with ID {statistic_id}")
        try:
            statistic = await self.statistic_repository.get_by_id(statistic_id)
            if statistic is None:
                logger.warning(f"Statistic with ID {statistic_id} not found")
                return OperationResult.not_found(f"Statistic with ID {statistic_id} could not be found.")
            logger.info(f"Successfully retrieved statistic {statistic_id}")
            return OperationResult.ok(PlayerStatisticResponse.from_entity(statistic))
        except Exception as e:
            logger.error(f"Error retrieving statistic with ID {statistic_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to load statistic. Please try again.")

    async def get_player_aggregates(
        self, player_id: int, team_player_id: Optional[int] = None
    ) -> OperationResult[StatisticAggregate]:
        """
        Totals and per-game averages for a player.

        Args:
            player_id: Player to summarize
            team_player_id: Restrict to one membership when given
        """
        logger.info(f"Retrieving aggregates for player {player_id}, team_player_id: {team_player_id}")
        try:
            aggregates = await self.statistic_repository.get_aggregates(player_id, team_player_id)
            logger.info(
                f"Retrieved aggregates for player {player_id}: games={aggregates.game_count}, "
                f"goals={aggregates.total_goals}, assists={aggregates.total_assists}"
            )
            return OperationResult.ok(aggregates)
        except Exception as e:
            logger.error(f"Error retrieving aggregates for player {player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to load aggregates. Please try again.")

    # ------------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------------

    async def add_statistic(
        self, request: CreatePlayerStatisticRequest, actor_id: str
    ) -> OperationResult[PlayerStatisticResponse]:
        """
        Record one game for an existing team membership.

        Raises:
            ValueError: If actor_id is blank or request is None
        """
        require_actor(actor_id)
        if request is None:
            raise ValueError("Create player statistic request is required.")

        logger.info(f"Creating new statistic for team player {request.team_player_id} by user {actor_id}")

        validation = validate_create_player_statistic(request)
        if not validation.is_valid:
            logger.warning(
                f"Statistic creation validation failed for team player {request.team_player_id}: "
                f"{', '.join(validation.messages())}"
            )
            return OperationResult.validation_failed(validation)

        try:
            if not await self.team_player_repository.exists(request.team_player_id):
                logger.warning(f"Team player {request.team_player_id} not found when creating statistic")
                return OperationResult.not_found(
                    f"Team player with ID {request.team_player_id} could not be found."
                )

            created = await self.statistic_repository.add(request.to_entity(actor_id))
            logger.info(f"Successfully created statistic {created.id} for team player {created.team_player_id}")
            return OperationResult.ok(PlayerStatisticResponse.from_entity(created))
        except Exception as e:
            logger.error(
                f"Error creating statistic for team player {request.team_player_id}: {e}", exc_info=True
            )
            return OperationResult.fail("Unable to save statistic. Please try again.")

    async def update_statistic(
        self, statistic_id: int, request: UpdatePlayerStatisticRequest, actor_id: str
    ) -> OperationResult[PlayerStatisticResponse]:
        """
        Replace a recorded game.

        statistic_id must match request.player_statistic_id. Moving the game to
        another membership checks that the new membership exists.
        """
        require_actor(actor_id)
        if request is None:
            raise ValueError("Update player statistic request is required.")

        logger.info(f"Updating statistic {statistic_id} by user {actor_id}")

        if request.player_statistic_id != statistic_id:
            logger.warning(
                f"Statistic ID mismatch: path ID {statistic_id} != request ID {request.player_statistic_id}"
            )
            return OperationResult.fail("Statistic ID mismatch.", kind=FailureKind.VALIDATION)

        validation = validate_update_player_statistic(request)
        if not validation.is_valid:
            logger.warning(
                f"Statistic update validation failed for ID {statistic_id}: "
                f"{', '.join(validation.messages())}"
            )
            return OperationResult.validation_failed(validation)

        try:
            existing = await self.statistic_repository.get_by_id(statistic_id)
            if existing is None:
                logger.warning(f"Statistic with ID {statistic_id} not found for update")
                return OperationResult.not_found(f"Statistic with ID {statistic_id} could not be found.")

            if existing.team_player_id != request.team_player_id:
                if not await self.team_player_repository.exists(request.team_player_id):
                    logger.warning(f"Team player {request.team_player_id} not found when updating statistic")
                    return OperationResult.not_found(
                        f"Team player with ID {request.team_player_id} could not be found."
                    )

            saved = await self.statistic_repository.update(request.apply_to(existing, actor_id))
            if saved is None:
                return OperationResult.not_found(f"Statistic with ID {statistic_id} could not be found.")
            logger.info(f"Successfully updated statistic {statistic_id}")
            return OperationResult.ok(PlayerStatisticResponse.from_entity(saved))
        except Exception as e:
            logger.error(f"Error updating statistic {statistic_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to save statistic. Please try again.")

    async def delete_statistic(self, statistic_id: int) -> OperationResult[bool]:
        logger.info(f"Deleting statistic with ID {statistic_id}")
        try:
            if not await self.statistic_repository.exists(statistic_id):
                logger.warning(f"Statistic with ID {statistic_id} not found for deletion")
                return OperationResult.not_found(f"Statistic with ID {statistic_id} could not be found.")

            if await self.statistic_repository.delete(statistic_id):
                logger.info(f"Successfully deleted statistic {statistic_id}")
                return OperationResult.ok(True)

            logger.warning(f"Failed to delete statistic {statistic_id}")
            return OperationResult.fail("Unable to delete statistic. Please try again.")
        except Exception as e:
            logger.error(f"Error deleting statistic {statistic_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to delete statistic. Please try again.")

    def validate_statistic(self, request: CreatePlayerStatisticRequest) -> ValidationResult:
        """Run the create rules without storing anything."""
        if request is None:
            raise ValueError("Create player statistic request is required.")
        logger.debug(f"Validating statistic data for team player {request.team_player_id}")
        result = validate_create_player_statistic(request)
        if not result.is_valid:
            logger.debug(
                f"Validation failed for team player {request.team_player_id}: {', '.join(result.messages())}"
            )
        return result
