"""
Team membership service: add players to teams, record departures, and list
memberships.
"""

from datetime import datetime
from typing import List, Optional

from roster.models.entities import require_actor
from roster.models.results import FailureKind, OperationResult, ValidationResult
from roster.models.schemas import (
    CreateTeamPlayerRequest,
    TeamPlayerResponse,
    UpdateTeamPlayerRequest,
)
from roster.repositories.exceptions import DuplicateAssignmentError
from roster.repositories.protocols import PlayerRepository, TeamPlayerRepository
from roster.utils.constants import DUPLICATE_ASSIGNMENT_KEY
from roster.utils.datetime_utils import ensure_utc, utcnow
from roster.validation.team_player_validator import validate_create_team_player, validate_left_date
import logging

logger = logging.getLogger(__name__)

DUPLICATE_ASSIGNMENT_MESSAGE = "Player already has an active assignment to this team and championship."


class TeamPlayerService:
    """Team membership operations over the team player and player repositories."""

    def __init__(
        self,
        team_player_repository: TeamPlayerRepository,
        player_repository: PlayerRepository,
    ):
        if team_player_repository is None:
            raise ValueError("Team player repository is required.")
        if player_repository is None:
            raise ValueError("Player repository is required.")
        self.team_player_repository = team_player_repository
        self.player_repository = player_repository

    # ========================================================================
    # Queries
    # ========================================================================

    async def get_teams_by_player_id(
        self, player_id: int, include_inactive: bool = False
    ) -> OperationResult[List[TeamPlayerResponse]]:
        logger.info(
            f"Retrieving team assignments for player {player_id}, include_inactive: {include_inactive}"
        )
        try:
            if include_inactive:
                team_players = await self.team_player_repository.get_all_by_player_id(player_id)
            else:
                team_players = await self.team_player_repository.get_active_by_player_id(player_id)
            responses = [TeamPlayerResponse.from_entity(tp) for tp in team_players]
            logger.info(f"Retrieved {len(responses)} team assignments for player {player_id}")
            return OperationResult.ok(responses)
        except Exception as e:
            logger.error(f"Error retrieving team assignments for player {player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to load team assignments. Please refresh the page.")

    async def get_active_teams_by_player_id(
        self, player_id: int
    ) -> OperationResult[List[TeamPlayerResponse]]:
        logger.info(f"Retrieving active team assignments for player {player_id}")
        try:
            team_players = await self.team_player_repository.get_active_by_player_id(player_id)
            responses = [TeamPlayerResponse.from_entity(tp) for tp in team_players]
            logger.info(f"Retrieved {len(responses)} active team assignments for player {player_id}")
            return OperationResult.ok(responses)
        except Exception as e:
            logger.error(
                f"Error retrieving active team assignments for player {player_id}: {e}", exc_info=True
            )
            return OperationResult.fail("Unable to load team assignments. Please refresh the page.")

    async def get_team_assignment_by_id(
        self, team_player_id: int
    ) -> OperationResult[TeamPlayerResponse]:
        logger.info(f"Retrieving team assignment with ID {team_player_id}")
        try:
            team_player = await self.team_player_repository.get_by_id(team_player_id)
            if team_player is None:
                logger.warning(f"Team assignment with ID {team_player_id} not found")
                return OperationResult.not_found(
                    f"Team assignment with ID {team_player_id} could not be found."
                )
            logger.info(f"Successfully retrieved team assignment {team_player_id}: {team_player.team_name}")
            return OperationResult.ok(TeamPlayerResponse.from_entity(team_player))
        except Exception as e:
            logger.error(f"Error retrieving team assignment with ID {team_player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to load team assignment. Please try again.")

    # ========================================================================
    # Commands
    # ========================================================================

    async def add_player_to_team(
        self, request: CreateTeamPlayerRequest, actor_id: str
    ) -> OperationResult[TeamPlayerResponse]:
        """
        Create an active membership.

        Fails with NOT_FOUND when the player does not exist and with CONFLICT
        (field key "DuplicateAssignment") when the player already has an active
        membership for the same team and championship. The unique index on
        active memberships reports the same conflict if two requests race.

        Raises:
            ValueError: If actor_id is blank or request is None
        """
        require_actor(actor_id)
        if request is None:
            raise ValueError("Create team player request is required.")

        logger.info(f"Adding player {request.player_id} to team {request.team_name} by user {actor_id}")

        validation = validate_create_team_player(request)
        if not validation.is_valid:
            logger.warning(
                f"Team player creation validation failed for player {request.player_id}: "
                f"{', '.join(validation.messages())}"
            )
            return OperationResult.validation_failed(validation)

        try:
            if not await self.player_repository.exists(request.player_id):
                logger.warning(f"Player {request.player_id} not found when adding to team")
                return OperationResult.not_found(
                    f"Player with ID {request.player_id} could not be found."
                )

            team_player = request.to_entity(actor_id)
            if await self.team_player_repository.has_active_duplicate(
                team_player.player_id, team_player.team_name, team_player.championship_name
            ):
                logger.warning(
                    f"Duplicate active assignment found for player {team_player.player_id} "
                    f"on team {team_player.team_name} in {team_player.championship_name}"
                )
                return OperationResult.conflict(DUPLICATE_ASSIGNMENT_KEY, DUPLICATE_ASSIGNMENT_MESSAGE)

            created = await self.team_player_repository.add(team_player)
            logger.info(
                f"Successfully added player {created.player_id} to team {created.team_name} "
                f"with ID {created.id}"
            )
            return OperationResult.ok(TeamPlayerResponse.from_entity(created))
        except DuplicateAssignmentError:
            logger.warning(
                f"Active assignment for player {request.player_id} on team {request.team_name} "
                "was created concurrently"
            )
            return OperationResult.conflict(DUPLICATE_ASSIGNMENT_KEY, DUPLICATE_ASSIGNMENT_MESSAGE)
        except Exception as e:
            logger.error(f"Error adding player {request.player_id} to team {request.team_name}: {e}", exc_info=True)
            return OperationResult.fail("Unable to save team assignment. Please try again.")

    async def update_team_assignment(
        self, team_player_id: int, request: UpdateTeamPlayerRequest, actor_id: str
    ) -> OperationResult[TeamPlayerResponse]:
        """
        Update a membership. A left_date ends it; without one only the audit
        fields are touched.

        team_player_id must match request.team_player_id; a mismatch fails
        before any storage access.
        """
        require_actor(actor_id)
        if request is None:
            raise ValueError("Update team player request is required.")

        logger.info(f"Updating team assignment {team_player_id} by user {actor_id}")

        if request.team_player_id != team_player_id:
            logger.warning(
                f"Team player ID mismatch: path ID {team_player_id} != request ID {request.team_player_id}"
            )
            return OperationResult.fail("Team player ID mismatch.", kind=FailureKind.VALIDATION)

        try:
            existing = await self.team_player_repository.get_by_id(team_player_id)
            if existing is None:
                logger.warning(f"Team assignment with ID {team_player_id} not found for update")
                return OperationResult.not_found(
                    f"Team assignment with ID {team_player_id} could not be found."
                )

            if request.left_date is not None:
                validation = validate_left_date(request.left_date, existing.joined_date)
                if not validation.is_valid:
                    logger.warning(
                        f"Team player update validation failed for ID {team_player_id}: "
                        f"{', '.join(validation.messages())}"
                    )
                    return OperationResult.validation_failed(validation)

                transition = existing.mark_as_left(request.left_date, actor_id)
                if not transition.success:
                    logger.warning(
                        f"Business rule violation when updating team assignment {team_player_id}: "
                        f"{transition.error_messages or transition.validation_errors}"
                    )
                    return transition.propagate()
                changed = transition.data
            else:
                changed = existing.mark_modified(actor_id)

            saved = await self.team_player_repository.update(changed)
            if saved is None:
                return OperationResult.not_found(
                    f"Team assignment with ID {team_player_id} could not be found."
                )
            logger.info(f"Successfully updated team assignment {team_player_id}")
            return OperationResult.ok(TeamPlayerResponse.from_entity(saved))
        except Exception as e:
            logger.error(f"Error updating team assignment {team_player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to save team assignment. Please try again.")

    async def remove_player_from_team(
        self, team_player_id: int, left_date: datetime, actor_id: str
    ) -> OperationResult[TeamPlayerResponse]:
        """
        End an active membership on left_date.

        left_date must be after the joined date and not in the future; a
        membership that has already ended fails with CONFLICT.
        """
        require_actor(actor_id)
        if left_date is None:
            raise ValueError("Left date is required.")

        logger.info(f"Removing player from team assignment {team_player_id} by user {actor_id}")

        try:
            existing = await self.team_player_repository.get_by_id(team_player_id)
            if existing is None:
                logger.warning(f"Team assignment with ID {team_player_id} not found for removal")
                return OperationResult.not_found(
                    f"Team assignment with ID {team_player_id} could not be found."
                )

            now = utcnow()
            left = ensure_utc(left_date)
            if left <= ensure_utc(existing.joined_date):
                logger.warning(
                    f"Invalid left date for team assignment {team_player_id}: "
                    "Left date must be after joined date"
                )
                return OperationResult.field_failed("left_date", "Left date must be after the joined date.")
            if left > now:
                logger.warning(
                    f"Invalid left date for team assignment {team_player_id}: "
                    "Left date cannot be in the future"
                )
                return OperationResult.field_failed("left_date", "Left date cannot be in the future.")

            transition = existing.mark_as_left(left, actor_id, now=now)
            if not transition.success:
                logger.warning(
                    f"Business rule violation when removing player from team assignment {team_player_id}: "
                    f"{transition.error_messages or transition.validation_errors}"
                )
                return transition.propagate()

            saved = await self.team_player_repository.update(transition.data)
            if saved is None:
                return OperationResult.not_found(
                    f"Team assignment with ID {team_player_id} could not be found."
                )
            logger.info(
                f"Successfully removed player from team assignment {team_player_id}, "
                f"is_active: {saved.is_active}"
            )
            return OperationResult.ok(TeamPlayerResponse.from_entity(saved))
        except Exception as e:
            logger.error(f"Error removing player from team assignment {team_player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to update team assignment. Please try again.")

    def validate_team_assignment(
        self, request: CreateTeamPlayerRequest, now: Optional[datetime] = None
    ) -> ValidationResult:
        """Run the create rules without storing anything."""
        if request is None:
            raise ValueError("Create team player request is required.")
        logger.debug(f"Validating team assignment data for player {request.player_id}")
        result = validate_create_team_player(request, now=now)
        if not result.is_valid:
            logger.debug(
                f"Validation failed for player {request.player_id}: {', '.join(result.messages())}"
            )
        return result
