"""
Player service: create, update, delete and look up player profiles.

Every operation returns an OperationResult. Storage failures are logged and
turned into a TRANSIENT failure with a message the user can act on.
"""

from typing import List

from roster.models.entities import require_actor
from roster.models.results import FailureKind, OperationResult, ValidationResult
from roster.models.schemas import CreatePlayerRequest, PlayerResponse, UpdatePlayerRequest
from roster.repositories.protocols import PlayerRepository
from roster.validation.player_validator import validate_create_player, validate_update_player
import logging

logger = logging.getLogger(__name__)


class PlayerService:
    """Player operations over a PlayerRepository."""

    def __init__(self, repository: PlayerRepository):
        if repository is None:
            raise ValueError("Player repository is required.")
        self.repository = repository

    async def get_all_players(self) -> OperationResult[List[PlayerResponse]]:
        logger.info("Retrieving all players")
        try:
            players = await self.repository.get_all()
            responses = [PlayerResponse.from_entity(player) for player in players]
            logger.info(f"Retrieved {len(responses)} players")
            return OperationResult.ok(responses)
        except Exception as e:
            logger.error(f"Error retrieving all players: {e}", exc_info=True)
            return OperationResult.fail("Unable to load players. Please refresh the page.")

    async def get_player_by_id(self, player_id: int) -> OperationResult[PlayerResponse]:
        logger.info(f"Retrieving player with ID {player_id}")
        try:
            player = await self.repository.get_by_id(player_id)
            if player is None:
                logger.warning(f"Player with ID {player_id} not found")
                return OperationResult.not_found(f"Player with ID {player_id} could not be found.")
            logger.info(f"Successfully retrieved player {player_id}: {player.name}")
            return OperationResult.ok(PlayerResponse.from_entity(player))
        except Exception as e:
            logger.error(f"Error retrieving player with ID {player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to load player. Please try again.")

    async def get_players_by_user_id(self, user_id: str) -> OperationResult[List[PlayerResponse]]:
        """Players owned by one user account."""
        if user_id is None or not user_id.strip():
            return OperationResult.field_failed("user_id", "User ID is required.")

        logger.info(f"Retrieving players for user {user_id}")
        try:
            players = await self.repository.get_by_user_id(user_id)
            responses = [PlayerResponse.from_entity(player) for player in players]
            logger.info(f"Retrieved {len(responses)} players for user {user_id}")
            return OperationResult.ok(responses)
        except Exception as e:
            logger.error(f"Error retrieving players for user {user_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to load players. Please refresh the page.")

    async def create_player(
        self, request: CreatePlayerRequest, actor_id: str
    ) -> OperationResult[PlayerResponse]:
        """
        Validate and store a new player.

        Args:
            request: Player data
            actor_id: User performing the change

        Returns:
            OperationResult with the stored player, or a VALIDATION/TRANSIENT failure

        Raises:
            ValueError: If actor_id is blank or request is None
        """
        require_actor(actor_id)
        if request is None:
            raise ValueError("Create player request is required.")

        logger.info(f"Creating new player: {request.name} by user {actor_id}")

        validation = validate_create_player(request)
        if not validation.is_valid:
            logger.warning(
                f"Player creation validation failed for {request.name}: "
                f"{', '.join(validation.messages())}"
            )
            return OperationResult.validation_failed(validation)

        try:
            created = await self.repository.add(request.to_entity(actor_id))
            logger.info(f"Successfully created player {created.id}: {created.name}")
            return OperationResult.ok(PlayerResponse.from_entity(created))
        except Exception as e:
            logger.error(f"Error creating player {request.name}: {e}", exc_info=True)
            return OperationResult.fail("Unable to save player. Please try again.")

    async def update_player(
        self, player_id: int, request: UpdatePlayerRequest, actor_id: str
    ) -> OperationResult[PlayerResponse]:
        """
        Replace a player's editable fields.

        player_id must match request.id; a mismatch fails before any storage
        access.
        """
        require_actor(actor_id)
        if request is None:
            raise ValueError("Update player request is required.")

        logger.info(f"Updating player {player_id} by user {actor_id}")

        if request.id != player_id:
            logger.warning(f"Player ID mismatch: path ID {player_id} != request ID {request.id}")
            return OperationResult.fail("Player ID mismatch.", kind=FailureKind.VALIDATION)

        validation = validate_update_player(request)
        if not validation.is_valid:
            logger.warning(
                f"Player update validation failed for ID {player_id}: "
                f"{', '.join(validation.messages())}"
            )
            return OperationResult.validation_failed(validation)

        try:
            existing = await self.repository.get_by_id(player_id)
            if existing is None:
                logger.warning(f"Player with ID {player_id} not found for update")
                return OperationResult.not_found(f"Player with ID {player_id} could not be found.")

            saved = await self.repository.update(request.apply_to(existing, actor_id))
            if saved is None:
                logger.warning(f"Player with ID {player_id} disappeared during update")
                return OperationResult.not_found(f"Player with ID {player_id} could not be found.")

            logger.info(f"Successfully updated player {saved.id}: {saved.name}")
            return OperationResult.ok(PlayerResponse.from_entity(saved))
        except Exception as e:
            logger.error(f"Error updating player {player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to save player. Please try again.")

    async def delete_player(self, player_id: int) -> OperationResult[bool]:
        """Delete a player together with its team memberships and statistics."""
        logger.info(f"Deleting player with ID {player_id}")
        try:
            if not await self.repository.exists(player_id):
                logger.warning(f"Player with ID {player_id} not found for deletion")
                return OperationResult.not_found(f"Player with ID {player_id} could not be found.")

            if await self.repository.delete(player_id):
                logger.info(f"Successfully deleted player {player_id}")
                return OperationResult.ok(True)

            logger.warning(f"Failed to delete player {player_id}")
            return OperationResult.fail("Unable to delete player. Please try again.")
        except Exception as e:
            logger.error(f"Error deleting player {player_id}: {e}", exc_info=True)
            return OperationResult.fail("Unable to delete player. Please try again.")

    def validate_player(self, request: CreatePlayerRequest) -> ValidationResult:
        """Run the create rules without storing anything."""
        if request is None:
            raise ValueError("Create player request is required.")
        logger.debug(f"Validating player data for {request.name}")
        result = validate_create_player(request)
        if not result.is_valid:
            logger.debug(f"Validation failed for {request.name}: {', '.join(result.messages())}")
        return result
