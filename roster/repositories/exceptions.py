"""
Exceptions raised by repository implementations.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


class RepositoryError(Exception):
    """A storage operation failed. The original error is chained as __cause__."""

    def __init__(
        self,
        message: str = "A repository operation failed.",
        operation: Optional[str] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[Any] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateAssignmentError(RepositoryError):
    """Storage rejected a second active membership for the same player/team/championship."""


@asynccontextmanager
async def repository_operation(
    session: AsyncSession,
    message: str,
    operation: str,
    entity_type: str,
    entity_id: Optional[Any] = None,
) -> AsyncIterator[None]:
    """
    Wrap SQLAlchemy failures raised inside the block in a RepositoryError.

    The session is rolled back first so it can be reused.
    """
    try:
        yield
    except RepositoryError:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        raise RepositoryError(message, operation, entity_type, entity_id) from e
