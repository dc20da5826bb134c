import logging
import uuid
from typing import Any, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.crud.review_crud import review_repository
from app.crud.user_crud import user_repository
from app.models.review_model import Review
from app.models.user_model import User
from app.core.exception_utils import raise_for_status
from app.core.exceptions import ResourceNotFound

logger = logging.getLogger(__name__)


def coerce_id(value: Any) -> Optional[uuid.UUID]:
    """Parse an opaque identifier; None when it cannot name any row."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


class EntityGuardService:
    """
    Existence checks run before any like or comment is written.

    Turns what would be a foreign-key failure in the store into a precise
    "not found" telling the caller which entity is missing.
    """

    def __init__(self):
        self.review_repository = review_repository
        self.user_repository = user_repository
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def ensure_review_exists(self, db: AsyncSession, *, review_id: Any) -> Review:
        """Return the review unless it is missing or deleted."""
        parsed_id = coerce_id(review_id)
        review = None
        if parsed_id is not None:
            review = await self.review_repository.get_active(db=db, review_id=parsed_id)

        raise_for_status(
            condition=review is None,
            exception=ResourceNotFound,
            detail="Review not found",
            resource_type="Review",
            resource_id=review_id,
        )
        return review

    async def ensure_user_eligible(self, db: AsyncSession, *, user_id: Any) -> User:
        """Return the user unless it is missing or not active."""
        parsed_id = coerce_id(user_id)
        user = None
        if parsed_id is not None:
            user = await self.user_repository.get_active(db=db, user_id=parsed_id)

        if user is None:
            self._logger.info("Ineligible user rejected", extra={"user_id": str(user_id)})
        raise_for_status(
            condition=user is None,
            exception=ResourceNotFound,
            detail="User not found or inactive",
            resource_type="User",
            resource_id=user_id,
        )
        return user


entity_guard = EntityGuardService()
