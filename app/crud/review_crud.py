import logging
import uuid
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select

from app.core.exception_utils import handle_exceptions
from app.core.exceptions import InternalServerError
from app.crud.base_crud import BaseRepository
from app.models.review_model import Review
from app.models.user_model import Status


logger = logging.getLogger(__name__)

DB_ERROR_MESSAGE = "An unexpected database error occurred."


class ReviewRepository(BaseRepository[Review]):
    """Read access to reviews. Reviews are written by the review service."""

    def __init__(self):
        super().__init__(Review)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get(self, db: AsyncSession, *, obj_id: uuid.UUID) -> Optional[Review]:
        """Get a review by its id, whatever its status."""
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get_active(
        self, db: AsyncSession, *, review_id: uuid.UUID
    ) -> Optional[Review]:
        """Get a review that has not been deleted."""
        statement = select(self.model).where(
            self.model.id == review_id, self.model.status != Status.DELETED
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()


review_repository = ReviewRepository()
