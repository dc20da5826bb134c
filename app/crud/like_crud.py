import logging
import uuid
from typing import Optional, List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select, func, delete

from app.core.exception_utils import handle_exceptions
from app.core.exceptions import InternalServerError, ResourceAlreadyExists
from app.crud.base_crud import BaseRepository
from app.models.like_model import Like, LIKE_PAIR_CONSTRAINT


logger = logging.getLogger(__name__)

DB_ERROR_MESSAGE = "An unexpected database error occurred."


def _is_duplicate_like(exc: IntegrityError) -> bool:
    # PostgreSQL reports the constraint name, SQLite the constrained columns
    message = str(exc.orig)
    return (
        LIKE_PAIR_CONSTRAINT in message
        or "UNIQUE constraint failed: likes.user_id, likes.review_id" in message
    )


class LikeRepository(BaseRepository[Like]):

    def __init__(self):
        super().__init__(Like)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get(self, db: AsyncSession, *, obj_id: uuid.UUID) -> Optional[Like]:
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get_by_user_and_review(
        self, db: AsyncSession, *, user_id: uuid.UUID, review_id: uuid.UUID
    ) -> Optional[Like]:
        """Gets the like a user left on a review (unique constraint)."""
        statement = select(self.model).where(
            self.model.user_id == user_id, self.model.review_id == review_id
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def create(self, db: AsyncSession, *, obj_in: Like) -> Like:
        """
        Inserts a like. A violation of the (user, review) uniqueness means
        another request liked the same review for the same user first; any
        other integrity failure (e.g. the review vanished) is not a race.
        """
        db.add(obj_in)
        try:
            await db.flush()
        except IntegrityError as exc:
            if not _is_duplicate_like(exc):
                raise
            raise ResourceAlreadyExists(
                "Review is already liked by this user.", resource_type="Like"
            ) from exc
        await db.refresh(obj_in)
        self._logger.info(
            "Like created",
            extra={"like_id": str(obj_in.id), "review_id": str(obj_in.review_id)},
        )
        return obj_in

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def delete(self, db: AsyncSession, *, obj_id: uuid.UUID) -> int:
        """Deletes a like by its own id."""
        statement = delete(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.rowcount

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def delete_by_user_and_review(
        self, db: AsyncSession, *, user_id: uuid.UUID, review_id: uuid.UUID
    ) -> int:
        """
        Conditional delete of the (user, review) like in a single statement.
        Returns the number of rows removed, 0 or 1.
        """
        statement = delete(self.model).where(
            self.model.user_id == user_id, self.model.review_id == review_id
        )
        result = await db.execute(statement)
        if result.rowcount:
            self._logger.info(
                "Like removed",
                extra={"user_id": str(user_id), "review_id": str(review_id)},
            )
        return result.rowcount

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get_many_for_review(
        self, db: AsyncSession, *, review_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> Tuple[List[Like], int]:
        """Likes on a review, newest first, with their users loaded."""
        total = await self.count_for_review(db, review_id=review_id)

        statement = (
            select(self.model)
            .where(self.model.review_id == review_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .offset(skip)
            .limit(limit)
            .options(selectinload(self.model.user))
        )
        result = await db.execute(statement)
        return list(result.scalars().all()), total

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def count_for_review(self, db: AsyncSession, *, review_id: uuid.UUID) -> int:
        statement = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.review_id == review_id)
        )
        return (await db.execute(statement)).scalar_one()


# Singleton instance
like_repository = LikeRepository()
