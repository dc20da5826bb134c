import logging
import uuid
from collections import defaultdict
from typing import Optional, List, Dict, Tuple, Sequence

from sqlalchemy.orm import selectinload
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select, func, delete

from app.core.exception_utils import handle_exceptions
from app.core.exceptions import InternalServerError
from app.crud.base_crud import BaseRepository
from app.models.comment_model import Comment


logger = logging.getLogger(__name__)

DB_ERROR_MESSAGE = "An unexpected database error occurred."


class CommentRepository(BaseRepository[Comment]):
    """Repository for comments and their one-level replies."""

    def __init__(self):
        super().__init__(Comment)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _ordered(self, statement):
        # created_at ties are broken by id so page windows are stable
        return statement.order_by(self.model.created_at.asc(), self.model.id.asc())

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get(self, db: AsyncSession, *, obj_id: uuid.UUID) -> Optional[Comment]:
        """Get a comment by its id"""
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get_in_review(
        self, db: AsyncSession, *, comment_id: uuid.UUID, review_id: uuid.UUID
    ) -> Optional[Comment]:
        """Get a comment only if it belongs to the given review."""
        statement = select(self.model).where(
            self.model.id == comment_id, self.model.review_id == review_id
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def create(self, db: AsyncSession, *, obj_in: Comment) -> Comment:
        """Create a comment or reply"""
        db.add(obj_in)
        await db.flush()
        await db.refresh(obj_in)
        self._logger.info(
            "Comment created",
            extra={
                "comment_id": str(obj_in.id),
                "review_id": str(obj_in.review_id),
                "is_reply": obj_in.parent_comment_id is not None,
            },
        )
        return obj_in

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get_top_level_for_review(
        self, db: AsyncSession, *, review_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> Tuple[List[Comment], int]:
        """One page of top-level comments plus the total number of them."""
        query = select(self.model).where(
            self.model.review_id == review_id,
            self.model.parent_comment_id.is_(None),
        )

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar_one()

        paginated_query = (
            self._ordered(query)
            .offset(skip)
            .limit(limit)
            .options(selectinload(self.model.user))
        )
        result = await db.execute(paginated_query)
        return list(result.scalars().all()), total

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get_replies_for_parents(
        self, db: AsyncSession, *, parent_ids: Sequence[uuid.UUID]
    ) -> Dict[uuid.UUID, List[Comment]]:
        """All replies of the given comments, grouped by parent, oldest first."""
        if not parent_ids:
            return {}

        statement = self._ordered(
            select(self.model)
            .where(self.model.parent_comment_id.in_(list(parent_ids)))
            .options(selectinload(self.model.user))
        )
        result = await db.execute(statement)

        grouped: Dict[uuid.UUID, List[Comment]] = defaultdict(list)
        for reply in result.scalars().all():
            grouped[reply.parent_comment_id].append(reply)
        return dict(grouped)

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def get_replies(
        self, db: AsyncSession, *, parent_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> Tuple[List[Comment], int]:
        """One page of replies to a single comment."""
        query = select(self.model).where(self.model.parent_comment_id == parent_id)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar_one()

        paginated_query = (
            self._ordered(query)
            .offset(skip)
            .limit(limit)
            .options(selectinload(self.model.user))
        )
        result = await db.execute(paginated_query)
        return list(result.scalars().all()), total

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def count_for_review(self, db: AsyncSession, *, review_id: uuid.UUID) -> int:
        """Count every comment on a review, replies included."""
        statement = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.review_id == review_id)
        )
        return (await db.execute(statement)).scalar_one()

    @handle_exceptions(default_exception=InternalServerError, message=DB_ERROR_MESSAGE)
    async def delete(self, db: AsyncSession, *, obj_id: uuid.UUID) -> int:
        """
        Delete a comment together with its replies; returns the rows removed.

        Replies go first so the FK cascade never removes rows behind the count.
        """
        replies = await db.execute(
            delete(self.model).where(self.model.parent_comment_id == obj_id)
        )
        parent = await db.execute(delete(self.model).where(self.model.id == obj_id))
        removed = replies.rowcount + parent.rowcount
        self._logger.info(f"Comment hard deleted: {obj_id}", extra={"rows": removed})
        return removed


comment_repository = CommentRepository()
