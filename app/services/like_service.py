import logging
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.exceptions import ResourceAlreadyExists
from app.crud.like_crud import like_repository
from app.db.session import transaction
from app.models.like_model import Like
from app.schemas.interaction_schema import (
    LikeCountResponse,
    LikeListResponse,
    LikeResponse,
    LikeStatusResponse,
    LikeToggleResponse,
    PaginationMeta,
)
from app.services.entity_guard_service import entity_guard, coerce_id
from app.utils.pagination import normalize, offset, paginate

logger = logging.getLogger(__name__)

LIKED_MESSAGE = "Review liked successfully"
UNLIKED_MESSAGE = "Review unliked successfully"


class LikeService:
    """Toggled likes on reviews."""

    def __init__(self):
        self.like_repository = like_repository
        self.entity_guard = entity_guard
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def toggle_like(
        self, db: AsyncSession, *, review_id: Any, user_id: Any
    ) -> LikeToggleResponse:
        """
        Flip the user's like on a review.

        The existing like is removed with a single conditional delete; if
        there was none, one is inserted. Both happen in one transaction
        together with the existence checks. When the insert loses to a
        concurrent toggle (uniqueness violation), the call is retried as a
        delete, so two racing toggles leave the pair as it started.
        """
        # Plain ids survive the rollback below; ORM instances are expired by it
        review_pk = user_pk = None
        try:
            async with transaction(db):
                review = await self.entity_guard.ensure_review_exists(
                    db, review_id=review_id
                )
                user = await self.entity_guard.ensure_user_eligible(
                    db, user_id=user_id
                )
                review_pk, user_pk = review.id, user.id

                removed = await self.like_repository.delete_by_user_and_review(
                    db, user_id=user_pk, review_id=review_pk
                )
                if not removed:
                    await self.like_repository.create(
                        db, obj_in=Like(user_id=user_pk, review_id=review_pk)
                    )
        except ResourceAlreadyExists:
            self._logger.warning(
                "Concurrent like detected, retrying toggle as unlike",
                extra={"review_id": str(review_pk), "user_id": str(user_pk)},
            )
            async with transaction(db):
                await self.like_repository.delete_by_user_and_review(
                    db, user_id=user_pk, review_id=review_pk
                )
            removed = True

        liked = not removed
        self._logger.info(
            "Like toggled",
            extra={"review_id": str(review_pk), "user_id": str(user_pk), "liked": liked},
        )
        return LikeToggleResponse(
            liked=liked, message=LIKED_MESSAGE if liked else UNLIKED_MESSAGE
        )

    async def get_review_likes(
        self,
        db: AsyncSession,
        *,
        review_id: Any,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> LikeListResponse:
        """Likes on a review, newest first, each with its user."""
        page, limit = normalize(page, limit)
        review = await self.entity_guard.ensure_review_exists(db, review_id=review_id)

        likes, total = await self.like_repository.get_many_for_review(
            db, review_id=review.id, skip=offset(page, limit), limit=limit
        )

        return LikeListResponse(
            likes=[LikeResponse.model_validate(like) for like in likes],
            pagination=PaginationMeta(**paginate(page, limit, total)),
        )

    async def check_user_like(
        self, db: AsyncSession, *, review_id: Any, user_id: Any
    ) -> LikeStatusResponse:
        """Whether the user currently likes the review."""
        parsed_review_id, parsed_user_id = coerce_id(review_id), coerce_id(user_id)
        if parsed_review_id is None or parsed_user_id is None:
            return LikeStatusResponse(has_liked=False)

        like = await self.like_repository.get_by_user_and_review(
            db, user_id=parsed_user_id, review_id=parsed_review_id
        )
        return LikeStatusResponse(
            has_liked=like is not None, liked_at=like.created_at if like else None
        )

    async def get_review_like_count(
        self, db: AsyncSession, *, review_id: Any
    ) -> LikeCountResponse:
        review = await self.entity_guard.ensure_review_exists(db, review_id=review_id)
        like_count = await self.like_repository.count_for_review(db, review_id=review.id)
        return LikeCountResponse(like_count=like_count)


like_service = LikeService()
