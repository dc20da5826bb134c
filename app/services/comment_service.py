import logging
from typing import Any, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.exception_utils import raise_for_status
from app.core.exceptions import ResourceNotFound, ValidationError
from app.crud.comment_crud import comment_repository
from app.db.session import transaction
from app.models.comment_model import Comment
from app.models.user_model import User
from app.schemas.interaction_schema import (
    CommentCountResponse,
    CommentListResponse,
    CommentResponse,
    MessageResponse,
    PaginationMeta,
    ReplyListResponse,
    UserSummary,
)
from app.services.entity_guard_service import entity_guard, coerce_id
from app.utils.pagination import normalize, offset, paginate

logger = logging.getLogger(__name__)


class CommentService:
    """
    Threaded comments on reviews.

    Threads are one level deep: a comment is either top-level or a reply
    to a top-level comment of the same review.
    """

    def __init__(self):
        self.comment_repository = comment_repository
        self.entity_guard = entity_guard
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # ======= CREATE =======
    async def add_comment(
        self,
        db: AsyncSession,
        *,
        review_id: Any,
        user_id: Any,
        comment: Optional[str],
        parent_comment_id: Any = None,
    ) -> CommentResponse:
        """Comment on a review, or reply to one of its top-level comments."""
        # Input is checked before any lookup is made
        text = self._clean_text(comment)

        async with transaction(db):
            review = await self.entity_guard.ensure_review_exists(db, review_id=review_id)
            user = await self.entity_guard.ensure_user_eligible(db, user_id=user_id)

            parent_id = None
            if parent_comment_id not in (None, ""):
                parent = await self._get_parent_in_review(
                    db, parent_comment_id=parent_comment_id, review_id=review.id
                )
                parent_id = parent.id

            new_comment = await self.comment_repository.create(
                db,
                obj_in=Comment(
                    review_id=review.id,
                    user_id=user.id,
                    comment=text,
                    parent_comment_id=parent_id,
                ),
            )

        self._logger.info(
            "Comment added",
            extra={
                "comment_id": str(new_comment.id),
                "review_id": str(review.id),
                "parent_comment_id": str(parent_id) if parent_id else None,
            },
        )
        return self._to_response(new_comment, author=user)

    async def reply_to_comment(
        self,
        db: AsyncSession,
        *,
        comment_id: Any,
        user_id: Any,
        comment: Optional[str],
    ) -> CommentResponse:
        """Reply to a top-level comment; the review is taken from the parent."""
        text = self._clean_text(comment)

        async with transaction(db):
            parent = await self._get_comment(db, comment_id, "Parent comment not found")
            self._ensure_top_level(parent)
            review = await self.entity_guard.ensure_review_exists(
                db, review_id=parent.review_id
            )
            user = await self.entity_guard.ensure_user_eligible(db, user_id=user_id)

            reply = await self.comment_repository.create(
                db,
                obj_in=Comment(
                    review_id=review.id,
                    user_id=user.id,
                    comment=text,
                    parent_comment_id=parent.id,
                ),
            )

        self._logger.info(
            "Reply added",
            extra={"comment_id": str(reply.id), "parent_comment_id": str(parent.id)},
        )
        return self._to_response(reply, author=user)

    # ======= READ =======
    async def get_review_comments(
        self,
        db: AsyncSession,
        *,
        review_id: Any,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> CommentListResponse:
        """
        One page of top-level comments, oldest first, each carrying all of
        its replies. `total` counts top-level comments only.
        """
        page, limit = normalize(page, limit)
        review = await self.entity_guard.ensure_review_exists(db, review_id=review_id)

        comments, total = await self.comment_repository.get_top_level_for_review(
            db, review_id=review.id, skip=offset(page, limit), limit=limit
        )
        replies_by_parent = await self.comment_repository.get_replies_for_parents(
            db, parent_ids=[c.id for c in comments]
        )

        return CommentListResponse(
            comments=[
                self._to_response(c, replies=replies_by_parent.get(c.id, []))
                for c in comments
            ],
            pagination=PaginationMeta(**paginate(page, limit, total)),
        )

    async def get_comment_replies(
        self,
        db: AsyncSession,
        *,
        comment_id: Any,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> ReplyListResponse:
        page, limit = normalize(page, limit)
        parent = await self._get_comment(db, comment_id, "Parent comment not found")

        replies, total = await self.comment_repository.get_replies(
            db, parent_id=parent.id, skip=offset(page, limit), limit=limit
        )
        return ReplyListResponse(
            replies=[self._to_response(r) for r in replies],
            pagination=PaginationMeta(**paginate(page, limit, total)),
        )

    async def get_review_comment_count(
        self, db: AsyncSession, *, review_id: Any
    ) -> CommentCountResponse:
        """Number of comments on a review, replies included."""
        review = await self.entity_guard.ensure_review_exists(db, review_id=review_id)
        count = await self.comment_repository.count_for_review(db, review_id=review.id)
        return CommentCountResponse(comment_count=count)

    # ======= DELETE =======
    async def delete_comment(
        self, db: AsyncSession, *, comment_id: Any, user_id: Any
    ) -> MessageResponse:
        """Delete the caller's own comment and every reply under it."""
        not_found = "Comment not found or you are not authorized to delete it"

        async with transaction(db):
            target = await self._get_comment(db, comment_id, not_found)
            raise_for_status(
                condition=target.user_id != coerce_id(user_id),
                exception=ResourceNotFound,
                detail=not_found,
            )
            removed = await self.comment_repository.delete(db, obj_id=target.id)

        self._logger.warning(
            f"Comment {comment_id} deleted by {user_id}",
            extra={"rows_removed": removed},
        )
        return MessageResponse(message="Comment and replies deleted successfully")

    # Helper Functions
    @staticmethod
    def _clean_text(comment: Optional[str]) -> str:
        text = (comment or "").strip()
        if not text:
            raise ValidationError("Comment text is required")
        if len(text) > settings.COMMENT_MAX_LENGTH:
            raise ValidationError(
                f"Comment must be at most {settings.COMMENT_MAX_LENGTH} characters"
            )
        return text

    async def _get_comment(self, db: AsyncSession, comment_id: Any, detail: str) -> Comment:
        parsed_id = coerce_id(comment_id)
        found = None
        if parsed_id is not None:
            found = await self.comment_repository.get(db, obj_id=parsed_id)
        raise_for_status(condition=found is None, exception=ResourceNotFound, detail=detail)
        return found

    async def _get_parent_in_review(
        self, db: AsyncSession, *, parent_comment_id: Any, review_id
    ) -> Comment:
        """The parent must exist, sit on the same review and be top-level."""
        parsed_id = coerce_id(parent_comment_id)
        parent = None
        if parsed_id is not None:
            parent = await self.comment_repository.get_in_review(
                db, comment_id=parsed_id, review_id=review_id
            )
        raise_for_status(
            condition=parent is None,
            exception=ResourceNotFound,
            detail="Parent comment not found",
        )
        self._ensure_top_level(parent)
        return parent

    @staticmethod
    def _ensure_top_level(parent: Comment) -> None:
        if parent.is_reply:
            raise ValidationError("Replies can only be added to top-level comments")

    def _to_response(
        self,
        comment: Comment,
        *,
        author: Optional[User] = None,
        replies: Optional[List[Comment]] = None,
    ) -> CommentResponse:
        author = author if author is not None else comment.user
        return CommentResponse(
            id=comment.id,
            review_id=comment.review_id,
            user_id=comment.user_id,
            comment=comment.comment,
            parent_comment_id=comment.parent_comment_id,
            created_at=comment.created_at,
            user=UserSummary.model_validate(author) if author is not None else None,
            replies=[self._to_response(r) for r in replies or []],
        )


comment_service = CommentService()
