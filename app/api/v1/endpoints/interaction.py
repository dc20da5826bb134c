import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.db.session import get_session
from app.utils.deps import (
    get_current_user_id,
    get_pagination_params,
    PaginationParams,
)
from app.schemas.interaction_schema import (
    CommentCountResponse,
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikeCountResponse,
    LikeListResponse,
    LikeStatusResponse,
    LikeToggleResponse,
    MessageResponse,
    ReplyCreate,
    ReplyListResponse,
)
from app.services.comment_service import comment_service
from app.services.like_service import like_service


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Review Interactions"],
    prefix=f"{settings.API_V1_STR}/reviews",
)


# ======= COMMENT THREADS (by comment id) =======
@router.post(
    "/comments/{comment_id}/replies",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to a comment",
    description="Reply to a top-level comment. Replies cannot be nested further.",
)
async def reply_to_comment(
    *,
    comment_id: str,
    reply_data: ReplyCreate,
    db: AsyncSession = Depends(get_session),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    return await comment_service.reply_to_comment(
        db, comment_id=comment_id, user_id=current_user_id, comment=reply_data.comment
    )


@router.get(
    "/comments/{comment_id}/replies",
    response_model=ReplyListResponse,
    status_code=status.HTTP_200_OK,
    summary="Get comment replies",
)
async def get_comment_replies(
    *,
    comment_id: str,
    db: AsyncSession = Depends(get_session),
    pagination: PaginationParams = Depends(get_pagination_params),
):
    return await comment_service.get_comment_replies(
        db, comment_id=comment_id, page=pagination.page, limit=pagination.limit
    )


@router.delete(
    "/comments/{comment_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete comment",
    description="Delete your own comment together with its replies.",
)
async def delete_comment(
    *,
    comment_id: str,
    db: AsyncSession = Depends(get_session),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    result = await comment_service.delete_comment(
        db, comment_id=comment_id, user_id=current_user_id
    )
    logger.info(
        "Comment deleted",
        extra={"comment_id": comment_id, "user_id": str(current_user_id)},
    )
    return result


# ======= LIKES =======
@router.post(
    "/{review_id}/like",
    response_model=LikeToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Like or unlike a review",
    description="Flips the caller's like on the review.",
)
async def toggle_like(
    *,
    review_id: str,
    db: AsyncSession = Depends(get_session),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    return await like_service.toggle_like(db, review_id=review_id, user_id=current_user_id)


@router.get(
    "/{review_id}/likes",
    response_model=LikeListResponse,
    status_code=status.HTTP_200_OK,
    summary="Get review likes",
)
async def get_review_likes(
    *,
    review_id: str,
    db: AsyncSession = Depends(get_session),
    pagination: PaginationParams = Depends(get_pagination_params),
):
    return await like_service.get_review_likes(
        db, review_id=review_id, page=pagination.page, limit=pagination.limit
    )


@router.get(
    "/{review_id}/likes/count",
    response_model=LikeCountResponse,
    status_code=status.HTTP_200_OK,
    summary="Count review likes",
)
async def get_review_like_count(
    *,
    review_id: str,
    db: AsyncSession = Depends(get_session),
):
    return await like_service.get_review_like_count(db, review_id=review_id)


@router.get(
    "/{review_id}/like/status",
    response_model=LikeStatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Check whether you liked a review",
)
async def check_user_like(
    *,
    review_id: str,
    db: AsyncSession = Depends(get_session),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    return await like_service.check_user_like(
        db, review_id=review_id, user_id=current_user_id
    )


# ======= COMMENTS (by review id) =======
@router.post(
    "/{review_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a review",
    description="Add a comment, or a reply when parentCommentId is given.",
)
async def add_comment(
    *,
    review_id: str,
    comment_data: CommentCreate,
    db: AsyncSession = Depends(get_session),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
):
    """
    Add a comment to a review.

    - Comment text must not be blank
    - parentCommentId must be a top-level comment of the same review
    """
    return await comment_service.add_comment(
        db,
        review_id=review_id,
        user_id=current_user_id,
        comment=comment_data.comment,
        parent_comment_id=comment_data.parent_comment_id,
    )


@router.get(
    "/{review_id}/comments",
    response_model=CommentListResponse,
    status_code=status.HTTP_200_OK,
    summary="Get review comments",
    description="Top-level comments, oldest first, each with all of its replies.",
)
async def get_review_comments(
    *,
    review_id: str,
    db: AsyncSession = Depends(get_session),
    pagination: PaginationParams = Depends(get_pagination_params),
):
    return await comment_service.get_review_comments(
        db, review_id=review_id, page=pagination.page, limit=pagination.limit
    )


@router.get(
    "/{review_id}/comments/count",
    response_model=CommentCountResponse,
    status_code=status.HTTP_200_OK,
    summary="Count review comments",
    description="Counts all comments on the review, replies included.",
)
async def get_review_comment_count(
    *,
    review_id: str,
    db: AsyncSession = Depends(get_session),
):
    return await comment_service.get_review_comment_count(db, review_id=review_id)
