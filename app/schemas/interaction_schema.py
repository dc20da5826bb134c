# app/schemas/interaction_schema.py
"""
Interaction schemas for request/response models.

This module defines the Pydantic schemas for likes and threaded comments
on reviews, together with the shared pagination envelope.
"""

import uuid
from typing import Any, Optional, List
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.models.user_model import UserType


# ----- Shared -----
class PaginationMeta(BaseModel):
    """Pagination envelope returned by every listing."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(
        ..., ge=0, alias="totalPages", description="Total number of pages"
    )


class UserSummary(BaseModel):
    """Minimal user projection attached to likes and comments."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    username: str
    name: Optional[str] = None
    user_type: UserType = Field(..., alias="userType")
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")


class MessageResponse(BaseModel):
    message: str


# ----- Likes -----
class LikeToggleResponse(BaseModel):
    """Result of flipping a like."""

    liked: bool = Field(..., description="Whether the review is liked after the call")
    message: str


class LikeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    user_id: uuid.UUID = Field(..., alias="userId")
    review_id: uuid.UUID = Field(..., alias="reviewId")
    created_at: datetime = Field(..., alias="createdAt")
    user: Optional[UserSummary] = None


class LikeListResponse(BaseModel):
    likes: List[LikeResponse]
    pagination: PaginationMeta


class LikeStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_liked: bool = Field(..., alias="hasLiked")
    liked_at: Optional[datetime] = Field(default=None, alias="likedAt")


class LikeCountResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    like_count: int = Field(..., ge=0, alias="likeCount")


# ----- Comments -----
class CommentCreate(BaseModel):
    """
    Body for commenting on a review, optionally as a reply.

    Both fields are loosely typed: the service rejects blank text before
    anything else, and an unparseable parent id is reported as not found.
    """

    comment: Optional[str] = Field(
        default=None,
        description="Comment text",
        examples=["Great review, thanks for sharing!"],
    )
    parent_comment_id: Any = Field(
        default=None,
        alias="parentCommentId",
        description="Top-level comment this replies to",
    )

    model_config = ConfigDict(populate_by_name=True)


class ReplyCreate(BaseModel):
    comment: Optional[str] = Field(default=None, description="Reply text")


class CommentResponse(BaseModel):
    """A comment with its author and, for top-level comments, its replies."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    review_id: uuid.UUID = Field(..., alias="reviewId")
    user_id: uuid.UUID = Field(..., alias="userId")
    comment: str
    parent_comment_id: Optional[uuid.UUID] = Field(default=None, alias="parentCommentId")
    created_at: datetime = Field(..., alias="createdAt")
    user: Optional[UserSummary] = None
    replies: List["CommentResponse"] = Field(default_factory=list)

    @field_validator("replies", mode="before")
    @classmethod
    def default_replies(cls, v):
        return v or []


class CommentListResponse(BaseModel):
    comments: List[CommentResponse]
    pagination: PaginationMeta


class ReplyListResponse(BaseModel):
    replies: List[CommentResponse]
    pagination: PaginationMeta


class CommentCountResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    comment_count: int = Field(..., ge=0, alias="commentCount")


CommentResponse.model_rebuild()


__all__ = [
    "PaginationMeta",
    "UserSummary",
    "MessageResponse",
    "LikeToggleResponse",
    "LikeResponse",
    "LikeListResponse",
    "LikeStatusResponse",
    "LikeCountResponse",
    "CommentCreate",
    "ReplyCreate",
    "CommentResponse",
    "CommentListResponse",
    "ReplyListResponse",
    "CommentCountResponse",
]
