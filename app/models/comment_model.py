import uuid
from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlmodel import SQLModel, Field, Relationship, Column, DateTime, Text
from sqlalchemy import Index, func

from app.models.user_model import Status, utcnow

if TYPE_CHECKING:
    from .user_model import User


class Comment(SQLModel, table=True):
    """
    A comment on a review. Top-level when parent_comment_id is None,
    otherwise a reply to a top-level comment of the same review.
    """

    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comment_review_created_at", "review_id", "created_at"),
        Index("idx_comment_user_id", "user_id"),
        Index("idx_comment_parent_id", "parent_comment_id"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    review_id: uuid.UUID = Field(
        foreign_key="reviews.id", ondelete="CASCADE", nullable=False
    )
    user_id: uuid.UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", nullable=False
    )
    comment: str = Field(sa_column=Column(Text, nullable=False))
    parent_comment_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="comments.id", ondelete="CASCADE", nullable=True
    )
    status: Status = Field(default=Status.ACTIVE)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
    )

    user: Optional["User"] = Relationship()

    @property
    def is_reply(self) -> bool:
        return self.parent_comment_id is not None

    def __repr__(self) -> str:
        return (
            f"<Comment(id={self.id}, review_id={self.review_id}, "
            f"parent_comment_id={self.parent_comment_id})>"
        )
