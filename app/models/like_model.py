import uuid
from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlmodel import SQLModel, Field, Relationship, Column, DateTime
from sqlalchemy import UniqueConstraint, Index, func

from app.models.user_model import utcnow

if TYPE_CHECKING:
    from .user_model import User

LIKE_PAIR_CONSTRAINT = "uq_like_user_review"


class Like(SQLModel, table=True):
    __tablename__ = "likes"
    __table_args__ = (
        # One like per user per review; the toggle relies on this
        UniqueConstraint("user_id", "review_id", name=LIKE_PAIR_CONSTRAINT),
        Index("idx_like_review_id", "review_id"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", nullable=False
    )
    review_id: uuid.UUID = Field(
        foreign_key="reviews.id", ondelete="CASCADE", nullable=False
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
    )

    user: Optional["User"] = Relationship()

    def __repr__(self) -> str:
        return f"<Like(user_id={self.user_id}, review_id={self.review_id})>"
