import uuid
from typing import Optional
from datetime import datetime

from sqlmodel import (
    SQLModel,
    Field,
    Column,
    String,
    DateTime,
    Text,
)
from sqlalchemy import Index, func

from app.models.user_model import Status, utcnow


class Review(SQLModel, table=True):
    """
    A posted review. Authored and moderated elsewhere; likes and comments
    hang off it and are removed with it (ON DELETE CASCADE).
    """

    __tablename__ = "reviews"
    __table_args__ = (
        Index("idx_review_user_id", "user_id"),
        Index("idx_review_created_at", "created_at"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4, primary_key=True, description="Review ID"
    )
    user_id: uuid.UUID = Field(
        foreign_key="users.id", nullable=False, description="ID of the author"
    )
    title: Optional[str] = Field(
        default=None, sa_column=Column(String(200), nullable=True)
    )
    caption: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    status: Status = Field(default=Status.ACTIVE, description="Review status")

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
        description="Review creation timestamp",
    )

    @property
    def is_deleted(self) -> bool:
        return self.status == Status.DELETED

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, user_id={self.user_id}, status={self.status.value})>"
