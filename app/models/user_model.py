import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional

from sqlmodel import (
    SQLModel,
    Field,
    Column,
    String,
    DateTime,
)
from sqlalchemy import func


# Using PyEnum to avoid conflict with SQLModel's Enum
class UserType(str, PyEnum):
    INDIVIDUAL = "INDIVIDUAL"
    BUSINESS = "BUSINESS"
    ADMIN = "ADMIN"


class Status(str, PyEnum):
    """Lifecycle status shared by users, reviews and comments."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    DELETED = "DELETED"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserBase(SQLModel):
    username: str = Field(
        min_length=3,
        max_length=50,
        description="User's unique handle",
        schema_extra={"example": "jane_doe"},
    )
    name: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Display name (person or business name)",
        schema_extra={"example": "Jane's Bakery"},
    )
    user_type: UserType = Field(
        default=UserType.INDIVIDUAL, description="Individual, business or admin"
    )
    status: Status = Field(default=Status.ACTIVE, description="Account status")
    logo_url: Optional[str] = Field(
        default=None, description="Avatar or business logo URL"
    )


class User(UserBase, table=True):
    """
    Platform account. Owned by the accounts service; this service only reads it.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4, primary_key=True, description="Unique Identifier"
    )
    username: str = Field(
        sa_column=Column(String(50), nullable=False, index=True, unique=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
        description="Account creation timestamp",
    )

    @property
    def is_eligible(self) -> bool:
        """Only active accounts may like or comment."""
        return self.status == Status.ACTIVE

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', type='{self.user_type.value}')>"
