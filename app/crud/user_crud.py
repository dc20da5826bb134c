import logging
import uuid
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select

from app.core.exception_utils import handle_exceptions
from app.core.exceptions import InternalServerError
from app.crud.base_crud import BaseRepository
from app.models.user_model import User, Status

logger = logging.getLogger(__name__)

DB_ERROR = InternalServerError(detail="An unexpected database error occurred.")


class UserRepository(BaseRepository[User]):
    """Read access to platform accounts."""

    def __init__(self):
        super().__init__(User)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @handle_exceptions(default_exception=DB_ERROR)
    async def get(self, db: AsyncSession, *, obj_id: uuid.UUID) -> Optional[User]:
        """Retrieves a user by their ID."""
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(default_exception=DB_ERROR)
    async def get_active(self, db: AsyncSession, *, user_id: uuid.UUID) -> Optional[User]:
        """Retrieves a user only when the account is active."""
        statement = select(self.model).where(
            self.model.id == user_id, self.model.status == Status.ACTIVE
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()


user_repository = UserRepository()
