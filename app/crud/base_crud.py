from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from sqlmodel.ext.asyncio.session import AsyncSession

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing consistent interface for database operations.

    Repositories flush but never commit: the calling service owns the
    transaction (see app.db.session.transaction).
    """

    def __init__(self, model: type[T]):
        self.model = model

    @abstractmethod
    async def get(self, db: AsyncSession, *, obj_id: Any) -> Optional[T]:
        """Get entity by its primary key."""
        pass

    async def create(self, db: AsyncSession, *, obj_in: T) -> T:
        """Create a new entity."""
        raise NotImplementedError(f"{self.__class__.__name__} is read-only")

    async def delete(self, db: AsyncSession, *, obj_id: Any) -> int:
        """Delete an entity by its primary key, returning the number of rows removed."""
        raise NotImplementedError(f"{self.__class__.__name__} is read-only")
