"""Base class for the SQL repositories behind each theme module."""

from __future__ import annotations

from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")
T = TypeVar("T")


class AsyncRepository(Generic[ModelT]):
    """Wraps one session; the calling service owns the transaction boundary.

    Repositories never commit. A service opens ``session_factory.begin()`` and
    every write made through the repositories lands or rolls back together.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def add(self, instance: ModelT) -> ModelT:
        """Add and flush, so generated keys and unique conflicts surface now."""
        self.session.add(instance)
        await self.session.flush()
        return instance

    def stage(self, instance: T) -> T:
        """Add without flushing; rows are written on the caller's next flush."""
        self.session.add(instance)
        return instance
