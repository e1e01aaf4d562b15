"""Database layer - session management, base models, and mixins."""

from remiwire.core.database.base import ActorMixin, Base, TimestampMixin, UUIDMixin
from remiwire.core.database.session import (
    async_engine,
    async_session_factory,
    get_db,
)


__all__ = [
    "ActorMixin",
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "async_engine",
    "async_session_factory",
    "get_db",
]
