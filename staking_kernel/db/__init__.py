"""Database layer - engine, base classes, column types."""

from staking_kernel.db.base import UUID, Base, UUIDString
from staking_kernel.db.engine import create_tables, get_engine, get_session, session_scope
from staking_kernel.db.types import TokenAmount

__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "Base",
    "UUIDString",
    "UUID",
    "TokenAmount",
]
