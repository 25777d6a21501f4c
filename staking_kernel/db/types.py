"""
Module: staking_kernel.db.types
Responsibility: Column types and size constants for staking quantities.
    Centralizes how token amounts, account identifiers and hashes are stored
    so that every model uses identical definitions.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - Token amounts are unbounded non-negative integers (the asset ledgers
      count base units).  They are stored as decimal digit strings so that
      values beyond 64 bits survive every backend unchanged.  NEVER use float.
    - Account identifiers are opaque strings.

Failure modes:
    - ValueError on binding a negative or non-integer amount.
"""

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

# Widest amount we persist: 2**256 - 1 has 78 decimal digits
TOKEN_AMOUNT_DIGITS = 78


class TokenAmount(TypeDecorator):
    """
    Non-negative integer token quantity stored as String(78).

    Guarantees:
        - process_bind_param: int -> decimal string on INSERT/UPDATE.
        - process_result_value: decimal string -> int on SELECT.
        - Round-trips any value up to 78 digits exactly on every backend.
    """

    impl = String(TOKEN_AMOUNT_DIGITS)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Token amounts must be int, got {type(value).__name__}")
        if value < 0:
            raise ValueError(f"Token amounts must be non-negative, got {value}")
        return str(value)

    def process_result_value(self, value, dialect):
        if value is not None:
            return int(value)
        return None


# Account identifier (address, username, service account)
ACCOUNT_ID_LENGTH = 128

# SHA-256 hash as hex string
HASH_LENGTH = 64
