"""
Deterministic hashing utilities.

All hashing in the staking kernel must be deterministic and reproducible.
This module provides the canonical hashing functions for staking records
and configuration checksums.
"""

import hashlib
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID


def _json_serializer(obj: Any) -> Any:
    """
    Custom JSON serializer for types not natively supported.

    Raises:
        TypeError: If object type is not supported.
    """
    if isinstance(obj, Decimal):
        return str(obj.normalize())
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, bytes):
        return obj.hex()

    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonicalize_json(data: dict | list | Any) -> str:
    """
    Convert data to canonical JSON string.

    Keys are sorted, there is no whitespace, and special types are
    serialized consistently.
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        default=_json_serializer,
    )


def hash_payload(payload: dict) -> str:
    """Hex-encoded SHA-256 of the canonical JSON form of ``payload``."""
    canonical = canonicalize_json(payload)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def hash_staking_record(
    action: str,
    deposit_id: int | None,
    actor: str,
    payload_hash: str,
    prev_hash: str | None,
) -> str:
    """
    Compute the chain hash of one staking record.

    hash = SHA-256(action | deposit_id | actor | payload_hash | prev_hash)

    A missing deposit id or previous hash is encoded as an empty field, so
    the genesis record and term table records hash deterministically.
    """
    parts = [
        action,
        "" if deposit_id is None else str(deposit_id),
        actor,
        payload_hash,
        prev_hash or "",
    ]
    return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()
