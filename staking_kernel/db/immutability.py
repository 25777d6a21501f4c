"""
ORM-Level Immutability Enforcement.

===============================================================================
WHY THIS EXISTS
===============================================================================

A deposit is finalized exactly once and then stays on the ledger forever as
a historical record.  Emitted staking records and term table versions are
history from the moment they are written.  Service code already respects
these rules; this module makes SQLAlchemy refuse to flush anything that
breaks them, whatever code path produced the change.

    session.flush()
         |
         v
    [before_update event] --> _check_*() --> ImmutabilityViolationError
         |
    [before_delete event] --> _check_*() --> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if checks pass)

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity            | Rule
------------------|--------------------------------------------------------
Deposit           | Only amount/ended may change, only open -> ended,
                  | and amount must become 0 in that same flush.  Never
                  | deleted.
StakingRecord     | ALWAYS immutable, never deleted.
TermTableVersion  | ALWAYS immutable, never deleted.  New versions are rows.
"""

from sqlalchemy import event, inspect
from sqlalchemy.orm.attributes import get_history

from staking_kernel.exceptions import ImmutabilityViolationError
from staking_kernel.logging_config import get_logger

logger = get_logger("db.immutability")

_FINALIZATION_FIELDS = frozenset({"amount", "ended"})


def _blocked(entity_type: str, entity_id: str, operation: str, reason: str, **extra):
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": entity_id,
            "operation": operation,
            **extra,
        },
    )
    return ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=entity_id,
        reason=reason,
    )


def _check_deposit_update(mapper, connection, target):
    """
    Allow exactly one transition on a Deposit: open -> ended with amount -> 0.

    Logic:
        1. Any change outside amount/ended is blocked.
        2. ended may only go False -> True; it may never go back.
        3. amount may only change as part of that transition, and to 0.
    """
    insp = inspect(target)
    deposit_ref = str(target.deposit_id)

    for attr in insp.attrs:
        if attr.key in _FINALIZATION_FIELDS:
            continue
        if attr.history.has_changes():
            raise _blocked(
                "Deposit",
                deposit_ref,
                "UPDATE",
                f"Cannot modify field '{attr.key}' on a deposit",
                field=attr.key,
            )

    ended_history = get_history(target, "ended")
    amount_history = get_history(target, "amount")

    was_ended = (
        bool(ended_history.deleted[0])
        if ended_history.deleted
        else bool(target.ended) and not ended_history.added
    )
    if was_ended:
        raise _blocked(
            "Deposit",
            deposit_ref,
            "UPDATE",
            "Finalized deposits cannot be modified",
        )

    finalizing = bool(ended_history.added) and bool(target.ended)
    if amount_history.has_changes() and not (finalizing and target.amount == 0):
        raise _blocked(
            "Deposit",
            deposit_ref,
            "UPDATE",
            "Deposit amount may only be zeroed during finalization",
            field="amount",
        )


def _check_deposit_delete(mapper, connection, target):
    raise _blocked(
        "Deposit",
        str(target.deposit_id),
        "DELETE",
        "Deposits are permanent records and cannot be deleted",
    )


def _check_record_update(mapper, connection, target):
    raise _blocked(
        "StakingRecord",
        str(target.seq),
        "UPDATE",
        "Staking records are immutable and cannot be modified",
    )


def _check_record_delete(mapper, connection, target):
    raise _blocked(
        "StakingRecord",
        str(target.seq),
        "DELETE",
        "Staking records cannot be deleted",
    )


def _check_term_version_update(mapper, connection, target):
    raise _blocked(
        "TermTableVersion",
        str(target.version),
        "UPDATE",
        "Term table versions are immutable; write a new version instead",
    )


def _check_term_version_delete(mapper, connection, target):
    raise _blocked(
        "TermTableVersion",
        str(target.version),
        "DELETE",
        "Term table versions cannot be deleted",
    )


def _listeners():
    from staking_kernel.models.deposit import Deposit
    from staking_kernel.models.staking_record import StakingRecord
    from staking_kernel.models.term_table import TermTableVersion

    return (
        (Deposit, "before_update", _check_deposit_update),
        (Deposit, "before_delete", _check_deposit_delete),
        (StakingRecord, "before_update", _check_record_update),
        (StakingRecord, "before_delete", _check_record_delete),
        (TermTableVersion, "before_update", _check_term_version_update),
        (TermTableVersion, "before_delete", _check_term_version_delete),
    )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Call this after models are imported and before any database operation.
    Registering twice is a no-op.
    """
    for target, name, fn in _listeners():
        if not event.contains(target, name, fn):
            event.listen(target, name, fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests that deliberately tamper with rows to
    verify detection (e.g. hash chain validation).
    """
    for target, name, fn in _listeners():
        if event.contains(target, name, fn):
            event.remove(target, name, fn)
