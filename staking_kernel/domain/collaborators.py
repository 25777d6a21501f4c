"""
External collaborator ports consumed by the staking kernel.

Contract:
    FungibleAssetLedger is the custody boundary.  The kernel never keeps
    token balances itself; it asks the ledger and trusts its boolean answer.
    A ``False`` return and a raised exception from ``transfer_from`` are
    treated identically: the whole staking operation aborts.

    AuthorizationGate answers "is this account an administrator" before any
    term table mutation.

Architecture: staking_kernel/domain.  Protocols only, no I/O.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FungibleAssetLedger(Protocol):
    """Balance lookup and transfer for one fungible asset."""

    def balance_of(self, account: str) -> int:
        """Spendable balance of ``account`` in base units."""
        ...

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool:
        """Move ``amount`` from ``sender`` to ``recipient``; True on success."""
        ...


@runtime_checkable
class AuthorizationGate(Protocol):
    """Administrator predicate for term table changes."""

    def is_administrator(self, account: str) -> bool:
        ...
