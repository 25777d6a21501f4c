"""
Immutable DTOs returned by staking services and selectors.

Services and selectors never hand ORM instances to callers; they convert
to these frozen dataclasses first.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DepositInfo:
    """Snapshot of one deposit as stored in the ledger."""

    deposit_id: int
    owner: str
    amount: int
    term: int
    start_time: int
    end_time: int
    ended: bool

    @property
    def is_open(self) -> bool:
        return not self.ended

    def is_mature(self, now: int) -> bool:
        """Whether the term has elapsed at epoch second ``now``."""
        return now >= self.end_time


@dataclass(frozen=True)
class StakeReceipt:
    """Result of a successful stake: the STAKE record fields plus the deposit."""

    deposit: DepositInfo
    record_seq: int

    @property
    def deposit_id(self) -> int:
        return self.deposit.deposit_id


@dataclass(frozen=True)
class UnstakeReceipt:
    """Result of a successful unstake: the UNSTAKE record fields."""

    deposit_id: int
    owner: str
    principal: int
    reward: int
    total_paid: int
    record_seq: int
