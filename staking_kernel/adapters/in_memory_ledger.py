"""
In-memory implementations of the collaborator ports.

InMemoryAssetLedger is the reference FungibleAssetLedger used by tests and
local tooling.  StaticAdministratorGate answers the administrator predicate
from a fixed set, typically the ``administrators`` list of the active
configuration.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable

from staking_kernel.logging_config import get_logger

logger = get_logger("adapters.ledger")


@dataclass(frozen=True)
class TransferLogEntry:
    sender: str
    recipient: str
    amount: int


class InMemoryAssetLedger:
    """
    Balances of one fungible asset held in a dict.

    ``transfer_from`` returns ``False`` on insufficient balance or a negative
    amount.  ``reject_transfers`` and ``raise_on_transfer`` force the two
    failure signals a real ledger can produce.
    """

    def __init__(self, asset: str = "asset", balances: dict[str, int] | None = None):
        self.asset = asset
        self._balances: defaultdict[str, int] = defaultdict(int)
        for account, amount in (balances or {}).items():
            self._balances[account] = amount
        self.transfers: list[TransferLogEntry] = []
        self.reject_transfers = False
        self.raise_on_transfer: Exception | None = None

    def balance_of(self, account: str) -> int:
        return self._balances[account]

    def transfer_from(self, sender: str, recipient: str, amount: int) -> bool:
        if self.raise_on_transfer is not None:
            raise self.raise_on_transfer
        if self.reject_transfers or amount < 0 or self._balances[sender] < amount:
            logger.debug(
                "ledger_transfer_rejected",
                extra={"asset": self.asset, "sender": sender, "amount": str(amount)},
            )
            return False
        self._balances[sender] -= amount
        self._balances[recipient] += amount
        self.transfers.append(TransferLogEntry(sender, recipient, amount))
        return True


class StaticAdministratorGate:
    """Administrator predicate backed by a fixed account set."""

    def __init__(self, administrators: Iterable[str]):
        self._administrators = frozenset(administrators)

    def is_administrator(self, account: str) -> bool:
        return account in self._administrators
