"""
CustodyGateway -- transfers through the external asset ledgers.

Responsibility:
    Wraps the staked-asset and reward-asset FungibleAssetLedger
    collaborators.  Normalizes their two failure signals (``False`` return,
    raised exception) into TransferFailedError and remembers every
    completed transfer so the surrounding operation can reverse them if it
    fails later.

Architecture position:
    Kernel > Services -- imperative shell.  The asset ledgers sit outside
    the database transaction, so rolling back a savepoint does not undo a
    transfer; ``compensation_scope`` closes that gap.

Invariants enforced:
    - A transfer that returned ``True`` is recorded in the active scope.
    - On failure inside a scope, recorded transfers are reversed newest
      first, recipient -> sender, on the ledger that executed them.

Failure modes:
    - TransferFailedError for any rejected or raising transfer.
    - A failed compensating transfer is logged at CRITICAL and does not
      mask the original error.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from staking_kernel.domain.collaborators import FungibleAssetLedger
from staking_kernel.exceptions import TransferFailedError
from staking_kernel.logging_config import get_logger

logger = get_logger("services.custody")


@dataclass(frozen=True)
class CompletedTransfer:
    """One transfer the external ledger accepted."""

    ledger: FungibleAssetLedger
    asset: str
    sender: str
    recipient: str
    amount: int


class CustodyGateway:
    """
    Custody boundary between the deposit ledger and the asset ledgers.

    Contract:
        ``staked_ledger`` receives principal on stake; ``reward_ledger``
        pays principal plus reward on unstake.  Both may be the same object.

    Non-goals:
        - Does NOT hold balances; the asset ledgers are the source of truth.
        - Does NOT retry; failures surface immediately.
    """

    def __init__(
        self,
        staked_ledger: FungibleAssetLedger,
        reward_ledger: FungibleAssetLedger,
        custody_account: str,
    ):
        self.staked_ledger = staked_ledger
        self.reward_ledger = reward_ledger
        self.custody_account = custody_account
        self._journal: list[CompletedTransfer] | None = None

    # Balances

    def staked_balance_of(self, account: str) -> int:
        return self.staked_ledger.balance_of(account)

    def reward_custody_balance(self) -> int:
        return self.reward_ledger.balance_of(self.custody_account)

    # Transfers

    def collect_principal(self, owner: str, amount: int) -> None:
        """Move a stake from the owner into custody on the staked-asset ledger."""
        self._transfer(self.staked_ledger, "staked", owner, self.custody_account, amount)

    def pay_out(self, owner: str, amount: int) -> None:
        """Move principal plus reward from custody to the owner on the reward ledger."""
        self._transfer(self.reward_ledger, "reward", self.custody_account, owner, amount)

    def _transfer(
        self,
        ledger: FungibleAssetLedger,
        asset: str,
        sender: str,
        recipient: str,
        amount: int,
    ) -> None:
        try:
            accepted = ledger.transfer_from(sender, recipient, amount)
        except Exception as exc:
            logger.warning(
                "custody_transfer_raised",
                extra={
                    "asset": asset,
                    "sender": sender,
                    "recipient": recipient,
                    "amount": str(amount),
                    "error": str(exc),
                },
            )
            raise TransferFailedError(sender, recipient, amount, reason=str(exc)) from exc

        if not accepted:
            logger.warning(
                "custody_transfer_rejected",
                extra={
                    "asset": asset,
                    "sender": sender,
                    "recipient": recipient,
                    "amount": str(amount),
                },
            )
            raise TransferFailedError(sender, recipient, amount)

        if self._journal is not None:
            self._journal.append(
                CompletedTransfer(ledger, asset, sender, recipient, amount)
            )
        logger.info(
            "custody_transfer_completed",
            extra={
                "asset": asset,
                "sender": sender,
                "recipient": recipient,
                "amount": str(amount),
            },
        )

    # Compensation

    @contextmanager
    def compensation_scope(self) -> Iterator[None]:
        """
        Reverse every transfer completed inside the block if the block raises.

        Scopes do not nest; the outermost scope owns the journal.
        """
        if self._journal is not None:
            yield
            return

        self._journal = []
        try:
            yield
        except Exception:
            self._compensate(self._journal)
            raise
        finally:
            self._journal = None

    def _compensate(self, completed: list[CompletedTransfer]) -> None:
        for transfer in reversed(completed):
            try:
                accepted = transfer.ledger.transfer_from(
                    transfer.recipient, transfer.sender, transfer.amount
                )
            except Exception:
                logger.critical(
                    "custody_compensation_failed",
                    extra={
                        "asset": transfer.asset,
                        "sender": transfer.recipient,
                        "recipient": transfer.sender,
                        "amount": str(transfer.amount),
                    },
                    exc_info=True,
                )
                continue
            if accepted:
                logger.warning(
                    "custody_transfer_compensated",
                    extra={
                        "asset": transfer.asset,
                        "sender": transfer.recipient,
                        "recipient": transfer.sender,
                        "amount": str(transfer.amount),
                    },
                )
            else:
                logger.critical(
                    "custody_compensation_failed",
                    extra={
                        "asset": transfer.asset,
                        "sender": transfer.recipient,
                        "recipient": transfer.sender,
                        "amount": str(transfer.amount),
                    },
                )
