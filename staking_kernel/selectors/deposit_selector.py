"""
DepositSelector -- read-only queries over the deposit ledger.

Deposits are addressed by their 0-based ledger position.  Owner listings are
ordered by ``deposit_id``, which is creation order.
"""

from __future__ import annotations

from sqlalchemy import func, select

from staking_kernel.domain.dtos import DepositInfo
from staking_kernel.models.deposit import Deposit
from staking_kernel.selectors.base import BaseSelector


def to_deposit_info(deposit: Deposit) -> DepositInfo:
    return DepositInfo(
        deposit_id=deposit.deposit_id,
        owner=deposit.owner,
        amount=deposit.amount,
        term=deposit.term,
        start_time=deposit.start_time,
        end_time=deposit.end_time,
        ended=deposit.ended,
    )


class DepositSelector(BaseSelector[Deposit]):
    """Query deposits without modifying them."""

    def get(self, deposit_id: int) -> DepositInfo | None:
        deposit = self.session.execute(
            select(Deposit).where(Deposit.deposit_id == deposit_id)
        ).scalar_one_or_none()
        return to_deposit_info(deposit) if deposit else None

    def deposits_of(self, owner: str) -> list[DepositInfo]:
        """Every deposit opened by ``owner``, in creation order."""
        rows = self.session.execute(
            select(Deposit).where(Deposit.owner == owner).order_by(Deposit.deposit_id)
        ).scalars().all()
        return [to_deposit_info(d) for d in rows]

    def deposit_ids_of(self, owner: str) -> list[int]:
        return list(
            self.session.execute(
                select(Deposit.deposit_id)
                .where(Deposit.owner == owner)
                .order_by(Deposit.deposit_id)
            ).scalars()
        )

    def count(self) -> int:
        return self.session.execute(select(func.count()).select_from(Deposit)).scalar_one()

    def open_deposits(self) -> list[DepositInfo]:
        rows = self.session.execute(
            select(Deposit).where(Deposit.ended.is_(False)).order_by(Deposit.deposit_id)
        ).scalars().all()
        return [to_deposit_info(d) for d in rows]

    def total_outstanding(self) -> int:
        """
        Sum of principal still held for open deposits.

        Amounts are stored as decimal strings, so the sum is taken in Python
        rather than with SQL ``SUM``.
        """
        amounts = self.session.execute(
            select(Deposit.amount).where(Deposit.ended.is_(False))
        ).scalars()
        return sum(amounts, 0)
