"""
DepositLedgerService -- the deposit lifecycle state machine.

Responsibility:
    Opens deposits (``stake``), finalizes them exactly once (``unstake``),
    and computes pending rewards.  Validates every precondition in a fixed
    order and emits the STAKE / UNSTAKE records.

Architecture position:
    Kernel > Services -- imperative shell.  Called by StakingEngine, which
    owns the savepoint and the custody compensation scope around each call.
    The pure reward arithmetic lives in domain/rewards.py.

Invariants enforced:
    - deposit_id is the 0-based ledger position, allocated from the locked
      "deposit" sequence (first allocation is 1, so position = value - 1).
    - end_time == start_time + term * seconds_per_term_unit.
    - Lifecycle: OPEN -> ENDED, once.  ``ended`` is set and ``amount`` zeroed
      before payout is requested.
    - Reward yield is looked up in the current term table at computation
      time, never stored on the deposit.

Failure modes (unstake, checked in this order):
    DepositNotFoundError, NotOwnerError, AlreadyFinalizedError,
    TermNotElapsedError, InsufficientRewardCustodyError,
    TransferFailedError.
Failure modes (stake, checked in this order):
    InvalidTermError, InvalidAmountError, InsufficientCallerBalanceError,
    TransferFailedError.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from staking_kernel.domain.clock import SECONDS_PER_DAY, Clock
from staking_kernel.domain.dtos import StakeReceipt, UnstakeReceipt
from staking_kernel.domain.rewards import RewardQuote
from staking_kernel.domain.term_table import TermValidation
from staking_kernel.exceptions import (
    AlreadyFinalizedError,
    DepositNotFoundError,
    InsufficientCallerBalanceError,
    InsufficientRewardCustodyError,
    InvalidAmountError,
    InvalidTermError,
    NotOwnerError,
    TermNotElapsedError,
)
from staking_kernel.logging_config import get_logger
from staking_kernel.models.deposit import Deposit
from staking_kernel.selectors.deposit_selector import to_deposit_info
from staking_kernel.services.base import BaseService
from staking_kernel.services.custody import CustodyGateway
from staking_kernel.services.record_service import RecordService
from staking_kernel.services.sequence_service import SequenceService
from staking_kernel.services.term_table_service import TermTableService

logger = get_logger("services.deposit_ledger")


class DepositLedgerService(BaseService[Deposit]):
    """
    Service for the deposit lifecycle.

    Contract:
        Runs inside the caller's transaction and compensation scope.  On any
        raised error the caller must roll back; this service only flushes.

    Non-goals:
        - No partial withdrawals, no compounding, no early exit.
        - Does NOT commit or roll back.
    """

    def __init__(
        self,
        session: Session,
        term_tables: TermTableService,
        custody: CustodyGateway,
        clock: Clock | None = None,
        records: RecordService | None = None,
        seconds_per_term_unit: int = SECONDS_PER_DAY,
        term_validation: TermValidation = TermValidation.STRICT,
    ):
        super().__init__(session, clock)
        self._term_tables = term_tables
        self._custody = custody
        self._records = records or RecordService(session, self.clock)
        self._sequences = SequenceService(session)
        self._seconds_per_term_unit = seconds_per_term_unit
        self._term_validation = TermValidation(term_validation)

    def _load(self, deposit_id: int) -> Deposit:
        deposit = self.session.execute(
            select(Deposit).where(Deposit.deposit_id == deposit_id)
        ).scalar_one_or_none()
        if deposit is None:
            raise DepositNotFoundError(deposit_id)
        return deposit

    # Stake

    def stake(self, caller: str, amount: int, term: int) -> StakeReceipt:
        """
        Lock ``amount`` of the staked asset for ``term`` days.

        Postconditions:
            - ``amount`` moved caller -> custody on the staked-asset ledger.
            - A new open deposit exists at the next ledger position.
            - A STAKE record (deposit_id, owner, amount, term) is emitted.
        """
        table = self._term_tables.current()
        if isinstance(term, bool) or not isinstance(term, int) or term < 1:
            raise InvalidTermError(term, table.durations)
        if not table.accepts(term, self._term_validation):
            raise InvalidTermError(term, table.durations)

        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise InvalidAmountError(amount)

        balance = self._custody.staked_balance_of(caller)
        if amount > balance:
            raise InsufficientCallerBalanceError(caller, amount, balance)

        self._custody.collect_principal(caller, amount)

        now = self.clock.timestamp()
        deposit = Deposit(
            deposit_id=self._sequences.next_value(SequenceService.DEPOSIT) - 1,
            owner=caller,
            amount=amount,
            term=term,
            start_time=now,
            end_time=now + term * self._seconds_per_term_unit,
            ended=False,
        )
        self.session.add(deposit)
        self.session.flush()

        record = self._records.record_stake(deposit.deposit_id, caller, amount, term)
        logger.info(
            "deposit_opened",
            extra={
                "deposit_id": deposit.deposit_id,
                "owner": caller,
                "amount": str(amount),
                "term": term,
                "end_time": deposit.end_time,
            },
        )
        return StakeReceipt(deposit=to_deposit_info(deposit), record_seq=record.seq)

    # Unstake

    def unstake(self, caller: str, deposit_id: int) -> UnstakeReceipt:
        """
        Finalize a matured deposit and pay principal plus reward to its owner.

        Postconditions:
            - The deposit reads ``ended=True`` and ``amount=0``.
            - ``principal + reward`` moved custody -> owner on the
              reward-asset ledger.
            - An UNSTAKE record (deposit_id, owner, total_paid) is emitted.
        """
        deposit = self._load(deposit_id)
        if deposit.owner != caller:
            raise NotOwnerError(deposit_id, caller, deposit.owner)
        if deposit.ended:
            raise AlreadyFinalizedError(deposit_id)

        now = self.clock.timestamp()
        if now < deposit.end_time:
            raise TermNotElapsedError(deposit_id, deposit.end_time, now)

        principal = deposit.amount
        # Principal only; the reward is not part of the solvency check
        available = self._custody.reward_custody_balance()
        if available < principal:
            raise InsufficientRewardCustodyError(deposit_id, principal, available)

        deposit.ended = True
        deposit.amount = 0
        self.session.flush()

        quote = self._quote(deposit_id, principal, deposit.term, deposit.start_time, now)
        total_paid = principal + quote.reward
        self._custody.pay_out(deposit.owner, total_paid)

        record = self._records.record_unstake(deposit_id, deposit.owner, total_paid)
        logger.info(
            "deposit_finalized",
            extra={
                "deposit_id": deposit_id,
                "owner": deposit.owner,
                "principal": str(principal),
                "reward": str(quote.reward),
                "total_paid": str(total_paid),
                "elapsed_seconds": quote.elapsed_seconds,
            },
        )
        return UnstakeReceipt(
            deposit_id=deposit_id,
            owner=deposit.owner,
            principal=principal,
            reward=quote.reward,
            total_paid=total_paid,
            record_seq=record.seq,
        )

    # Rewards

    def _quote(
        self,
        deposit_id: int,
        principal: int,
        term: int,
        start_time: int,
        now: int,
    ) -> RewardQuote:
        annual_yield = self._term_tables.current().yield_for(term)
        return RewardQuote.quote(deposit_id, principal, annual_yield, now - start_time)

    def quote_pending_rewards(self, deposit_id: int) -> RewardQuote:
        """Reward breakdown for a deposit at the current clock time."""
        deposit = self._load(deposit_id)
        return self._quote(
            deposit_id,
            deposit.amount,
            deposit.term,
            deposit.start_time,
            self.clock.timestamp(),
        )

    def compute_pending_rewards(self, deposit_id: int) -> int:
        """
        Reward accrued so far, without changing any state.

        Elapsed time is not capped at the term.  A finalized deposit has zero
        principal and therefore reads zero.

        Raises:
            DepositNotFoundError: No deposit at ``deposit_id``.
        """
        return self.quote_pending_rewards(deposit_id).reward
