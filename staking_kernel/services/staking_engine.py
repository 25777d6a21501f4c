"""
StakingEngine -- transactional entry point for every staking operation.

Responsibility:
    Wires TermTableService, DepositLedgerService, RecordService and the
    CustodyGateway around one session, and runs each public operation as a
    single all-or-nothing unit: a database savepoint plus a custody
    compensation scope, committed on success (when ``auto_commit=True``)
    and rolled back on failure.

Architecture position:
    Kernel > Services -- the outermost kernel service.  Configuration is
    passed in as EngineSettings; the kernel never reads configuration files
    (see staking_config.bridges).

Invariants enforced:
    - Atomicity: a failed stake, unstake or term table change leaves no
      persisted effect and no net transfer.
    - Transaction boundaries: only this class commits or rolls back.

Failure modes:
    - Every StakingKernelError subclass raised by the inner services
      surfaces unchanged after rollback.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence, TypeVar
from uuid import uuid4

from sqlalchemy.orm import Session

from staking_kernel.db.immutability import register_immutability_listeners
from staking_kernel.domain.clock import SECONDS_PER_DAY, Clock, SystemClock
from staking_kernel.domain.collaborators import AuthorizationGate, FungibleAssetLedger
from staking_kernel.domain.dtos import DepositInfo, StakeReceipt, UnstakeReceipt
from staking_kernel.domain.rewards import RewardQuote
from staking_kernel.domain.term_table import TermEntry, TermTable, TermValidation
from staking_kernel.exceptions import DepositNotFoundError
from staking_kernel.logging_config import LogContext, get_logger
from staking_kernel.selectors.deposit_selector import DepositSelector
from staking_kernel.services.custody import CustodyGateway
from staking_kernel.services.deposit_ledger import DepositLedgerService
from staking_kernel.services.record_service import RecordEntry, RecordService
from staking_kernel.services.term_table_service import TermTableService

logger = get_logger("services.staking_engine")

T = TypeVar("T")


@dataclass(frozen=True)
class EngineSettings:
    """Kernel-side view of the staking configuration."""

    custody_account: str = "staking-custody"
    seconds_per_term_unit: int = SECONDS_PER_DAY
    term_validation: TermValidation = TermValidation.STRICT
    initial_durations: tuple[int, ...] = field(default=(30, 90, 180))
    initial_yields: tuple[int, ...] = field(default=(5, 10, 20))
    config_id: str = "default"


class StakingEngine:
    """
    Facade over the staking ledger.

    Contract:
        ``stake``, ``unstake``, ``set_terms`` and ``set_yields`` are the
        only mutating operations.  Each either completes fully or leaves the
        ledger, the record chain and the asset ledgers as they were.

    Guarantees:
        - ``compute_pending_rewards`` and the query methods never write.
        - The term table is initialized from ``settings`` on first use.

    Non-goals:
        - Does NOT retry failed operations.
        - Does NOT run operations concurrently; one call runs to completion
          before the next.

    Usage:
        engine = StakingEngine(session, staked_ledger, reward_ledger, gate,
                               settings=build_engine_settings(config))
        receipt = engine.stake("alice", 1_000, 90)
    """

    def __init__(
        self,
        session: Session,
        staked_ledger: FungibleAssetLedger,
        reward_ledger: FungibleAssetLedger,
        gate: AuthorizationGate,
        clock: Clock | None = None,
        settings: EngineSettings | None = None,
        auto_commit: bool = True,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._settings = settings or EngineSettings()
        self._auto_commit = auto_commit

        register_immutability_listeners()

        self._records = RecordService(session, self._clock)
        self._custody = CustodyGateway(
            staked_ledger, reward_ledger, self._settings.custody_account
        )
        self._term_tables = TermTableService(
            session, gate, self._clock, self._records
        )
        self._deposits = DepositLedgerService(
            session,
            self._term_tables,
            self._custody,
            clock=self._clock,
            records=self._records,
            seconds_per_term_unit=self._settings.seconds_per_term_unit,
            term_validation=self._settings.term_validation,
        )
        self._selector = DepositSelector(session)

    # Collaborators exposed for tooling and tests

    @property
    def records(self) -> RecordService:
        return self._records

    @property
    def custody(self) -> CustodyGateway:
        return self._custody

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    # Transaction handling

    def _run(
        self,
        operation: str,
        actor: str,
        fn: Callable[[], T],
        deposit_id: int | None = None,
        **log_extra: Any,
    ) -> T:
        with LogContext.bind(
            correlation_id=str(uuid4()),
            actor=actor,
            operation=operation,
            deposit_id=None if deposit_id is None else str(deposit_id),
        ):
            logger.info(f"{operation}_started", extra=log_extra)
            t0 = time.monotonic()
            try:
                with self._custody.compensation_scope():
                    with self._session.begin_nested():
                        self._ensure_term_table()
                        result = fn()
                    if self._auto_commit:
                        self._session.commit()

                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                logger.info(f"{operation}_completed", extra={"duration_ms": duration_ms})
                return result

            except Exception:
                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                if self._auto_commit:
                    self._session.rollback()
                logger.error(
                    f"{operation}_failed",
                    extra={"duration_ms": duration_ms},
                    exc_info=True,
                )
                raise

    def _ensure_term_table(self) -> TermTable:
        if self._term_tables.is_initialized():
            return self._term_tables.current()
        return self._term_tables.initialize(
            self._settings.initial_durations,
            self._settings.initial_yields,
            actor=self._settings.config_id,
        )

    def initialize(self) -> TermTable:
        """Persist the configured term table if none exists yet."""
        return self._run("initialize_term_table", self._settings.config_id, self._ensure_term_table)

    # Deposit lifecycle

    def stake(self, caller: str, amount: int, term: int) -> StakeReceipt:
        """
        Open a deposit of ``amount`` for ``term`` days.

        Raises:
            InvalidTermError, InvalidAmountError,
            InsufficientCallerBalanceError, TransferFailedError.
        """
        return self._run(
            "stake",
            caller,
            lambda: self._deposits.stake(caller, amount, term),
            amount=str(amount),
            term=term,
        )

    def unstake(self, caller: str, deposit_id: int) -> UnstakeReceipt:
        """
        Finalize a matured deposit and pay principal plus reward.

        Raises:
            DepositNotFoundError, NotOwnerError, AlreadyFinalizedError,
            TermNotElapsedError, InsufficientRewardCustodyError,
            TransferFailedError.
        """
        return self._run(
            "unstake",
            caller,
            lambda: self._deposits.unstake(caller, deposit_id),
            deposit_id=deposit_id,
        )

    def compute_pending_rewards(self, deposit_id: int) -> int:
        """Reward accrued so far by ``deposit_id``; read-only."""
        return self._deposits.compute_pending_rewards(deposit_id)

    def quote_pending_rewards(self, deposit_id: int) -> RewardQuote:
        return self._deposits.quote_pending_rewards(deposit_id)

    # Term table administration

    def set_terms(self, caller: str, new_durations: Sequence[int]) -> TermTable:
        return self._run(
            "set_terms",
            caller,
            lambda: self._term_tables.set_terms(caller, new_durations),
            durations=list(new_durations),
        )

    def set_yields(self, caller: str, new_rates: Sequence[int]) -> TermTable:
        return self._run(
            "set_yields",
            caller,
            lambda: self._term_tables.set_yields(caller, new_rates),
            yields=list(new_rates),
        )

    def term_table(self) -> TermTable:
        """The term table in force (the configured one before first write)."""
        if self._term_tables.is_initialized():
            return self._term_tables.current()
        return TermTable.build(
            self._settings.initial_durations, self._settings.initial_yields
        )

    def get_term(self, index: int) -> TermEntry:
        return self.term_table().entry(index)

    def term_table_history(self) -> list[TermTable]:
        return self._term_tables.history()

    # Ledger queries

    def get_deposit(self, deposit_id: int) -> DepositInfo:
        """
        Raises:
            DepositNotFoundError: No deposit at ``deposit_id``.
        """
        info = self._selector.get(deposit_id)
        if info is None:
            raise DepositNotFoundError(deposit_id)
        return info

    def deposits_of(self, owner: str) -> list[DepositInfo]:
        return self._selector.deposits_of(owner)

    def deposit_count(self) -> int:
        return self._selector.count()

    def total_outstanding(self) -> int:
        return self._selector.total_outstanding()

    def records_for(self, deposit_id: int) -> list[RecordEntry]:
        return self._records.records_for(deposit_id)
