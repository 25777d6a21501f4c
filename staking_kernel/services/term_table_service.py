"""
TermTableService -- versioned, administrator-gated term table.

Responsibility:
    Owns the persisted term table.  Reads always return the latest committed
    version; the only way to change it is ``set_terms``/``set_yields``,
    which consult the AuthorizationGate and append a new version.

Architecture position:
    Kernel > Services -- imperative shell.  Injected into
    DepositLedgerService so that stake validation and reward lookups always
    see the current table; there is no module-level table state.

Invariants enforced:
    - Exactly three slots per version (TermTable + one column per slot).
    - Updates longer than three entries fail with
      InvalidConfigurationSizeError; shorter updates replace the leading
      slots and keep the rest.
    - Every version is recorded in the staking record chain.

Failure modes:
    - NotAdministratorError: caller failed the authorization gate.
    - TermTableNotInitializedError: read before ``initialize``.
    - InvalidConfigurationSizeError / InvalidConfigurationValueError.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from staking_kernel.domain.clock import Clock
from staking_kernel.domain.collaborators import AuthorizationGate
from staking_kernel.domain.term_table import TermEntry, TermTable
from staking_kernel.exceptions import NotAdministratorError, TermTableNotInitializedError
from staking_kernel.logging_config import get_logger
from staking_kernel.models.staking_record import RecordAction
from staking_kernel.models.term_table import TermTableVersion
from staking_kernel.services.base import BaseService
from staking_kernel.services.record_service import RecordService

logger = get_logger("services.term_table")


class TermTableService(BaseService[TermTableVersion]):
    """
    Service for reading and administering the term table.

    Contract:
        ``current()`` is the single read path used by every stake and every
        reward computation.

    Non-goals:
        - Does NOT decide who is an administrator (AuthorizationGate does).
        - Does NOT touch existing deposits; they captured term and amount by
          value at creation.
    """

    def __init__(
        self,
        session: Session,
        gate: AuthorizationGate,
        clock: Clock | None = None,
        records: RecordService | None = None,
    ):
        super().__init__(session, clock)
        self._gate = gate
        self._records = records or RecordService(session, self.clock)

    def _latest(self) -> TermTableVersion | None:
        return self.session.execute(
            select(TermTableVersion).order_by(TermTableVersion.version.desc()).limit(1)
        ).scalar_one_or_none()

    @staticmethod
    def _to_domain(row: TermTableVersion) -> TermTable:
        return TermTable(durations=row.durations, yields=row.yields, version=row.version)

    def _persist(self, table: TermTable, actor: str, change_kind: str) -> TermTable:
        row = TermTableVersion(
            version=table.version,
            duration_0=table.durations[0],
            duration_1=table.durations[1],
            duration_2=table.durations[2],
            yield_0=table.yields[0],
            yield_1=table.yields[1],
            yield_2=table.yields[2],
            changed_by=actor,
            change_kind=change_kind,
            created_at=self.clock.now(),
        )
        self.session.add(row)
        self.session.flush()
        return table

    def _require_admin(self, caller: str, operation: str) -> None:
        if not self._gate.is_administrator(caller):
            logger.warning(
                "term_table_change_denied",
                extra={"caller": caller, "change": operation},
            )
            raise NotAdministratorError(caller, operation)

    # Reads

    def is_initialized(self) -> bool:
        return self._latest() is not None

    def current(self) -> TermTable:
        """
        The term table in force.

        Raises:
            TermTableNotInitializedError: If no version exists yet.
        """
        row = self._latest()
        if row is None:
            raise TermTableNotInitializedError()
        return self._to_domain(row)

    def get_term(self, index: int) -> TermEntry:
        """Slot ``index`` (0, 1 or 2) of the current table."""
        return self.current().entry(index)

    def history(self) -> list[TermTable]:
        """Every committed version, oldest first."""
        rows = self.session.execute(
            select(TermTableVersion).order_by(TermTableVersion.version)
        ).scalars().all()
        return [self._to_domain(r) for r in rows]

    # Writes

    def initialize(
        self,
        durations: Sequence[int],
        yields: Sequence[int],
        actor: str,
    ) -> TermTable:
        """
        Write version 1 if the table is empty; otherwise return the current table.

        Initialization is deployment configuration, so it is not gated.
        """
        existing = self._latest()
        if existing is not None:
            return self._to_domain(existing)

        table = TermTable.build(durations, yields, version=1)
        self._persist(table, actor, "initialize")
        self._records.record_term_table_change(
            RecordAction.TERM_TABLE_INITIALIZED,
            actor=actor,
            version=table.version,
            durations=table.durations,
            yields=table.yields,
        )
        logger.info(
            "term_table_initialized",
            extra={"durations": list(table.durations), "yields": list(table.yields)},
        )
        return table

    def set_terms(self, caller: str, new_durations: Sequence[int]) -> TermTable:
        """
        Replace the leading duration slots (administrator only).

        Raises:
            NotAdministratorError: caller is not an administrator.
            InvalidConfigurationSizeError: more than three entries.
            InvalidConfigurationValueError: a duration is not a positive int.
        """
        self._require_admin(caller, "set_terms")
        previous = self.current()
        table = previous.with_durations(new_durations)
        self._persist(table, caller, "set_terms")
        self._records.record_term_table_change(
            RecordAction.TERMS_UPDATED,
            actor=caller,
            version=table.version,
            durations=table.durations,
            yields=table.yields,
        )
        logger.info(
            "term_table_terms_updated",
            extra={
                "version": table.version,
                "previous_durations": list(previous.durations),
                "durations": list(table.durations),
                "slots_supplied": len(new_durations),
            },
        )
        return table

    def set_yields(self, caller: str, new_rates: Sequence[int]) -> TermTable:
        """
        Replace the leading yield slots (administrator only).

        Open deposits pick up the new rate on their next reward computation.

        Raises:
            NotAdministratorError: caller is not an administrator.
            InvalidConfigurationSizeError: more than three entries.
            InvalidConfigurationValueError: a yield is negative or not an int.
        """
        self._require_admin(caller, "set_yields")
        previous = self.current()
        table = previous.with_yields(new_rates)
        self._persist(table, caller, "set_yields")
        self._records.record_term_table_change(
            RecordAction.YIELDS_UPDATED,
            actor=caller,
            version=table.version,
            durations=table.durations,
            yields=table.yields,
        )
        logger.info(
            "term_table_yields_updated",
            extra={
                "version": table.version,
                "previous_yields": list(previous.yields),
                "yields": list(table.yields),
                "slots_supplied": len(new_rates),
            },
        )
        return table
