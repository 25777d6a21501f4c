"""
SequenceService -- monotonic sequence allocation via locked counter rows.

Responsibility:
    Provides strictly monotonically increasing sequence numbers for deposit
    positions and staking records.  Uses a dedicated counter table with
    row-level locking (``SELECT ... FOR UPDATE``) to guarantee uniqueness
    and ordering under concurrent access.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.
    Called by DepositLedgerService (deposit positions) and RecordService
    (record sequence numbers).

Invariants enforced:
    - Sequences are strictly monotonic and dense.  The aggregate-max-plus-one
      query is never used; the locked counter row is the source of truth.
    - Transactional: an increment is only visible after the caller's
      transaction commits.  A rolled-back savepoint returns the value, so
      deposit positions stay gap-free across failed stakes.

Failure modes:
    - IntegrityError: concurrent counter creation race (handled via
      savepoint rollback and retry).
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from staking_kernel.logging_config import get_logger
from staking_kernel.models.sequence_counter import SequenceCounter

logger = get_logger("services.sequence")


class SequenceService:
    """
    Service for generating transactional sequence numbers.

    Guarantees:
        - Strictly monotonic values starting at 1 for every sequence name.
        - ``SELECT ... FOR UPDATE`` serializes concurrent allocations for the
          same sequence on PostgreSQL.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
    """

    DEPOSIT = "deposit"
    STAKING_RECORD = "staking_record"

    def __init__(self, session: Session):
        self._session = session

    def _locked_counter(self, sequence_name: str) -> SequenceCounter | None:
        return self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def next_value(self, sequence_name: str) -> int:
        """
        Get the next value for a named sequence.

        Preconditions:
            - The caller is within an active database transaction.

        Postconditions:
            - Returns an integer > 0 strictly greater than any previously
              committed value for this sequence name.

        Args:
            sequence_name: Name of the sequence.

        Returns:
            The next sequence value (always > 0).
        """
        counter = self._locked_counter(sequence_name)

        if counter is None:
            # First use; another session may create the row concurrently,
            # so isolate the insert in a savepoint.
            savepoint = self._session.begin_nested()
            try:
                counter = SequenceCounter(name=sequence_name, current_value=1)
                self._session.add(counter)
                self._session.flush()
                savepoint.commit()
                logger.debug(
                    "sequence_allocated",
                    extra={"sequence_name": sequence_name, "value": 1},
                )
                return 1
            except IntegrityError:
                logger.debug(
                    "sequence_counter_race_retry",
                    extra={"sequence_name": sequence_name},
                )
                savepoint.rollback()
                counter = self._locked_counter(sequence_name)
                if counter is None:
                    raise

        counter.current_value += 1
        self._session.flush()
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": sequence_name, "value": counter.current_value},
        )
        return counter.current_value

    def current_value(self, sequence_name: str) -> int | None:
        """Current value of a sequence without incrementing, or None if unused."""
        counter = self._session.execute(
            select(SequenceCounter).where(SequenceCounter.name == sequence_name)
        ).scalar_one_or_none()

        return counter.current_value if counter else None
