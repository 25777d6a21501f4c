"""
RecordService -- emitted staking records with a tamper-evident hash chain.

Responsibility:
    Writes the STAKE / UNSTAKE records (and term table change records) that
    external observers consume, links them into a SHA-256 hash chain, and
    validates the chain on demand.

Architecture position:
    Kernel > Services -- imperative shell.  Called by DepositLedgerService
    and TermTableService inside the caller's transaction.

Invariants enforced:
    - Records are append-only (ORM listeners in db/immutability.py).
    - hash = H(action | deposit_id | actor | payload_hash | prev_hash).
    - seq allocated from SequenceService.STAKING_RECORD, never max()+1.

Failure modes:
    - RecordChainBrokenError from validate_chain() on any mismatch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from staking_kernel.domain.clock import Clock, SystemClock
from staking_kernel.exceptions import RecordChainBrokenError
from staking_kernel.logging_config import get_logger
from staking_kernel.models.staking_record import RecordAction, StakingRecord
from staking_kernel.services.sequence_service import SequenceService
from staking_kernel.utils.hashing import hash_payload, hash_staking_record

logger = get_logger("services.records")


@dataclass(frozen=True)
class RecordEntry:
    """Read-side view of one staking record."""

    seq: int
    action: str
    deposit_id: int | None
    actor: str
    occurred_at: datetime
    payload: dict[str, Any]
    hash: str


def _action_value(action: RecordAction | str) -> str:
    return action.value if isinstance(action, RecordAction) else action


class RecordService:
    """
    Service for emitting and verifying staking records.

    Guarantees:
        - Every record links to its predecessor by hash.
        - Payload values are stored exactly as given (amounts are ints).

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
        - Does NOT deliver records to observers; they read the table.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()
        self._sequence_service = SequenceService(session)

    def _get_last_hash(self) -> str | None:
        last = self._session.execute(
            select(StakingRecord).order_by(StakingRecord.seq.desc()).limit(1)
        ).scalar_one_or_none()
        return last.hash if last else None

    def _append(
        self,
        action: RecordAction,
        actor: str,
        payload: dict[str, Any],
        deposit_id: int | None = None,
    ) -> StakingRecord:
        seq = self._sequence_service.next_value(SequenceService.STAKING_RECORD)
        prev_hash = self._get_last_hash()
        payload_hash = hash_payload(payload)
        record_hash = hash_staking_record(
            action=action.value,
            deposit_id=deposit_id,
            actor=actor,
            payload_hash=payload_hash,
            prev_hash=prev_hash,
        )

        record = StakingRecord(
            seq=seq,
            action=action,
            deposit_id=deposit_id,
            actor=actor,
            occurred_at=self._clock.now(),
            payload=payload,
            payload_hash=payload_hash,
            prev_hash=prev_hash,
            hash=record_hash,
        )
        self._session.add(record)
        self._session.flush()

        logger.info(
            "staking_record_created",
            extra={"action": action.value, "seq": seq, "record_deposit_id": deposit_id},
        )
        return record

    # Domain-specific recording methods

    def record_stake(self, deposit_id: int, owner: str, amount: int, term: int) -> StakingRecord:
        # Amounts are decimal strings in every payload
        return self._append(
            RecordAction.STAKE,
            actor=owner,
            deposit_id=deposit_id,
            payload={
                "deposit_id": deposit_id,
                "owner": owner,
                "amount": str(amount),
                "term": term,
            },
        )

    def record_unstake(self, deposit_id: int, owner: str, total_paid: int) -> StakingRecord:
        return self._append(
            RecordAction.UNSTAKE,
            actor=owner,
            deposit_id=deposit_id,
            payload={
                "deposit_id": deposit_id,
                "owner": owner,
                "total_paid": str(total_paid),
            },
        )

    def record_term_table_change(
        self,
        action: RecordAction,
        actor: str,
        version: int,
        durations: tuple[int, ...],
        yields: tuple[int, ...],
    ) -> StakingRecord:
        return self._append(
            action,
            actor=actor,
            payload={
                "version": version,
                "durations": list(durations),
                "yields": list(yields),
            },
        )

    # Chain validation

    def validate_chain(self) -> bool:
        """
        Validate the entire record chain.

        Postconditions:
            - Returns ``True`` only if every record's stored hash matches
              the recomputed value and every prev_hash matches its
              predecessor's hash.

        Raises:
            RecordChainBrokenError: On the first mismatch.
        """
        records = self._session.execute(
            select(StakingRecord).order_by(StakingRecord.seq)
        ).scalars().all()

        expected_prev: str | None = None
        for record in records:
            if record.prev_hash != expected_prev:
                logger.critical("record_chain_broken", extra={"seq": record.seq})
                raise RecordChainBrokenError(
                    record.seq, expected_prev or "None", record.prev_hash or "None"
                )

            expected_hash = hash_staking_record(
                action=_action_value(record.action),
                deposit_id=record.deposit_id,
                actor=record.actor,
                payload_hash=hash_payload(record.payload or {}),
                prev_hash=record.prev_hash,
            )
            if record.hash != expected_hash:
                logger.critical("record_chain_broken", extra={"seq": record.seq})
                raise RecordChainBrokenError(record.seq, expected_hash, record.hash)

            expected_prev = record.hash

        logger.info("record_chain_valid", extra={"record_count": len(records)})
        return True

    # Query methods

    def records_for(self, deposit_id: int) -> list[RecordEntry]:
        """All records of one deposit in emission order."""
        records = self._session.execute(
            select(StakingRecord)
            .where(StakingRecord.deposit_id == deposit_id)
            .order_by(StakingRecord.seq)
        ).scalars().all()
        return [self._to_entry(r) for r in records]

    def recent(self, limit: int = 100) -> list[RecordEntry]:
        """Most recent records, newest first."""
        records = self._session.execute(
            select(StakingRecord).order_by(StakingRecord.seq.desc()).limit(limit)
        ).scalars().all()
        return [self._to_entry(r) for r in records]

    @staticmethod
    def _to_entry(record: StakingRecord) -> RecordEntry:
        return RecordEntry(
            seq=record.seq,
            action=_action_value(record.action),
            deposit_id=record.deposit_id,
            actor=record.actor,
            occurred_at=record.occurred_at,
            payload=dict(record.payload or {}),
            hash=record.hash,
        )
