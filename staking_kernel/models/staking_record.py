"""
Module: staking_kernel.models.staking_record
Responsibility: ORM persistence for emitted staking records -- the
    tamper-evident trail that external observers and auditors read.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - Records are append-only; no UPDATE or DELETE (ORM listeners).
    - Hash chain integrity: hash = H(action | deposit_id | actor |
      payload_hash | prev_hash).  Validated by RecordService.
    - seq is monotonically increasing, allocated by SequenceService.

Minimum coverage (each action type generates a record):
    - STAKE          (deposit_id, owner, amount, term)
    - UNSTAKE        (deposit_id, owner, total_paid)
    - TERM_TABLE_INITIALIZED, TERMS_UPDATED, YIELDS_UPDATED
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, BigInteger, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from staking_kernel.db.base import Base
from staking_kernel.db.types import ACCOUNT_ID_LENGTH, HASH_LENGTH


class RecordAction(str, Enum):
    """Types of emitted staking records."""

    STAKE = "stake"
    UNSTAKE = "unstake"
    TERM_TABLE_INITIALIZED = "term_table_initialized"
    TERMS_UPDATED = "terms_updated"
    YIELDS_UPDATED = "yields_updated"


class StakingRecord(Base):
    """
    One emitted record in the staking hash chain.

    Guarantees:
        - seq is unique and strictly increasing.
        - prev_hash is the hash of seq - 1 (None for the first record).
    """

    __tablename__ = "staking_records"

    __table_args__ = (
        Index("idx_record_seq", "seq", unique=True),
        Index("idx_record_deposit", "deposit_id"),
        Index("idx_record_action", "action"),
    )

    seq: Mapped[int] = mapped_column(BigInteger, nullable=False)

    action: Mapped[RecordAction] = mapped_column(String(50), nullable=False)

    # Null for term table records
    deposit_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    actor: Mapped[str] = mapped_column(String(ACCOUNT_ID_LENGTH), nullable=False)

    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    payload: Mapped[dict] = mapped_column(JSON, nullable=False)

    payload_hash: Mapped[str] = mapped_column(String(HASH_LENGTH), nullable=False)

    prev_hash: Mapped[str | None] = mapped_column(String(HASH_LENGTH), nullable=True)

    hash: Mapped[str] = mapped_column(String(HASH_LENGTH), nullable=False)

    def __repr__(self) -> str:
        return f"<StakingRecord #{self.seq} {self.action} deposit={self.deposit_id}>"
