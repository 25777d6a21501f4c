"""
Module: staking_kernel.models.sequence_counter
Responsibility: Named counter rows backing SequenceService.  Row-level
    locking on these rows is the sole source of deposit positions and
    record sequence numbers.
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from staking_kernel.db.base import Base


class SequenceCounter(Base):
    """
    Sequence counter table.

    Each row represents a named sequence with its current value.
    """

    __tablename__ = "sequence_counters"

    # Sequence name (e.g., "deposit", "staking_record")
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    current_value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
