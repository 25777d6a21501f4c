"""
Module: staking_kernel.models.term_table
Responsibility: Append-only version history of the term table.  Each
    administrative update writes a new row; the row with the highest version
    is the table in force.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - version is unique and strictly increasing (uq_term_table_version).
    - Rows are immutable once written (db/immutability.py).
    - Exactly three slots: the schema has one column per slot, so a version
      can never hold more or fewer than three entries.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from staking_kernel.db.base import Base
from staking_kernel.db.types import ACCOUNT_ID_LENGTH


class TermTableVersion(Base):
    """One committed version of the three-slot term table."""

    __tablename__ = "term_table_versions"

    __table_args__ = (
        UniqueConstraint("version", name="uq_term_table_version"),
    )

    version: Mapped[int] = mapped_column(BigInteger, nullable=False)

    duration_0: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_1: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_2: Mapped[int] = mapped_column(Integer, nullable=False)

    yield_0: Mapped[int] = mapped_column(Integer, nullable=False)
    yield_1: Mapped[int] = mapped_column(Integer, nullable=False)
    yield_2: Mapped[int] = mapped_column(Integer, nullable=False)

    changed_by: Mapped[str] = mapped_column(String(ACCOUNT_ID_LENGTH), nullable=False)

    # What produced this version: "initialize", "set_terms", "set_yields"
    change_kind: Mapped[str] = mapped_column(String(20), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @property
    def durations(self) -> tuple[int, int, int]:
        return (self.duration_0, self.duration_1, self.duration_2)

    @property
    def yields(self) -> tuple[int, int, int]:
        return (self.yield_0, self.yield_1, self.yield_2)

    def __repr__(self) -> str:
        return f"<TermTableVersion v{self.version} {self.durations} {self.yields}>"
