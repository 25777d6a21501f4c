"""
Module: staking_kernel.models.deposit
Responsibility: ORM persistence for staking deposits -- the central entity of
    the ledger.  One row per stake, created by StakingEngine.stake() and
    finalized exactly once by StakingEngine.unstake().
Architecture position: Kernel > Models.  May import from db/ only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - deposit_id is the 0-based ledger position, dense and unique
      (uq_deposit_position), allocated from the locked "deposit" sequence.
    - end_time == start_time + term * seconds_per_term_unit, fixed at
      creation.
    - owner, term, start_time, end_time and deposit_id never change after
      INSERT; amount and ended change exactly once, together, in the
      open -> ended transition (db/immutability.py).
    - Rows are never deleted: an ended deposit is a permanent record.

Failure modes:
    - IntegrityError on duplicate deposit_id.
    - ImmutabilityViolationError on any other UPDATE or any DELETE.
"""

from sqlalchemy import BigInteger, Boolean, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from staking_kernel.db.base import Base
from staking_kernel.db.types import ACCOUNT_ID_LENGTH, TokenAmount


class Deposit(Base):
    """
    A quantity of the staked asset locked for a fixed term.

    Contract:
        ``amount`` is the principal still held in custody; it reads zero from
        the moment the deposit is finalized.  ``ended`` is set once and never
        reset.

    Non-goals:
        - The row does not store a yield.  The yield is looked up from the
          current term table whenever rewards are computed.
        - The row does not track partial withdrawals (there are none).
    """

    __tablename__ = "deposits"

    __table_args__ = (
        UniqueConstraint("deposit_id", name="uq_deposit_position"),
        Index("idx_deposit_owner", "owner", "deposit_id"),
        Index("idx_deposit_ended", "ended"),
    )

    # Ledger position (0-based)
    deposit_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    owner: Mapped[str] = mapped_column(String(ACCOUNT_ID_LENGTH), nullable=False)

    # Remaining principal in base units
    amount: Mapped[int] = mapped_column(TokenAmount(), nullable=False)

    # Lock duration in term-table units (days)
    term: Mapped[int] = mapped_column(Integer, nullable=False)

    # Epoch seconds
    start_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    end_time: Mapped[int] = mapped_column(BigInteger, nullable=False)

    ended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        state = "ended" if self.ended else "open"
        return f"<Deposit #{self.deposit_id} {self.owner} {self.amount} ({state})>"
