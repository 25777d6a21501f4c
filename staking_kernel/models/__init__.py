"""ORM models for the staking kernel."""

from staking_kernel.models.deposit import Deposit
from staking_kernel.models.sequence_counter import SequenceCounter
from staking_kernel.models.staking_record import RecordAction, StakingRecord
from staking_kernel.models.term_table import TermTableVersion

__all__ = [
    "Deposit",
    "RecordAction",
    "SequenceCounter",
    "StakingRecord",
    "TermTableVersion",
]
