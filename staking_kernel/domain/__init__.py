"""Pure domain layer: clock, term table, reward accrual, collaborator ports."""

from staking_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from staking_kernel.domain.collaborators import AuthorizationGate, FungibleAssetLedger
from staking_kernel.domain.dtos import DepositInfo, StakeReceipt, UnstakeReceipt
from staking_kernel.domain.rewards import RewardQuote, compute_reward, reward_per_second
from staking_kernel.domain.term_table import TermEntry, TermTable, TermValidation

__all__ = [
    "AuthorizationGate",
    "Clock",
    "DepositInfo",
    "DeterministicClock",
    "FungibleAssetLedger",
    "RewardQuote",
    "StakeReceipt",
    "SystemClock",
    "TermEntry",
    "TermTable",
    "TermValidation",
    "UnstakeReceipt",
    "compute_reward",
    "reward_per_second",
]
