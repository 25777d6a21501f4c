"""
Reward accrual -- step-wise truncating simple-interest formula.

Responsibility:
    Computes the reward a deposit has accrued from its principal, the
    annual yield looked up for its term, and the seconds elapsed since
    issuance.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Integer arithmetic only; no floats, no Decimals.
    - The annual reward is divided down to a per-second rate one unit at a
      time (days, hours, minutes, seconds), truncating at every step, and
      only then multiplied by the elapsed seconds.  The truncation error
      compounds at each division and this is the published behavior:
      36_500_000 at 10% for one year accrues 0, not 3_650_000.
    - Elapsed time is not capped at the term.  A deposit that stays open
      past ``end_time`` keeps accruing until it is unstaken.

Failure modes:
    - None.  Negative elapsed time (clock behind issuance) accrues 0.
"""

from __future__ import annotations

from dataclasses import dataclass

PERCENT_DENOMINATOR = 100
DAYS_PER_YEAR = 365
HOURS_PER_DAY = 24
MINUTES_PER_HOUR = 60
SECONDS_PER_MINUTE = 60


def reward_per_second(principal: int, annual_yield_percent: int) -> int:
    """Per-second reward rate, truncated at each unit step."""
    rate = principal * annual_yield_percent // PERCENT_DENOMINATOR
    for divisor in (DAYS_PER_YEAR, HOURS_PER_DAY, MINUTES_PER_HOUR, SECONDS_PER_MINUTE):
        rate //= divisor
    return rate


def compute_reward(principal: int, annual_yield_percent: int, elapsed_seconds: int) -> int:
    """
    Reward accrued over ``elapsed_seconds``.

    Preconditions:
        - ``principal`` and ``annual_yield_percent`` are non-negative ints.
    Postconditions:
        - Returns ``max(elapsed_seconds, 0) * reward_per_second(...)``.
        - Monotonically non-decreasing in ``elapsed_seconds``.
    """
    if elapsed_seconds <= 0:
        return 0
    return elapsed_seconds * reward_per_second(principal, annual_yield_percent)


@dataclass(frozen=True)
class RewardQuote:
    """Breakdown of one pending-reward computation."""

    deposit_id: int
    principal: int
    annual_yield_percent: int
    elapsed_seconds: int
    per_second_rate: int
    reward: int

    @classmethod
    def quote(
        cls,
        deposit_id: int,
        principal: int,
        annual_yield_percent: int,
        elapsed_seconds: int,
    ) -> RewardQuote:
        elapsed = max(elapsed_seconds, 0)
        rate = reward_per_second(principal, annual_yield_percent)
        return cls(
            deposit_id=deposit_id,
            principal=principal,
            annual_yield_percent=annual_yield_percent,
            elapsed_seconds=elapsed,
            per_second_rate=rate,
            reward=compute_reward(principal, annual_yield_percent, elapsed),
        )
