"""Property-based tests for reward accrual and term table updates."""

from hypothesis import given, settings
from hypothesis import strategies as st

from staking_kernel.domain.rewards import compute_reward, reward_per_second
from staking_kernel.domain.term_table import TermTable

principals = st.integers(min_value=0, max_value=10**30)
yields = st.integers(min_value=0, max_value=1_000)
elapsed = st.integers(min_value=-10**6, max_value=10 * 365 * 24 * 3600)


@settings(max_examples=300)
@given(principal=principals, annual_yield=yields, a=elapsed, b=elapsed)
def test_reward_monotonic_in_elapsed(principal, annual_yield, a, b):
    lo, hi = sorted((a, b))
    assert compute_reward(principal, annual_yield, lo) <= compute_reward(
        principal, annual_yield, hi
    )


@settings(max_examples=300)
@given(principal=principals, annual_yield=yields, seconds=elapsed)
def test_reward_is_linear_in_elapsed(principal, annual_yield, seconds):
    rate = reward_per_second(principal, annual_yield)
    assert compute_reward(principal, annual_yield, seconds) == max(seconds, 0) * rate


@given(principal=principals, annual_yield=yields, seconds=st.integers(0, 10**9))
def test_never_exceeds_single_division(principal, annual_yield, seconds):
    exact = principal * annual_yield * seconds // (100 * 365 * 24 * 3600)
    assert compute_reward(principal, annual_yield, seconds) <= exact


@given(principal=principals, low=yields, high=yields)
def test_rate_monotonic_in_yield(principal, low, high):
    low, high = sorted((low, high))
    assert reward_per_second(principal, low) <= reward_per_second(principal, high)


slot_values = st.integers(min_value=1, max_value=10_000)


@given(
    base=st.lists(slot_values, min_size=3, max_size=3),
    update=st.lists(slot_values, min_size=0, max_size=3),
)
def test_partial_duration_update_keeps_trailing_slots(base, update):
    table = TermTable.build(base, [1, 2, 3])
    updated = table.with_durations(update)
    assert list(updated.durations[: len(update)]) == update
    assert updated.durations[len(update):] == table.durations[len(update):]
    assert updated.yields == table.yields
