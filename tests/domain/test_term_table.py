"""Tests for the three-slot TermTable value type."""

import pytest

from staking_kernel.domain.term_table import TermEntry, TermTable, TermValidation
from staking_kernel.exceptions import (
    InvalidConfigurationSizeError,
    InvalidConfigurationValueError,
)


@pytest.fixture
def table() -> TermTable:
    return TermTable.build([30, 90, 180], [5, 10, 20])


class TestBuild:
    def test_build_complete_table(self, table):
        assert table.durations == (30, 90, 180)
        assert table.yields == (5, 10, 20)
        assert table.version == 1

    def test_build_requires_three_durations(self):
        with pytest.raises(InvalidConfigurationSizeError) as exc_info:
            TermTable.build([30, 90], [5, 10, 20])
        assert exc_info.value.field == "durations"

    def test_build_rejects_four_yields(self):
        with pytest.raises(InvalidConfigurationSizeError) as exc_info:
            TermTable.build([30, 90, 180], [5, 10, 20, 30])
        assert exc_info.value.size == 4
        assert exc_info.value.code == "INVALID_CONFIGURATION_SIZE"


class TestPartialUpdates:
    def test_single_duration_replaces_slot_zero_only(self, table):
        updated = table.with_durations([45])
        assert updated.durations == (45, 90, 180)
        assert updated.yields == table.yields
        assert updated.version == 2

    def test_two_yields_replace_leading_slots(self, table):
        updated = table.with_yields([7, 8])
        assert updated.yields == (7, 8, 20)
        assert updated.durations == table.durations

    def test_empty_update_keeps_values_and_bumps_version(self, table):
        updated = table.with_yields([])
        assert updated.yields == table.yields
        assert updated.version == 2

    def test_four_entries_rejected(self, table):
        with pytest.raises(InvalidConfigurationSizeError):
            table.with_durations([1, 2, 3, 4])

    def test_original_unchanged(self, table):
        table.with_durations([1, 2, 3])
        assert table.durations == (30, 90, 180)

    @pytest.mark.parametrize("bad", [0, -1])
    def test_non_positive_duration_rejected(self, table, bad):
        with pytest.raises(InvalidConfigurationValueError) as exc_info:
            table.with_durations([30, bad])
        assert exc_info.value.index == 1

    def test_negative_yield_rejected(self, table):
        with pytest.raises(InvalidConfigurationValueError):
            table.with_yields([-1])

    def test_zero_yield_allowed(self, table):
        assert table.with_yields([0]).yields == (0, 10, 20)

    @pytest.mark.parametrize("bad", [1.5, "30", True, None])
    def test_non_integer_rejected(self, table, bad):
        with pytest.raises(InvalidConfigurationValueError):
            table.with_durations([bad])


class TestLookup:
    def test_entry(self, table):
        assert table.entry(1) == TermEntry(index=1, duration=90, annual_yield_percent=10)

    def test_entries(self, table):
        assert [e.duration for e in table.entries()] == [30, 90, 180]

    @pytest.mark.parametrize("index", [-1, 3])
    def test_entry_out_of_range(self, table, index):
        with pytest.raises(IndexError):
            table.entry(index)

    def test_yield_for_configured_term(self, table):
        assert table.yield_for(180) == 20

    def test_yield_for_unknown_term_is_zero(self, table):
        assert table.yield_for(45) == 0

    def test_yield_for_duplicate_duration_uses_first_slot(self):
        dup = TermTable.build([90, 90, 180], [3, 10, 20])
        assert dup.yield_for(90) == 3


class TestAccepts:
    @pytest.mark.parametrize("term", [30, 90, 180])
    def test_strict_accepts_configured(self, table, term):
        assert table.accepts(term)

    @pytest.mark.parametrize("term", [0, 31, 365])
    def test_strict_rejects_unconfigured(self, table, term):
        assert not table.accepts(term, TermValidation.STRICT)

    @pytest.mark.parametrize("term", [0, 31, 90, 365])
    def test_legacy_accepts_when_durations_differ(self, table, term):
        assert table.accepts(term, TermValidation.LEGACY)

    def test_legacy_rejects_only_when_all_slots_equal_term(self):
        same = TermTable.build([60, 60, 60], [1, 2, 3])
        assert not same.accepts(60, TermValidation.LEGACY)
        assert same.accepts(61, TermValidation.LEGACY)

    def test_mode_from_config_string(self, table):
        assert TermValidation("legacy") is TermValidation.LEGACY
        assert table.accepts(31, TermValidation("legacy"))
