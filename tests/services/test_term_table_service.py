"""Tests for TermTableService: persisted, versioned, administrator-gated."""

import pytest

from staking_kernel.adapters import StaticAdministratorGate
from staking_kernel.exceptions import (
    InvalidConfigurationSizeError,
    InvalidConfigurationValueError,
    NotAdministratorError,
    TermTableNotInitializedError,
)
from staking_kernel.models.term_table import TermTableVersion
from staking_kernel.services.record_service import RecordService
from staking_kernel.services.term_table_service import TermTableService


@pytest.fixture
def service(session, deterministic_clock):
    return TermTableService(
        session, StaticAdministratorGate(["admin"]), deterministic_clock
    )


@pytest.fixture
def initialized(service):
    service.initialize([30, 90, 180], [5, 10, 20], actor="deployer")
    return service


class TestInitialize:
    def test_read_before_initialize(self, service):
        assert service.is_initialized() is False
        with pytest.raises(TermTableNotInitializedError):
            service.current()

    def test_initialize_writes_version_one(self, service, session):
        table = service.initialize([30, 90, 180], [5, 10, 20], actor="deployer")
        assert table.version == 1

        row = session.query(TermTableVersion).one()
        assert row.durations == (30, 90, 180)
        assert row.yields == (5, 10, 20)
        assert row.change_kind == "initialize"
        assert row.changed_by == "deployer"

    def test_initialize_twice_keeps_first(self, initialized):
        again = initialized.initialize([1, 2, 3], [0, 0, 0], actor="deployer")
        assert again.durations == (30, 90, 180)
        assert len(initialized.history()) == 1

    def test_initialize_requires_three_slots(self, service):
        with pytest.raises(InvalidConfigurationSizeError):
            service.initialize([30, 90], [5, 10, 20], actor="deployer")

    def test_initialize_recorded(self, initialized, session, deterministic_clock):
        entries = RecordService(session, deterministic_clock).recent()
        assert entries[0].action == "TERM_TABLE_INITIALIZED"
        assert entries[0].payload == {
            "version": 1,
            "durations": [30, 90, 180],
            "yields": [5, 10, 20],
        }


class TestUpdates:
    def test_set_terms_partial(self, initialized):
        table = initialized.set_terms("admin", [45, 120])
        assert table.durations == (45, 120, 180)
        assert initialized.current() == table

    def test_set_yields_full(self, initialized):
        table = initialized.set_yields("admin", [1, 2, 3])
        assert table.yields == (1, 2, 3)
        assert table.durations == (30, 90, 180)

    def test_non_admin(self, initialized):
        with pytest.raises(NotAdministratorError) as exc_info:
            initialized.set_terms("mallory", [1])
        assert exc_info.value.operation == "set_terms"
        assert initialized.current().version == 1

    def test_authorization_checked_before_size(self, initialized):
        with pytest.raises(NotAdministratorError):
            initialized.set_yields("mallory", [1, 2, 3, 4])

    def test_size_rejected(self, initialized):
        with pytest.raises(InvalidConfigurationSizeError):
            initialized.set_yields("admin", [1, 2, 3, 4])

    def test_value_rejected(self, initialized):
        with pytest.raises(InvalidConfigurationValueError):
            initialized.set_terms("admin", [0])

    def test_history_oldest_first(self, initialized):
        initialized.set_terms("admin", [45])
        initialized.set_yields("admin", [9])
        history = initialized.history()
        assert [t.version for t in history] == [1, 2, 3]
        assert history[1].durations == (45, 90, 180)
        assert history[1].yields == (5, 10, 20)
        assert history[2].yields == (9, 10, 20)

    def test_get_term(self, initialized):
        entry = initialized.get_term(2)
        assert (entry.duration, entry.annual_yield_percent) == (180, 20)

    def test_updates_recorded(self, initialized, session, deterministic_clock):
        initialized.set_yields("admin", [9])
        latest = RecordService(session, deterministic_clock).recent(1)[0]
        assert latest.action == "YIELDS_UPDATED"
        assert latest.actor == "admin"
        assert latest.payload["yields"] == [9, 10, 20]

    def test_denied_change_logged(self, initialized, captured_logs):
        with pytest.raises(NotAdministratorError):
            initialized.set_yields("mallory", [1])
        denied = [r for r in captured_logs() if r["message"] == "term_table_change_denied"]
        assert denied[0]["caller"] == "mallory"
