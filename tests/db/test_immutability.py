"""Tests for the ORM immutability listeners."""

from datetime import datetime, timezone

import pytest

from staking_kernel.exceptions import ImmutabilityViolationError
from staking_kernel.models.deposit import Deposit
from staking_kernel.models.staking_record import StakingRecord
from staking_kernel.models.term_table import TermTableVersion
from staking_kernel.services.record_service import RecordService


@pytest.fixture
def deposit(session):
    row = Deposit(
        deposit_id=0,
        owner="alice",
        amount=1000,
        term=30,
        start_time=1_704_110_400,
        end_time=1_704_110_400 + 30 * 86400,
        ended=False,
    )
    session.add(row)
    session.flush()
    return row


class TestDepositImmutability:
    def test_finalization_allowed(self, session, deposit):
        deposit.ended = True
        deposit.amount = 0
        session.flush()
        assert session.get(Deposit, deposit.id).ended is True

    @pytest.mark.parametrize(
        "field, value",
        [("owner", "mallory"), ("term", 180), ("end_time", 0), ("deposit_id", 9)],
    )
    def test_identity_fields_frozen(self, session, deposit, field, value):
        setattr(deposit, field, value)
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_amount_change_on_open_deposit_blocked(self, session, deposit):
        deposit.amount = 1
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_finalization_must_zero_amount(self, session, deposit):
        deposit.ended = True
        deposit.amount = 500
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_ended_cannot_reopen(self, session, deposit):
        deposit.ended = True
        deposit.amount = 0
        session.flush()

        deposit.ended = False
        with pytest.raises(ImmutabilityViolationError) as exc_info:
            session.flush()
        assert exc_info.value.entity_type == "Deposit"

    def test_delete_blocked(self, session, deposit):
        session.delete(deposit)
        with pytest.raises(ImmutabilityViolationError):
            session.flush()


class TestAppendOnlyTables:
    def test_record_update_blocked(self, session, deterministic_clock):
        record = RecordService(session, deterministic_clock).record_stake(0, "alice", 1, 30)
        record.actor = "mallory"
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_record_delete_blocked(self, session, deterministic_clock):
        record = RecordService(session, deterministic_clock).record_stake(0, "alice", 1, 30)
        session.delete(record)
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_term_table_version_update_blocked(self, session):
        row = TermTableVersion(
            version=1,
            duration_0=30,
            duration_1=90,
            duration_2=180,
            yield_0=5,
            yield_1=10,
            yield_2=20,
            changed_by="deployer",
            change_kind="initialize",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        session.add(row)
        session.flush()

        row.yield_1 = 50
        with pytest.raises(ImmutabilityViolationError):
            session.flush()

    def test_violation_logged(self, session, deposit, captured_logs):
        deposit.owner = "mallory"
        with pytest.raises(ImmutabilityViolationError):
            session.flush()
        blocked = [r for r in captured_logs() if r["message"] == "immutability_violation_blocked"]
        assert blocked[0]["entity_type"] == "Deposit"
        assert blocked[0]["field"] == "owner"
