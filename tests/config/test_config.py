"""Tests for staking_config: loading, validation, bridges and the trace log."""

from pathlib import Path

import pytest
import yaml

from staking_config import (
    DEFAULT_CONFIG_PATH,
    compute_checksum,
    get_active_config,
    validate_configuration,
)
from staking_config.bridges import build_administrator_gate, build_engine_settings
from staking_config.loader import load_configuration
from staking_kernel.domain.term_table import TermValidation

VALID = {
    "config_id": "test",
    "version": 2,
    "term_table": {"durations": [7, 14, 28], "yields": [1, 2, 3]},
    "term_validation": "legacy",
    "seconds_per_term_unit": 60,
    "custody_account": "vault",
    "administrators": ["ops", "treasury"],
}


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "staking.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaultConfiguration:
    def test_default_file_ships_with_package(self):
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_default_values(self):
        config = get_active_config()
        assert config.config_id == "default"
        assert config.term_table.durations == (30, 90, 180)
        assert config.term_table.yields == (5, 10, 20)
        assert config.term_validation == "strict"
        assert config.seconds_per_term_unit == 86400
        assert config.administrators == ("admin",)

    def test_trace_logged(self, captured_logs):
        config = get_active_config()
        traces = [r for r in captured_logs() if r["message"] == "STAKING_CONFIG_TRACE"]
        assert traces[-1]["checksum"] == config.checksum
        assert traces[-1]["config_set_id"] == "default"


class TestLoading:
    def test_custom_file(self, tmp_path):
        config = get_active_config(_write(tmp_path, VALID))
        assert config.config_id == "test"
        assert config.custody_account == "vault"
        assert config.administrators == ("ops", "treasury")

    def test_optional_keys_default(self, tmp_path):
        minimal = {
            "config_id": "minimal",
            "version": 1,
            "term_table": {"durations": [30, 90, 180], "yields": [5, 10, 20]},
        }
        config = get_active_config(_write(tmp_path, minimal))
        assert config.term_validation == "strict"
        assert config.custody_account == "staking-custody"
        assert config.administrators == ()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_missing_required_key(self, tmp_path):
        data = dict(VALID)
        del data["term_table"]
        with pytest.raises(KeyError):
            get_active_config(_write(tmp_path, data))

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            get_active_config(path)


class TestChecksum:
    def test_deterministic(self):
        assert compute_checksum(VALID) == compute_checksum(dict(VALID))

    def test_key_order_irrelevant(self):
        reordered = dict(reversed(list(VALID.items())))
        assert compute_checksum(reordered) == compute_checksum(VALID)

    def test_changes_with_content(self, tmp_path):
        changed = dict(VALID, administrators=["ops"])
        a = load_configuration(_write(tmp_path, VALID)).checksum
        b = load_configuration(_write(tmp_path, changed)).checksum
        assert a != b


class TestValidation:
    def test_valid(self, tmp_path):
        result = validate_configuration(load_configuration(_write(tmp_path, VALID)))
        assert result.is_valid

    def test_collects_every_error(self, tmp_path):
        bad = dict(
            VALID,
            term_table={"durations": [0, 90], "yields": [-1, 2, 3, 4]},
            term_validation="lenient",
            seconds_per_term_unit=0,
        )
        result = validate_configuration(load_configuration(_write(tmp_path, bad)))
        assert not result.is_valid
        joined = "\n".join(result.errors)
        assert "durations must have exactly 3" in joined
        assert "yields must have exactly 3" in joined
        assert "durations[0]" in joined
        assert "yields[0]" in joined
        assert "term_validation" in joined
        assert "seconds_per_term_unit" in joined

    def test_custody_cannot_be_administrator(self, tmp_path):
        bad = dict(VALID, administrators=["vault"])
        result = validate_configuration(load_configuration(_write(tmp_path, bad)))
        assert any("custody_account" in e for e in result.errors)

    def test_invalid_configuration_raises(self, tmp_path):
        bad = dict(VALID, term_validation="lenient")
        with pytest.raises(ValueError, match="Configuration validation failed"):
            get_active_config(_write(tmp_path, bad))


class TestBridges:
    def test_engine_settings(self, tmp_path):
        settings = build_engine_settings(get_active_config(_write(tmp_path, VALID)))
        assert settings.term_validation is TermValidation.LEGACY
        assert settings.seconds_per_term_unit == 60
        assert settings.custody_account == "vault"
        assert settings.initial_durations == (7, 14, 28)
        assert settings.config_id == "test"

    def test_administrator_gate(self, tmp_path):
        gate = build_administrator_gate(get_active_config(_write(tmp_path, VALID)))
        assert gate.is_administrator("ops")
        assert not gate.is_administrator("alice")

    def test_configured_engine(self, tmp_path, make_engine, deterministic_clock):
        config = get_active_config(_write(tmp_path, VALID))
        engine = make_engine(
            settings=build_engine_settings(config),
            gate=build_administrator_gate(config),
        )
        receipt = engine.stake("alice", 100, 14)
        assert receipt.deposit.end_time - receipt.deposit.start_time == 14 * 60
        engine.set_yields("ops", [9])
        assert engine.term_table().yields == (9, 2, 3)
