"""
Configuration Loader (``staking_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a frozen
``StakingConfiguration``.  This is internal tooling; runtime callers go
through ``staking_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* A top-level document that is not a mapping  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from staking_config.schema import StakingConfiguration, TermTableConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its top-level mapping."""
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")
    return data


def parse_term_table(data: dict[str, Any]) -> TermTableConfig:
    return TermTableConfig(
        durations=tuple(data["durations"]),
        yields=tuple(data["yields"]),
    )


def parse_configuration(data: dict[str, Any]) -> StakingConfiguration:
    """
    Parse a configuration mapping.

    The checksum is computed over the raw mapping so that any edit to the
    file, including to optional keys, changes it.
    """
    return StakingConfiguration(
        config_id=data["config_id"],
        version=data["version"],
        term_table=parse_term_table(data["term_table"]),
        term_validation=data.get("term_validation", "strict"),
        seconds_per_term_unit=data.get("seconds_per_term_unit", 86400),
        custody_account=data.get("custody_account", "staking-custody"),
        administrators=tuple(data.get("administrators", ())),
        checksum=compute_checksum(data),
    )


def load_configuration(path: Path) -> StakingConfiguration:
    return parse_configuration(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
