"""
StakingConfiguration schema.

The frozen data model that YAML configuration files are parsed into.  It
holds data only; validation lives in ``validator.py`` and translation into
kernel inputs lives in ``bridges.py``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TermTableConfig:
    """Initial term table: durations in days and yields in whole percent."""

    durations: tuple[int, ...]
    yields: tuple[int, ...]


@dataclass(frozen=True)
class StakingConfiguration:
    """One complete, versioned staking configuration."""

    config_id: str
    version: int
    term_table: TermTableConfig
    term_validation: str = "strict"
    seconds_per_term_unit: int = 86400
    custody_account: str = "staking-custody"
    administrators: tuple[str, ...] = ()
    checksum: str = ""
