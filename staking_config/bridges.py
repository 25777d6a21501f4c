"""
Config -> Kernel bridges.

Functions that convert a StakingConfiguration into kernel inputs.  They
live here because the kernel never imports staking_config.

Usage:
    config = get_active_config()
    engine = StakingEngine(session, staked, reward,
                           build_administrator_gate(config),
                           settings=build_engine_settings(config))
"""

from __future__ import annotations

from staking_config.schema import StakingConfiguration
from staking_kernel.adapters.in_memory_ledger import StaticAdministratorGate
from staking_kernel.domain.term_table import TermValidation
from staking_kernel.services.staking_engine import EngineSettings


def build_engine_settings(config: StakingConfiguration) -> EngineSettings:
    return EngineSettings(
        custody_account=config.custody_account,
        seconds_per_term_unit=config.seconds_per_term_unit,
        term_validation=TermValidation(config.term_validation),
        initial_durations=config.term_table.durations,
        initial_yields=config.term_table.yields,
        config_id=config.config_id,
    )


def build_administrator_gate(config: StakingConfiguration) -> StaticAdministratorGate:
    return StaticAdministratorGate(config.administrators)
