"""
staking_config -- single public entrypoint for staking configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration
    files.  The kernel never imports this package; ``bridges`` translates
    the returned configuration into kernel inputs.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``ValueError`` -- validation failed; the message lists every error.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``STAKING_CONFIG_TRACE`` log entry with the config_id, version and
    checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from staking_config.loader import compute_checksum, load_configuration
from staking_config.schema import StakingConfiguration, TermTableConfig
from staking_config.validator import ValidationResult, validate_configuration

_logger = logging.getLogger("staking_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> StakingConfiguration:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to
            ``staking_config/sets/default.yaml``.

    Returns:
        A validated, frozen ``StakingConfiguration``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If configuration validation fails.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_configuration(path)

    validation = validate_configuration(config)
    if not validation.is_valid:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in validation.errors)
        )

    _logger.info(
        "STAKING_CONFIG_TRACE",
        extra={
            "trace_type": "STAKING_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
            "term_validation": config.term_validation,
            "administrator_count": len(config.administrators),
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "StakingConfiguration",
    "TermTableConfig",
    "ValidationResult",
    "compute_checksum",
    "get_active_config",
    "validate_configuration",
]
