"""
Configuration Validator (``staking_config.validator``).

Validates a parsed ``StakingConfiguration`` before it is handed to the
kernel.  Every problem is collected; nothing stops at the first error.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from staking_config.schema import StakingConfiguration

TERM_SLOTS = 3
TERM_VALIDATION_MODES = ("strict", "legacy")


@dataclass
class ValidationResult:
    """``is_valid`` is ``True`` only when ``errors`` is empty."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_configuration(config: StakingConfiguration) -> ValidationResult:
    """Validate term table shape and values, modes and accounts."""
    result = ValidationResult()

    if not config.config_id:
        result.add_error("config_id must not be empty")
    if not _is_int(config.version) or config.version < 1:
        result.add_error(f"version must be a positive integer, got {config.version!r}")

    durations = config.term_table.durations
    yields = config.term_table.yields
    if len(durations) != TERM_SLOTS:
        result.add_error(
            f"term_table.durations must have exactly {TERM_SLOTS} entries, got {len(durations)}"
        )
    if len(yields) != TERM_SLOTS:
        result.add_error(
            f"term_table.yields must have exactly {TERM_SLOTS} entries, got {len(yields)}"
        )
    for i, d in enumerate(durations):
        if not _is_int(d) or d < 1:
            result.add_error(f"term_table.durations[{i}] must be a positive integer, got {d!r}")
    for i, y in enumerate(yields):
        if not _is_int(y) or y < 0:
            result.add_error(f"term_table.yields[{i}] must be a non-negative integer, got {y!r}")

    if config.term_validation not in TERM_VALIDATION_MODES:
        result.add_error(
            f"term_validation must be one of {list(TERM_VALIDATION_MODES)}, "
            f"got {config.term_validation!r}"
        )
    if not _is_int(config.seconds_per_term_unit) or config.seconds_per_term_unit < 1:
        result.add_error(
            "seconds_per_term_unit must be a positive integer, "
            f"got {config.seconds_per_term_unit!r}"
        )
    if not config.custody_account:
        result.add_error("custody_account must not be empty")
    if config.custody_account in config.administrators:
        result.add_error("custody_account must not be an administrator")

    return result
