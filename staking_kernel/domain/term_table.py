"""
TermTable -- the three-slot (duration, annual yield) configuration.

Responsibility:
    Pure value type describing which lock durations a stake may choose and
    which simple annual yield applies to each.  Every stake validates its
    term here and every reward computation looks its yield up here.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Persistence of
    versions lives in models/term_table.py and services/term_table_service.py.

Invariants enforced:
    - Exactly three slots, structurally: ``durations`` and ``yields`` are
      ``tuple[int, int, int]`` and slot indices are checked against
      ``TERM_SLOTS``.
    - Durations are positive integers (days); yields are non-negative
      integer percentages.
    - Updates are whole-value: ``with_durations``/``with_yields`` return a
      new TermTable with ``version + 1`` and never mutate in place.
    - Partial updates (fewer than three entries) replace the leading slots
      only and keep the remaining slots at their prior values.

Failure modes:
    - InvalidConfigurationSizeError: update array longer than three.
    - InvalidConfigurationValueError: non-positive duration, negative yield,
      or a non-integer value.
    - IndexError: slot index outside 0..2.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from staking_kernel.exceptions import (
    InvalidConfigurationSizeError,
    InvalidConfigurationValueError,
)

TERM_SLOTS = 3

Slots = tuple[int, int, int]


class TermValidation(str, Enum):
    """How ``TermTable.accepts`` decides whether a requested term is valid.

    STRICT: the term must equal at least one configured duration.
    LEGACY: the historical check, which OR-ed three inequalities together and
        therefore only rejects a term when all three durations equal it.
    """

    STRICT = "strict"
    LEGACY = "legacy"


@dataclass(frozen=True)
class TermEntry:
    """One slot of the term table."""

    index: int
    duration: int
    annual_yield_percent: int


def _check_index(index: int) -> None:
    if not 0 <= index < TERM_SLOTS:
        raise IndexError(f"Term slot {index} out of range 0..{TERM_SLOTS - 1}")


def _validated(field: str, values: Sequence[int], minimum: int) -> list[int]:
    if len(values) > TERM_SLOTS:
        raise InvalidConfigurationSizeError(field, len(values), TERM_SLOTS)
    out: list[int] = []
    for i, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfigurationValueError(field, i, value, "must be an integer")
        if value < minimum:
            raise InvalidConfigurationValueError(field, i, value, f"must be >= {minimum}")
        out.append(value)
    return out


def _overlay(current: Slots, update: list[int]) -> Slots:
    merged = list(current)
    merged[: len(update)] = update
    return (merged[0], merged[1], merged[2])


@dataclass(frozen=True)
class TermTable:
    """
    Immutable snapshot of the term table at one version.

    Contract:
        ``durations[i]`` and ``yields[i]`` together form slot ``i``.

    Guarantees:
        - ``yield_for(term)`` returns the yield of the first slot whose
          duration equals ``term``, or 0 when no slot matches.  A removed
          duration therefore earns nothing; this is not an error.
    """

    durations: Slots
    yields: Slots
    version: int = 1

    @classmethod
    def build(
        cls,
        durations: Sequence[int],
        yields: Sequence[int],
        version: int = 1,
    ) -> TermTable:
        """Build a complete table; both sequences must have exactly three entries."""
        d = _validated("durations", durations, 1)
        y = _validated("yields", yields, 0)
        if len(d) != TERM_SLOTS:
            raise InvalidConfigurationSizeError("durations", len(d), TERM_SLOTS)
        if len(y) != TERM_SLOTS:
            raise InvalidConfigurationSizeError("yields", len(y), TERM_SLOTS)
        return cls(durations=(d[0], d[1], d[2]), yields=(y[0], y[1], y[2]), version=version)

    def with_durations(self, new_durations: Sequence[int]) -> TermTable:
        """Replace the leading duration slots; untouched slots keep their values."""
        update = _validated("durations", new_durations, 1)
        return TermTable(
            durations=_overlay(self.durations, update),
            yields=self.yields,
            version=self.version + 1,
        )

    def with_yields(self, new_yields: Sequence[int]) -> TermTable:
        """Replace the leading yield slots; untouched slots keep their values."""
        update = _validated("yields", new_yields, 0)
        return TermTable(
            durations=self.durations,
            yields=_overlay(self.yields, update),
            version=self.version + 1,
        )

    def entry(self, index: int) -> TermEntry:
        _check_index(index)
        return TermEntry(
            index=index,
            duration=self.durations[index],
            annual_yield_percent=self.yields[index],
        )

    def entries(self) -> tuple[TermEntry, TermEntry, TermEntry]:
        return (self.entry(0), self.entry(1), self.entry(2))

    def accepts(self, term: int, mode: TermValidation = TermValidation.STRICT) -> bool:
        """Whether a stake may choose ``term`` under the given validation mode."""
        d0, d1, d2 = self.durations
        if mode is TermValidation.LEGACY:
            return term != d0 or term != d1 or term != d2
        return term == d0 or term == d1 or term == d2

    def yield_for(self, term: int) -> int:
        for duration, annual_yield in zip(self.durations, self.yields):
            if duration == term:
                return annual_yield
        return 0
