"""Non-fatal anomalies raised while resolving and rendering lines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Union

logger = logging.getLogger("fixedfile_highlighter.diagnostics")


@dataclass(frozen=True)
class SkippedInvalidRule:
    """A rule lacked the numeric field its mode requires and was skipped."""

    rule_index: int
    name: str
    line_index: int
    required: str

    @property
    def message(self) -> str:
        return (
            f"Syntax record {self.rule_index + 1} ({self.name!r}) skipped on line {self.line_index}"
            f" as fields were not correctly filled in (needs {self.required}!)"
        )


@dataclass(frozen=True)
class LineTooShort:
    """Regions were still open when the line ended and had to be force-closed."""

    line_index: int
    open_regions: int

    @property
    def message(self) -> str:
        return f"Line {self.line_index} was not long enough to fit the matching regions."


@dataclass(frozen=True)
class RegionNotApplied:
    """A region never reached its closing boundary on this line."""

    name: str
    line_index: int

    @property
    def message(self) -> str:
        return f"Failed to highlight rule {self.name} on line {self.line_index}!"


Diagnostic = Union[SkippedInvalidRule, LineTooShort, RegionNotApplied]


def log_diagnostics(diagnostics: Iterable[Diagnostic]) -> int:
    """Log each diagnostic as a warning and return how many were emitted."""

    count = 0
    for diagnostic in diagnostics:
        logger.warning(diagnostic.message)
        count += 1
    return count
