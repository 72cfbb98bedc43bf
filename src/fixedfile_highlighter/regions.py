"""Translate a rule set into the highlight regions of a single line."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, cast

from .diagnostics import Diagnostic, SkippedInvalidRule
from .rules import ColumnRule, DelimiterRule, Rule, RuleMode, RuleSet, compile_condition

logger = logging.getLogger("fixedfile_highlighter.regions")


@dataclass
class Region:
    """Half-open ``[start, end)`` character range on one line."""

    start: int
    end: int
    name: str
    applied: bool = False


@dataclass
class LineRegions:
    regions: List[Region] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def find_nth(delimiter: str, n: int, line: str) -> Optional[int]:
    """Return the index of the ``n``-th (1-based) ``delimiter`` in ``line``, if present."""

    if n < 1:
        return None
    index = -1
    for _ in range(n):
        index = line.find(delimiter, index + 1)
        if index < 0:
            return None
    return index


def _rule_applies(rule: Rule, line: str) -> bool:
    if rule.condition is None:
        return True
    return compile_condition(rule.condition).search(line) is not None


def _column_region(rule: ColumnRule) -> Region:
    if rule.start is None or rule.length is None:
        raise ValueError(f"Column rule {rule.name!r} has no start or length")
    start = rule.start - 1
    return Region(start=start, end=start + rule.length, name=rule.name)


def _delimiter_region(rule: DelimiterRule, delimiter: str, line: str) -> Region:
    if rule.field is None:
        raise ValueError(f"Delimiter rule {rule.name!r} has no field")
    if rule.field == 1:
        start = 0
    else:
        previous = find_nth(delimiter, rule.field - 1, line)
        start = previous + 1 if previous is not None else 0
    end = find_nth(delimiter, rule.field, line)
    return Region(start=start, end=end if end is not None else len(line), name=rule.name)


def resolve_regions(rule_set: RuleSet, line: str, line_index: int = 0) -> LineRegions:
    """
    Produce the regions ``rule_set`` defines for ``line``, in rule order.

    Rules whose condition does not match are skipped silently. Rules missing the
    numeric field their mode needs are skipped with a ``SkippedInvalidRule``
    diagnostic, once per line they would have applied to.
    """

    result = LineRegions()
    for rule_index, rule in enumerate(rule_set.rules):
        if not _rule_applies(rule, line):
            continue
        if rule_set.mode is RuleMode.COLUMN:
            if not isinstance(rule, ColumnRule):
                raise TypeError(f"Column rule set holds a {type(rule).__name__}")
            if not rule.is_valid:
                result.diagnostics.append(
                    SkippedInvalidRule(rule_index, rule.name, line_index, "'start' and 'length'")
                )
                continue
            result.regions.append(_column_region(rule))
        elif rule_set.mode is RuleMode.DELIMITER:
            if not isinstance(rule, DelimiterRule):
                raise TypeError(f"Delimiter rule set holds a {type(rule).__name__}")
            if not rule.is_valid:
                result.diagnostics.append(
                    SkippedInvalidRule(rule_index, rule.name, line_index, "'field'")
                )
                continue
            result.regions.append(_delimiter_region(rule, cast(str, rule_set.delimiter), line))
        else:  # pragma: no cover - exhaustive over RuleMode
            raise ValueError(f"Unsupported rule mode: {rule_set.mode!r}")
    logger.debug("Line %d resolved %d region(s)", line_index, len(result.regions))
    return result
