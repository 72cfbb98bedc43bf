"""Highlighting rules and the CSV syntax-file parser that produces them.

A syntax file is a CSV table with a mandatory header. In column mode the header names
``start,length,name,condition``; in delimiter mode it names ``field,name,condition``.
Rules apply top-to-bottom, so row order is preserved everywhere downstream.
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Final, List, Optional, Sequence, Tuple, Union

COLUMN_FIELDS: Final[Tuple[str, ...]] = ("start", "length", "name", "condition")
DELIMITER_FIELDS: Final[Tuple[str, ...]] = ("field", "name", "condition")
OPTIONAL_FIELDS: Final[frozenset[str]] = frozenset({"condition"})


class SyntaxParseError(ValueError):
    """Raised when the syntax file is malformed."""

    def __init__(self, message: str, *, row: Optional[int] = None) -> None:
        if row is not None:
            message = f"Syntax file row {row}: {message}"
        super().__init__(message)
        self.row = row


class ConditionError(ValueError):
    """Raised when a rule condition is not a valid regular expression."""

    def __init__(self, pattern: str, error: re.error) -> None:
        super().__init__(f"Failed to parse condition regex {pattern!r}: {error}")
        self.pattern = pattern


class RuleMode(str, Enum):
    """Which addressing scheme a rule set uses."""

    COLUMN = "column"
    DELIMITER = "delimiter"


@dataclass(frozen=True)
class ColumnRule:
    """Highlight ``length`` characters starting at 1-based column ``start``."""

    start: Optional[int]
    length: Optional[int]
    name: str
    condition: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.start is not None and self.length is not None


@dataclass(frozen=True)
class DelimiterRule:
    """Highlight the 1-based delimited ``field`` of a line."""

    field: Optional[int]
    name: str
    condition: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.field is not None


Rule = Union[ColumnRule, DelimiterRule]


@dataclass(frozen=True)
class RuleSet:
    """Ordered, immutable rules plus the active addressing mode."""

    mode: RuleMode
    rules: Tuple[Rule, ...]
    delimiter: Optional[str] = None

    def __post_init__(self) -> None:
        if self.mode is RuleMode.DELIMITER:
            if self.delimiter is None or len(self.delimiter) != 1:
                raise ValueError("Delimiter rule sets need exactly one delimiter character")
        elif self.delimiter is not None:
            raise ValueError("Column rule sets cannot carry a delimiter")

    def __len__(self) -> int:
        return len(self.rules)


@lru_cache(maxsize=256)
def compile_condition(pattern: str) -> re.Pattern[str]:
    """Compile and cache a rule condition."""

    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConditionError(pattern, exc) from exc


def _parse_header(header: Sequence[str], expected: Tuple[str, ...], row: int) -> Dict[str, int]:
    names = [cell.strip().lower() for cell in header]
    seen: Dict[str, int] = {}
    for index, name in enumerate(names):
        if name in seen:
            raise SyntaxParseError(f"duplicate header column {name!r}", row=row)
        if name not in expected:
            raise SyntaxParseError(
                f"unexpected header column {name!r}; expected {','.join(expected)}", row=row
            )
        seen[name] = index
    missing = [name for name in expected if name not in seen and name not in OPTIONAL_FIELDS]
    if missing:
        raise SyntaxParseError(
            f"missing header column(s) {', '.join(missing)}; expected {','.join(expected)}", row=row
        )
    return seen


def _positive_int(raw: str, column: str, row: int) -> Optional[int]:
    text = raw.strip()
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        raise SyntaxParseError(f"{column} must be a positive integer, got {raw!r}", row=row) from None
    if value < 1:
        raise SyntaxParseError(f"{column} must be a positive integer, got {raw!r}", row=row)
    return value


def _condition(cells: Sequence[str], columns: Dict[str, int]) -> Optional[str]:
    index = columns.get("condition")
    if index is None:
        return None
    pattern = cells[index]
    if not pattern:
        return None
    compile_condition(pattern)
    return pattern


def parse_rule_set(text: str, delimiter: Optional[str] = None) -> RuleSet:
    """
    Parse syntax-file ``text`` into a RuleSet.

    The mode is selected by ``delimiter``: ``None`` means column mode, a single
    character means delimiter mode.

    Raises:
        SyntaxParseError: On a missing or mismatched header, a row whose cell count
            differs from the header, or a numeric cell that is not a positive integer.
        ConditionError: When a condition is not a valid regular expression.
    """

    mode = RuleMode.COLUMN if delimiter is None else RuleMode.DELIMITER
    expected = COLUMN_FIELDS if mode is RuleMode.COLUMN else DELIMITER_FIELDS

    reader = csv.reader(io.StringIO(text))
    header: Optional[List[str]] = None
    header_row_number = 0
    for header_row in reader:
        if any(cell.strip() for cell in header_row):
            header = header_row
            header_row_number = reader.line_num
            break
    if header is None:
        raise SyntaxParseError(f"missing header row; expected {','.join(expected)}")
    columns = _parse_header(header, expected, header_row_number)

    rules: List[Rule] = []
    for cells in reader:
        row = reader.line_num
        if not any(cell.strip() for cell in cells):
            continue
        if len(cells) != len(header):
            raise SyntaxParseError(
                f"expected {len(header)} fields but found {len(cells)}", row=row
            )
        name = cells[columns["name"]]
        condition = _condition(cells, columns)
        if mode is RuleMode.COLUMN:
            rules.append(
                ColumnRule(
                    start=_positive_int(cells[columns["start"]], "start", row),
                    length=_positive_int(cells[columns["length"]], "length", row),
                    name=name,
                    condition=condition,
                )
            )
        else:
            rules.append(
                DelimiterRule(
                    field=_positive_int(cells[columns["field"]], "field", row),
                    name=name,
                    condition=condition,
                )
            )
    return RuleSet(mode=mode, rules=tuple(rules), delimiter=delimiter)
