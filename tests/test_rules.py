"""Syntax-file parsing into rule sets."""

from __future__ import annotations

import pytest

from src.fixedfile_highlighter.rules import (
    ColumnRule,
    ConditionError,
    DelimiterRule,
    RuleMode,
    RuleSet,
    SyntaxParseError,
    parse_rule_set,
)


def test_column_rules_keep_row_order(id_code_rules: RuleSet) -> None:
    assert id_code_rules.mode is RuleMode.COLUMN
    assert id_code_rules.delimiter is None
    assert id_code_rules.rules == (
        ColumnRule(start=1, length=3, name="ID"),
        ColumnRule(start=5, length=2, name="Code"),
    )


def test_delimiter_rules_carry_delimiter() -> None:
    rule_set = parse_rule_set('field,name,condition\n2,"Second",\n1,First,^a\n', delimiter=",")

    assert rule_set.mode is RuleMode.DELIMITER
    assert rule_set.delimiter == ","
    assert rule_set.rules == (
        DelimiterRule(field=2, name="Second"),
        DelimiterRule(field=1, name="First", condition="^a"),
    )


def test_header_may_be_reordered_and_condition_omitted() -> None:
    rule_set = parse_rule_set("Name, Length ,START\nAmount,4,10\n")

    assert rule_set.rules == (ColumnRule(start=10, length=4, name="Amount"),)


def test_empty_numeric_cells_make_invalid_rules() -> None:
    rule_set = parse_rule_set("start,length,name,condition\n,3,NoStart,\n2,,NoLength,\n")

    assert [rule.is_valid for rule in rule_set.rules] == [False, False]
    assert rule_set.rules[0] == ColumnRule(start=None, length=3, name="NoStart")


def test_blank_rows_are_ignored() -> None:
    rule_set = parse_rule_set("\nstart,length,name,condition\n\n1,1,A,\n\n")

    assert len(rule_set) == 1


@pytest.mark.parametrize(
    ("text", "delimiter", "fragment"),
    [
        ("field,name,condition\n1,A,\n", None, "unexpected header column 'field'"),
        ("start,length,name,condition\n1,1,A,\n", ",", "unexpected header column 'start'"),
        ("start,name,condition\n1,A,\n", None, "missing header column(s) length"),
        ("start,length,name,name\n1,1,A,B\n", None, "duplicate header column 'name'"),
    ],
)
def test_header_is_validated_against_mode(text: str, delimiter: str | None, fragment: str) -> None:
    with pytest.raises(SyntaxParseError) as excinfo:
        parse_rule_set(text, delimiter)

    assert fragment in str(excinfo.value)
    assert excinfo.value.row == 1


def test_missing_header_is_fatal() -> None:
    with pytest.raises(SyntaxParseError, match="missing header row"):
        parse_rule_set("   \n")


@pytest.mark.parametrize("value", ["x", "0", "-2", "1.5"])
def test_non_positive_numeric_cell_names_row(value: str) -> None:
    text = f"start,length,name,condition\n1,1,A,\n{value},2,B,\n"

    with pytest.raises(SyntaxParseError) as excinfo:
        parse_rule_set(text)

    assert excinfo.value.row == 3
    assert str(excinfo.value).startswith("Syntax file row 3: start must be a positive integer")


def test_row_arity_mismatch_is_fatal() -> None:
    with pytest.raises(SyntaxParseError) as excinfo:
        parse_rule_set("field,name,condition\n1,A\n", delimiter="|")

    assert excinfo.value.row == 2
    assert "expected 3 fields but found 2" in str(excinfo.value)


def test_invalid_condition_regex_is_fatal() -> None:
    with pytest.raises(ConditionError) as excinfo:
        parse_rule_set("start,length,name,condition\n1,1,A,(unclosed\n")

    assert excinfo.value.pattern == "(unclosed"


def test_quoted_condition_may_contain_commas() -> None:
    rule_set = parse_rule_set('start,length,name,condition\n1,2,A,"^\\d{1,3}"\n')

    assert rule_set.rules[0].condition == "^\\d{1,3}"


@pytest.mark.parametrize(
    ("mode", "delimiter"),
    [(RuleMode.DELIMITER, None), (RuleMode.DELIMITER, "ab"), (RuleMode.COLUMN, ",")],
)
def test_rule_set_rejects_inconsistent_mode(mode: RuleMode, delimiter: str | None) -> None:
    with pytest.raises(ValueError):
        RuleSet(mode=mode, rules=(), delimiter=delimiter)
