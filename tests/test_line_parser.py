# tests/test_line_parser.py

import pytest

from core.line_parser import ParseError, parse_line
from core.response import ErrorCode


def test_parse_space_delimited_line():
    record = parse_line("1001 Ada Lovelace ComputerScience 92.5\n")

    assert record.id == 1001
    assert record.name == "Ada Lovelace"
    assert record.programme == "ComputerScience"
    assert record.mark == 92.5


def test_parse_fixed_width_line_with_runs_of_spaces():
    record = parse_line("1002       Alan Turing     Mathematics               40.0  \r\n")

    assert record.id == 1002
    assert record.name == "Alan Turing"
    assert record.programme == "Mathematics"
    assert record.mark == 40.0


def test_multi_token_programme_is_joined():
    record = parse_line("7 Grace Hopper Software Engineering Honours 71")

    assert record.name == "Grace Hopper"
    assert record.programme == "Software Engineering Honours"


def test_four_tokens_leave_an_empty_programme():
    record = parse_line("7 Grace Hopper 71")

    assert record.name == "Grace Hopper"
    assert record.programme == ""


def test_tab_delimited_line_keeps_fields_verbatim():
    record = parse_line("42\tMary Ann Evans\tEnglish Literature\t66.5\n")

    assert record.name == "Mary Ann Evans"
    assert record.programme == "English Literature"


def test_tab_line_without_four_fields_falls_back_to_whitespace():
    record = parse_line("42\tMary\tEvans\tEnglish\t66.5")

    assert record.name == "Mary Evans"
    assert record.programme == "English"


def test_name_token_count_moves_split_point():
    record = parse_line("42 Mary Ann Evans English 66.5", name_token_count=3)

    assert record.name == "Mary Ann Evans"
    assert record.programme == "English"


@pytest.mark.parametrize("line", ["", "1001 Ada 92.5", "1001"])
def test_too_few_tokens_is_malformed(line):
    with pytest.raises(ParseError) as exc:
        parse_line(line)

    assert exc.value.error is ErrorCode.MALFORMED_LINE


def test_name_split_cannot_consume_the_mark():
    with pytest.raises(ParseError) as exc:
        parse_line("1 A B C 50", name_token_count=4)

    assert exc.value.error is ErrorCode.MALFORMED_LINE


@pytest.mark.parametrize("token", ["-1", "abc", "12x", "1.5", "+3"])
def test_invalid_id(token):
    with pytest.raises(ParseError) as exc:
        parse_line(f"{token} Ada Lovelace CS 50.0")

    assert exc.value.error is ErrorCode.INVALID_ID


@pytest.mark.parametrize("token", ["-0.5", "100.5", "abc", "50x", "nan", "inf"])
def test_invalid_mark(token):
    with pytest.raises(ParseError) as exc:
        parse_line(f"1 Ada Lovelace CS {token}")

    assert exc.value.error is ErrorCode.INVALID_MARK


@pytest.mark.parametrize("token", ["0", "100", "0.0", "100.0"])
def test_mark_bounds_are_inclusive(token):
    assert parse_line(f"1 Ada Lovelace CS {token}").mark == float(token)


def test_overlong_programme_is_rejected():
    with pytest.raises(ParseError) as exc:
        parse_line(f"1 Ada Lovelace {'x' * 128} 50")

    assert exc.value.error is ErrorCode.INVALID_FIELD_VALUE


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_line("bad")
