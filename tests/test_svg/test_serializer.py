"""Tests for the path-data serializer."""

import pytest

from pathopt.svg.command import (
    Command,
    Kind,
    Path,
    arc_by,
    close_path,
    line_by,
    move_to,
    vline_by,
)
from pathopt.svg.parser import parse_path_data
from pathopt.svg.serializer import format_number, serialize_command, serialize_path
from tests.conftest import ALL_FIXTURES, max_deviation


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.0, "0"),
        (-0.0, "0"),
        (10.0, "10"),
        (100.0, "100"),
        (1000.0, "1e3"),
        (0.5, ".5"),
        (-0.5, "-.5"),
        (123.456, "123.456"),
        (0.0001, "1e-4"),
        (-3.05176e-05, "-3.05176e-5"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_no_space_before_negative():
    commands = [move_to(10, 50), line_by(-10, -20)]
    assert serialize_path(commands) == "M10 50l-10-20"
    assert serialize_path(commands, negative_extra_space=False) == "M10 50l-10 -20"


def test_no_space_between_fractions():
    commands = [move_to(0, 0), line_by(0.5, 0.5)]
    assert serialize_path(commands) == "M0 0l.5.5"
    assert serialize_path(commands, negative_extra_space=False) == "M0 0l.5 .5"


def test_space_kept_after_exponent():
    commands = [move_to(1e-4, 0.5)]
    assert serialize_path(commands) == "M1e-4 .5"


def test_implicit_command_written_without_letter():
    commands = [move_to(0, 0), vline_by(5), vline_by(5).as_implicit()]
    assert serialize_path(commands) == "M0 0v5 5"


def test_implicit_after_negative():
    previous = line_by(10, -20)
    implicit = line_by(-5, 3).as_implicit()
    assert serialize_command(implicit, previous) == "-5 3"


def test_arc_flags_written_as_digits():
    commands = [move_to(0, 0), arc_by(2, 2, 0, False, True, 4, 0), close_path()]
    assert serialize_path(commands) == "M0 0a2 2 0 0 1 4 0z"


def test_path_str_round_trip():
    text = "M10 50l-10-20h5.5v.5z"
    path = Path.parse(text)
    assert str(path) == text
    assert parse_path_data(str(path)).commands == path.commands


def test_command_arity_checked():
    with pytest.raises(ValueError):
        Command(Kind.LINE, (1.0,))


def test_fixtures_reparse_to_same_geometry():
    for d in ALL_FIXTURES:
        rewritten = str(Path.parse(d))
        assert max_deviation(d, rewritten) < 1e-9
