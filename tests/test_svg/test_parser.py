"""Tests for the path-data parser."""

import pytest

from pathopt.svg.command import Kind
from pathopt.svg.parser import PathParseError, parse_path_data
from tests.conftest import ALL_FIXTURES


def test_parse_simple_move():
    path = parse_path_data("M 10,50")
    assert len(path) == 1
    assert path[0].kind is Kind.MOVE
    assert path[0].args == (10.0, 50.0)
    assert not path[0].relative


def test_separator_variants_agree():
    expected = parse_path_data("M10 50").commands
    for text in ["M 10,50", "M10,50", "M 10 , 50", "  M\t10\n50  "]:
        assert parse_path_data(text).commands == expected


def test_sign_acts_as_separator():
    path = parse_path_data("M-10-50")
    assert path[0].args == (-10.0, -50.0)


def test_exponent():
    path = parse_path_data("M10-3.05176e-005")
    assert path[0].args == (10.0, -3.05176e-05)


def test_second_decimal_point_starts_new_number():
    path = parse_path_data("M10-50.2.30-2")
    assert path[0].args == (10.0, -50.2)
    assert path[1].kind is Kind.LINE
    assert path[1].implicit
    assert path[1].args == (0.3, -2.0)


def test_compact_arc_flags():
    path = parse_path_data("M0 0a1 1 0 011 1")
    arc = path[1]
    assert arc.kind is Kind.ARC
    assert arc.relative
    assert arc.args == (1.0, 1.0, 0.0, 0.0, 1.0, 1.0, 1.0)


def test_repeated_groups_become_implicit():
    path = parse_path_data("M 10,50 C 20,30 40,50 60,70 40,40 50,60 70,80")
    assert [c.kind for c in path] == [Kind.MOVE, Kind.CURVE, Kind.CURVE]
    assert not path[1].implicit
    assert path[2].implicit


def test_repeated_move_becomes_line():
    path = parse_path_data("m 0,0 10,10 5,5")
    assert [c.kind for c in path] == [Kind.MOVE, Kind.LINE, Kind.LINE]
    assert all(c.relative for c in path)
    assert path[1].implicit and path[2].implicit


def test_close_path_letters():
    path = parse_path_data("M0 0h10v10Z m5 5 h1z")
    kinds = [c.kind for c in path]
    assert kinds.count(Kind.CLOSE) == 2


def test_empty_input():
    assert len(parse_path_data("")) == 0
    assert len(parse_path_data("   ")) == 0


@pytest.mark.parametrize(
    "text",
    [
        "L10 10",  # must start with a move
        "M10 10 X5",  # unknown command
        "M10 10 L5",  # incomplete group
        "M10 10 L5 -",  # malformed number
        "M0 0z 5 5",  # arguments after close
        "M0 0a1 1 0 2 1 1 1",  # bad arc flag
    ],
)
def test_malformed_input_raises(text):
    with pytest.raises(PathParseError):
        parse_path_data(text)


def test_error_offset_points_at_problem():
    with pytest.raises(PathParseError) as exc_info:
        parse_path_data("M10 10 X5")
    assert exc_info.value.offset == 7


def test_fixtures_parse():
    for d in ALL_FIXTURES:
        path = parse_path_data(d)
        assert path[0].kind is Kind.MOVE
        assert len(path) > 1
