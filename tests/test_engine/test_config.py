"""Tests for flags, style info and precision rounding."""

import pytest

from pathopt.engine.config import Flags, Options, StyleInfo
from pathopt.svg.command import arc_by


def test_flag_defaults():
    flags = Flags()
    assert flags.remove_useless and flags.utilize_absolute and flags.negative_extra_space
    assert not flags.force_absolute_path


def test_error_bound():
    assert Options(precision=3).error() == 0.001
    assert Options(precision=1).error() == 0.1
    assert Options(precision=0).error() == 1.0


def test_round_drops_digit_within_error():
    options = Options(precision=3)
    assert options.round(0.12344999, options.error()) == 0.123
    assert options.round(10.0004, options.error()) == 10.0
    assert options.round(1.23456, options.error()) == 1.235


def test_round_keeps_exact_values():
    options = Options(precision=3)
    assert options.round(1.5, options.error()) == 1.5
    assert options.round(-2.25, options.error()) == -2.25


@pytest.mark.parametrize("precision", [-1, 0, 20])
def test_round_outside_range_goes_to_integer(precision):
    options = Options(precision=precision)
    assert options.round(2.5, options.error()) == 3.0
    assert options.round(-2.5, options.error()) == -3.0
    assert options.round(7.2, options.error()) == 7.0


@pytest.mark.parametrize("value", [0.12344999, 3.14159265, -7.77777, 123.4567891, 0.0005])
def test_rounding_error_bounded(value):
    options = Options(precision=3)
    assert abs(options.round(value, options.error()) - value) < options.error()


def test_round_data():
    options = Options(precision=2)
    assert options.round_data((1.234, 5.0), options.error()) == (1.23, 5.0)


def test_round_command_leaves_arc_flags():
    options = Options(precision=1)
    command = options.round_command(arc_by(2.04, 2.04, 0, True, True, 1.26, 0), options.error())
    assert command.args[3:5] == (1.0, 1.0)
    assert command.args[0] == 2.0


def test_gather_without_stroke():
    style = StyleInfo.gather({})
    assert style.is_safe_to_use_z
    assert not style.maybe_has_stroke
    assert not style.has_marker_mid


def test_gather_stroke_none():
    style = StyleInfo.gather({"stroke": "none", "stroke-linecap": "square"})
    assert not style.maybe_has_stroke
    assert style.maybe_has_linecap
    assert style.is_safe_to_use_z


def test_gather_stroke_needs_round_cap_and_join_for_z():
    assert not StyleInfo.gather({"stroke": "red", "stroke-linecap": "round"}).is_safe_to_use_z
    assert StyleInfo.gather(
        {"stroke": "red", "stroke-linecap": "round", "stroke-linejoin": "round"}
    ).is_safe_to_use_z


def test_gather_butt_cap():
    assert not StyleInfo.gather({"stroke": "red", "stroke-linecap": "butt"}).maybe_has_linecap


def test_gather_markers():
    style = StyleInfo.gather({"marker-mid": "url(#m)"}, has_marker=True)
    assert style.has_marker_mid
    assert style.has_marker
