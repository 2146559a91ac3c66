"""Tests for per-command notation choice."""

from pathopt.engine.config import Options
from pathopt.engine.context import Position, PositionedPath
from pathopt.engine.passes.p01_relative import to_positioned
from pathopt.engine.passes.p03_mixed import choose_notation
from pathopt.svg.command import Path, close_path, line_by, move_by


def _choose(d: str) -> str:
    return str(choose_notation(to_positioned(Path.parse(d)), Options()).take())


def test_absolute_when_shorter():
    assert _choose("M10 50L0 30") == "M10 50 0 30"


def test_tie_keeps_relative():
    assert _choose("M10 50L20 60") == "M10 50l10 10"


def test_relative_when_shorter():
    assert _choose("M100 100L101 101") == "M100 100l1 1"


def test_close_kept():
    assert _choose("M10 10L20 10L10 20Z") == "M10 10l10 0-10 10z"


def test_first_command_untouched():
    positioned = PositionedPath([
        Position(move_by(5, 5), (0.0, 0.0), (5.0, 5.0)),
        Position(line_by(-5, -5), (5.0, 5.0), (0.0, 0.0)),
        Position(close_path(), (0.0, 0.0), (5.0, 5.0)),
    ])
    first = choose_notation(positioned, Options())[0].command
    assert first.relative
    assert first.args == (5.0, 5.0)
