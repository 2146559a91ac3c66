"""Path command model: the closed set of SVG path-data commands.

A ``Command`` is an immutable value: a kind (one of ``M L H V C S Q T A Z``),
its arguments, whether those arguments are relative deltas or absolute
coordinates, and whether the command letter is omitted in serialized form
(an *implicit* command repeating its predecessor's letter).
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathopt.utils.geometry import Rect

Point = tuple[float, float]


class Kind(str, enum.Enum):
    MOVE = "M"
    LINE = "L"
    HORIZONTAL = "H"
    VERTICAL = "V"
    CURVE = "C"
    SMOOTH_CURVE = "S"
    QUAD = "Q"
    SMOOTH_QUAD = "T"
    ARC = "A"
    CLOSE = "Z"

    @property
    def arity(self) -> int:
        return len(_AXES[self])

    @property
    def axes(self) -> tuple[str | None, ...]:
        """Axis of each argument slot: "x", "y", or None for non-coordinates."""
        return _AXES[self]


_AXES: dict[Kind, tuple[str | None, ...]] = {
    Kind.MOVE: ("x", "y"),
    Kind.LINE: ("x", "y"),
    Kind.HORIZONTAL: ("x",),
    Kind.VERTICAL: ("y",),
    Kind.CURVE: ("x", "y", "x", "y", "x", "y"),
    Kind.SMOOTH_CURVE: ("x", "y", "x", "y"),
    Kind.QUAD: ("x", "y", "x", "y"),
    Kind.SMOOTH_QUAD: ("x", "y"),
    # rx ry x-axis-rotation large-arc-flag sweep-flag x y
    Kind.ARC: (None, None, None, None, None, "x", "y"),
    Kind.CLOSE: (),
}

LINE_KINDS = frozenset({Kind.LINE, Kind.HORIZONTAL, Kind.VERTICAL})
CUBIC_KINDS = frozenset({Kind.CURVE, Kind.SMOOTH_CURVE})
QUAD_KINDS = frozenset({Kind.QUAD, Kind.SMOOTH_QUAD})

# Arc flag slots are never rounded and always written as a single digit.
ARC_FLAG_SLOTS = (3, 4)


@dataclass(frozen=True)
class Command:
    kind: Kind
    args: tuple[float, ...] = ()
    relative: bool = False
    implicit: bool = False

    def __post_init__(self) -> None:
        if len(self.args) != self.kind.arity:
            raise ValueError(
                f"{self.kind.name} takes {self.kind.arity} arguments, got {len(self.args)}"
            )

    @property
    def letter(self) -> str:
        if self.kind is Kind.CLOSE:
            return "z"
        return self.kind.value.lower() if self.relative else self.kind.value

    @property
    def is_move(self) -> bool:
        return self.kind is Kind.MOVE

    def explicit(self) -> Command:
        return replace(self, implicit=False) if self.implicit else self

    def as_implicit(self) -> Command:
        return self if self.implicit else replace(self, implicit=True)

    def to_absolute(self, start: Point) -> Command:
        """Re-express the command in absolute coordinates, given its start point."""
        if not self.relative or self.kind is Kind.CLOSE:
            return self
        return replace(self, args=_shift(self, start, 1.0), relative=False)

    def to_relative(self, start: Point) -> Command:
        """Re-express the command as deltas from its start point."""
        if self.relative or self.kind is Kind.CLOSE:
            return self
        return replace(self, args=_shift(self, start, -1.0), relative=True)

    def end_point(self, start: Point, subpath_start: Point) -> Point:
        """Absolute point the pen rests on after this command."""
        if self.kind is Kind.CLOSE:
            return subpath_start
        ox, oy = start if self.relative else (0.0, 0.0)
        if self.kind is Kind.HORIZONTAL:
            return (ox + self.args[0], start[1])
        if self.kind is Kind.VERTICAL:
            return (start[0], oy + self.args[0])
        return (ox + self.args[-2], oy + self.args[-1])


def _shift(command: Command, start: Point, sign: float) -> tuple[float, ...]:
    dx, dy = start[0] * sign, start[1] * sign
    shifted = []
    for value, axis in zip(command.args, command.kind.axes):
        if axis == "x":
            value += dx
        elif axis == "y":
            value += dy
        shifted.append(value)
    return tuple(shifted)


def implied_letter(previous: Command | None) -> str | None:
    """Letter an implicit command following ``previous`` would be read as."""
    if previous is None or previous.kind is Kind.CLOSE:
        return None
    if previous.kind is Kind.MOVE:
        return "l" if previous.relative else "L"
    return previous.letter


def with_implicit(previous: Command | None, command: Command) -> Command:
    """Tag ``command`` implicit exactly when its letter can be omitted after ``previous``."""
    if command.kind is not Kind.CLOSE and implied_letter(previous) == command.letter:
        return command.as_implicit()
    return command.explicit()


def retag_implicit(commands: Iterable[Command]) -> list[Command]:
    tagged: list[Command] = []
    previous: Command | None = None
    for command in commands:
        command = with_implicit(previous, command)
        tagged.append(command)
        previous = command
    return tagged


# --- Variant constructors -------------------------------------------------


def move_to(x: float, y: float) -> Command:
    return Command(Kind.MOVE, (x, y))


def move_by(dx: float, dy: float) -> Command:
    return Command(Kind.MOVE, (dx, dy), relative=True)


def line_to(x: float, y: float) -> Command:
    return Command(Kind.LINE, (x, y))


def line_by(dx: float, dy: float) -> Command:
    return Command(Kind.LINE, (dx, dy), relative=True)


def hline_to(x: float) -> Command:
    return Command(Kind.HORIZONTAL, (x,))


def hline_by(dx: float) -> Command:
    return Command(Kind.HORIZONTAL, (dx,), relative=True)


def vline_to(y: float) -> Command:
    return Command(Kind.VERTICAL, (y,))


def vline_by(dy: float) -> Command:
    return Command(Kind.VERTICAL, (dy,), relative=True)


def curve_to(x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> Command:
    return Command(Kind.CURVE, (x1, y1, x2, y2, x, y))


def curve_by(x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> Command:
    return Command(Kind.CURVE, (x1, y1, x2, y2, x, y), relative=True)


def smooth_curve_to(x2: float, y2: float, x: float, y: float) -> Command:
    return Command(Kind.SMOOTH_CURVE, (x2, y2, x, y))


def smooth_curve_by(x2: float, y2: float, x: float, y: float) -> Command:
    return Command(Kind.SMOOTH_CURVE, (x2, y2, x, y), relative=True)


def quad_to(x1: float, y1: float, x: float, y: float) -> Command:
    return Command(Kind.QUAD, (x1, y1, x, y))


def quad_by(x1: float, y1: float, x: float, y: float) -> Command:
    return Command(Kind.QUAD, (x1, y1, x, y), relative=True)


def smooth_quad_to(x: float, y: float) -> Command:
    return Command(Kind.SMOOTH_QUAD, (x, y))


def smooth_quad_by(x: float, y: float) -> Command:
    return Command(Kind.SMOOTH_QUAD, (x, y), relative=True)


def arc_to(
    rx: float, ry: float, rotation: float, large_arc: bool, sweep: bool, x: float, y: float
) -> Command:
    return Command(Kind.ARC, (rx, ry, rotation, float(large_arc), float(sweep), x, y))


def arc_by(
    rx: float, ry: float, rotation: float, large_arc: bool, sweep: bool, x: float, y: float
) -> Command:
    return Command(
        Kind.ARC, (rx, ry, rotation, float(large_arc), float(sweep), x, y), relative=True
    )


def close_path() -> Command:
    return Command(Kind.CLOSE)


@dataclass
class Path:
    """Ordered command sequence. A non-empty path always starts with a move."""

    commands: list[Command] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> Path:
        from pathopt.svg.parser import parse_path_data

        return parse_path_data(text)

    def to_string(self, negative_extra_space: bool = True) -> str:
        from pathopt.svg.serializer import serialize_path

        return serialize_path(self.commands, negative_extra_space=negative_extra_space)

    def __str__(self) -> str:
        return self.to_string()

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def __getitem__(self, index: int) -> Command:
        return self.commands[index]

    @property
    def has_drawing(self) -> bool:
        return any(not c.is_move for c in self.commands)

    def intersects(self, rect: Rect) -> bool:
        """Whether any part of the path could be visible inside ``rect``."""
        from pathopt.utils.geometry import intersects

        return intersects(self, rect)
