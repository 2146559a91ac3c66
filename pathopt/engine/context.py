"""OptimizeContext: the single mutable state object flowing through all passes.

Passes read ``ctx.positioned`` and replace it with their output; the input
``path`` is never mutated.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from pathopt.engine.config import Options, StyleInfo
from pathopt.svg.command import Command, Path, Point


@dataclass(frozen=True)
class Position:
    """A command with the absolute points the pen moves between."""

    command: Command
    start: Point
    end: Point


@dataclass
class PositionedPath:
    positions: list[Position] = field(default_factory=list)

    def take(self) -> Path:
        """Strip positions, returning the bare command sequence."""
        return Path([p.command for p in self.positions])

    def commands(self) -> list[Command]:
        return [p.command for p in self.positions]

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.positions)

    def __getitem__(self, index: int) -> Position:
        return self.positions[index]


@dataclass
class OptimizeContext:
    """Shared state flowing through the entire pipeline."""

    # Parsed input; never mutated
    path: Path = field(default_factory=Path)
    options: Options = field(default_factory=Options)
    style_info: StyleInfo = field(default_factory=StyleInfo)
    # Working command sequence, replaced by each pass
    positioned: PositionedPath = field(default_factory=PositionedPath)

    # --- Pipeline metadata ---
    completed_passes: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def error(self) -> float:
        return self.options.error()

    @property
    def includes_vertices(self) -> bool:
        """Whether the input draws anything beyond moves."""
        return self.path.has_drawing
