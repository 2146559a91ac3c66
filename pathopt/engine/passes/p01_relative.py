"""relative: resolve positions and re-base every command to relative notation.

The first move stays absolute: at the origin both encodings carry the same
numbers. Nothing is dropped or reordered.
"""

from __future__ import annotations

from pathopt.engine.context import OptimizeContext, Position, PositionedPath
from pathopt.engine.registry import Stage, optimization_pass
from pathopt.svg.command import Command, Kind, Path, Point, implied_letter


def to_positioned(path: Path, *, absolute: bool = False) -> PositionedPath:
    positions: list[Position] = []
    cursor: Point = (0.0, 0.0)
    subpath_start: Point = cursor
    previous: Command | None = None

    for index, command in enumerate(path):
        end = command.end_point(cursor, subpath_start)
        if absolute or index == 0:
            rebased = command.to_absolute(cursor)
        else:
            rebased = command.to_relative(cursor)

        # Re-basing can change the letter an implicit command relied on
        if rebased.implicit and implied_letter(previous) != rebased.letter:
            rebased = rebased.explicit()

        if command.kind is Kind.MOVE:
            subpath_start = end
        positions.append(Position(rebased, cursor, end))
        previous = rebased
        cursor = end

    return PositionedPath(positions)


@optimization_pass(
    id="relative",
    stage=Stage.NORMALIZE,
    description="Resolve absolute positions and re-base commands to relative notation",
)
def relative(ctx: OptimizeContext) -> None:
    ctx.positioned = to_positioned(ctx.path, absolute=ctx.options.flags.force_absolute_path)
