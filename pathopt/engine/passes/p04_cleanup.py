"""cleanup: merge consecutive moves and tidy the leading move."""

from __future__ import annotations

import logging
from dataclasses import replace

from pathopt.engine.context import OptimizeContext, Position, PositionedPath
from pathopt.engine.registry import Stage, optimization_pass
from pathopt.svg.command import Kind, retag_implicit
from pathopt.svg.serializer import serialize_path

logger = logging.getLogger(__name__)


def merge_moves(positions: list[Position]) -> list[Position]:
    """Collapse each run of moves into one move ending where the run ends."""
    merged: list[Position] = []
    for position in positions:
        previous = merged[-1] if merged else None
        if previous is None or not (position.command.is_move and previous.command.is_move):
            merged.append(position)
            continue
        command = previous.command
        if command.relative:
            dx = position.end[0] - position.start[0]
            dy = position.end[1] - position.start[1]
            args = (command.args[0] + dx, command.args[1] + dy)
        else:
            args = position.end
        merged[-1] = Position(replace(command, args=args), previous.start, position.end)
    return merged


def switch_leading_move(positions: list[Position], negative_extra_space: bool = True) -> None:
    """Flip the first move's notation when the following line can then drop its letter.

    Only the very first move qualifies: at the origin its relative and
    absolute forms carry the same numbers. Applied only when shorter.
    """
    if len(positions) < 2:
        return
    first, second = positions[0], positions[1]
    if not first.command.is_move or second.command.kind is not Kind.LINE:
        return
    if first.command.relative == second.command.relative:
        return
    move = replace(first.command, relative=second.command.relative, implicit=False)
    line = second.command.as_implicit()
    before = serialize_path([first.command, second.command.explicit()], negative_extra_space)
    after = serialize_path([move, line], negative_extra_space)
    if len(after) < len(before):
        positions[0] = replace(first, command=move)
        positions[1] = replace(second, command=line)


def cleanup_positions(positioned: PositionedPath, negative_extra_space: bool = True) -> PositionedPath:
    positions = merge_moves(list(positioned))
    switch_leading_move(positions, negative_extra_space)
    if len(positions) == 1 and positions[0].command.is_move and positions[0].command.relative:
        positions[0] = replace(positions[0], command=replace(positions[0].command, relative=False))

    commands = retag_implicit(p.command for p in positions)
    return PositionedPath([replace(p, command=c) for p, c in zip(positions, commands)])


@optimization_pass(
    id="cleanup",
    stage=Stage.CLEANUP,
    dependencies=["filter"],
    description="Merge repeated moves and tidy the leading move",
)
def cleanup(ctx: OptimizeContext) -> None:
    before = len(ctx.positioned)
    ctx.positioned = cleanup_positions(ctx.positioned, ctx.options.flags.negative_extra_space)
    if len(ctx.positioned) != before:
        logger.debug("Cleanup merged %d moves", before - len(ctx.positioned))
