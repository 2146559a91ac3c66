"""mixed: per command, keep whichever of relative or absolute notation is shorter."""

from __future__ import annotations

from pathopt.engine.config import Options
from pathopt.engine.context import OptimizeContext, Position, PositionedPath
from pathopt.engine.registry import Stage, optimization_pass
from pathopt.svg.command import Command, Kind, with_implicit
from pathopt.svg.serializer import serialize_command


def _cost(previous: Command | None, command: Command, negative_extra_space: bool) -> int:
    command = with_implicit(previous, command)
    return len(serialize_command(command, previous, negative_extra_space))


def choose_notation(positioned: PositionedPath, options: Options) -> PositionedPath:
    error = options.error()
    nes = options.flags.negative_extra_space
    positions: list[Position] = []
    previous: Command | None = None

    for index, position in enumerate(positioned):
        command = position.command.explicit()
        if index > 0 and command.kind is not Kind.CLOSE:
            relative = options.round_command(command.to_relative(position.start), error)
            absolute = options.round_command(command.to_absolute(position.start), error)
            # Ties keep relative
            if _cost(previous, absolute, nes) < _cost(previous, relative, nes):
                command = absolute
            else:
                command = relative
        command = with_implicit(previous, command)
        positions.append(Position(command, position.start, position.end))
        previous = command

    return PositionedPath(positions)


@optimization_pass(
    id="mixed",
    stage=Stage.NOTATION,
    dependencies=["filter"],
    tags={"utilize_absolute"},
    description="Choose the shorter of relative and absolute notation per command",
)
def mixed(ctx: OptimizeContext) -> None:
    ctx.positioned = choose_notation(ctx.positioned, ctx.options)
