"""filter: rewrite each command into its cheapest equivalent form.

Every input command is first expanded to absolute longhand geometry, so the
true shape never depends on earlier rewrites. The walk then emits rounded
commands against the *rendered* cursor: where the pen actually is after the
already-emitted, already-rounded output. Relative rounding therefore never
accumulates drift, and every rewrite is checked against what a renderer
would draw.

Candidates for one command are ranked by serialized length after the
previous emitted command; ties go to a candidate that can drop its letter,
then to generation order (the command's own kind comes first).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from pathopt.engine.config import Flags, Options, StyleInfo
from pathopt.engine.context import OptimizeContext, Position, PositionedPath
from pathopt.engine.registry import Stage, optimization_pass
from pathopt.svg.command import LINE_KINDS, Command, Kind, Point, close_path, with_implicit
from pathopt.svg.serializer import serialize_command
from pathopt.utils.geometry import (
    ArcFit,
    Segment,
    arc_sagitta,
    fit_arc,
    is_straight,
    join_samples,
    longhand_segments,
)
from pathopt.utils.math_helpers import cross, dot, near, reflect, sub, to_fixed

logger = logging.getLogger(__name__)

# (command, rendered absolute control point or None, curve degree: 3, 2 or 0)
Step = tuple[Command, Point | None, int]


@dataclass
class FilterState:
    cursor: Point = (0.0, 0.0)
    subpath_start: Point = (0.0, 0.0)
    output: list[Position] = field(default_factory=list)
    # Last control point of the previous emitted curve, as rendered
    prev_control: Point | None = None
    prev_degree: int = 0

    @property
    def previous(self) -> Command | None:
        return self.output[-1].command if self.output else None

    def emit(self, command: Command, control: Point | None = None, degree: int = 0) -> None:
        end = command.end_point(self.cursor, self.subpath_start)
        command = with_implicit(self.previous, command)
        self.output.append(Position(command, self.cursor, end))
        if command.kind is Kind.MOVE:
            self.subpath_start = end
        self.cursor = end
        self.prev_control, self.prev_degree = control, degree

    def pop(self) -> Position:
        position = self.output.pop()
        self.cursor = position.start
        self.prev_control, self.prev_degree = None, 0
        return position


class PathFilter:
    def __init__(self, options: Options, style_info: StyleInfo) -> None:
        self.options = options
        self.flags: Flags = options.flags
        self.style = style_info
        self.error = options.error()
        self.state = FilterState()
        self._samples: dict[Segment, NDArray[np.float64]] = {}
        self._radii: dict[tuple[float, float, bool], float | None] = {}
        self.removal_allowed = (
            self.flags.remove_useless and not style_info.has_marker and not style_info.has_marker_mid
        )
        # A zero-length segment still paints a dot under a round or square cap
        self.zero_length_removal_allowed = self.removal_allowed and not (
            style_info.maybe_has_stroke and style_info.maybe_has_linecap
        )

    def run(self, positioned: PositionedPath) -> PositionedPath:
        sources = positioned.commands()
        segments = longhand_segments(sources)
        index = 0
        while index < len(segments):
            index += self._visit(index, segments, sources)
        return PositionedPath(self.state.output)

    # --- Building and measuring -------------------------------------------

    def command(self, kind: Kind, args: tuple[float, ...], start: Point, *, absolute: bool = False) -> Command:
        """Rounded command from absolute ``args``, expressed against ``start``."""
        command = Command(kind, tuple(args))
        if not (absolute or self.flags.force_absolute_path):
            command = command.to_relative(start)
        return self.options.round_command(command, self.error)

    def cost(self, steps: list[Step]) -> int:
        previous = self.state.previous
        total = 0
        for command, _, _ in steps:
            command = with_implicit(previous, command)
            total += len(serialize_command(command, previous, self.flags.negative_extra_space))
            previous = command
        return total

    def choose(self, candidates: list[list[Step]]) -> list[Step]:
        previous = self.state.previous

        def rank(item: tuple[int, list[Step]]) -> tuple[int, bool, int]:
            index, steps = item
            implicit = with_implicit(previous, steps[0][0]).implicit
            return (self.cost(steps), not implicit, index)

        return min(enumerate(candidates), key=rank)[1]

    def emit_all(self, steps: list[Step]) -> None:
        for command, control, degree in steps:
            self.state.emit(command, control, degree)

    @staticmethod
    def _point(command: Command, start: Point, slot: int) -> Point:
        absolute = command.to_absolute(start)
        return (absolute.args[slot], absolute.args[slot + 1])

    # --- Traversal ----------------------------------------------------------

    def _visit(self, index: int, segments: list[Segment], sources: list[Command]) -> int:
        """Handle the segment at ``index``; return how many segments were consumed."""
        segment = segments[index]
        following = segments[index + 1] if index + 1 < len(segments) else None
        trailing = following is None or following.kind in (Kind.MOVE, Kind.CLOSE)

        if segment.kind is Kind.MOVE:
            self.state.emit(self.command(Kind.MOVE, segment.end, self.state.cursor, absolute=index == 0))
            return 1

        if segment.kind is Kind.CLOSE:
            previous = self.state.previous
            if previous is not None and (
                (self.removal_allowed and previous.kind is Kind.CLOSE)
                or (self.zero_length_removal_allowed and previous.kind is Kind.MOVE)
            ):
                return 1
            self.state.emit(close_path())
            return 1

        if segment.is_curve:
            consumed = self._arc_run(index, segments, sources)
            if consumed:
                return consumed

        if self._is_useless(segment):
            return 1

        source = sources[index].kind
        if segment.kind is Kind.LINE:
            self._collapse(segment.end)
            candidates = self.line_candidates(segment.end, source, trailing)
        elif segment.kind is Kind.ARC:
            candidates = self.arc_candidates(segment, trailing)
        else:
            candidates = self.curve_candidates(segment, source, trailing)
        self.emit_all(self.choose(candidates))
        return 1

    def _is_useless(self, segment: Segment) -> bool:
        cursor = self.state.cursor
        if segment.kind is Kind.ARC:
            # Coincident endpoints: the arc is not rendered at all
            if self.removal_allowed and segment.start == segment.end:
                return True
            if segment.arc is not None and segment.arc[3]:
                return False
        if not self.zero_length_removal_allowed:
            return False
        return all(near(point, cursor, self.error) for point in segment.points[1:])

    def _collapse(self, end: Point) -> None:
        """Fold the previous emitted line into this one when both run the same way."""
        if not self.flags.collapse_repeated or self.style.has_marker_mid or not self.state.output:
            return
        previous = self.state.output[-1]
        if previous.command.kind not in LINE_KINDS:
            return
        first, second = sub(previous.end, previous.start), sub(end, previous.end)
        if dot(first, second) <= 0:
            return
        chord = sub(end, previous.start)
        length = math.hypot(*chord)
        if length == 0 or abs(cross(chord, first)) / length >= self.error:
            return
        self.state.pop()

    # --- Candidate generators ---------------------------------------------

    def line_candidates(self, end: Point, own: Kind, trailing: bool) -> list[list[Step]]:
        start = self.state.cursor
        candidates: list[list[Step]] = []
        order = [own] + [k for k in (Kind.LINE, Kind.HORIZONTAL, Kind.VERTICAL) if k is not own]
        for kind in order:
            if kind is Kind.HORIZONTAL:
                if not (own is kind or self.flags.line_shorthands) or abs(end[1] - start[1]) >= self.error:
                    continue
                command = self.command(kind, (end[0],), start)
            elif kind is Kind.VERTICAL:
                if not (own is kind or self.flags.line_shorthands) or abs(end[0] - start[0]) >= self.error:
                    continue
                command = self.command(kind, (end[1],), start)
            else:
                command = self.command(Kind.LINE, end, start)
            candidates.append([(command, None, 0)])

        if (
            self.flags.convert_to_z
            and self.style.is_safe_to_use_z
            and trailing
            and near(end, self.state.subpath_start, self.error)
        ):
            candidates.append([(close_path(), None, 0)])
        return candidates

    def _reflects(self, control: Point, degree: int) -> Point | None:
        """The implied first control point of a shorthand, if it matches ``control``."""
        state = self.state
        if state.prev_degree == degree and state.prev_control is not None:
            implied = reflect(state.prev_control, state.cursor)
        else:
            implied = state.cursor
        return implied if near(implied, control, self.error) else None

    def curve_candidates(self, segment: Segment, source: Kind, trailing: bool) -> list[list[Step]]:
        start = self.state.cursor
        end = segment.end
        smooth_enabled = self.flags.curve_smooth_shorthands
        candidates: list[list[Step]] = []

        if segment.kind is Kind.CURVE:
            _, c1, c2, _ = segment.points
            full = self.command(Kind.CURVE, (*c1, *c2, *end), start)
            curves = [[(full, self._point(full, start, 2), 3)]]
            if (smooth_enabled or source is Kind.SMOOTH_CURVE) and self._reflects(c1, 3):
                smooth = self.command(Kind.SMOOTH_CURVE, (*c2, *end), start)
                curves.append([(smooth, self._point(smooth, start, 0), 3)])
            candidates.extend(curves[::-1] if source is Kind.SMOOTH_CURVE else curves)
            quadratic = self._as_quadratic(segment) if self.flags.convert_to_q else None
            if quadratic is not None:
                candidates.extend(self._quad_candidates(quadratic, end, smooth_enabled))
        else:
            _, control, _ = segment.points
            quads = self._quad_candidates(control, end, smooth_enabled or source is Kind.SMOOTH_QUAD)
            candidates.extend(quads[::-1] if source is Kind.SMOOTH_QUAD else quads)

        if self.flags.straight_curves and is_straight(segment.points, self.error):
            candidates.extend(self.line_candidates(end, Kind.LINE, trailing))

        fit = self._fit([segment])
        if fit is not None and not fit.is_full_turn:
            candidates.append(self._arc_steps(fit, segment.start, end))
        return candidates

    def _quad_candidates(self, control: Point, end: Point, smooth: bool) -> list[list[Step]]:
        start = self.state.cursor
        full = self.command(Kind.QUAD, (*control, *end), start)
        candidates = [[(full, self._point(full, start, 0), 2)]]
        if smooth:
            implied = self._reflects(control, 2)
            if implied is not None:
                candidates.append([(self.command(Kind.SMOOTH_QUAD, end, start), implied, 2)])
        return candidates

    def _as_quadratic(self, segment: Segment) -> Point | None:
        """The quadratic control point a cubic was degree-elevated from, if any."""
        p0, p1, p2, p3 = segment.points
        from_start = ((3 * p1[0] - p0[0]) / 2, (3 * p1[1] - p0[1]) / 2)
        from_end = ((3 * p2[0] - p3[0]) / 2, (3 * p2[1] - p3[1]) / 2)
        if not near(from_start, from_end, 2 * self.error):
            return None
        return ((from_start[0] + from_end[0]) / 2, (from_start[1] + from_end[1]) / 2)

    def arc_candidates(self, segment: Segment, trailing: bool) -> list[list[Step]]:
        start = self.state.cursor
        end = segment.end
        rx, ry, rotation, large_arc, sweep = segment.arc
        chord = math.hypot(*sub(segment.end, segment.start))

        if rx == 0 or ry == 0:
            # Rendered as a straight line
            if self.flags.straight_curves:
                return self.line_candidates(end, Kind.LINE, trailing)
            rounded = (rx, ry)
        elif rx == ry and self.flags.smart_arc_rounding:
            radius = self._smart_radius(rx, end, large_arc)
            rounded = (radius, radius)
        else:
            rounded = (rx, ry)

        arc = self.command(Kind.ARC, (*rounded, rotation, float(large_arc), float(sweep), *end), start)
        candidates = [[(arc, None, 0)]]
        if self.flags.straight_curves and rx == ry and not large_arc:
            sagitta = arc_sagitta(rx, chord)
            if sagitta is not None and sagitta < self.error:
                candidates.extend(self.line_candidates(end, Kind.LINE, trailing))
        return candidates

    def _smart_radius(self, radius: float, end: Point, large_arc: bool) -> float:
        """Shortest radius that keeps the arc height within the error and survives a rerun."""
        # Measured on the chord a rerun will see
        start = self.state.cursor
        rendered_end = self.command(Kind.LINE, end, start).end_point(start, self.state.subpath_start)
        chord = math.hypot(*sub(rendered_end, start))
        if self.options.precision <= 0 or arc_sagitta(radius, chord, large_arc) is None:
            return radius
        shortest = self._shortest_radius(radius, chord, large_arc)
        if shortest is None:
            # No stable radius lies within the error; settle on the plainly rounded one
            shortest = self._shortest_radius(self.options.round(radius, self.error), chord, large_arc)
        return shortest

    def _shortest_radius(self, radius: float, chord: float, large_arc: bool) -> float | None:
        """The fewest-digit radius within the error of ``radius`` that maps to itself.

        Candidates at each digit count are the two grid values around ``radius``,
        nearest first. Returns ``radius`` once its own digit count is reached, and
        None when it has more digits than the precision keeps.
        """
        key = (radius, chord, large_arc)
        if key in self._radii:
            return self._radii[key]
        height = arc_sagitta(radius, chord, large_arc)
        result: float | None = radius if height is None else None
        for digits in range(self.options.precision + 1):
            if result is not None:
                break
            nearest = to_fixed(radius, digits)
            if nearest == radius:
                result = radius
                break
            other = to_fixed(nearest + math.copysign(10.0**-digits, radius - nearest), digits)
            for candidate in (nearest, other):
                candidate_height = arc_sagitta(candidate, chord, large_arc)
                if candidate_height is None or abs(candidate_height - height) >= self.error:
                    continue
                # Fewer digits than ``radius``, so the recursion bottoms out
                if self._shortest_radius(candidate, chord, large_arc) == candidate:
                    result = candidate
                    break
        self._radii[key] = result
        return result

    # --- Arc fitting --------------------------------------------------------

    def _fit(self, segments: list[Segment]) -> ArcFit | None:
        config = self.options.make_arcs
        if config is None:
            return None
        points = join_samples([self._sample(segment) for segment in segments])
        return fit_arc(
            points,
            threshold=config.threshold,
            tolerance=config.tolerance,
            error=self.error,
            round_radius=lambda r: self.options.round(r, self.error),
        )

    def _sample(self, segment: Segment) -> NDArray[np.float64]:
        if segment not in self._samples:
            self._samples[segment] = segment.sample()
        return self._samples[segment]

    def _arc_steps(self, fit: ArcFit, true_start: Point, end: Point) -> list[Step]:
        start = self.state.cursor
        radius = fit.radius
        sweep = float(fit.sweep)
        if fit.is_full_turn:
            # A single arc cannot close on itself; split at the opposite point
            middle = reflect(true_start, fit.center)
            first = self.command(Kind.ARC, (radius, radius, 0.0, 0.0, sweep, *middle), start)
            rendered_middle = first.end_point(start, self.state.subpath_start)
            second = self.command(Kind.ARC, (radius, radius, 0.0, 0.0, sweep, *end), rendered_middle)
            return [(first, None, 0), (second, None, 0)]
        if self.flags.smart_arc_rounding:
            radius = self._smart_radius(radius, end, fit.large_arc)
        arc = self.command(
            Kind.ARC, (radius, radius, 0.0, float(fit.large_arc), sweep, *end), start
        )
        return [(arc, None, 0)]

    def _arc_run(self, index: int, segments: list[Segment], sources: list[Command]) -> int:
        """Replace a run of two or more curves lying on one circle with arcs."""
        if self.options.make_arcs is None or self.style.has_marker_mid:
            return 0
        best: tuple[int, ArcFit] | None = None
        last = index + 1
        while last < len(segments) and segments[last].is_curve:
            fit = self._fit(segments[index : last + 1])
            if fit is None:
                break
            best = (last, fit)
            if fit.is_full_turn:
                break
            last += 1
        if best is None:
            return 0

        last, fit = best
        steps = self._arc_steps(fit, segments[index].start, segments[last].end)
        replaced = sum(
            len(serialize_command(self.options.round_command(source.explicit(), self.error)))
            for source in sources[index : last + 1]
        )
        if self.cost(steps) >= replaced:
            return 0
        logger.debug("Fitted %d curves to an arc (r=%s)", last - index + 1, fit.radius)
        self.emit_all(steps)
        return last - index + 1


@optimization_pass(
    id="filter",
    stage=Stage.OPTIMIZE,
    dependencies=["relative"],
    description="Rewrite each command into its cheapest equivalent form",
)
def filter_commands(ctx: OptimizeContext) -> None:
    ctx.positioned = PathFilter(ctx.options, ctx.style_info).run(ctx.positioned)
