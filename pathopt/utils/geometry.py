"""Leaf-node geometry helpers: longhand segments, sampling, arc fitting, intersection.

Segments are evaluated with svgpathtools; fitting runs on numpy arrays and the
rectangle test on shapely geometry. No engine imports.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import LineString, Polygon, box
from svgpathtools import Arc, CubicBezier, QuadraticBezier

from pathopt.svg.command import CUBIC_KINDS, QUAD_KINDS, Command, Kind, Path, Point
from pathopt.utils.math_helpers import cross, dot, reflect, sub

# Samples per curve segment when fitting or flattening.
SAMPLES_PER_SEGMENT = 17

# Sweep angles within this many radians of a full turn count as a closed circle.
_FULL_TURN_SLACK = 1e-3

# Radii beyond this are a straight line in disguise.
_MAX_RADIUS = 1e15


@dataclass(frozen=True)
class Rect:
    top: float
    left: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class Segment:
    """Absolute longhand geometry of one command.

    ``kind`` is one of MOVE, LINE, CURVE, QUAD, ARC, CLOSE; ``points`` runs from
    the start point through any control points to the end point.
    """

    kind: Kind
    points: tuple[Point, ...]
    # rx, ry, x-axis-rotation, large-arc, sweep
    arc: tuple[float, float, float, bool, bool] | None = None

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def is_curve(self) -> bool:
        return self.kind in (Kind.CURVE, Kind.QUAD)

    def sample(self, count: int = SAMPLES_PER_SEGMENT) -> NDArray[np.float64]:
        """Nx2 array of points along the segment, endpoints included."""
        if self.kind is Kind.CURVE:
            seg = CubicBezier(*(complex(*p) for p in self.points))
        elif self.kind is Kind.QUAD:
            seg = QuadraticBezier(*(complex(*p) for p in self.points))
        elif self.kind is Kind.ARC and not self.is_degenerate_arc:
            rx, ry, rotation, large_arc, sweep = self.arc
            seg = Arc(
                complex(*self.start), complex(rx, ry), rotation, large_arc, sweep, complex(*self.end)
            )
        else:
            return np.array([self.start, self.end], dtype=float)
        values = np.array([seg.point(t) for t in np.linspace(0.0, 1.0, count)])
        return np.column_stack([values.real, values.imag])

    @property
    def is_degenerate_arc(self) -> bool:
        """Zero radius or coincident endpoints: rendered as a line or not at all."""
        if self.arc is None:
            return False
        rx, ry = self.arc[0], self.arc[1]
        return rx == 0 or ry == 0 or self.start == self.end


def longhand_segments(commands: Iterable[Command]) -> list[Segment]:
    """Expand commands to absolute longhand segments.

    Shorthand curves take their reflected control point from the command that
    precedes them in ``commands``.
    """
    segments: list[Segment] = []
    cursor: Point = (0.0, 0.0)
    subpath_start: Point = cursor
    previous: Command | None = None
    previous_control: Point | None = None

    for command in commands:
        command = command.explicit()
        end = command.end_point(cursor, subpath_start)
        absolute = command.to_absolute(cursor)
        args = absolute.args
        kind = command.kind
        control: Point | None = None

        if kind is Kind.MOVE:
            segment = Segment(Kind.MOVE, (cursor, end))
            subpath_start = end
        elif kind in (Kind.LINE, Kind.HORIZONTAL, Kind.VERTICAL):
            segment = Segment(Kind.LINE, (cursor, end))
        elif kind is Kind.CLOSE:
            segment = Segment(Kind.CLOSE, (cursor, end))
        elif kind is Kind.CURVE:
            control = (args[2], args[3])
            segment = Segment(Kind.CURVE, (cursor, (args[0], args[1]), control, end))
        elif kind is Kind.SMOOTH_CURVE:
            first = cursor
            if previous is not None and previous.kind in CUBIC_KINDS and previous_control:
                first = reflect(previous_control, cursor)
            control = (args[0], args[1])
            segment = Segment(Kind.CURVE, (cursor, first, control, end))
        elif kind is Kind.QUAD:
            control = (args[0], args[1])
            segment = Segment(Kind.QUAD, (cursor, control, end))
        elif kind is Kind.SMOOTH_QUAD:
            control = cursor
            if previous is not None and previous.kind in QUAD_KINDS and previous_control:
                control = reflect(previous_control, cursor)
            segment = Segment(Kind.QUAD, (cursor, control, end))
        else:
            rx, ry, rotation, large_arc, sweep = args[:5]
            segment = Segment(
                Kind.ARC, (cursor, end), (abs(rx), abs(ry), rotation, bool(large_arc), bool(sweep))
            )

        segments.append(segment)
        previous, previous_control = command, control
        cursor = end
    return segments


# --- Straightness ---------------------------------------------------------


def is_straight(points: Sequence[Point], error: float) -> bool:
    """Whether every inner control point lies on the chord, within ``error``.

    Control points must also project inside the chord, otherwise the curve
    overshoots its endpoints.
    """
    first, last = points[0], points[-1]
    chord = sub(last, first)
    length_sq = dot(chord, chord)
    if length_sq == 0:
        return False
    length = math.sqrt(length_sq)
    for point in points[1:-1]:
        offset = sub(point, first)
        if abs(cross(chord, offset)) / length > error:
            return False
        along = dot(offset, chord) / length
        if along < -error or along > length + error:
            return False
    return True


def arc_sagitta(radius: float, chord: float, large_arc: bool = False) -> float | None:
    """Height of a circular arc of ``radius`` over ``chord``; None if the chord is too long."""
    if chord > 2 * radius:
        return None
    offset = math.sqrt(radius * radius - chord * chord / 4)
    return radius + offset if large_arc else radius - offset


# --- Arc fitting ----------------------------------------------------------


@dataclass(frozen=True)
class ArcFit:
    radius: float
    large_arc: bool
    sweep: bool
    center: Point
    # Signed swept angle in radians; positive is the SVG positive-angle direction.
    angle: float

    @property
    def is_full_turn(self) -> bool:
        return abs(abs(self.angle) - 2 * math.pi) <= _FULL_TURN_SLACK


def fit_circle(points: NDArray[np.float64]) -> tuple[Point, float] | None:
    """Algebraic least-squares circle fit. Returns (center, radius) or None."""
    if len(points) < 3:
        return None
    origin = points.mean(axis=0)
    shifted = points - origin
    x, y = shifted[:, 0], shifted[:, 1]
    design = np.column_stack([2 * x, 2 * y, np.ones_like(x)])
    solution, _, rank, _ = np.linalg.lstsq(design, x**2 + y**2, rcond=None)
    if rank < 3:
        return None
    cx, cy, c = solution
    radius_sq = c + cx**2 + cy**2
    if not np.isfinite(radius_sq) or radius_sq <= 0:
        return None
    radius = float(np.sqrt(radius_sq))
    if radius >= _MAX_RADIUS:
        return None
    return (float(cx + origin[0]), float(cy + origin[1])), radius


def swept_angle(points: NDArray[np.float64], center: Point) -> float | None:
    """Signed angle swept around ``center``; None when the sweep is not monotonic."""
    angles = np.unwrap(np.arctan2(points[:, 1] - center[1], points[:, 0] - center[0]))
    steps = np.diff(angles)
    if not (np.all(steps >= -1e-12) or np.all(steps <= 1e-12)):
        return None
    return float(angles[-1] - angles[0])


def fit_arc(
    points: NDArray[np.float64],
    *,
    threshold: float,
    tolerance: float,
    error: float,
    round_radius=None,
) -> ArcFit | None:
    """Fit one circular arc through sampled curve points.

    The allowed deviation is ``min(threshold * error, tolerance% of radius)``.
    ``round_radius`` is applied to the radius before checking, so the check
    holds for the value that will actually be written.
    """
    circle = fit_circle(points)
    if circle is None:
        return None
    center, radius = circle
    if round_radius is not None:
        radius = round_radius(radius)
    if radius <= 0:
        return None
    allowed = min(threshold * error, tolerance * radius / 100)

    distances = np.hypot(points[:, 0] - center[0], points[:, 1] - center[1])
    if float(np.max(np.abs(distances - radius))) > allowed:
        return None

    angle = swept_angle(points, center)
    if angle is None or abs(angle) > 2 * math.pi + _FULL_TURN_SLACK:
        return None

    fit = ArcFit(
        radius=radius,
        large_arc=abs(angle) > math.pi,
        sweep=angle > 0,
        center=center,
        angle=angle,
    )
    if fit.is_full_turn:
        return fit
    start, end = tuple(points[0]), tuple(points[-1])
    if start == end or not _matches_svg_arc(points, fit, allowed):
        return None
    return fit


def _matches_svg_arc(points: NDArray[np.float64], fit: ArcFit, allowed: float) -> bool:
    """Re-check the samples against the arc an SVG renderer would draw."""
    arc = Arc(
        complex(*points[0]),
        complex(fit.radius, fit.radius),
        0.0,
        fit.large_arc,
        fit.sweep,
        complex(*points[-1]),
    )
    if abs(arc.center - complex(*fit.center)) > allowed:
        return False
    distances = np.abs(points[:, 0] + 1j * points[:, 1] - arc.center)
    return float(np.max(np.abs(distances - arc.radius.real))) <= allowed


def join_samples(parts: Sequence[NDArray[np.float64]]) -> NDArray[np.float64]:
    """Concatenate consecutive segment samples, dropping each shared start point."""
    return np.concatenate([parts[0]] + [part[1:] for part in parts[1:]])


# --- Rectangle intersection -----------------------------------------------


def flatten(path: Path) -> list[NDArray[np.float64]]:
    """Polyline per subpath; subpaths holding only a move are skipped."""
    polylines: list[NDArray[np.float64]] = []
    current: list[NDArray[np.float64]] = []

    def flush() -> None:
        if current:
            polylines.append(join_samples(current))
            current.clear()

    for segment in longhand_segments(path):
        if segment.kind is Kind.MOVE:
            flush()
            continue
        current.append(segment.sample())
        if segment.kind is Kind.CLOSE:
            flush()
    flush()
    return polylines


def intersects(path: Path, rect: Rect) -> bool:
    """Whether any stroke or fill of ``path`` could reach inside ``rect``."""
    area = box(rect.left, rect.top, rect.right, rect.bottom)
    for polyline in flatten(path):
        if LineString(polyline).intersects(area):
            return True
        if len(np.unique(polyline, axis=0)) < 3:
            continue
        polygon = Polygon(polyline)
        if not polygon.is_valid:
            polygon = polygon.buffer(0)
        if polygon.intersects(area):
            return True
    return False
