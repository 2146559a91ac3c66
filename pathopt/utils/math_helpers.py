"""Math helpers: fixed-point rounding and small vector operations. No engine imports."""

from __future__ import annotations

import math

Point = tuple[float, float]


def to_fixed(value: float, digits: int) -> float:
    """Round to ``digits`` decimal places, halves away from zero."""
    scale = 10.0**digits
    return math.copysign(math.floor(abs(value) * scale + 0.5), value) / scale


def truncate(value: float, digits: int) -> float:
    scale = 10.0**digits
    return math.trunc(value * scale) / scale


def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


def scale(a: Point, factor: float) -> Point:
    return (a[0] * factor, a[1] * factor)


def reflect(point: Point, about: Point) -> Point:
    """Point reflection of ``point`` through ``about``."""
    return (2 * about[0] - point[0], 2 * about[1] - point[1])


def cross(a: Point, b: Point) -> float:
    return a[0] * b[1] - a[1] * b[0]


def dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]


def near(a: Point, b: Point, tolerance: float) -> bool:
    """Per-axis closeness, strictly within ``tolerance``."""
    return abs(a[0] - b[0]) < tolerance and abs(a[1] - b[1]) < tolerance
