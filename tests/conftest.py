"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest
from shapely.geometry import MultiLineString, Point

from pathopt.svg.command import Kind, Path
from pathopt.utils.geometry import longhand_segments


# Path data taken from the lucide icon set

HOME_D = "M3 10a2 2 0 0 1 .709-1.528l7-5.999a2 2 0 0 1 2.582 0l7 5.999A2 2 0 0 1 21 10v9a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2z"

DOOR_D = "M15 21v-8a1 1 0 0 0-1-1h-4a1 1 0 0 0-1 1v8"

SMILE_D = "M8 14s1.5 2 4 2 4-2 4-2"

SETTINGS_D = (
    "M12.22 2h-.44a2 2 0 0 0-2 2v.18a2 2 0 0 1-1 1.73l-.43.25a2 2 0 0 1-2 0l-.15-.08"
    "a2 2 0 0 0-2.73.73l-.22.38a2 2 0 0 0 .73 2.73l.15.1a2 2 0 0 1 1 1.72v.51"
    "a2 2 0 0 1-1 1.74l-.15.09a2 2 0 0 0-.73 2.73l.22.38a2 2 0 0 0 2.73.73l.15-.08"
    "a2 2 0 0 1 2 0l.43.25a2 2 0 0 1 1 1.73V20a2 2 0 0 0 2 2h.44a2 2 0 0 0 2-2v-.18"
    "a2 2 0 0 1 1-1.73l.43-.25a2 2 0 0 1 2 0l.15.08a2 2 0 0 0 2.73-.73l.22-.39"
    "a2 2 0 0 0-.73-2.73l-.15-.08a2 2 0 0 1-1-1.74v-.5a2 2 0 0 1 1-1.74l.15-.09"
    "a2 2 0 0 0 .73-2.73l-.22-.38a2 2 0 0 0-2.73-.73l-.15.08a2 2 0 0 1-2 0l-.43-.25"
    "a2 2 0 0 1-1-1.73V4a2 2 0 0 0-2-2z"
)

# Verbose, absolute, uncompressed input of the kind drawing tools export
VERBOSE_D = (
    "M 10.000 10.000 L 20.000 10.000 L 30.000 10.000 L 30.000 20.000 "
    "C 30.000 25.000 25.000 30.000 20.000 30.000 "
    "C 15.000 30.000 10.000 25.000 10.000 20.000 L 10.000 10.000 Z"
)

# Four cubics approximating a circle of radius 2 around the origin
CIRCLE_CUBICS_D = (
    "M2 0C2 1.10457 1.10457 2 0 2C-1.10457 2 -2 1.10457 -2 0"
    "C-2 -1.10457 -1.10457 -2 0 -2C1.10457 -2 2 -1.10457 2 0z"
)

ALL_FIXTURES = [HOME_D, DOOR_D, SMILE_D, SETTINGS_D, VERBOSE_D, CIRCLE_CUBICS_D]


def sample_geometry(d: str) -> tuple[np.ndarray, MultiLineString]:
    """Dense samples of everything the path draws, and the same as line geometry."""
    lines = []
    for segment in longhand_segments(Path.parse(d)):
        if segment.kind is Kind.MOVE:
            continue
        points = segment.sample(33)
        if len(np.unique(points, axis=0)) > 1:
            lines.append(points)
    return np.concatenate(lines), MultiLineString([line.tolist() for line in lines])


def max_deviation(d1: str, d2: str) -> float:
    """Symmetric maximum distance between the drawings of two path strings."""
    points1, geometry1 = sample_geometry(d1)
    points2, geometry2 = sample_geometry(d2)
    forward = max(geometry2.distance(Point(p)) for p in points1)
    backward = max(geometry1.distance(Point(p)) for p in points2)
    return max(forward, backward)


@pytest.fixture
def home_d() -> str:
    return HOME_D


@pytest.fixture
def settings_d() -> str:
    return SETTINGS_D


@pytest.fixture
def verbose_d() -> str:
    return VERBOSE_D


@pytest.fixture
def circle_cubics_d() -> str:
    return CIRCLE_CUBICS_D
