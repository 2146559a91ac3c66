"""Off-canvas test: whether a path can show up inside the visible view box."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pathopt.svg.command import Kind, Path, close_path
from pathopt.svg.parser import PathParseError, parse_path_data
from pathopt.utils.geometry import Rect, longhand_segments

logger = logging.getLogger(__name__)

_VIEWBOX_SPLIT_RE = re.compile(r"[\s,]+")
_PX_SUFFIX_RE = re.compile(r"px$")


@dataclass(frozen=True)
class ViewBox:
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def parse(
        cls,
        view_box: str | None = None,
        width: str | None = None,
        height: str | None = None,
    ) -> ViewBox | None:
        """From a ``viewBox`` attribute, else from ``width``/``height``. None when neither works."""
        if view_box:
            parts = [p for p in _VIEWBOX_SPLIT_RE.split(view_box.strip()) if p]
            if len(parts) != 4:
                return None
            try:
                left, top, w, h = (float(p) for p in parts)
            except ValueError:
                return None
            return cls(left, top, w, h)
        if width is None or height is None:
            return None
        try:
            w = float(_PX_SUFFIX_RE.sub("", width.strip()))
            h = float(_PX_SUFFIX_RE.sub("", height.strip()))
        except ValueError:
            return None
        return cls(0.0, 0.0, w, h)

    def contains(self, point: tuple[float, float]) -> bool:
        x, y = point
        return self.left <= x <= self.left + self.width and self.top <= y <= self.top + self.height

    def rect(self) -> Rect:
        return Rect(top=self.top, left=self.left, width=self.width, height=self.height)


def is_path_visible(d: str, view_box: ViewBox) -> bool:
    """Whether any part of the path data could be drawn inside ``view_box``."""
    try:
        path = parse_path_data(d)
    except PathParseError as e:
        logger.debug("Treating unparsable path as visible: %s", e)
        return True

    for segment in longhand_segments(path):
        if segment.kind is Kind.MOVE and view_box.contains(segment.end):
            return True

    # A lone drawing command still has an area worth testing
    if len(path) == 2:
        path = Path(path.commands + [close_path()])
    return path.intersects(view_box.rect())
