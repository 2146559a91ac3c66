"""Attribute-level entry point: optimise one ``d`` attribute value."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pathopt.engine.config import StyleInfo
from pathopt.engine.pipeline import default_pipeline
from pathopt.models.params import ConvertPathDataParams
from pathopt.svg.parser import PathParseError, parse_path_data

logger = logging.getLogger(__name__)


def gather_style_info(attributes: Mapping[str, str], computed_styles: Mapping[str, str]) -> StyleInfo:
    """Style info for an element: markers come from its attributes, the rest from computed style."""
    has_marker = "marker-start" in attributes or "marker-end" in attributes
    return StyleInfo.gather(computed_styles, has_marker)


def optimize_path_data(
    d: str,
    params: ConvertPathDataParams | None = None,
    style_info: StyleInfo | None = None,
) -> str:
    """Return the optimised path data, or ``d`` itself when it cannot be improved."""
    try:
        path = parse_path_data(d)
    except PathParseError as e:
        logger.warning("Leaving unparsable path data untouched: %s", e)
        return d
    if not path.commands:
        return d

    params = params or ConvertPathDataParams()
    options = params.to_options()
    pipeline = default_pipeline()
    optimized = pipeline.optimize(path, options, style_info)
    # A failed pass hands back the parsed input itself
    if optimized is path:
        return d
    result = optimized.to_string(negative_extra_space=options.flags.negative_extra_space)

    if len(result) > len(d):
        logger.debug("Optimised path is longer (%d > %d); keeping original", len(result), len(d))
        return d
    return result
