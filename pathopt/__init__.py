"""pathopt: shortest equivalent SVG path data."""

from pathopt.config import configure_logging, settings
from pathopt.engine.config import ArcFitConfig, Flags, Options, StyleInfo
from pathopt.engine.pipeline import run
from pathopt.models.params import ConvertPathDataParams
from pathopt.svg.canvas import ViewBox, is_path_visible
from pathopt.svg.command import Command, Kind, Path
from pathopt.svg.optimizer import gather_style_info, optimize_path_data
from pathopt.svg.parser import PathParseError, parse_path_data
from pathopt.svg.serializer import serialize_path

__all__ = [
    "configure_logging",
    "settings",
    "ArcFitConfig",
    "Flags",
    "Options",
    "StyleInfo",
    "run",
    "ConvertPathDataParams",
    "ViewBox",
    "is_path_visible",
    "Command",
    "Kind",
    "Path",
    "gather_style_info",
    "optimize_path_data",
    "PathParseError",
    "parse_path_data",
    "serialize_path",
]
