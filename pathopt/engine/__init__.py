"""pathopt path-data optimisation engine."""

from pathopt.engine.config import ArcFitConfig, Flags, Options, StyleInfo
from pathopt.engine.context import OptimizeContext, Position, PositionedPath
from pathopt.engine.pipeline import Pipeline, create_pipeline, default_pipeline, run
from pathopt.engine.registry import Stage, get_registry, optimization_pass

__all__ = [
    "ArcFitConfig",
    "Flags",
    "Options",
    "StyleInfo",
    "OptimizeContext",
    "Position",
    "PositionedPath",
    "Pipeline",
    "create_pipeline",
    "default_pipeline",
    "run",
    "Stage",
    "get_registry",
    "optimization_pass",
]
