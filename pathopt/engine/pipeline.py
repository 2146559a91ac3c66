"""Pipeline orchestrator: runs passes in dependency order, then rounds the result."""

from __future__ import annotations

import functools
import importlib
import logging
import pkgutil
import time

from pathopt.engine.config import Options, StyleInfo
from pathopt.engine.context import OptimizeContext
from pathopt.engine.registry import PassRegistry, get_registry
from pathopt.svg.command import Path, close_path

logger = logging.getLogger(__name__)

_PASS_PACKAGE = "pathopt.engine.passes"


def register_passes() -> None:
    """Import all pass modules so @optimization_pass decorators fire."""
    package = importlib.import_module(_PASS_PACKAGE)
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{_PASS_PACKAGE}.{module_name}")


class Pipeline:
    """Orchestrates the optimisation passes."""

    def __init__(self, registry: PassRegistry | None = None) -> None:
        if registry is None:
            register_passes()
        self.registry = registry or get_registry()

    def run(self, ctx: OptimizeContext) -> OptimizeContext:
        """Run every applicable pass on the given context."""
        start = time.perf_counter()

        skip_ids = self._gate(ctx)
        ordered = self.registry.without(skip_ids)

        logger.debug("Pipeline: %d passes queued (%d skipped)", len(ordered), len(skip_ids))

        for spec in ordered:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
                ctx.completed_passes.add(spec.id)
                elapsed = (time.perf_counter() - t0) * 1000
                logger.debug("  %s (%s) completed in %.1fms", spec.id, spec.description, elapsed)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d passes in %.1fms",
            len(ctx.completed_passes),
            len(ordered),
            total,
        )
        return ctx

    def optimize(
        self,
        path: Path,
        options: Options | None = None,
        style_info: StyleInfo | None = None,
    ) -> Path:
        """Optimise ``path``. Returns the input unchanged when any pass fails."""
        if not path.commands:
            return path
        ctx = OptimizeContext(
            path=path,
            options=options or Options(),
            style_info=style_info or StyleInfo(),
        )
        self.run(ctx)
        if ctx.errors:
            logger.warning("Keeping original path data; failed passes: %s", sorted(ctx.errors))
            return path
        return self._finalize(ctx)

    def _finalize(self, ctx: OptimizeContext) -> Path:
        path = ctx.positioned.take()

        # Markers still need a vertex to sit on
        if ctx.style_info.has_marker and ctx.includes_vertices and not path.has_drawing:
            path.commands.append(close_path())

        error = ctx.error
        return Path([ctx.options.round_command(c, error) for c in path.commands])

    def _gate(self, ctx: OptimizeContext) -> set[str]:
        """Determine which passes to skip for this run's flags."""
        flags = ctx.options.flags
        skip: set[str] = set()
        if not flags.utilize_absolute or flags.force_absolute_path:
            skip |= self.registry.tagged("utilize_absolute")
        return skip


def create_pipeline(registry: PassRegistry | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    return Pipeline(registry=registry)


@functools.lru_cache(maxsize=1)
def default_pipeline() -> Pipeline:
    """The shared pipeline over the registered passes, built once."""
    return create_pipeline()


def run(path: Path, options: Options | None = None, style_info: StyleInfo | None = None) -> Path:
    """Optimise ``path`` with the default pass set."""
    return default_pipeline().optimize(path, options, style_info)
