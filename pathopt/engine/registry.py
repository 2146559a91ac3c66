"""Pass registry: every optimisation pass is a standalone function registered via decorator.

Usage:
    @optimization_pass(id="mixed", stage=Stage.NOTATION, dependencies=["filter"])
    def mixed(ctx: OptimizeContext) -> None:
        ctx.positioned = choose_notation(ctx.positioned, ctx.options)

Adding a new pass = creating one module under ``pathopt.engine.passes``.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from pathopt.engine.context import OptimizeContext

logger = logging.getLogger(__name__)


class Stage(enum.IntEnum):
    NORMALIZE = 0
    OPTIMIZE = 1
    NOTATION = 2
    CLEANUP = 3


@dataclass
class PassSpec:
    id: str
    stage: Stage
    fn: Callable[["OptimizeContext"], None]
    dependencies: list[str] = field(default_factory=list)
    tags: set[str] = field(default_factory=set)
    description: str = ""


class PassRegistry:
    def __init__(self) -> None:
        self._passes: dict[str, PassSpec] = {}

    def register(self, spec: PassSpec) -> None:
        if spec.id in self._passes:
            raise ValueError(f"Duplicate pass ID: {spec.id}")
        self._passes[spec.id] = spec
        logger.debug("Registered pass %s (%s)", spec.id, spec.stage.name)

    def tagged(self, tag: str) -> set[str]:
        """IDs of the passes carrying ``tag``."""
        return {pid for pid, spec in self._passes.items() if tag in spec.tags}

    def without(self, skip_ids: set[str]) -> list[PassSpec]:
        """Run order for every pass not in ``skip_ids``, plus whatever those depend on."""
        return self.resolve_order(set(self._passes) - skip_ids)

    def resolve_order(self, requested_ids: set[str] | None = None) -> list[PassSpec]:
        """Topological sort respecting dependencies; ready passes run stage first.

        Requested passes pull in their transitive dependencies. None runs all.
        """
        pool = self._passes
        if requested_ids is not None:
            expanded: set[str] = set()
            stack = list(requested_ids)
            while stack:
                pid = stack.pop()
                if pid in expanded:
                    continue
                expanded.add(pid)
                spec = pool.get(pid)
                if spec:
                    stack.extend(spec.dependencies)
            pool = {k: v for k, v in pool.items() if k in expanded}

        def key(pid: str) -> tuple[Stage, str]:
            return (pool[pid].stage, pid)

        # Kahn's algorithm
        in_degree: dict[str, int] = {pid: 0 for pid in pool}
        for pid, spec in pool.items():
            for dep in spec.dependencies:
                if dep in pool:
                    in_degree[pid] += 1

        queue = sorted((pid for pid, d in in_degree.items() if d == 0), key=key)
        ordered: list[PassSpec] = []

        while queue:
            pid = queue.pop(0)
            ordered.append(pool[pid])
            for other_id, other_spec in pool.items():
                if pid in other_spec.dependencies:
                    in_degree[other_id] -= 1
                    if in_degree[other_id] == 0:
                        queue.append(other_id)
                        queue.sort(key=key)

        if len(ordered) != len(pool):
            missing = set(pool) - {s.id for s in ordered}
            raise ValueError(f"Circular dependency detected among: {missing}")

        return ordered


# Module-level singleton
_registry = PassRegistry()


def get_registry() -> PassRegistry:
    return _registry


def optimization_pass(
    *,
    id: str,
    stage: Stage,
    dependencies: list[str] | None = None,
    tags: set[str] | None = None,
    description: str = "",
):
    """Decorator to register a pass function."""

    def decorator(fn: Callable[["OptimizeContext"], None]):
        _registry.register(
            PassSpec(
                id=id,
                stage=stage,
                fn=fn,
                dependencies=dependencies or [],
                tags=tags or set(),
                description=description,
            )
        )
        return fn

    return decorator
