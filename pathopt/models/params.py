"""Plugin parameter models, as written in an optimiser config file."""

from __future__ import annotations

from dataclasses import fields

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pathopt.config import settings
from pathopt.engine.config import ArcFitConfig, Flags, Options


class MakeArcs(BaseModel):
    threshold: float = 2.5  # multiple of the precision error
    tolerance: float = 0.5  # percent of the fitted radius


class ConvertPathDataParams(BaseModel):
    """Parameters of the convertPathData job. Unset flags keep their defaults."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    remove_useless: bool | None = None
    smart_arc_rounding: bool | None = None
    straight_curves: bool | None = None
    convert_to_q: bool | None = None
    line_shorthands: bool | None = None
    collapse_repeated: bool | None = None
    curve_smooth_shorthands: bool | None = None
    convert_to_z: bool | None = None
    force_absolute_path: bool | None = None
    negative_extra_space: bool | None = None
    utilize_absolute: bool | None = None
    # null disables arc fitting
    make_arcs: MakeArcs | None = Field(default_factory=MakeArcs)
    float_precision: int = Field(default_factory=lambda: settings.pathopt_float_precision)

    def to_flags(self) -> Flags:
        overrides = {
            f.name: getattr(self, f.name) for f in fields(Flags) if getattr(self, f.name) is not None
        }
        return Flags(**overrides)

    def to_options(self) -> Options:
        make_arcs = None
        if self.make_arcs is not None:
            make_arcs = ArcFitConfig(
                threshold=self.make_arcs.threshold, tolerance=self.make_arcs.tolerance
            )
        return Options(flags=self.to_flags(), make_arcs=make_arcs, precision=self.float_precision)
