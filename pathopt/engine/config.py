"""Optimisation configuration: rewrite flags, style safety info, precision."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from pathopt.svg.command import ARC_FLAG_SLOTS, Command, Kind
from pathopt.utils.math_helpers import to_fixed, truncate


@dataclass(frozen=True)
class Flags:
    """Which rewrites the filter pass may apply."""

    remove_useless: bool = True
    smart_arc_rounding: bool = True
    straight_curves: bool = True
    convert_to_q: bool = True
    line_shorthands: bool = True
    collapse_repeated: bool = True
    curve_smooth_shorthands: bool = True
    convert_to_z: bool = True
    force_absolute_path: bool = False
    negative_extra_space: bool = True
    utilize_absolute: bool = True


@dataclass(frozen=True)
class StyleInfo:
    """Rendering facts about the element that constrain which rewrites are safe."""

    # A mid-vertex marker is drawn at every vertex; removing vertices moves them
    has_marker_mid: bool = False
    maybe_has_stroke: bool = False
    # Any cap other than butt draws something for a zero-length segment
    maybe_has_linecap: bool = False
    is_safe_to_use_z: bool = False
    has_marker: bool = False

    @classmethod
    def gather(cls, computed_styles: Mapping[str, str], has_marker: bool = False) -> StyleInfo:
        """Derive style info from computed CSS values keyed by property name."""
        stroke = computed_styles.get("stroke")
        linecap = computed_styles.get("stroke-linecap")
        linejoin = computed_styles.get("stroke-linejoin")

        maybe_has_stroke = stroke is not None and stroke.strip() != "none"
        if maybe_has_stroke:
            is_safe_to_use_z = (linecap or "").strip() == "round" and (
                linejoin or ""
            ).strip() == "round"
        else:
            is_safe_to_use_z = True

        return cls(
            has_marker_mid="marker-mid" in computed_styles,
            maybe_has_stroke=maybe_has_stroke,
            maybe_has_linecap=linecap is not None and linecap.strip() != "butt",
            is_safe_to_use_z=is_safe_to_use_z,
            has_marker=has_marker,
        )


@dataclass(frozen=True)
class ArcFitConfig:
    # Allowed deviation as a multiple of the precision error
    threshold: float = 2.5
    # Allowed deviation as a percentage of the fitted radius
    tolerance: float = 0.5


@dataclass(frozen=True)
class Options:
    flags: Flags = field(default_factory=Flags)
    # None disables fitting curve runs to arcs
    make_arcs: ArcFitConfig | None = field(default_factory=ArcFitConfig)
    precision: int = 3

    def error(self) -> float:
        """One unit in the last retained digit, truncated to the precision."""
        return truncate(0.1**self.precision, self.precision)

    def round(self, value: float, error: float) -> float:
        """Round ``value``, dropping one more digit when that stays within ``error``."""
        p = self.precision
        if 0 < p < 20:
            fixed = to_fixed(value, p)
            if fixed == value:
                return value
            rounded = to_fixed(value, p - 1)
            if to_fixed(abs(rounded - value), p + 1) >= error:
                return fixed
            return rounded
        return to_fixed(value, 0)

    def round_data(self, values: tuple[float, ...], error: float) -> tuple[float, ...]:
        return tuple(self.round(v, error) for v in values)

    def round_command(self, command: Command, error: float) -> Command:
        if not command.args:
            return command
        args = []
        for slot, value in enumerate(command.args):
            if command.kind is Kind.ARC and slot in ARC_FLAG_SLOTS:
                args.append(value)
            else:
                args.append(self.round(value, error))
        return replace(command, args=tuple(args))
