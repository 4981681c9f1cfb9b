"""Configuration stack for the face analysis.

Parameters are layered from lowest to highest precedence:

1. JSON file (primary): persistent project configuration.
2. CLI overrides: runtime tweaks for headless runs.

The interface is pure Python so unit tests run outside FreeCAD.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

__all__ = [
    "AnalysisParameters",
    "load_json_config",
    "apply_overrides",
    "parse_cli_overrides",
    "load_parameters",
]


@dataclass(slots=True)
class AnalysisParameters:
    """Canonical set of adjustable analysis parameters."""

    tolerance: float = 1.0e-9  # zero length / equal coordinates
    parallel_tolerance: float = 1.0e-9  # radians
    loop_tolerance: float = 1.0e-6  # edge chaining gap
    slab_boundary_offset: float = 0.1  # downwards from the slab bottom face
    wall_profile_offset: float = 1.0  # outwards from the exterior wall face
    length_unit: str = "feet"
    decimals: int = 2
    analyze_slabs: bool = True
    analyze_walls: bool = True
    analyze_dimensions: bool = True
    cross_check_areas: bool = True

    # FreeCAD host extraction.
    host_deflection: float = 0.5  # edge discretisation deflection, host units
    host_unit_scale: float = 1.0  # host length -> model length

    def validate(self) -> None:
        if self.tolerance <= 0:
            raise ValueError("Tolerance must be positive")
        if self.parallel_tolerance <= 0:
            raise ValueError("Parallel tolerance must be positive")
        if self.loop_tolerance <= 0:
            raise ValueError("Loop tolerance must be positive")
        if self.slab_boundary_offset < 0:
            raise ValueError("Slab boundary offset cannot be negative")
        if self.wall_profile_offset < 0:
            raise ValueError("Wall profile offset cannot be negative")
        if not self.length_unit:
            raise ValueError("Length unit label cannot be empty")
        if not 0 <= self.decimals <= 12:
            raise ValueError("Decimals must be within [0, 12]")
        if self.host_deflection <= 0:
            raise ValueError("Host deflection must be positive")
        if self.host_unit_scale <= 0:
            raise ValueError("Host unit scale must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisParameters":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise KeyError(f"Unknown parameter(s): {', '.join(unknown)}")
        merged = {**asdict(cls()), **data}
        params = cls(**merged)
        params.validate()
        return params


def load_json_config(path: Path | str | None) -> Dict[str, Any]:
    """Load the JSON config file or return an empty dict if no path is given."""

    if path is None:
        return {}
    json_path = Path(path)
    if not json_path.exists():
        raise FileNotFoundError(f"Config file not found: {json_path}")
    data = json.loads(json_path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError("Top-level JSON config must be an object")
    return dict(data)


def apply_overrides(base: AnalysisParameters, overrides: Mapping[str, Any]) -> AnalysisParameters:
    """Return a copy of ``base`` with overrides applied."""

    merged = base.to_dict()
    for key, value in overrides.items():
        if key not in merged:
            raise KeyError(f"Unknown parameter '{key}'")
        merged[key] = value
    return AnalysisParameters.from_dict(merged)


def parse_cli_overrides(
    args: Optional[Iterable[str]] = None,
) -> Tuple[Dict[str, Any], Any]:
    """Parse CLI-style overrides using argparse conventions."""

    import argparse

    parser = argparse.ArgumentParser(description="Planar face boundary and dimension analysis")
    parser.add_argument("--scene", type=str, default=None, help="Path to the JSON scene file")
    parser.add_argument("--config", type=str, help="Path to JSON config", default=None)
    parser.add_argument("--out-dir", type=str, default="exports", help="Export folder")
    parser.add_argument("--report-name", type=str, default="face_report.json")
    parser.add_argument("--tolerance", type=float, help="Zero-length tolerance")
    parser.add_argument("--parallel-tolerance", type=float, help="Parallel normal tolerance (rad)")
    parser.add_argument("--loop-tolerance", type=float, help="Max gap when chaining loop edges")
    parser.add_argument("--slab-offset", type=float, help="Slab boundary offset below the slab")
    parser.add_argument("--wall-offset", type=float, help="Wall profile offset outside the wall")
    parser.add_argument("--unit", type=str, help="Length unit label used in messages")
    parser.add_argument("--decimals", type=int, help="Decimals in report messages")
    parser.add_argument("--no-slabs", action="store_true", help="Skip slab boundary loops")
    parser.add_argument("--no-walls", action="store_true", help="Skip wall profile loops")
    parser.add_argument(
        "--no-dimensions",
        action="store_true",
        help="Skip wall dimensions from parallel face groups",
    )
    parser.add_argument(
        "--no-cross-check",
        action="store_true",
        help="Skip the 2-D area cross-check of wall profile loops",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    parsed, unknown = parser.parse_known_args(args=args)
    if unknown:
        logging.info("Ignoring unknown CLI args: %s", " ".join(unknown))
    overrides: Dict[str, Any] = {}
    if parsed.tolerance is not None:
        overrides["tolerance"] = parsed.tolerance
    if parsed.parallel_tolerance is not None:
        overrides["parallel_tolerance"] = parsed.parallel_tolerance
    if parsed.loop_tolerance is not None:
        overrides["loop_tolerance"] = parsed.loop_tolerance
    if parsed.slab_offset is not None:
        overrides["slab_boundary_offset"] = parsed.slab_offset
    if parsed.wall_offset is not None:
        overrides["wall_profile_offset"] = parsed.wall_offset
    if parsed.unit is not None:
        overrides["length_unit"] = parsed.unit
    if parsed.decimals is not None:
        overrides["decimals"] = parsed.decimals
    if parsed.no_slabs:
        overrides["analyze_slabs"] = False
    if parsed.no_walls:
        overrides["analyze_walls"] = False
    if parsed.no_dimensions:
        overrides["analyze_dimensions"] = False
    if parsed.no_cross_check:
        overrides["cross_check_areas"] = False

    return overrides, parsed


def load_parameters(
    config_path: Path | str | None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AnalysisParameters:
    """Load parameters using the JSON → CLI precedence chain."""

    data = load_json_config(config_path)
    params = AnalysisParameters.from_dict(data)
    if cli_overrides:
        params = apply_overrides(params, cli_overrides)
    return params
