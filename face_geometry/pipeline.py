"""Pipeline architecture for the face analysis.

Breaks the analysis flow into composable, testable steps. Each step receives
a shared ``PipelineContext`` and can read/write its fields. Steps declare
their own ``should_run`` predicate so the runner skips irrelevant stages.

Usage::

    from face_geometry.pipeline import AnalysisPipeline, PipelineContext

    ctx = PipelineContext(params=my_params, scene_path=Path("scene.json"))
    AnalysisPipeline().run(ctx)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from . import formatting
from . import vec3 as v3
from .face_grouper import DimensionReport, FaceNormalGrouper
from .faces import Element, slab_boundary_polygons, wall_profile_polygons
from .parameters import AnalysisParameters
from .polygon_plane import flatten, horizontal_area, signed_area_2d, try_compute_plane
from .scene_io import load_scene, write_report
from .vec3 import Point3

__all__ = [
    "LoopArea",
    "PipelineContext",
    "PipelineStep",
    "AnalysisPipeline",
    "LoadSceneStep",
    "SlabBoundaryStep",
    "WallProfileStep",
    "WallDimensionStep",
    "ReportStep",
    "build_report",
    "default_steps",
]

log = logging.getLogger(__name__)


@dataclass(slots=True)
class LoopArea:
    """One boundary loop with its area."""

    element: str
    index: int
    area: float
    polygon: List[Point3]
    is_largest: bool = False
    check_area: Optional[float] = None  # 2-D cross-check, wall profiles only

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "element": self.element,
            "index": self.index,
            "area": self.area,
            "is_largest": self.is_largest,
            "vertex_count": len(self.polygon),
            "polygon": [list(p) for p in self.polygon],
        }
        if self.check_area is not None:
            data["check_area"] = self.check_area
        return data


def _mark_largest(loops: Sequence[LoopArea]) -> None:
    if not loops:
        return
    largest = max(loops, key=lambda loop: abs(loop.area))
    for loop in loops:
        loop.is_largest = loop is largest


# ---------------------------------------------------------------------------
# Pipeline context
# ---------------------------------------------------------------------------


@dataclass
class PipelineContext:
    """Mutable state bag passed through every pipeline step."""

    params: AnalysisParameters
    scene_path: Optional[Path] = None
    out_dir: Optional[Path] = None
    report_name: str = "face_report.json"

    # Populated by LoadSceneStep (or by a host adapter before the run).
    elements: List[Element] = field(default_factory=list)

    # Populated by the analysis steps.
    slab_loops: List[LoopArea] = field(default_factory=list)
    wall_loops: List[LoopArea] = field(default_factory=list)
    dimensions: Dict[str, List[DimensionReport]] = field(default_factory=dict)
    messages: List[str] = field(default_factory=list)

    # Populated by ReportStep.
    report: Dict[str, Any] = field(default_factory=dict)
    report_path: Optional[Path] = None

    def emit(self, lines: Sequence[str]) -> None:
        for line in lines:
            log.info("%s", line)
            self.messages.append(line)


# ---------------------------------------------------------------------------
# Step base class
# ---------------------------------------------------------------------------


class PipelineStep(ABC):
    """A single composable stage of the analysis pipeline."""

    name: str = "unnamed"

    def should_run(self, ctx: PipelineContext) -> bool:
        """Return ``False`` to skip this step for the current context."""
        return True

    @abstractmethod
    def execute(self, ctx: PipelineContext) -> None:
        """Perform this step's work, reading/writing ``ctx``."""


# ---------------------------------------------------------------------------
# Concrete steps
# ---------------------------------------------------------------------------


class LoadSceneStep(PipelineStep):
    name = "load_scene"

    def should_run(self, ctx: PipelineContext) -> bool:
        return ctx.scene_path is not None and not ctx.elements

    def execute(self, ctx: PipelineContext) -> None:
        ctx.elements = load_scene(ctx.scene_path)  # type: ignore[arg-type]


class SlabBoundaryStep(PipelineStep):
    """Bottom face loops of floor slabs with their signed 2-D areas."""

    name = "slab_boundary"

    def should_run(self, ctx: PipelineContext) -> bool:
        return ctx.params.analyze_slabs

    def execute(self, ctx: PipelineContext) -> None:
        params = ctx.params
        polygons = slab_boundary_polygons(
            ctx.elements,
            offset=params.slab_boundary_offset,
            tolerance=params.tolerance,
            loop_tolerance=params.loop_tolerance,
        )
        loops: List[LoopArea] = []
        for element, polygon in polygons:
            try:
                flat = flatten(polygon, params.loop_tolerance)
            except ValueError as exc:
                log.warning("%s: skipping non-horizontal slab loop (%s)", element.name, exc)
                continue
            area = signed_area_2d(flat)
            loops.append(LoopArea(element=element.name, index=len(loops), area=area, polygon=polygon))
        _mark_largest(loops)
        ctx.slab_loops = loops
        ctx.emit(
            formatting.loop_area_lines(
                [loop.area for loop in loops],
                "outer loop of largest floor slab",
                unit=params.length_unit,
                decimals=params.decimals,
            )
        )


class WallProfileStep(PipelineStep):
    """Exterior face loops of walls with their 3-D areas."""

    name = "wall_profile"

    def should_run(self, ctx: PipelineContext) -> bool:
        return ctx.params.analyze_walls

    def execute(self, ctx: PipelineContext) -> None:
        params = ctx.params
        polygons = wall_profile_polygons(
            ctx.elements,
            offset=params.wall_profile_offset,
            tolerance=params.tolerance,
            loop_tolerance=params.loop_tolerance,
        )
        loops: List[LoopArea] = []
        for element, polygon in polygons:
            plane = try_compute_plane(polygon, params.tolerance)
            if plane is None:
                log.warning("%s: skipping degenerate profile loop", element.name)
                continue
            loop = LoopArea(element=element.name, index=len(loops), area=plane.area, polygon=polygon)
            if params.cross_check_areas:
                try:
                    loop.check_area = horizontal_area(polygon, params.loop_tolerance)
                except ValueError as exc:
                    log.warning("%s: loop %d has no 2-D area check (%s)", element.name, loop.index, exc)
                tolerance = params.loop_tolerance * max(1.0, loop.area)
                if loop.check_area is not None and not v3.is_equal(loop.area, loop.check_area, tolerance):
                    log.warning(
                        "%s: loop %d area %.6f differs from 2-D area %.6f",
                        element.name,
                        loop.index,
                        loop.area,
                        loop.check_area,
                    )
            loops.append(loop)
        _mark_largest(loops)
        ctx.wall_loops = loops
        ctx.emit(
            formatting.loop_area_lines(
                [loop.area for loop in loops],
                "outer loop of largest wall",
                unit=params.length_unit,
                decimals=params.decimals,
            )
        )


class WallDimensionStep(PipelineStep):
    """Overall wall dimensions from groups of parallel planar faces."""

    name = "wall_dimensions"

    def should_run(self, ctx: PipelineContext) -> bool:
        return ctx.params.analyze_dimensions

    def execute(self, ctx: PipelineContext) -> None:
        params = ctx.params
        walls = [element for element in ctx.elements if element.is_wall]
        if not walls:
            ctx.emit(["No wall elements found."])
            return
        for element in walls:
            grouper = FaceNormalGrouper(eps=params.parallel_tolerance)
            for solid in element.solids:
                grouper.add_solid(solid)
            reports = grouper.dimensions()
            ctx.dimensions[element.name] = reports
            ctx.emit(
                [f"Wall <{element.name}>:"]
                + formatting.dimension_lines(reports, params.length_unit, params.decimals)
            )


class ReportStep(PipelineStep):
    name = "report"

    def execute(self, ctx: PipelineContext) -> None:
        ctx.report = build_report(ctx)
        if ctx.out_dir is not None:
            ctx.report_path = Path(ctx.out_dir) / ctx.report_name
            write_report(ctx.report, ctx.report_path)


def _dimension_dict(report: DimensionReport) -> Dict[str, Any]:
    return {
        "normal": list(report.normal),
        "extent": report.extent,
        "face_count": report.face_count,
    }


def build_report(ctx: PipelineContext) -> Dict[str, Any]:
    return {
        "parameters": ctx.params.to_dict(),
        "element_count": len(ctx.elements),
        "slab_loops": [loop.to_dict() for loop in ctx.slab_loops],
        "wall_loops": [loop.to_dict() for loop in ctx.wall_loops],
        "wall_dimensions": {
            name: [_dimension_dict(r) for r in reports]
            for name, reports in ctx.dimensions.items()
        },
        "messages": list(ctx.messages),
    }


# ---------------------------------------------------------------------------
# Pipeline runner
# ---------------------------------------------------------------------------


def default_steps() -> List[PipelineStep]:
    return [
        LoadSceneStep(),
        SlabBoundaryStep(),
        WallProfileStep(),
        WallDimensionStep(),
        ReportStep(),
    ]


class AnalysisPipeline:
    """Runs a sequence of steps over one context."""

    def __init__(self, steps: Optional[List[PipelineStep]] = None):
        self.steps = steps if steps is not None else default_steps()

    def run(self, ctx: PipelineContext) -> PipelineContext:
        for step in self.steps:
            if not step.should_run(ctx):
                log.debug("Skipping step %s", step.name)
                continue
            log.info("Running step %s", step.name)
            step.execute(ctx)
        return ctx

    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]
