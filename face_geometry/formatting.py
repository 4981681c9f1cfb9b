"""Human-readable strings for log lines and report messages."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .face_grouper import DimensionReport
from .vec3 import Vector3

__all__ = [
    "real_string",
    "point_string",
    "plural_suffix",
    "dimension_lines",
    "loop_area_lines",
]


def real_string(value: float, decimals: int = 2) -> str:
    """Fixed-point string with trailing zeros trimmed (``1.50`` -> ``1.5``)."""
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"-0", ""}:
        text = "0"
    return text


def point_string(p: Vector3, decimals: int = 2) -> str:
    return "(" + ",".join(real_string(c, decimals) for c in p) + ")"


def plural_suffix(n: int) -> str:
    return "" if n == 1 else "s"


def dimension_lines(
    reports: Iterable[DimensionReport],
    unit: str = "feet",
    decimals: int = 2,
) -> List[str]:
    lines: List[str] = []
    for report in reports:
        direction = point_string(report.normal, decimals)
        if report.extent is None:
            lines.append(f"Only one wall face in direction {direction} found.")
        else:
            lines.append(
                f"Max wall dimension in direction {direction} is "
                f"{real_string(report.extent, decimals)} {unit}."
            )
    return lines


def loop_area_lines(
    areas: Sequence[float],
    largest_label: str,
    unit: str = "feet",
    decimals: int = 2,
) -> List[str]:
    """One header plus one line per loop; the largest loop is marked."""
    n = len(areas)
    lines = [f"{n} boundary loop{plural_suffix(n)} found."]
    largest = max(range(n), key=lambda i: abs(areas[i])) if n else -1
    for i, area in enumerate(areas):
        marker = f", {largest_label}" if i == largest else ""
        lines.append(f"  Loop {i} area is {real_string(area, decimals)} square {unit}{marker}")
    return lines
