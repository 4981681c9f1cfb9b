#!/usr/bin/env python3
"""Headless entry point for the planar face analysis."""

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import List, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from face_geometry.parameters import load_parameters, parse_cli_overrides
from face_geometry.pipeline import AnalysisPipeline, PipelineContext


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    overrides, cli = parse_cli_overrides(_sanitized_args() if argv is None else argv)
    configure_logging(cli.verbose)
    if not cli.scene:
        logging.error("No scene file given (use --scene)")
        return 2
    params = load_parameters(cli.config, overrides)
    logging.info(
        "Parameters: tolerance=%g parallel=%g unit=%s",
        params.tolerance,
        params.parallel_tolerance,
        params.length_unit,
    )

    ctx = PipelineContext(
        params=params,
        scene_path=Path(cli.scene),
        out_dir=Path(cli.out_dir),
        report_name=cli.report_name,
    )
    AnalysisPipeline().run(ctx)
    logging.info(
        "Done: %d slab loop(s), %d wall loop(s), %d wall(s) dimensioned",
        len(ctx.slab_loops),
        len(ctx.wall_loops),
        len(ctx.dimensions),
    )
    return 0


def _sanitized_args() -> List[str]:
    return [arg for arg in sys.argv[1:] if arg not in {"--", "-"}]


if __name__ == "__main__":
    sys.exit(main())
