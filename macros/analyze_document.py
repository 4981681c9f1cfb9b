"""Analyze the active document (FreeCAD macro).

Reads every shape in the active FreeCAD document, classifies walls and
floors from their ``IfcType`` property, runs the face analysis pipeline and
shows the resulting messages.

- Prompts for an output directory (optional; Cancel skips the JSON report)

Add/run in FreeCAD:
- Macro -> Macros... -> Add -> select this file
- Execute
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

try:
    import FreeCADGui  # noqa: F401
    from PySide import QtWidgets
except Exception as exc:
    raise SystemExit(f"This macro must be run inside FreeCAD GUI. Error: {exc}")

import FreeCAD  # type: ignore


def _repo_root() -> Path:
    macro_path = Path(globals().get("__file__", "")).resolve()
    if macro_path.is_file():
        return macro_path.parents[1]
    return Path.cwd()


def _pick_out_dir(default_dir: Path) -> Path | None:
    path = QtWidgets.QFileDialog.getExistingDirectory(
        None,
        "Select report directory (Cancel to skip the report)",
        str(default_dir),
    )
    return Path(path) if path else None


def main() -> None:
    root = _repo_root()
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    from face_geometry.freecad_adapter import load_document_elements
    from face_geometry.parameters import AnalysisParameters
    from face_geometry.pipeline import AnalysisPipeline, PipelineContext

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    doc = FreeCAD.ActiveDocument
    if doc is None:
        QtWidgets.QMessageBox.warning(None, "Face analysis", "No active document.")
        return

    # FreeCAD works in millimetres; report in metres.
    params = AnalysisParameters(length_unit="metres", host_unit_scale=0.001)
    ctx = PipelineContext(params=params, out_dir=_pick_out_dir(root / "exports"))
    ctx.elements = load_document_elements(doc, params)
    AnalysisPipeline().run(ctx)

    text = "\n".join(ctx.messages) or "No walls or floors found."
    QtWidgets.QMessageBox.information(None, "Face analysis", text)


main()
