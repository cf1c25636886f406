from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from apkview.domain.errors import IoError
from apkview.domain.models import AnalysisResult, MirrorRules, PackageWorkspace
from apkview.renderers.base import Renderer
from apkview.renderers.jinja_renderer import TEMPLATE_SUFFIX
from apkview.services.source_tree import SourceTreeMirror

LOG = logging.getLogger(__name__)


@dataclass
class ReportService:
    """
    Writes the HTML report of one package:

        <results>/<package>/index.html          report page
        <results>/<package>/src/index.html      source navigation
        <results>/<package>/src/<path>.html     one page per source file
        <results>/<package>/<assets>            copied from the template folder

    A failure leaves whatever was already written in place.
    """
    renderer: Renderer
    template_path: Path
    rules: MirrorRules

    def generate(self, ws: PackageWorkspace, result: AnalysisResult) -> None:
        LOG.debug("Starting HTML report generation. First we create the file.")
        _write(ws.output_root / "index.html", self.renderer.render("report", result.to_template_data()))
        LOG.debug("The report file has been created and filled.")

        self.generate_code_html_files(ws)
        self.copy_assets(ws.output_root)
        LOG.info("HTML report generated in %s", ws.output_root)

    def copy_assets(self, destination: Path) -> None:
        try:
            for entry in sorted(self.template_path.iterdir()):
                if entry.is_dir():
                    shutil.copytree(entry, destination / entry.name, dirs_exist_ok=True)
                elif entry.suffix != TEMPLATE_SUFFIX:
                    shutil.copy2(entry, destination / entry.name)
        except OSError as e:
            raise IoError(f"Could not copy report assets: {e}", path=self.template_path) from e

    def generate_code_html_files(self, ws: PackageWorkspace) -> None:
        mirror = SourceTreeMirror(
            renderer=self.renderer,
            source_root=ws.root,
            output_root=ws.src_output,
            rules=self.rules,
        )
        menu = mirror.mirror()
        _write(ws.src_output / "index.html", self.renderer.render("src", {"menu": menu}))
        LOG.debug("Source code pages generated: %d top level entries", len(menu))


def _write(path: Path, payload: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    except OSError as e:
        raise IoError(f"Could not write report file: {e}", path=path) from e
