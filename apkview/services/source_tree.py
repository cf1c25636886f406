from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from apkview.domain.errors import EncodingError, IoError
from apkview.domain.models import DirectoryEntry, FileEntry, MenuNode, MirrorRules
from apkview.renderers.base import Renderer

LOG = logging.getLogger(__name__)


def back_path_for(rel: PurePosixPath) -> str:
    """Relative link from the page of ``rel`` back to the mirrored root."""
    return "../" * len(rel.parent.parts)


@dataclass
class SourceTreeMirror:
    """
    Mirrors the decompiled source tree into a tree of rendered ``code`` pages
    and returns the navigation menu describing what was written.

    Excluded paths are neither created nor descended into. Folders that end
    up without pages are removed again, so the menu and the output tree
    always have the same shape.
    """
    renderer: Renderer
    source_root: Path
    output_root: Path
    rules: MirrorRules

    def mirror(self) -> list[MenuNode]:
        return self._mirror_folder(PurePosixPath())

    def _mirror_folder(self, rel: PurePosixPath) -> list[MenuNode]:
        if self.rules.is_excluded(rel):
            LOG.debug("Skipping excluded folder %s", rel)
            return []

        source = self.source_root / rel
        try:
            entries = sorted(source.iterdir(), key=lambda p: p.name)
            (self.output_root / rel).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoError(f"Could not mirror folder: {e}", path=source) from e

        menu: list[MenuNode] = []
        for entry in entries:
            child = rel / entry.name

            if entry.is_dir():
                if self.rules.is_skipped(child):
                    continue

                inner = self._mirror_folder(child)
                if inner:
                    menu.append(DirectoryEntry(entry.name, tuple(inner)))
                else:
                    self._remove_output_dir(child)

            elif self.rules.is_eligible(entry):
                self._render_file(child)
                menu.append(FileEntry(entry.name, child.as_posix(), entry.suffix[1:]))

        return menu

    def _render_file(self, rel: PurePosixPath) -> None:
        source = self.source_root / rel
        try:
            code = source.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"Source file is not valid UTF-8: {e}", path=source) from e
        except OSError as e:
            raise IoError(f"Could not read source file: {e}", path=source) from e

        page = self.renderer.render(
            "code",
            {
                "path": rel.as_posix(),
                "code": code,
                "back_path": back_path_for(rel),
            },
        )

        target = self.output_root / f"{rel.as_posix()}.html"
        try:
            target.write_bytes(page)
        except OSError as e:
            raise IoError(f"Could not write code page: {e}", path=target) from e

    def _remove_output_dir(self, rel: PurePosixPath) -> None:
        path = self.output_root / rel
        if path.exists():
            try:
                shutil.rmtree(path)
            except OSError as e:
                raise IoError(f"Could not remove empty output folder: {e}", path=path) from e
