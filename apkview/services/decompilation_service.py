from __future__ import annotations

import logging
import os
import shutil
import time
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from apkview.adapters.archive import ZipEntryExtractor
from apkview.adapters.tool_runner import ToolRunner
from apkview.domain.errors import ArchiveError, IoError
from apkview.domain.models import Benchmark, PackageWorkspace, Stage

LOG = logging.getLogger(__name__)

DEX_ENTRY = "classes.dex"


@dataclass(frozen=True)
class ToolPaths:
    java: str
    apktool_file: Path
    dex2jar_folder: Path
    jd_cmd_file: Path

    @property
    def dex2jar_script(self) -> Path:
        name = "d2j-dex2jar.bat" if os.name == "nt" else "d2j-dex2jar.sh"
        return self.dex2jar_folder / name


def _elapsed(start: float) -> timedelta:
    return timedelta(seconds=time.perf_counter() - start)


@dataclass
class DecompilationService:
    """
    Service layer: runs the decompilation stages for one package workspace.

    Stages run in a fixed order (decompress -> extract dex + convert to jar ->
    decompile). Each one is skipped when its output already exists, unless
    forced. Any failure raises; nothing here exits the process.
    """
    tools: ToolPaths
    runner: ToolRunner
    extractor: ZipEntryExtractor

    def run(self, ws: PackageWorkspace, *, force: bool, benchmarks: list[Benchmark]) -> None:
        self.decompress(ws, force=force)
        self.extract_dex(ws, force=force, benchmarks=benchmarks)
        self.decompile(ws, force=force)

    # -----------------------------
    # Stages
    # -----------------------------
    def decompress(self, ws: PackageWorkspace, *, force: bool) -> None:
        path = ws.root
        if path.exists() and not force:
            LOG.debug("Seems that the application has already been decompressed. "
                      "There is no need to do it again.")
            return

        if path.exists():
            LOG.debug("The application decompression folder exists. But no more...")
            _remove_stale(path, Stage.DECOMPRESS)

        LOG.debug("Decompressing the application...")

        # d: decode, -s: keep .dex files as they are, -o: output folder, -f: overwrite
        self.runner.run(
            Stage.DECOMPRESS,
            [
                self.tools.java, "-jar", self.tools.apktool_file,
                "d", "-s", "-o", path, "-f", ws.apk_file,
            ],
        )

        LOG.debug("The application has been decompressed in %s.", path)
        LOG.info("Application decompressed.")

    def extract_dex(self, ws: PackageWorkspace, *, force: bool, benchmarks: list[Benchmark]) -> None:
        if ws.jar_file.exists() and not force:
            LOG.debug("Seems that there is already a .jar file for the application. "
                      "There is no need to create it again.")
            return

        LOG.debug("To decompile the app, first we need to extract the .dex file.")

        started = time.perf_counter()
        try:
            self.extractor.extract(ws.apk_file, DEX_ENTRY, ws.dex_file)
        except (ArchiveError, IoError) as e:
            e.stage = Stage.EXTRACT_BYTECODE
            raise
        benchmarks.append(Benchmark("Dex extraction", _elapsed(started)))

        LOG.debug("The .dex file was extracted successfully! "
                  "Now it's time to create the .jar file from its classes.")
        LOG.info("Dex file extracted.")

        started = time.perf_counter()
        self._dex_to_jar(ws)
        benchmarks.append(Benchmark("Dex to Jar decompilation", _elapsed(started)))

    def _dex_to_jar(self, ws: PackageWorkspace) -> None:
        self.runner.run(
            Stage.CONVERT_TO_ARCHIVE,
            [self.tools.dex2jar_script, ws.dex_file, "-o", ws.jar_file, "--force"],
        )

        LOG.debug("The application .jar file has been generated in %s", ws.jar_file)
        LOG.info("Jar file generated.")

    def decompile(self, ws: PackageWorkspace, *, force: bool) -> None:
        out_path = ws.classes_dir
        if out_path.exists() and not force:
            LOG.debug("Seems that there is already a source folder for the application. "
                      "There is no need to decompile it again.")
            return

        # jd-cmd has no overwrite flag; a forced run starts from an empty folder
        if out_path.is_dir():
            _remove_stale(out_path, Stage.DECOMPILE)

        self.runner.run(
            Stage.DECOMPILE,
            [self.tools.java, "-jar", self.tools.jd_cmd_file, ws.jar_file, "-od", out_path],
        )

        LOG.debug("The application has been successfully decompiled!")
        LOG.info("Application decompiled.")


def _remove_stale(path: Path, stage: Stage) -> None:
    try:
        shutil.rmtree(path)
    except OSError as e:
        # the tool that runs next reports the real problem if the leftovers matter
        LOG.warning("There was an error when removing the %s folder %s: %s", stage.label, path, e)
