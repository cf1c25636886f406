from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from apkview.adapters.archive import ZipEntryExtractor
from apkview.adapters.tool_runner import ToolOutput
from apkview.domain.errors import EntryNotFoundError, ToolExecutionError
from apkview.domain.models import Benchmark, PackageWorkspace, Stage
from apkview.services import decompilation_service
from apkview.services.decompilation_service import DecompilationService, ToolPaths


# -----------------------------
# Test doubles
# -----------------------------
class FakeToolRunner:
    """Pretends to be apktool / dex2jar / jd-cmd by creating their outputs."""

    def __init__(self, fail_on: Stage | None = None):
        self.calls: list[tuple[Stage, list[str]]] = []
        self.fail_on = fail_on

    def run(self, stage, args):
        args = [str(a) for a in args]
        self.calls.append((stage, args))
        if stage is self.fail_on:
            raise ToolExecutionError("boom", returncode=1, stderr="tool exploded", stage=stage)

        if stage is Stage.DECOMPRESS:
            out = Path(args[args.index("-o") + 1])
            (out / "res" / "layout").mkdir(parents=True, exist_ok=True)
            (out / "AndroidManifest.xml").write_text("<manifest/>", encoding="utf-8")
        elif stage is Stage.CONVERT_TO_ARCHIVE:
            Path(args[args.index("-o") + 1]).write_bytes(b"PK jar")
        elif stage is Stage.DECOMPILE:
            out = Path(args[args.index("-od") + 1])
            out.mkdir(parents=True, exist_ok=True)
            (out / "Main.java").write_text("class Main {}", encoding="utf-8")
        return ToolOutput(returncode=0, stdout="", stderr="")

    def stages(self) -> list[Stage]:
        return [s for s, _ in self.calls]


# -----------------------------
# Helpers
# -----------------------------
def make_workspace(tmp_path: Path, dex: bytes | None = b"dex\n035") -> PackageWorkspace:
    apk_folder = tmp_path / "downloads"
    apk_folder.mkdir()
    apk = apk_folder / "com.example.app.apk"
    with zipfile.ZipFile(apk, "w") as zf:
        zf.writestr("AndroidManifest.xml", b"binary manifest")
        if dex is not None:
            zf.writestr("classes.dex", dex)
    return PackageWorkspace(
        package="com.example.app",
        apk_file=apk,
        dist_root=tmp_path / "dist",
        results_root=tmp_path / "results",
    )


def make_service(tmp_path: Path, runner: FakeToolRunner) -> DecompilationService:
    tools = ToolPaths(
        java="java",
        apktool_file=tmp_path / "vendor" / "apktool.jar",
        dex2jar_folder=tmp_path / "vendor" / "dex2jar",
        jd_cmd_file=tmp_path / "vendor" / "jd-cli.jar",
    )
    return DecompilationService(tools=tools, runner=runner, extractor=ZipEntryExtractor())


def snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# -----------------------------
# Tests
# -----------------------------
def test_full_run_executes_stages_in_order(tmp_path: Path):
    ws = make_workspace(tmp_path)
    runner = FakeToolRunner()
    benchmarks: list[Benchmark] = []

    make_service(tmp_path, runner).run(ws, force=False, benchmarks=benchmarks)

    assert runner.stages() == [Stage.DECOMPRESS, Stage.CONVERT_TO_ARCHIVE, Stage.DECOMPILE]
    assert ws.dex_file.read_bytes() == b"dex\n035"
    assert ws.jar_file.exists()
    assert (ws.classes_dir / "Main.java").exists()
    assert [b.label for b in benchmarks] == ["Dex extraction", "Dex to Jar decompilation"]


def test_commands_include_output_path_and_force_flags(tmp_path: Path):
    ws = make_workspace(tmp_path)
    runner = FakeToolRunner()

    make_service(tmp_path, runner).run(ws, force=False, benchmarks=[])

    decompress, convert, decompile = (args for _, args in runner.calls)
    assert decompress[:3] == ["java", "-jar", str(tmp_path / "vendor" / "apktool.jar")]
    assert decompress[3:] == ["d", "-s", "-o", str(ws.root), "-f", str(ws.apk_file)]
    assert convert[0].endswith(("d2j-dex2jar.sh", "d2j-dex2jar.bat"))
    assert convert[1:] == [str(ws.dex_file), "-o", str(ws.jar_file), "--force"]
    assert decompile == [
        "java", "-jar", str(tmp_path / "vendor" / "jd-cli.jar"),
        str(ws.jar_file), "-od", str(ws.classes_dir),
    ]


def test_second_run_is_a_no_op(tmp_path: Path):
    ws = make_workspace(tmp_path)
    runner = FakeToolRunner()
    service = make_service(tmp_path, runner)

    service.run(ws, force=False, benchmarks=[])
    before = snapshot(ws.root)
    runner.calls.clear()

    benchmarks: list[Benchmark] = []
    service.run(ws, force=False, benchmarks=benchmarks)

    assert runner.calls == []
    assert benchmarks == []
    assert snapshot(ws.root) == before


def test_force_reruns_every_stage(tmp_path: Path):
    ws = make_workspace(tmp_path)
    runner = FakeToolRunner()
    service = make_service(tmp_path, runner)

    service.run(ws, force=False, benchmarks=[])
    stale = ws.root / "stale.txt"
    stale.write_text("left over", encoding="utf-8")
    runner.calls.clear()

    service.run(ws, force=True, benchmarks=[])

    assert runner.stages() == [Stage.DECOMPRESS, Stage.CONVERT_TO_ARCHIVE, Stage.DECOMPILE]
    assert not stale.exists()


def test_forced_cleanup_failure_is_only_a_warning(tmp_path: Path, monkeypatch, caplog):
    ws = make_workspace(tmp_path)
    runner = FakeToolRunner()
    service = make_service(tmp_path, runner)
    service.run(ws, force=False, benchmarks=[])
    runner.calls.clear()

    def refuse(path, *a, **kw):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(decompilation_service.shutil, "rmtree", refuse)

    with caplog.at_level("WARNING", logger="apkview"):
        service.decompress(ws, force=True)

    assert runner.stages() == [Stage.DECOMPRESS]
    assert any("removing the decompression folder" in r.getMessage() for r in caplog.records)


def test_tool_failure_aborts_the_pipeline(tmp_path: Path):
    ws = make_workspace(tmp_path)
    runner = FakeToolRunner(fail_on=Stage.CONVERT_TO_ARCHIVE)

    with pytest.raises(ToolExecutionError) as exc:
        make_service(tmp_path, runner).run(ws, force=False, benchmarks=[])

    assert exc.value.stderr == "tool exploded"
    assert Stage.DECOMPILE not in runner.stages()
    assert not ws.classes_dir.exists()


def test_missing_dex_aborts_before_conversion(tmp_path: Path):
    ws = make_workspace(tmp_path, dex=None)
    runner = FakeToolRunner()

    with pytest.raises(EntryNotFoundError) as exc:
        make_service(tmp_path, runner).run(ws, force=False, benchmarks=[])

    assert exc.value.stage is Stage.EXTRACT_BYTECODE

    assert runner.stages() == [Stage.DECOMPRESS]
    assert not ws.dex_file.exists()
