######## models.py
########

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Optional, Union


class Stage(Enum):
    DECOMPRESS = "decompression"
    EXTRACT_BYTECODE = "dex extraction"
    CONVERT_TO_ARCHIVE = "dex to jar conversion"
    DECOMPILE = "decompilation"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class Benchmark:
    label: str
    elapsed: timedelta

    @property
    def seconds(self) -> float:
        return self.elapsed.total_seconds()


@dataclass(frozen=True)
class PackageWorkspace:
    """
    Paths owned by one analysis run of one package.
    Nothing here touches the filesystem.
    """
    package: str
    apk_file: Path
    dist_root: Path
    results_root: Path

    @property
    def root(self) -> Path:
        return self.dist_root / self.package

    @property
    def dex_file(self) -> Path:
        return self.root / "classes.dex"

    @property
    def jar_file(self) -> Path:
        return self.root / "classes.jar"

    @property
    def classes_dir(self) -> Path:
        return self.root / "classes"

    @property
    def output_root(self) -> Path:
        return self.results_root / self.package

    @property
    def src_output(self) -> Path:
        return self.output_root / "src"


# -----------------------------
# Menu tree
# -----------------------------
@dataclass(frozen=True)
class FileEntry:
    name: str
    path: str                   # posix path relative to the mirrored root
    extension: str


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    children: tuple["MenuNode", ...]

    def __post_init__(self) -> None:
        if not self.children:
            raise ValueError(f"Directory entry {self.name!r} must have children.")


MenuNode = Union[FileEntry, DirectoryEntry]


@dataclass(frozen=True)
class MirrorRules:
    excluded_paths: frozenset[PurePosixPath] = frozenset(
        {
            PurePosixPath("classes/android"),
            PurePosixPath("classes/com/google/android/gms"),
            PurePosixPath("smali"),
        }
    )
    skipped_dirs: frozenset[PurePosixPath] = frozenset({PurePosixPath("original")})
    extensions: frozenset[str] = frozenset({"java", "xml"})

    def is_excluded(self, rel: PurePosixPath) -> bool:
        return rel in self.excluded_paths

    def is_skipped(self, rel: PurePosixPath) -> bool:
        return rel in self.skipped_dirs

    def is_eligible(self, path: Path) -> bool:
        return path.suffix[1:] in self.extensions if path.suffix else False


# -----------------------------
# Findings and results
# -----------------------------
class Criticality(Enum):
    WARNING = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Finding:
    criticality: Criticality
    name: str
    description: str
    file: Optional[str] = None
    line: Optional[int] = None
    code: Optional[str] = None


@dataclass
class AnalysisResult:
    package: str
    generated_at: str
    benchmarks: list[Benchmark] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)

    def to_template_data(self) -> dict:
        grouped = {c.key: [] for c in Criticality}
        for f in self.findings:
            grouped[f.criticality.key].append(f)

        return {
            "app_package": self.package,
            "generated_at": self.generated_at,
            "benchmarks": [{"label": b.label, "seconds": round(b.seconds, 3)} for b in self.benchmarks],
            "findings": list(self.findings),
            "total_findings": len(self.findings),
            **grouped,
        }
