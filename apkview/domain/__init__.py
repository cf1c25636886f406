from .errors import (
    EXIT_UNKNOWN,
    ApkViewError,
    ArchiveError,
    ArchiveOpenError,
    ConfigError,
    EncodingError,
    EntryNotFoundError,
    InvalidPackageError,
    IoError,
    TemplateError,
    ToolExecutionError,
    ToolLaunchError,
)
from .models import (
    AnalysisResult,
    Benchmark,
    Criticality,
    DirectoryEntry,
    FileEntry,
    Finding,
    MenuNode,
    MirrorRules,
    PackageWorkspace,
    Stage,
)

__all__ = [
    "EXIT_UNKNOWN",
    "ApkViewError",
    "ArchiveError",
    "ArchiveOpenError",
    "ConfigError",
    "EncodingError",
    "EntryNotFoundError",
    "InvalidPackageError",
    "IoError",
    "TemplateError",
    "ToolExecutionError",
    "ToolLaunchError",
    "AnalysisResult",
    "Benchmark",
    "Criticality",
    "DirectoryEntry",
    "FileEntry",
    "Finding",
    "MenuNode",
    "MirrorRules",
    "PackageWorkspace",
    "Stage",
]
