from __future__ import annotations

from pathlib import Path
from typing import Optional

from apkview.domain.models import Stage

# Process exit status for any fatal pipeline or report error.
EXIT_UNKNOWN = 1


class ApkViewError(Exception):
    """Base class for every error that aborts an analysis run."""

    def __init__(self, message: str, *, stage: Optional[Stage] = None, path: Optional[Path] = None):
        super().__init__(message)
        self.stage = stage
        self.path = path

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stage is not None:
            msg = f"[{self.stage.label}] {msg}"
        if self.path is not None:
            msg = f"{msg} ({self.path})"
        return msg


class ConfigError(ApkViewError):
    pass


class InvalidPackageError(ApkViewError):
    """The package name is empty or is not a plain file name."""


class ToolLaunchError(ApkViewError):
    """The external executable could not be started."""


class ToolExecutionError(ApkViewError):
    """The external executable ran and failed."""

    def __init__(self, message: str, *, returncode: int, stderr: str = "", stage: Optional[Stage] = None):
        super().__init__(message, stage=stage)
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base}. More info: {self.stderr}" if self.stderr else base


class ArchiveError(ApkViewError):
    pass


class ArchiveOpenError(ArchiveError):
    pass


class EntryNotFoundError(ArchiveError):
    pass


class IoError(ApkViewError):
    pass


class EncodingError(ApkViewError):
    pass


class TemplateError(ApkViewError):
    pass
