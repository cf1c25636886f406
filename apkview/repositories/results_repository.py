from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ResultsRepository:
    """
    Repository pattern: encapsulates locating generated reports and input APKs.
    """
    results_base: Path
    apk_folder: Path

    def list_reports(self) -> list[str]:
        """Packages with a generated report, newest first."""
        if not self.results_base.exists():
            return []
        candidates = [
            p for p in self.results_base.iterdir()
            if p.is_dir() and (p / "index.html").is_file()
        ]
        candidates.sort(key=lambda p: (p / "index.html").stat().st_mtime, reverse=True)
        return [p.name for p in candidates]

    def list_apks(self) -> list[str]:
        if not self.apk_folder.exists():
            return []
        return sorted(p.stem for p in self.apk_folder.glob("*.apk") if p.is_file())

    def package_dir(self, package: str) -> Optional[Path]:
        root = self.results_base.resolve()
        d = (root / package).resolve()
        if d.parent != root or not d.is_dir():
            return None
        return d

    def resolve(self, package: str, filename: str) -> Optional[Path]:
        """
        Path of ``filename`` inside the package report, or None when it does
        not exist. Raises PermissionError when it points outside the report.
        """
        base = self.package_dir(package)
        if base is None:
            return None
        full = (base / filename).resolve()
        if base not in full.parents:
            raise PermissionError(filename)
        if not full.is_file():
            return None
        return full
