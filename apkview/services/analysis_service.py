from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from apkview.config.ini_config import AppSettings
from apkview.domain.errors import InvalidPackageError, IoError
from apkview.domain.models import AnalysisResult, Benchmark, Finding, PackageWorkspace
from apkview.services.decompilation_service import DecompilationService
from apkview.services.report_service import ReportService

LOG = logging.getLogger(__name__)

# one path component: no separators, no leading dot
PACKAGE_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.-]*")

# Boundary to the vulnerability rule engine, which lives outside this package.
FindingsProvider = Callable[[PackageWorkspace], list[Finding]]


@dataclass
class AnalysisService:
    """
    Service layer: orchestrates one "analyse package" operation.
    Keeps controllers/routes thin.
    """
    settings: AppSettings
    decompiler: DecompilationService
    report_service: ReportService
    findings_provider: Optional[FindingsProvider] = None

    def workspace(self, package: str) -> PackageWorkspace:
        return PackageWorkspace(
            package=package,
            apk_file=self.settings.apk_file(package),
            dist_root=self.settings.dist_folder,
            results_root=self.settings.results_folder,
        )

    def run(self, package: str, *, force: Optional[bool] = None) -> AnalysisResult:
        package = validate_package(package)

        force = self.settings.force if force is None else force
        ws = self.workspace(package)
        if not ws.apk_file.is_file():
            raise IoError(f"The application {package} does not exist", path=ws.apk_file)

        benchmarks: list[Benchmark] = []
        self.decompiler.run(ws, force=force, benchmarks=benchmarks)

        findings = self.findings_provider(ws) if self.findings_provider else []

        result = AnalysisResult(
            package=package,
            generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            benchmarks=benchmarks,
            findings=findings,
        )
        self.report_service.generate(ws, result)

        LOG.info("Analysis of %s finished with %d findings.", package, len(findings))
        return result


def validate_package(package: Optional[str]) -> str:
    package = (package or "").strip()
    if not package:
        raise InvalidPackageError("Package is required.")
    if not PACKAGE_RE.fullmatch(package) or ".." in package:
        raise InvalidPackageError(f"Invalid package name: {package!r}")
    return package
