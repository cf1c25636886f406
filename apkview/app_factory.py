from __future__ import annotations

from pathlib import Path
from typing import Optional

from flask import Flask

from apkview.adapters.archive import ZipEntryExtractor
from apkview.adapters.tool_runner import ToolRunner
from apkview.config.ini_config import AppSettings, IniConfig
from apkview.renderers.jinja_renderer import JinjaRenderer
from apkview.repositories.results_repository import ResultsRepository
from apkview.services.analysis_service import AnalysisService, FindingsProvider
from apkview.services.decompilation_service import DecompilationService, ToolPaths
from apkview.services.report_service import ReportService
from apkview.web.routes import create_blueprint


def build_analysis_service(
    settings: AppSettings,
    findings_provider: Optional[FindingsProvider] = None,
) -> AnalysisService:
    decompiler = DecompilationService(
        tools=ToolPaths(
            java=settings.java,
            apktool_file=settings.apktool_file,
            dex2jar_folder=settings.dex2jar_folder,
            jd_cmd_file=settings.jd_cmd_file,
        ),
        runner=ToolRunner(timeout_seconds=settings.timeout_seconds),
        extractor=ZipEntryExtractor(),
    )

    report_service = ReportService(
        renderer=JinjaRenderer(settings.template_path),
        template_path=settings.template_path,
        rules=settings.mirror_rules,
    )

    return AnalysisService(
        settings=settings,
        decompiler=decompiler,
        report_service=report_service,
        findings_provider=findings_provider,
    )


def create_app(ini_path: Optional[Path] = None) -> Flask:
    ini = IniConfig.from_env_or_default(str(ini_path) if ini_path else None)
    settings = ini.load_settings()

    results_repo = ResultsRepository(
        results_base=settings.results_folder,
        apk_folder=settings.apk_folder,
    )

    analysis_service = build_analysis_service(settings)

    app = Flask(__name__)
    app.register_blueprint(create_blueprint(analysis_service, results_repo))

    app.config["HOST"] = settings.flask_host
    app.config["PORT"] = settings.flask_port
    app.config["DEBUG"] = settings.flask_debug

    return app
