## routes.py
from __future__ import annotations

from flask import Blueprint, abort, current_app, redirect, render_template, request, send_file, url_for

from apkview.domain.errors import ApkViewError, InvalidPackageError


def create_blueprint(analysis_service, results_repo) -> Blueprint:
    bp = Blueprint("web", __name__)

    @bp.get("/")
    def index():
        return render_template(
            "index.html",
            reports=results_repo.list_reports(),
            apks=results_repo.list_apks(),
            error=None,
        )

    @bp.post("/run")
    def run_analysis():
        package = (request.form.get("package") or "").strip()
        force = request.form.get("force") in ("on", "1", "true")

        if not package:
            return render_template(
                "index.html",
                reports=results_repo.list_reports(),
                apks=results_repo.list_apks(),
                error="Package is required.",
            ), 400

        try:
            result = analysis_service.run(package, force=force)
        except InvalidPackageError as e:
            return render_template(
                "index.html",
                reports=results_repo.list_reports(),
                apks=results_repo.list_apks(),
                error=str(e),
            ), 400
        except ApkViewError as e:
            current_app.logger.error("Run %s failed: %s", package, e)
            return render_template("result.html", status="failed", package=package, error=str(e), result=None), 500

        current_app.logger.info("Run %s status=ok findings=%d", package, len(result.findings))
        return render_template(
            "result.html",
            status="ok",
            package=package,
            error=None,
            result=result,
            report_url=url_for("web.results", package=package, filename="index.html"),
        )

    @bp.get("/results/<package>/")
    def results_index(package: str):
        return redirect(url_for("web.results", package=package, filename="index.html"))

    @bp.get("/results/<package>/<path:filename>")
    def results(package: str, filename: str):
        try:
            full = results_repo.resolve(package, filename)
        except PermissionError:
            abort(403)
        if full is None:
            abort(404)
        return send_file(full)

    return bp
