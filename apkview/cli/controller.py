from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from apkview.app_factory import build_analysis_service, create_app
from apkview.cli.args import parse_args
from apkview.config.ini_config import IniConfig
from apkview.domain.errors import EXIT_UNKNOWN, ApkViewError
from apkview.log_setup import setup_logging

LOG = logging.getLogger("apkview.cli")


def analyze(args: argparse.Namespace) -> int:
    settings = IniConfig.from_env_or_default(args.config).load_settings().with_overrides(
        force=args.force,
        verbose=args.verbose,
        quiet=args.quiet,
    )
    setup_logging(verbose=settings.verbose, quiet=settings.quiet)

    service = build_analysis_service(settings)
    result = service.run(args.package, force=settings.force)

    for b in result.benchmarks:
        LOG.debug("%s: %.3fs", b.label, b.seconds)
    LOG.info("Report available at %s", settings.results_folder / args.package / "index.html")
    return 0


def serve(args: argparse.Namespace) -> int:
    setup_logging()
    app = create_app(args.config)
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Single place deciding the process exit status."""
    args = parse_args(argv)
    try:
        if args.command == "serve":
            return serve(args)
        return analyze(args)
    except ApkViewError as e:
        # make sure the error is printed even if logging was never configured
        if not logging.getLogger("apkview").handlers:
            setup_logging()
        LOG.error("%s", e)
        return EXIT_UNKNOWN
