from __future__ import annotations

import argparse
from typing import Optional, Sequence


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apkview",
        description="Decompile Android applications and publish their sources as an HTML report.",
    )
    parser.add_argument("--config", metavar="INI", help="INI file (defaults to $APP_INI or ./apkview.ini)")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="decompile a package and generate its report")
    analyze.add_argument("package", help="package name; the APK is <apk_folder>/<package>.apk")
    analyze.add_argument("--force", action="store_true", default=None,
                         help="re-run every stage even if its output exists")
    noise = analyze.add_mutually_exclusive_group()
    noise.add_argument("-v", "--verbose", action="store_true", default=None)
    noise.add_argument("-q", "--quiet", action="store_true", default=None)

    sub.add_parser("serve", help="start the web UI")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
