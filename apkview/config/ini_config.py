########## ini_config.py

from __future__ import annotations

import os
from configparser import ConfigParser, Error as ConfigParserError
from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath
from typing import Optional

from apkview.domain.errors import ConfigError
from apkview.domain.models import MirrorRules

INI_DEFAULT_NAME = "apkview.ini"
BUNDLED_TEMPLATES = Path(__file__).resolve().parents[1] / "report_templates"


@dataclass(frozen=True)
class AppSettings:
    apk_folder: Path
    dist_folder: Path
    results_folder: Path
    template_path: Path

    java: str
    apktool_file: Path
    dex2jar_folder: Path
    jd_cmd_file: Path

    force: bool
    verbose: bool
    quiet: bool
    timeout_seconds: Optional[int]

    mirror_rules: MirrorRules

    flask_host: str
    flask_port: int
    flask_debug: bool

    def apk_file(self, package: str) -> Path:
        return self.apk_folder / f"{package}.apk"

    def with_overrides(
        self,
        *,
        force: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
    ) -> "AppSettings":
        """CLI flags win over the INI values; None keeps the INI value."""
        changes = {}
        if force is not None:
            changes["force"] = force
        if verbose is not None:
            changes["verbose"] = verbose
        if quiet is not None:
            changes["quiet"] = quiet
        return replace(self, **changes)


def _split_list(raw: str) -> list[str]:
    return [x.strip() for x in (raw or "").split(",") if x.strip()]


class IniConfig:
    """
    Adapter around ConfigParser and filesystem resolution.
    Keeps INI handling out of the service code.
    """

    def __init__(self, ini_path: Path):
        self._ini_path = ini_path
        self._cfg = ConfigParser()
        try:
            read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
        except ConfigParserError as e:
            raise ConfigError(f"INI file is malformed: {e}", path=ini_path) from e
        if not read_ok:
            raise ConfigError("INI file not found or unreadable", path=ini_path)

    @property
    def ini_path(self) -> Path:
        return self._ini_path

    @staticmethod
    def from_env_or_default(ini_raw: Optional[str] = None) -> "IniConfig":
        ini_raw = (ini_raw or os.getenv("APP_INI") or "").strip()
        # If APP_INI is not set, default to repo-root-relative ini location
        ini_path = Path(ini_raw) if ini_raw else (Path(__file__).resolve().parents[2] / INI_DEFAULT_NAME)
        return IniConfig(ini_path)

    def _cfg_path(self, section: str, key: str, default: Optional[Path] = None) -> Path:
        """
        Reads a filesystem path from INI and resolves it.
        Tries [paths] and [path] interchangeably for convenience.
        Relative paths are taken relative to the INI file.
        """
        sections_to_try = [section]
        if section == "paths":
            sections_to_try.append("path")
        if section == "path":
            sections_to_try.append("paths")

        for sec in sections_to_try:
            if not self._cfg.has_section(sec):
                continue
            raw = (self._cfg.get(sec, key, fallback="") or "").strip()
            if raw:
                p = Path(os.path.expandvars(os.path.expanduser(raw)))
                if not p.is_absolute():
                    p = self._ini_path.parent / p
                return p.resolve()

        if default is not None:
            return default
        raise ConfigError(f"Missing INI value for {key} in sections: {sections_to_try}", path=self._ini_path)

    def _mirror_rules(self) -> MirrorRules:
        defaults = MirrorRules()
        if not self._cfg.has_section("report"):
            return defaults

        excluded = self._cfg.get("report", "excluded_paths", fallback=None)
        skipped = self._cfg.get("report", "skipped_dirs", fallback=None)
        extensions = self._cfg.get("report", "extensions", fallback=None)

        return MirrorRules(
            excluded_paths=(
                frozenset(PurePosixPath(p) for p in _split_list(excluded))
                if excluded is not None else defaults.excluded_paths
            ),
            skipped_dirs=(
                frozenset(PurePosixPath(p) for p in _split_list(skipped))
                if skipped is not None else defaults.skipped_dirs
            ),
            extensions=(
                frozenset(e.lstrip(".") for e in _split_list(extensions))
                if extensions is not None else defaults.extensions
            ),
        )

    def load_settings(self) -> AppSettings:
        try:
            return self._load_settings()
        except ValueError as e:
            # getint / getboolean on bad values
            raise ConfigError(f"Invalid INI value: {e}", path=self._ini_path) from e

    def _load_settings(self) -> AppSettings:
        # Required paths
        apk_folder = self._cfg_path("paths", "apk_folder")
        dist_folder = self._cfg_path("paths", "dist_folder")
        results_folder = self._cfg_path("paths", "results_folder")
        template_path = self._cfg_path("paths", "template_path", default=BUNDLED_TEMPLATES)

        # Tools
        apktool_file = self._cfg_path("paths", "apktool_file")
        dex2jar_folder = self._cfg_path("paths", "dex2jar_folder")
        jd_cmd_file = self._cfg_path("paths", "jd_cmd_file")
        java = (self._cfg.get("execution", "java", fallback="java") or "").strip() or "java"

        # Execution
        force = self._cfg.getboolean("execution", "force", fallback=False)
        verbose = self._cfg.getboolean("execution", "verbose", fallback=False)
        quiet = self._cfg.getboolean("execution", "quiet", fallback=False)
        timeout_seconds = self._cfg.getint("execution", "timeout_seconds", fallback=0)

        # Flask
        flask_host = (self._cfg.get("flask", "host", fallback="127.0.0.1") or "").strip() or "127.0.0.1"
        flask_port = self._cfg.getint("flask", "port", fallback=5000)
        flask_debug = self._cfg.getboolean("flask", "debug", fallback=False)

        # Validate
        if not template_path.is_dir():
            raise ConfigError("Template folder not found", path=template_path)

        try:
            dist_folder.mkdir(parents=True, exist_ok=True)
            results_folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Could not create output folders: {e}", path=self._ini_path) from e

        return AppSettings(
            apk_folder=apk_folder,
            dist_folder=dist_folder,
            results_folder=results_folder,
            template_path=template_path,
            java=java,
            apktool_file=apktool_file,
            dex2jar_folder=dex2jar_folder,
            jd_cmd_file=jd_cmd_file,
            force=force,
            verbose=verbose,
            quiet=quiet,
            timeout_seconds=timeout_seconds if timeout_seconds > 0 else None,
            mirror_rules=self._mirror_rules(),
            flask_host=flask_host,
            flask_port=flask_port,
            flask_debug=flask_debug,
        )
