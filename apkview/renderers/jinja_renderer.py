from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import jinja2

from apkview.domain.errors import TemplateError
from apkview.renderers.base import Renderer
from apkview.renderers.helpers import HELPERS

LOG = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".j2"
REQUIRED_TEMPLATES = ("report", "src", "code")


class JinjaRenderer(Renderer):
    """
    Renders the report pages: (template name, data) -> UTF-8 bytes.
    Templates are the ``<name>.j2`` files at the top of ``template_path``.
    """

    def __init__(self, template_path: Path):
        self.template_path = Path(template_path)
        if not self.template_path.is_dir():
            raise TemplateError("Could not load templates: not a directory", path=self.template_path)

        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.template_path)),
            autoescape=True,
            keep_trailing_newline=True,
        )
        self._env.filters.update(HELPERS)
        self._env.globals.update(HELPERS)

        self.names = sorted(
            p.name[: -len(TEMPLATE_SUFFIX)]
            for p in self.template_path.iterdir()
            if p.is_file() and p.name.endswith(TEMPLATE_SUFFIX)
        )
        missing = [n for n in REQUIRED_TEMPLATES if n not in self.names]
        if missing:
            raise TemplateError(
                "templates must include report, src and code templates; missing: " + ", ".join(missing),
                path=self.template_path,
            )
        LOG.debug("Loaded templates from %s: %s", self.template_path, ", ".join(self.names))

    def render(self, name: str, data: Mapping[str, Any]) -> bytes:
        if name not in self.names:
            raise TemplateError(f"Unknown template {name!r}", path=self.template_path)
        try:
            template = self._env.get_template(name + TEMPLATE_SUFFIX)
            return template.render(**data).encode("utf-8")
        except jinja2.TemplateError as e:
            raise TemplateError(f"Could not render the {name} template: {e}", path=self.template_path) from e
