"""Template helpers for the report pages.

Each helper returns ``Markup`` so the surrounding autoescaping leaves the
generated HTML alone; every piece of source text is escaped here instead.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from markupsafe import Markup, escape

from apkview.domain.models import Criticality, DirectoryEntry, FileEntry

# lines of context shown around a finding
CONTEXT_LINES = 5


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _window(finding: Any) -> tuple[list[str], int]:
    code = _field(finding, "code") or ""
    lines = code.splitlines()
    line = _field(finding, "line")
    if not lines:
        return [], 1
    if not line:
        return lines, 1
    start = max(1, line - CONTEXT_LINES)
    end = min(len(lines), line + CONTEXT_LINES)
    return lines[start - 1:end], start


def line_numbers(finding: Any) -> Markup:
    lines, first = _window(finding)
    target = _field(finding, "line")
    out = []
    for n in range(first, first + len(lines)):
        cls = ' class="vulnerable_line"' if n == target else ""
        out.append(f"<span{cls}>{n}</span><br>")
    return Markup("".join(out))


def html_code(finding: Any) -> Markup:
    lines, first = _window(finding)
    target = _field(finding, "line")
    out = []
    for n, text in enumerate(lines, start=first):
        cls = ' class="vulnerable_line"' if n == target else ""
        out.append(f"<code{cls}>{escape(text)}</code><br>")
    return Markup("".join(out))


def all_lines(code: str) -> Markup:
    count = len((code or "").splitlines())
    return Markup("".join(f'<a href="#code-line-{n}" id="line-{n}">{n}</a><br>' for n in range(1, count + 1)))


def all_code(code: str) -> Markup:
    out = []
    for n, text in enumerate((code or "").splitlines(), start=1):
        out.append(f'<code id="code-line-{n}">{escape(text)}</code><br>')
    return Markup("".join(out))


def report_index(findings: Iterable[Any]) -> Markup:
    counts = {c: 0 for c in Criticality}
    for f in findings:
        crit = _field(f, "criticality")
        if isinstance(crit, Criticality):
            counts[crit] += 1

    rows = []
    for crit in sorted(counts, key=lambda c: c.value, reverse=True):
        rows.append(
            f'<li class="{crit.key}"><a href="#{crit.key}">{crit.key.capitalize()}</a>'
            f" <span>{counts[crit]}</span></li>"
        )
    return Markup('<ul class="report-index">' + "".join(rows) + "</ul>")


def generate_menu(menu: Iterable[Any]) -> Markup:
    return Markup(_menu_html(menu))


def _menu_html(menu: Iterable[Any]) -> str:
    items = []
    for node in menu:
        if isinstance(node, DirectoryEntry):
            items.append(
                f'<li><a href="#" class="folder">{escape(node.name)}</a>{_menu_html(node.children)}</li>'
            )
        elif isinstance(node, FileEntry):
            items.append(
                f'<li><a href="{escape(node.path)}.html" class="file {escape(node.extension)}"'
                f' target="code">{escape(node.name)}</a></li>'
            )
    return "<ul>" + "".join(items) + "</ul>"


HELPERS = {
    "line_numbers": line_numbers,
    "html_code": html_code,
    "all_lines": all_lines,
    "all_code": all_code,
    "report_index": report_index,
    "generate_menu": generate_menu,
}
