from __future__ import annotations

from pathlib import Path

import pytest

from apkview.config.ini_config import BUNDLED_TEMPLATES
from apkview.domain.errors import TemplateError
from apkview.domain.models import Criticality, DirectoryEntry, FileEntry, Finding
from apkview.renderers import helpers
from apkview.renderers.jinja_renderer import JinjaRenderer


def test_bundled_templates_load():
    renderer = JinjaRenderer(BUNDLED_TEMPLATES)
    assert {"report", "src", "code"} <= set(renderer.names)


def test_missing_folder_fails(tmp_path: Path):
    with pytest.raises(TemplateError):
        JinjaRenderer(tmp_path / "random path")


def test_missing_required_template_fails(tmp_path: Path):
    (tmp_path / "report.j2").write_text("r", encoding="utf-8")
    (tmp_path / "src.j2").write_text("s", encoding="utf-8")

    with pytest.raises(TemplateError) as exc:
        JinjaRenderer(tmp_path)

    assert "code" in str(exc.value)


def test_render_failure_maps_to_template_error(tmp_path: Path):
    for name in ("report", "src"):
        (tmp_path / f"{name}.j2").write_text("ok", encoding="utf-8")
    (tmp_path / "code.j2").write_text("{{ code.missing.attr }}", encoding="utf-8")

    renderer = JinjaRenderer(tmp_path)
    assert renderer.render("report", {}) == b"ok"
    with pytest.raises(TemplateError):
        renderer.render("code", {"code": None})
    with pytest.raises(TemplateError):
        renderer.render("nope", {})


def test_code_page_escapes_source():
    renderer = JinjaRenderer(BUNDLED_TEMPLATES)

    page = renderer.render(
        "code",
        {"path": "a/b/Main.java", "code": "if (a < b) {\n  x();\n}", "back_path": "../../"},
    ).decode("utf-8")

    assert "a &lt; b" in page
    assert "<script" not in page
    assert 'href="../../index.html"' in page
    assert 'id="line-3"' in page
    assert "../../../css/style.css" in page


def test_src_page_contains_menu_links():
    renderer = JinjaRenderer(BUNDLED_TEMPLATES)
    menu = [
        FileEntry("Main.java", "Main.java", "java"),
        DirectoryEntry("res", (FileEntry("a.xml", "res/a.xml", "xml"),)),
    ]

    page = renderer.render("src", {"menu": menu}).decode("utf-8")

    assert 'href="Main.java.html"' in page
    assert 'href="res/a.xml.html"' in page
    assert ">res</a>" in page


def test_finding_window_marks_the_line():
    code = "\n".join(f"line {n}" for n in range(1, 21))
    finding = Finding(Criticality.HIGH, "Name", "Desc", file="A.java", line=10, code=code)

    numbers = str(helpers.line_numbers(finding))
    lines = str(helpers.html_code(finding))

    assert numbers.count("<span") == 11
    assert '<span class="vulnerable_line">10</span>' in numbers
    assert '<code class="vulnerable_line">line 10</code>' in lines
    assert "line 4<" not in lines


def test_report_index_counts():
    findings = [
        Finding(Criticality.HIGH, "a", "d"),
        Finding(Criticality.HIGH, "b", "d"),
        Finding(Criticality.LOW, "c", "d"),
    ]

    html = str(helpers.report_index(findings))

    assert '<a href="#high">High</a> <span>2</span>' in html
    assert '<a href="#low">Low</a> <span>1</span>' in html
    assert '<a href="#critical">Critical</a> <span>0</span>' in html
