"""Tests for the Jinja2 HTML renderer."""

import pytest
from markupsafe import Markup

from resumeconvertor.errors import RenderError
from resumeconvertor.normalizer import normalize_resume, parse_model_json
from resumeconvertor.renderers import DEFAULT_TEMPLATE, HtmlRenderer, raw
from resumeconvertor.sanitizer import sanitize_model_response
from resumeconvertor.shared import ResumeRecord


@pytest.fixture
def sample_record(sample_answer):
    return normalize_resume(parse_model_json(sanitize_model_response(sample_answer)), logo_base64="QUJD")


class TestEscaping:
    """Values are escaped unless the template marks them raw."""

    def test_plain_binding_is_escaped(self):
        renderer = HtmlRenderer.from_string("{{ full_name }}")
        html = renderer.render(ResumeRecord(full_name="<b>bold</b>"))
        assert html == "&lt;b&gt;bold&lt;/b&gt;"

    def test_raw_function_passes_markup_through(self):
        renderer = HtmlRenderer.from_string("{{ raw(strengths) }}")
        html = renderer.render(ResumeRecord(strengths="<b>bold</b>"))
        assert html == "<b>bold</b>"

    def test_raw_filter_passes_markup_through(self):
        renderer = HtmlRenderer.from_string("{{ strengths|raw }}")
        assert renderer.render(ResumeRecord(strengths="<i>x</i>")) == "<i>x</i>"

    def test_raw_of_none_is_empty(self):
        assert raw(None) == Markup("")

    def test_record_also_bound_as_resume(self):
        renderer = HtmlRenderer.from_string("{{ resume.title }}")
        assert renderer.render(ResumeRecord(title="Engineer")) == "Engineer"

    def test_lists_iterate(self):
        renderer = HtmlRenderer.from_string("{% for c in certifications %}[{{ c }}]{% endfor %}")
        assert renderer.render(ResumeRecord(certifications=["PMP", "CKA"])) == "[PMP][CKA]"


class TestTemplateErrors:

    def test_compile_error(self):
        with pytest.raises(RenderError, match="Cannot compile"):
            HtmlRenderer.from_string("{% if %}")

    def test_runtime_error(self):
        renderer = HtmlRenderer.from_string("{{ resume.missing.deeper }}")
        with pytest.raises(RenderError) as exc_info:
            renderer.render(ResumeRecord())
        assert exc_info.value.stage.value == "Render"

    def test_missing_template_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            HtmlRenderer.from_file(tmp_path / "missing.html.j2")

    def test_template_from_file(self, tmp_path):
        path = tmp_path / "custom.html.j2"
        path.write_text("<h1>{{ full_name }}</h1>", encoding="utf-8")
        assert HtmlRenderer.from_file(path).render(ResumeRecord(full_name="A")) == "<h1>A</h1>"


class TestDefaultTemplate:

    def test_default_template_is_packaged(self):
        assert DEFAULT_TEMPLATE.is_file()

    def test_renders_sample_record(self, sample_record):
        html = HtmlRenderer.from_file().render(sample_record)

        assert "<h1>Jane Doe</h1>" in html
        assert "<strong>Senior Data Engineer</strong>" in html
        assert "jane@example.com | +1 555 0100" in html
        assert "Builds <b>reliable</b> pipelines." in html
        assert "Cut batch runtime by <i>40%</i>" in html
        assert "<th>Skill</th>" in html
        assert "<td>Python</td>" in html
        assert "<h3>Lakehouse migration</h3>" in html
        assert "<li>Designed ingestion</li>" in html
        assert "AWS Solutions Architect" in html
        assert 'src="data:image/png;base64,QUJD"' in html

    def test_empty_record_renders_without_sections(self):
        html = HtmlRenderer.from_file().render(ResumeRecord())
        assert "<h1></h1>" in html
        assert "<h2>" not in html
        assert "<img" not in html

    def test_string_skills_render_as_list(self):
        html = HtmlRenderer.from_file().render(ResumeRecord(skill_matrix=["Python", "Go"]))
        assert "<li>Python</li>" in html
        assert "<table>" not in html

    def test_unsafe_name_escaped_in_default_template(self):
        html = HtmlRenderer.from_file().render(ResumeRecord(full_name="<script>x</script>"))
        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html
