"""Tests for content rendering, front matter validation and the content tree pass."""

from pathlib import Path

import pytest

from grafe.exceptions import FrontMatterError, TemplateNotFoundError, TemplateRenderError
from grafe.pipeline.site_builder import renderer as r
from grafe.pipeline.site_builder.converter import MarkdownConverter
from grafe.pipeline.site_builder.templates import load_templates


@pytest.fixture
def templates(templates_dir: Path):
    return load_templates(templates_dir)


@pytest.fixture(scope="module")
def converter() -> MarkdownConverter:
    return MarkdownConverter()


def test_render_writes_complete_page(templates, converter, page, tmp_path: Path) -> None:
    out = tmp_path / "public" / "blog" / "post.html"
    source = page(
        title="A & B",
        summary="About things",
        body="Some *markdown* <b>raw</b>.\n",
        extra="Params:\n  author: Ada\n",
    )

    assert r.render_content_file(templates, converter, source, out) is True

    html = out.read_text(encoding="utf-8")
    assert "<title>A &amp; B</title>" in html
    assert 'content="About things"' in html
    assert "<em>markdown</em> <b>raw</b>" in html
    assert '<p class="author">Ada</p>' in html


def test_draft_writes_nothing(templates, converter, page, tmp_path: Path) -> None:
    out = tmp_path / "public" / "draft.html"
    assert r.render_content_file(templates, converter, page(extra="Draft: true\n"), out) is False
    assert not out.exists()
    assert not out.parent.exists()


def test_draft_skips_even_without_required_fields(templates, converter, tmp_path: Path) -> None:
    out = tmp_path / "x.html"
    assert r.render_content_file(templates, converter, "---\nDraft: true\n---\nbody\n", out) is False


def test_draft_false_is_rendered(templates, converter, page, tmp_path: Path) -> None:
    out = tmp_path / "x.html"
    assert r.render_content_file(templates, converter, page(extra="Draft: false\n"), out)
    assert out.exists()


@pytest.mark.parametrize("missing", ["Title", "Summary", "Template"])
def test_missing_required_field(templates, converter, tmp_path: Path, missing: str) -> None:
    fields = {"Title": "T", "Summary": "S", "Template": "default"}
    del fields[missing]
    source = "---\n" + "".join(f"{k}: {v}\n" for k, v in fields.items()) + "---\nbody\n"
    out = tmp_path / "x.html"

    with pytest.raises(FrontMatterError) as excinfo:
        r.render_content_file(templates, converter, source, out, source=Path("content/x.md"))

    assert excinfo.value.context == {"source": "content/x.md", "field": missing}
    assert not out.exists()


def test_mistyped_field_is_not_coerced(templates, converter, page, tmp_path: Path) -> None:
    with pytest.raises(FrontMatterError, match="Title"):
        r.render_content_file(templates, converter, page(title="2024"), tmp_path / "x.html")


def test_non_boolean_draft_is_rejected() -> None:
    with pytest.raises(FrontMatterError, match="Draft"):
        r.extract_page_metadata({"Title": "T", "Summary": "S", "Template": "d", "Draft": "yes"})
    with pytest.raises(FrontMatterError, match="got str"):
        r.extract_page_metadata({"Title": "T", "Summary": "S", "Template": "d", "Draft": "false"})


def test_params_must_be_a_mapping() -> None:
    with pytest.raises(FrontMatterError, match="Params"):
        r.extract_page_metadata({"Title": "T", "Summary": "S", "Template": "d", "Params": [1, 2]})


def test_params_default_to_empty_mapping() -> None:
    meta = r.extract_page_metadata({"Title": "T", "Summary": "S", "Template": "d", "Params": None})
    assert meta is not None
    assert meta.params == {}
    assert meta.template_file == "d.html"


def test_params_pass_through_unmodified() -> None:
    params = {"nested": {"list": [1, "two", True]}, 3: "int key"}
    meta = r.extract_page_metadata({"Title": "T", "Summary": "S", "Template": "d", "Params": params})
    assert meta is not None
    assert meta.params is params


def test_unknown_template_is_fatal(templates, converter, page, tmp_path: Path) -> None:
    with pytest.raises(TemplateNotFoundError) as excinfo:
        r.render_content_file(
            templates, converter, page(template="nope"), tmp_path / "x.html", source=Path("c.md")
        )
    assert "nope.html" in str(excinfo.value)
    assert excinfo.value.context["source"] == "c.md"


def test_missing_param_is_falsy(templates_dir: Path, write, converter, page, tmp_path: Path) -> None:
    write(
        templates_dir / "layouts" / "hero.html",
        '{% if PageParams.image %}<img src="{{ PageParams.image }}">{% endif %}{{ Body }}[{{ PageParams.caption }}]',
    )
    templates = load_templates(templates_dir)
    out = tmp_path / "x.html"

    assert r.render_content_file(templates, converter, page(template="hero", body="Hi\n"), out)
    html = out.read_text()
    assert "<img" not in html
    assert "<p>Hi</p>" in html
    assert html.endswith("[]")


def test_template_runtime_error(templates_dir: Path, write, converter, page, tmp_path: Path) -> None:
    write(templates_dir / "layouts" / "deep.html", "{{ PageParams.image.src }}")
    templates = load_templates(templates_dir)
    out = tmp_path / "x.html"

    with pytest.raises(TemplateRenderError):
        r.render_content_file(templates, converter, page(template="deep"), out)
    assert not out.exists()


def test_convert_content_tree(templates, converter, page, write, tmp_path: Path) -> None:
    content = tmp_path / "content"
    public = tmp_path / "public"
    write(content / "index.md", page())
    write(content / "blog" / "first.md", page(title="First"))
    write(content / "blog" / "wip.md", page(extra="Draft: true\n"))
    (content / "img").mkdir(parents=True)
    (content / "img" / "logo.png").write_bytes(b"\x89PNG\x00\xff")

    stats = r.convert_content_tree(templates, converter, content, public)

    assert (stats.pages_rendered, stats.drafts_skipped, stats.files_copied) == (2, 1, 1)
    assert (public / "index.html").exists()
    assert "<title>First</title>" in (public / "blog" / "first.html").read_text()
    assert not (public / "blog" / "wip.html").exists()
    assert (public / "img" / "logo.png").read_bytes() == b"\x89PNG\x00\xff"
