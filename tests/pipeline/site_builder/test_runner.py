"""End-to-end tests for the build orchestrator."""

import logging
from pathlib import Path

import pytest

from grafe.config import LOG_FILENAME_BUILD_SITE
from grafe.exceptions import FrontMatterError, TemplateLoadError
from grafe.pipeline.site_builder import runner


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def full_site(site_root: Path, write, page) -> Path:
    write(site_root / "content" / "blog" / "post.md", page(title="Post", body="[[index|Home]]\n"))
    write(site_root / "content" / "blog" / "draft.md", page(title="Hidden", extra="Draft: true\n"))
    write(site_root / "content" / "blog" / "widget.ts", "export const w: number = 1;\n")
    write(site_root / "theme" / "static" / "css" / "site.css", "theme")
    write(site_root / "theme" / "static" / "js" / "app.ts", "const a: number = 2;\n")
    write(site_root / "static" / "css" / "site.css", "project")
    write(site_root / "static" / "favicon.ico", "icon")
    return site_root


def test_full_build_produces_expected_tree(full_site: Path, fake_transpile) -> None:
    stats = runner.build_site(full_site, transpile=fake_transpile)

    public = full_site / "public"
    assert sorted(_snapshot(public)) == [
        ".nojekyll",
        "blog/post.html",
        "blog/widget.js",
        "css/site.css",
        "favicon.ico",
        "index.html",
        "js/app.js",
    ]
    assert (public / ".nojekyll").read_bytes() == b""
    assert (public / "css" / "site.css").read_text() == "project"
    assert (public / "js" / "app.js").read_text() == "// compiled\nconst a = 2;\n"
    assert '<a href="index.html">Home</a>' in (public / "blog" / "post.html").read_text()
    assert stats.as_dict() == {
        "pages_rendered": 2,
        "drafts_skipped": 1,
        "content_files_copied": 1,
        "theme_assets_copied": 2,
        "static_assets_copied": 2,
        "scripts_transpiled": 2,
    }


def test_draft_never_reaches_output(full_site: Path, fake_transpile) -> None:
    runner.build_site(full_site, transpile=fake_transpile)
    public = full_site / "public"
    assert not list(public.rglob("draft*"))
    assert all("Hidden" not in p.read_text() for p in public.rglob("*.html"))


def test_stale_output_is_removed(site_root: Path, fake_transpile) -> None:
    stale = site_root / "public" / "old" / "gone.html"
    stale.parent.mkdir(parents=True)
    stale.write_text("stale")

    runner.build_site(site_root, transpile=fake_transpile)

    assert not stale.exists()
    assert (site_root / "public" / "index.html").exists()


def test_build_is_deterministic(full_site: Path, fake_transpile) -> None:
    runner.build_site(full_site, transpile=fake_transpile)
    first = _snapshot(full_site / "public")
    runner.build_site(full_site, transpile=fake_transpile)
    assert _snapshot(full_site / "public") == first


def test_missing_template_field_halts_build(site_root: Path, write, fake_transpile) -> None:
    write(site_root / "content" / "a_bad.md", "---\nTitle: T\nSummary: S\n---\nbody\n")
    write(site_root / "static" / "late.css", "never copied")

    with pytest.raises(FrontMatterError) as excinfo:
        runner.build_site(site_root, transpile=fake_transpile)

    assert excinfo.value.context["field"] == "Template"
    assert excinfo.value.context["source"].endswith("a_bad.md")
    assert not (site_root / "public" / "index.html").exists()
    assert not (site_root / "public" / "late.css").exists()
    assert not (site_root / "public" / ".nojekyll").exists()


def test_run_from_config_reports_failure(site_root: Path, write, caplog) -> None:
    write(site_root / "theme" / "templates" / "layouts" / "bad.html", "{% endif %}")
    with caplog.at_level(logging.ERROR):
        assert runner.run_from_config(site_root) is False
    assert "Failed to build site" in caplog.text
    assert "TEMPLATE_LOAD_ERROR" in caplog.text


def test_try_build_site_returns_stats_or_none(site_root: Path, write) -> None:
    stats = runner.try_build_site(site_root)
    assert stats is not None
    assert stats.pages_rendered == 1

    write(site_root / "content" / "bad.md", "---\nTitle: T\n---\n")
    assert runner.try_build_site(site_root) is None


def test_run_from_config_success(site_root: Path) -> None:
    assert runner.run_from_config(site_root) is True
    assert (site_root / "public" / "index.html").exists()


def test_build_defaults_to_current_directory(site_root: Path, monkeypatch, fake_transpile) -> None:
    monkeypatch.chdir(site_root)
    runner.build_site(transpile=fake_transpile)
    assert (site_root / "public" / "index.html").exists()


def test_template_errors_surface_before_output_is_written(site_root: Path, write) -> None:
    write(site_root / "theme" / "templates" / "includes" / "broken.html", "{{")
    with pytest.raises(TemplateLoadError):
        runner.build_site(site_root)
    assert not (site_root / "public").exists()


def test_clean_output_refuses_site_root(tmp_path: Path) -> None:
    with pytest.raises(PermissionError):
        runner.clean_output(tmp_path, tmp_path)
    with pytest.raises(PermissionError):
        runner.clean_output(tmp_path.parent / "elsewhere", tmp_path)


def test_configure_logging_file_handler(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("DISABLE_FILE_LOGS", raising=False)
    monkeypatch.setattr(runner, "LOG_DIR", tmp_path / "logs")
    runner.configure_logging("debug", enable_file=True)
    try:
        assert logging.root.level == logging.DEBUG
        assert any(isinstance(h, logging.FileHandler) for h in logging.root.handlers)
        assert (tmp_path / "logs" / LOG_FILENAME_BUILD_SITE).exists()
    finally:
        for h in logging.root.handlers[:]:
            h.close()
            logging.root.removeHandler(h)


def test_configure_logging_respects_disable_file_logs(monkeypatch) -> None:
    monkeypatch.setenv("DISABLE_FILE_LOGS", "1")
    runner.configure_logging("INFO", enable_file=True)
    assert not any(isinstance(h, logging.FileHandler) for h in logging.root.handlers)
