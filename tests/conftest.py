"""Pytest configuration and shared fixtures.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides a minimal site tree (theme layout + include) and a fake script
  transpiler so builds run without the ``esbuild`` executable.
"""

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

DEFAULT_LAYOUT = """<!DOCTYPE html>
<html>
<head><title>{{ Title }}</title><meta name="description" content="{{ Summary }}"></head>
<body>
{% include "header.html" %}
<main>{{ Body }}</main>
{% if PageParams.author %}<p class="author">{{ PageParams.author }}</p>{% endif %}
</body>
</html>
"""

HEADER_INCLUDE = '<header><a href="/">Home</a></header>\n'


def write_file(path: Path, text: str) -> Path:
    """Write ``text`` to ``path`` in UTF-8, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def make_page(
    title: str = "Home",
    summary: str = "Start here",
    template: str = "default",
    body: str = "# Hello World\n\nWelcome.\n",
    extra: str = "",
) -> str:
    """Return a markdown document with front matter."""
    return (
        "---\n"
        f"Title: {title}\n"
        f"Summary: {summary}\n"
        f"Template: {template}\n"
        f"{extra}"
        "---\n"
        f"{body}"
    )


@pytest.fixture
def page() -> Callable[..., str]:
    """Factory for markdown documents with front matter."""
    return make_page


@pytest.fixture
def write() -> Callable[[Path, str], Path]:
    """Helper that writes a text file, creating parents."""
    return write_file


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """A theme template root with one layout and one include."""
    root = tmp_path / "theme" / "templates"
    write_file(root / "layouts" / "default.html", DEFAULT_LAYOUT)
    write_file(root / "includes" / "header.html", HEADER_INCLUDE)
    return root


@pytest.fixture
def site_root(tmp_path: Path, templates_dir: Path) -> Path:
    """A site directory with a theme and a single home page."""
    write_file(tmp_path / "content" / "index.md", make_page())
    return tmp_path


@pytest.fixture
def fake_transpile() -> Callable[[str], str]:
    """Deterministic stand-in for esbuild that records its inputs."""
    calls: list[str] = []

    def transpile(source: str) -> str:
        calls.append(source)
        return "// compiled\n" + source.replace(": number", "")

    transpile.calls = calls  # type: ignore[attr-defined]
    return transpile
