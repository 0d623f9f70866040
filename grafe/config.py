"""Global configuration constants for the site builder.

Defines the fixed site layout, file extensions, engine settings and logging
defaults used across the pipeline. Directory constants are relative to the
site root (the current working directory unless a caller passes another one).
"""

from __future__ import annotations

from pathlib import Path

# Input layout (relative to the site root)
CONTENT_DIR: Path = Path("content")
TEMPLATES_DIR: Path = Path("theme") / "templates"
LAYOUTS_SUBDIR: str = "layouts"
INCLUDES_SUBDIR: str = "includes"
THEME_STATIC_DIR: Path = Path("theme") / "static"
STATIC_DIR: Path = Path("static")

# Output layout
OUTPUT_DIR: Path = Path("public")
MARKER_FILENAME: str = ".nojekyll"

# Extensions
MARKDOWN_EXTENSION: str = ".md"
HTML_EXTENSION: str = ".html"
TEMPLATE_EXTENSION: str = ".html"
SCRIPT_SOURCE_EXTENSION: str = ".ts"
SCRIPT_COMPILED_EXTENSION: str = ".js"

# Markdown engine (markdown2) extras, configured once per build
MARKDOWN_EXTRAS: list[str] = [
    "tables",
    "header-ids",
    "fenced-code-blocks",
    "latex",
]
HEADING_ANCHOR_TEXT: str = "#"
WIKILINK_EXTENSION: str = ".html"

# Script transpiler (esbuild reads TypeScript on stdin, writes JavaScript)
TRANSPILER_COMMAND: list[str] = ["esbuild", "--loader=ts", "--log-level=warning"]
TRANSPILER_TIMEOUT_SECONDS: float = 60.0

# Preview server
PREVIEW_HOST: str = "localhost"
PREVIEW_PORT: int = 8081

# Logging
LOG_DIR: Path = Path("logs")
LOG_FILENAME_BUILD_SITE: str = "build_site.log"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
