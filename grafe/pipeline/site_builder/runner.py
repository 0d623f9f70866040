"""Build orchestration for the static site.

This module provides the headless entrypoints that sequence the build stages
and the logging configuration used by the CLI. It holds no rendering logic of
its own: every stage is delegated to its sibling module.

Build sequence
--------------
1. Delete ``public/``.
2. Load the theme templates and configure the markdown converter.
3. Render ``content/`` into ``public/``.
4. Mirror ``theme/static/`` into ``public/``.
5. Mirror ``static/`` into ``public/`` (wins over step 4 on collisions).
6. Transpile every ``.ts`` file under ``public/``.
7. Write the empty ``public/.nojekyll`` marker.

The first failing stage stops the build. ``build_site`` lets the exception
propagate so callers and tests can inspect it; ``run_from_config`` logs it
and reports ``False``.

Examples
--------
>>> from grafe.pipeline.site_builder.runner import configure_logging, run_from_config
>>> configure_logging(log_level="INFO")  # doctest: +SKIP
>>> run_from_config()  # doctest: +SKIP
True
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import asdict, dataclass
from pathlib import Path

from grafe.config import (
    CONTENT_DIR,
    LOG_DIR,
    LOG_FILENAME_BUILD_SITE,
    LOG_FORMAT,
    MARKER_FILENAME,
    OUTPUT_DIR,
    STATIC_DIR,
    TEMPLATES_DIR,
    THEME_STATIC_DIR,
)

from .assets import mirror_tree
from .converter import MarkdownConverter
from .renderer import convert_content_tree
from .templates import load_templates
from .transpiler import Transpile, transpile_scripts

logger = logging.getLogger(__name__)


@dataclass
class BuildStats:
    """Counters describing one completed build."""

    pages_rendered: int = 0
    drafts_skipped: int = 0
    content_files_copied: int = 0
    theme_assets_copied: int = 0
    static_assets_copied: int = 0
    scripts_transpiled: int = 0

    def as_dict(self) -> dict[str, int]:
        """Return the counters as a plain dictionary."""
        return asdict(self)


def configure_logging(log_level: str = "INFO", enable_file: bool = False) -> None:
    r"""Configure root logging for a build run.

    Installs a console handler and, optionally, a file handler writing to
    ``LOG_DIR / LOG_FILENAME_BUILD_SITE``. Existing root handlers are
    removed first, so the call is idempotent.

    Parameters
    ----------
    log_level : str, optional
        Logging level name (e.g. ``"INFO"``, ``"DEBUG"``). Unknown names fall
        back to INFO.
    enable_file : bool, optional
        Also log to a file. Ignored when ``DISABLE_FILE_LOGS`` is set.
        Failure to create the log file is tolerated and the console handler
        is kept.
    """
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file and not os.environ.get("DISABLE_FILE_LOGS"):
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(
                0, logging.FileHandler(LOG_DIR / LOG_FILENAME_BUILD_SITE, mode="a")
            )
        except OSError:
            pass
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def clean_output(output_root: Path, site_root: Path) -> None:
    r"""Remove the previous build's output tree.

    Parameters
    ----------
    output_root : Path
        Directory to delete recursively. A missing directory is a no-op.
    site_root : Path
        Site directory; the output root must lie strictly inside it.

    Raises
    ------
    PermissionError
        If ``output_root`` is the site root itself or lies outside it.
    OSError
        If the tree cannot be removed.
    """
    target = output_root.resolve()
    root = site_root.resolve()
    if target == root or not target.is_relative_to(root):
        raise PermissionError(
            f"Refusing to delete {target}: output must be inside the site root {root}"
        )
    if target.exists():
        logger.warning("Removing previous output: %s", target)
        shutil.rmtree(target)
    else:
        logger.info("Output %s does not exist; nothing to remove.", target)


def write_marker(output_root: Path) -> Path:
    """Create the empty hosting marker file at the output root."""
    marker = output_root / MARKER_FILENAME
    output_root.mkdir(parents=True, exist_ok=True)
    marker.write_bytes(b"")
    return marker


def build_site(
    site_root: Path | None = None,
    *,
    converter: MarkdownConverter | None = None,
    transpile: Transpile | None = None,
) -> BuildStats:
    r"""Run the full build for the site rooted at ``site_root``.

    Parameters
    ----------
    site_root : Path or None, optional
        Directory holding ``content/``, ``theme/`` and ``static/``. Defaults
        to the current working directory.
    converter : MarkdownConverter or None, optional
        Converter to use; a default one is created when omitted.
    transpile : callable or None, optional
        Script compiler (``str -> str``); defaults to ``EsbuildTranspiler``.

    Returns
    -------
    BuildStats
        Counters for the completed build.

    Raises
    ------
    AppError
        Template, front-matter, conversion or transpilation failures.
    OSError
        Filesystem failures.
    """
    root = Path(site_root) if site_root is not None else Path.cwd()
    output_root = root / OUTPUT_DIR
    stats = BuildStats()

    clean_output(output_root, root)

    templates = load_templates(root / TEMPLATES_DIR)
    converter = converter if converter is not None else MarkdownConverter()

    content = convert_content_tree(templates, converter, root / CONTENT_DIR, output_root)
    stats.pages_rendered = content.pages_rendered
    stats.drafts_skipped = content.drafts_skipped
    stats.content_files_copied = content.files_copied

    stats.theme_assets_copied = mirror_tree(root / THEME_STATIC_DIR, output_root)
    stats.static_assets_copied = mirror_tree(root / STATIC_DIR, output_root)

    stats.scripts_transpiled = transpile_scripts(output_root, transpile)

    write_marker(output_root)
    logger.info("Build finished: %s", stats.as_dict())
    return stats


def try_build_site(site_root: Path | None = None) -> BuildStats | None:
    """Build the site, logging any failure.

    Returns
    -------
    BuildStats or None
        Counters of the completed build, or None if any stage failed (the
        error is logged with its traceback).
    """
    try:
        return build_site(site_root)
    except Exception:
        logger.exception("Failed to build site")
        return None


def run_from_config(site_root: Path | None = None) -> bool:
    """Build the site and report success as a boolean."""
    return try_build_site(site_root) is not None


__all__ = [
    "BuildStats",
    "build_site",
    "clean_output",
    "configure_logging",
    "run_from_config",
    "try_build_site",
    "write_marker",
]
