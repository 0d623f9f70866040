"""Content rendering: front matter validation, template binding and page output.

This module is the centre of the build. For every markdown file under
``content/`` it converts the source, applies the draft-exclusion policy,
validates the required front-matter fields, resolves the page's template in
the registry and writes the rendered page to its mirrored location under the
output root. Non-markdown files found in the content tree are copied
verbatim to the same mirrored location.

Front-matter schema
-------------------
``Title`` (str), ``Summary`` (str) and ``Template`` (str, a layout name
without extension) are required; ``Draft`` (bool) and ``Params`` (mapping,
passed to templates untouched) are optional. Values are never coerced: a
numeric ``Title`` is an error, not a string.

Template binding
----------------
Every template receives exactly ``Title``, ``Summary``, ``Body`` and
``PageParams``. ``Body`` is already-rendered HTML wrapped in
``markupsafe.Markup`` so autoescaping leaves it untouched.

Failure policy
--------------
Every failure raises and stops the build; there is no per-page fallback. A
page is rendered completely in memory before its file is created, so a
failing page leaves no partial output.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import TemplateError
from markupsafe import Markup

from grafe.config import HTML_EXTENSION, MARKDOWN_EXTENSION, TEMPLATE_EXTENSION
from grafe.exceptions import (
    AppError,
    FrontMatterError,
    TemplateNotFoundError,
    TemplateRenderError,
)

from .assets import copy_file
from .converter import MarkdownConverter
from .paths import (
    add_extension,
    change_extension,
    ensure_parent_dirs,
    extension_of,
    mirror_path,
)
from .templates import TemplateSet
from .walker import walk

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("Title", "Summary", "Template")


@dataclass(frozen=True)
class PageMetadata:
    """Validated front matter of a publishable (non-draft) page."""

    title: str
    summary: str
    template: str
    params: Mapping[Any, Any] = field(default_factory=dict)

    @property
    def template_file(self) -> str:
        """Registry key of the page's layout, e.g. ``"default.html"``."""
        return add_extension(self.template, TEMPLATE_EXTENSION)


@dataclass
class ContentStats:
    """Counters collected while converting the content tree."""

    pages_rendered: int = 0
    drafts_skipped: int = 0
    files_copied: int = 0


def _context(source: Path | None, **extra: Any) -> dict[str, Any]:
    context: dict[str, Any] = {"source": str(source) if source is not None else None}
    context.update(extra)
    return context


def _where(source: Path | None) -> str:
    return f" in {source}" if source is not None else ""


def is_draft(metadata: Mapping[str, Any], source: Path | None = None) -> bool:
    """Return True when the page is marked ``Draft: true``.

    Raises
    ------
    FrontMatterError
        If ``Draft`` is present with a non-boolean value.
    """
    draft = metadata.get("Draft")
    if draft is None:
        return False
    if not isinstance(draft, bool):
        raise FrontMatterError(
            f"Front matter field 'Draft' must be a boolean, got {type(draft).__name__}{_where(source)}",
            context=_context(source, field="Draft"),
        )
    return draft


def extract_page_metadata(
    metadata: Mapping[str, Any], source: Path | None = None
) -> PageMetadata | None:
    r"""Validate raw front matter and build the page's metadata.

    Parameters
    ----------
    metadata : Mapping[str, Any]
        Raw mapping produced by the converter.
    source : Path or None, optional
        Content file the metadata came from; used only in error messages.

    Returns
    -------
    PageMetadata or None
        ``None`` for drafts, which are excluded from every build.

    Raises
    ------
    FrontMatterError
        If a required field is missing or is not a string, if ``Draft`` is
        not a boolean, or if ``Params`` is not a mapping.

    Examples
    --------
    >>> meta = extract_page_metadata(
    ...     {"Title": "Home", "Summary": "Start here", "Template": "default"}
    ... )
    >>> meta.template_file
    'default.html'
    >>> extract_page_metadata({"Draft": True}) is None
    True
    """
    if is_draft(metadata, source):
        return None

    values: dict[str, str] = {}
    for name in REQUIRED_FIELDS:
        if name not in metadata:
            raise FrontMatterError(
                f"Front matter field '{name}' is missing{_where(source)}",
                context=_context(source, field=name),
            )
        value = metadata[name]
        if not isinstance(value, str):
            raise FrontMatterError(
                f"Front matter field '{name}' must be a string, got {type(value).__name__}{_where(source)}",
                context=_context(source, field=name),
            )
        values[name] = value

    params = metadata.get("Params")
    if params is None:
        params = {}
    elif not isinstance(params, Mapping):
        raise FrontMatterError(
            f"Front matter field 'Params' must be a mapping, got {type(params).__name__}{_where(source)}",
            context=_context(source, field="Params"),
        )

    return PageMetadata(
        title=values["Title"],
        summary=values["Summary"],
        template=values["Template"],
        params=params,
    )


def render_content_file(
    templates: TemplateSet,
    converter: MarkdownConverter,
    source_text: str,
    output_path: Path,
    *,
    source: Path | None = None,
) -> bool:
    r"""Render one markdown source into a complete HTML page on disk.

    Parameters
    ----------
    templates : TemplateSet
        Registry built by ``load_templates`` for this build.
    converter : MarkdownConverter
        Converter shared by all pages of the build.
    source_text : str
        Contents of the markdown file.
    output_path : Path
        Destination of the rendered page.
    source : Path or None, optional
        Path of the markdown file, attached to error context.

    Returns
    -------
    bool
        ``True`` if the page was written, ``False`` if it is a draft (nothing
        written).

    Raises
    ------
    FrontMatterError
        Invalid or incomplete front matter.
    TemplateNotFoundError
        ``Template`` names no layout in the registry.
    TemplateRenderError
        The template failed while rendering the page.
    ConversionError
        The markdown engine failed.
    OSError
        The output file or its directories could not be written.
    """
    try:
        result = converter.convert(source_text)
    except AppError as exc:
        if source is not None:
            exc.context.setdefault("source", str(source))
        raise

    page = extract_page_metadata(result.metadata, source)
    if page is None:
        logger.info("Skipping draft %s", source if source is not None else output_path)
        return False

    try:
        template = templates.get(page.template_file)
    except TemplateNotFoundError as exc:
        if source is not None:
            exc.context.setdefault("source", str(source))
        raise

    try:
        rendered = template.render(
            Title=page.title,
            Summary=page.summary,
            Body=Markup(result.html),
            PageParams=page.params,
        )
    except TemplateError as exc:
        raise TemplateRenderError(
            f"Template {page.template_file} failed to render{_where(source)}: {exc}",
            context=_context(source, template=page.template_file),
        ) from exc

    ensure_parent_dirs(output_path)
    output_path.write_text(rendered, encoding="utf-8")
    logger.debug("Rendered %s with %s", output_path, page.template_file)
    return True


def convert_content_tree(
    templates: TemplateSet,
    converter: MarkdownConverter,
    content_root: Path,
    output_root: Path,
) -> ContentStats:
    r"""Render or copy every file of the content tree into the output root.

    Markdown files become ``.html`` pages at their mirrored path; all other
    files are copied byte for byte. The first failure propagates.

    Parameters
    ----------
    templates : TemplateSet
        Compiled theme layouts.
    converter : MarkdownConverter
        Markdown converter configured for this build.
    content_root : Path
        Source tree (``content/``).
    output_root : Path
        Output tree (``public/``).

    Returns
    -------
    ContentStats
        Pages rendered, drafts skipped and files copied.
    """
    stats = ContentStats()

    def visit(path: Path) -> None:
        destination = mirror_path(path, content_root, output_root)
        if extension_of(path) == MARKDOWN_EXTENSION:
            source_text = path.read_text(encoding="utf-8")
            target = Path(change_extension(destination, HTML_EXTENSION))
            if render_content_file(
                templates, converter, source_text, target, source=path
            ):
                stats.pages_rendered += 1
            else:
                stats.drafts_skipped += 1
        else:
            copy_file(path, destination)
            stats.files_copied += 1

    walk(content_root, visit)
    logger.info(
        "Content: %d page(s) rendered, %d draft(s) skipped, %d file(s) copied",
        stats.pages_rendered,
        stats.drafts_skipped,
        stats.files_copied,
    )
    return stats


__all__ = [
    "ContentStats",
    "PageMetadata",
    "REQUIRED_FIELDS",
    "convert_content_tree",
    "extract_page_metadata",
    "is_draft",
    "render_content_file",
]
