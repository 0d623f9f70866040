"""Markdown-to-HTML conversion for content files.

``MarkdownConverter`` wraps the two external engines a content file goes
through: ``python-frontmatter`` splits off and parses the YAML front matter,
and ``markdown2`` renders the body. The converter is configured once per
build and reused for every file; each ``convert`` call works on its own
parsed ``frontmatter.Post``, so no state leaks between files.

Supported syntax on top of standard Markdown:

- tables and fenced code blocks (markdown2 extras);
- heading ids, each heading prefixed with a ``#`` self-link;
- wiki links: ``[[Page]]``, ``[[Page|label]]``, ``[[Page#section]]`` and
  ``[[#section]]``; targets without an extension link to ``Page.html``;
- math: ``$...$`` and ``$$...$$`` rendered to MathML (markdown2 ``latex``);
  a pair of single ``$`` signs always delimits inline math, so prose such
  as ``costs $5 and later $10`` is rendered as a formula;
- raw HTML passes through untouched.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import frontmatter
import markdown2
import yaml

from grafe.config import HEADING_ANCHOR_TEXT, MARKDOWN_EXTRAS, WIKILINK_EXTENSION
from grafe.exceptions import ConversionError, FrontMatterError

from .paths import add_extension, extension_of

_WIKILINK_RE = re.compile(r"(?<!!)\[\[([^\[\]|]+?)(?:\|([^\[\]]+?))?\]\]")
_CODE_SPAN_RE = re.compile(r"(`+)(.+?)(?<!`)\1(?!`)")
_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_HEADING_RE = re.compile(r'<(h[1-6]) id="([^"]+)">')


@dataclass(frozen=True)
class ConversionResult:
    """Rendered HTML body plus the raw front-matter mapping of one file."""

    html: str
    metadata: dict[str, Any] = field(default_factory=dict)


def resolve_wikilink(target: str) -> str:
    """Return the link destination for a wiki link target.

    >>> resolve_wikilink("Getting Started")
    'Getting%20Started.html'
    >>> resolve_wikilink("guide#install")
    'guide.html#install'
    >>> resolve_wikilink("#top")
    '#top'
    >>> resolve_wikilink("diagram.png")
    'diagram.png'
    """
    page, _, fragment = target.strip().partition("#")
    page = page.strip()
    if page and not extension_of(page):
        page = add_extension(page, WIKILINK_EXTENSION)
    destination = quote(page, safe="/.-_~")
    if fragment:
        destination += "#" + quote(fragment.strip(), safe="-_.~")
    return destination


def _outside_code_spans(line: str, replace: Callable[[re.Match[str]], str]) -> str:
    """Apply the wiki link substitution to the parts of ``line`` outside code spans."""
    parts = []
    last = 0
    for span in _CODE_SPAN_RE.finditer(line):
        parts.append(_WIKILINK_RE.sub(replace, line[last : span.start()]))
        parts.append(span.group(0))
        last = span.end()
    parts.append(_WIKILINK_RE.sub(replace, line[last:]))
    return "".join(parts)


def expand_wikilinks(text: str) -> str:
    r"""Rewrite ``[[wiki links]]`` into standard Markdown links.

    Fenced code blocks and inline code spans are left untouched.

    Parameters
    ----------
    text : str
        Markdown body (front matter already removed).

    Returns
    -------
    str
        Markdown with every wiki link replaced by ``[label](destination)``.

    Examples
    --------
    >>> expand_wikilinks("See [[About|the about page]].")
    'See [the about page](About.html).'
    """

    def replace(match: re.Match[str]) -> str:
        target = match.group(1)
        label = match.group(2) or target
        return f"[{label.strip()}]({resolve_wikilink(target)})"

    lines = text.splitlines(keepends=True)
    in_fence = False
    for index, line in enumerate(lines):
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if not in_fence:
            lines[index] = _outside_code_spans(line, replace)
    return "".join(lines)


def add_heading_anchors(html: str, anchor_text: str = HEADING_ANCHOR_TEXT) -> str:
    """Prefix every heading that carries an id with a self-link.

    >>> add_heading_anchors('<h2 id="usage">Usage</h2>')
    '<h2 id="usage"><a class="anchor" href="#usage">#</a> Usage</h2>'
    """
    return _HEADING_RE.sub(
        lambda m: f'{m.group(0)}<a class="anchor" href="#{m.group(2)}">{anchor_text}</a> ',
        html,
    )


class MarkdownConverter:
    """Convert content sources into HTML plus front-matter metadata.

    Parameters
    ----------
    extras : list of str, optional
        markdown2 extras; defaults to ``MARKDOWN_EXTRAS`` from ``grafe.config``.
    """

    def __init__(self, extras: list[str] | None = None) -> None:
        self.extras = list(MARKDOWN_EXTRAS if extras is None else extras)
        self._markdown = markdown2.Markdown(extras=self.extras)

    def convert(self, source_text: str) -> ConversionResult:
        r"""Render one content file.

        Parameters
        ----------
        source_text : str
            Full file contents, front matter included.

        Returns
        -------
        ConversionResult
            Rendered body HTML and the parsed metadata mapping (empty when
            the file has no front matter).

        Raises
        ------
        FrontMatterError
            If the front matter is not valid YAML.
        ConversionError
            If the markdown engine fails on the body.
        """
        try:
            post = frontmatter.loads(source_text)
        except yaml.YAMLError as exc:
            raise FrontMatterError(
                f"Front matter is not valid YAML: {exc}",
                context={"reason": "yaml"},
            ) from exc

        body = expand_wikilinks(post.content)
        try:
            html = str(self._markdown.convert(body))
        except Exception as exc:
            raise ConversionError(
                f"Markdown conversion failed: {exc}",
                context={"engine": "markdown2", "extras": self.extras},
            ) from exc
        return ConversionResult(html=add_heading_anchors(html), metadata=dict(post.metadata))


__all__ = [
    "ConversionResult",
    "MarkdownConverter",
    "add_heading_anchors",
    "expand_wikilinks",
    "resolve_wikilink",
]
