"""Page template registry built on Jinja2.

A theme ships *layouts* (one per page type, e.g. ``default.html``) and
*includes* (fragments shared by all layouts, e.g. ``header.html``). Every
layout is compiled against the full set of includes and registered under its
file name, which is how content files select it through their ``Template``
front-matter field.

The registry is built once per build and is read-only afterwards; it is
passed explicitly to the renderer rather than stored in module state.

Boundaries
----------
- Syntax errors anywhere in the theme abort the build (``TemplateLoadError``).
- Autoescaping is on for every layout and include; the page body is
  passed as ``markupsafe.Markup`` by the renderer so it is injected verbatim.
- Unknown names render as empty and test false, so a layout can write
  ``{% if PageParams.image %}`` for an optional parameter. Going one level
  further into a missing value (``PageParams.image.src``) is an error.

Examples
--------
>>> templates = load_templates(Path("theme/templates"))  # doctest: +SKIP
>>> templates.names()  # doctest: +SKIP
['default.html', 'post.html']
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from jinja2 import Environment, FileSystemLoader, Template, TemplateSyntaxError, Undefined

from grafe.config import INCLUDES_SUBDIR, LAYOUTS_SUBDIR
from grafe.exceptions import TemplateLoadError, TemplateNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateSet:
    """Immutable mapping from layout file name to compiled template unit."""

    units: Mapping[str, Template]

    def get(self, name: str) -> Template:
        """Return the unit registered as ``name``.

        Raises
        ------
        TemplateNotFoundError
            If no layout with that file name exists.
        """
        try:
            return self.units[name]
        except KeyError:
            raise TemplateNotFoundError(
                f"The template {name} does not exist.",
                context={"template": name, "available": sorted(self.units)},
            ) from None

    def names(self) -> list[str]:
        """Return the registered layout names, sorted."""
        return sorted(self.units)

    def __contains__(self, name: object) -> bool:
        return name in self.units

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.units)


def _list_files(directory: Path) -> list[Path]:
    """Return regular files directly inside ``directory``, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file())


def create_environment(layouts_dir: Path, includes_dir: Path) -> Environment:
    """Build the Jinja2 environment shared by every unit of one build.

    Layout names take precedence over include names on lookup.
    """
    return Environment(
        loader=FileSystemLoader([str(layouts_dir), str(includes_dir)]),
        autoescape=True,
        undefined=Undefined,
        keep_trailing_newline=True,
    )


def _compile(env: Environment, path: Path, kind: str) -> Template:
    try:
        return env.get_template(path.name)
    except TemplateSyntaxError as exc:
        raise TemplateLoadError(
            f"Failed to parse {kind} {path}: {exc.message} (line {exc.lineno})",
            context={"template": str(path), "kind": kind, "line": exc.lineno},
        ) from exc


def load_templates(templates_dir: Path) -> TemplateSet:
    r"""Discover and compile every layout of a theme.

    Parameters
    ----------
    templates_dir : Path
        Theme template root containing ``layouts/`` and ``includes/``.

    Returns
    -------
    TemplateSet
        Read-only registry keyed by layout file name (e.g. ``"default.html"``).

    Raises
    ------
    TemplateLoadError
        If any layout or include has a syntax error. Includes are compiled
        eagerly so a broken fragment fails the build even when no layout
        happens to reach it.

    Notes
    -----
    Missing ``layouts/`` or ``includes/`` directories produce an empty
    registry or an empty include set; a page that then names a template
    fails with ``TemplateNotFoundError`` at render time.
    """
    layouts_dir = Path(templates_dir) / LAYOUTS_SUBDIR
    includes_dir = Path(templates_dir) / INCLUDES_SUBDIR
    layouts = _list_files(layouts_dir)
    includes = _list_files(includes_dir)

    env = create_environment(layouts_dir, includes_dir)
    for include in includes:
        _compile(env, include, "include")

    units: dict[str, Template] = {}
    for layout in layouts:
        units[layout.name] = _compile(env, layout, "layout")

    logger.info(
        "Loaded %d layout(s) with %d include(s) from %s",
        len(units),
        len(includes),
        templates_dir,
    )
    return TemplateSet(MappingProxyType(units))


__all__ = ["TemplateSet", "create_environment", "load_templates"]
