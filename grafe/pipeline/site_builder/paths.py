"""Path helpers shared by every stage of the site build.

Extension inspection and rewriting are pure string transforms on the final
path segment; they never touch the filesystem. ``mirror_path`` is the single
place where a source file's location is mapped under the output root, so
content conversion, asset mirroring and script transpilation always agree on
where a file lands.

Examples
--------
>>> extension_of("content/blog.v2/post.tar.gz")
'.gz'
>>> change_extension("content/post.md", ".html")
'content/post.html'
"""

from __future__ import annotations

import os
from pathlib import Path

PathLike = str | os.PathLike[str]

_SEPARATORS = {"/", os.sep}


def _final_segment_start(path: str) -> int:
    """Return the index where the final path segment begins."""
    return max(path.rfind(sep) for sep in _SEPARATORS) + 1


def extension_of(path: PathLike) -> str:
    r"""Return the extension of the final path segment, including the dot.

    The extension starts at the last ``.`` of the final segment. Dots in
    directory names are ignored.

    Parameters
    ----------
    path : str or os.PathLike
        File path to inspect.

    Returns
    -------
    str
        The extension (e.g. ``".gz"``), or ``""`` if the final segment has
        no dot.

    Examples
    --------
    >>> extension_of("a/b/c.tar.gz")
    '.gz'
    >>> extension_of("a/b/noext")
    ''
    >>> extension_of("a.d/noext")
    ''
    """
    text = os.fspath(path)
    start = _final_segment_start(text)
    dot = text.rfind(".", start)
    if dot == -1:
        return ""
    return text[dot:]


def remove_extension(path: PathLike) -> str:
    """Return ``path`` without the extension of its final segment.

    >>> remove_extension("content/post.md")
    'content/post'
    """
    text = os.fspath(path)
    extension = extension_of(text)
    if not extension:
        return text
    return text[: -len(extension)]


def add_extension(path: PathLike, extension: str) -> str:
    """Append ``extension`` to ``path`` verbatim."""
    return os.fspath(path) + extension


def change_extension(path: PathLike, new_extension: str) -> str:
    """Replace the extension of the final segment with ``new_extension``.

    >>> change_extension("public/app/main.ts", ".js")
    'public/app/main.js'
    >>> change_extension("README", ".txt")
    'README.txt'
    """
    return add_extension(remove_extension(path), new_extension)


def ensure_parent_dirs(path: PathLike) -> None:
    r"""Create every missing directory in the parent chain of ``path``.

    Calling this repeatedly is harmless. Filesystem refusals propagate.

    Parameters
    ----------
    path : str or os.PathLike
        File path whose parent directories must exist.

    Raises
    ------
    OSError
        If a directory cannot be created, e.g. ``PermissionError`` or
        ``FileExistsError``/``NotADirectoryError`` when a regular file sits
        where a directory is needed.
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def mirror_path(path: PathLike, source_root: PathLike, dest_root: PathLike) -> Path:
    r"""Map a file under ``source_root`` to the same relative location under ``dest_root``.

    Parameters
    ----------
    path : str or os.PathLike
        File discovered under ``source_root``.
    source_root : str or os.PathLike
        Root whose prefix is stripped.
    dest_root : str or os.PathLike
        Root the relative path is re-anchored to.

    Returns
    -------
    Path
        ``dest_root / path.relative_to(source_root)``.

    Raises
    ------
    ValueError
        If ``path`` does not live under ``source_root``.

    Examples
    --------
    >>> mirror_path("theme/static/css/site.css", "theme/static", "public").as_posix()
    'public/css/site.css'
    """
    return Path(dest_root) / Path(path).relative_to(Path(source_root))


__all__ = [
    "add_extension",
    "change_extension",
    "ensure_parent_dirs",
    "extension_of",
    "mirror_path",
    "remove_extension",
]
