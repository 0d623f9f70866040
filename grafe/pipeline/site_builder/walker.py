"""Recursive directory traversal used by every build stage.

The walker visits every non-directory entry beneath a root exactly once,
depth-first, with entries sorted by name inside each directory so repeated
builds see files in the same order.

Unreadable directories
----------------------
A directory that cannot be listed (``PermissionError`` or any other
``OSError``) is logged at WARNING with its path and contributes no files; the
walk carries on with its siblings. A missing root is treated as an empty tree
(the site may simply have no ``static/`` directory). Symbolic links to
directories are not followed, which keeps the walk free of cycles; symbolic
links to files are visited like regular files.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
    """Return the sorted entries of ``directory``, or ``[]`` if it cannot be read."""
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except FileNotFoundError:
        logger.debug("Directory %s does not exist; nothing to walk", directory)
        return []
    except OSError as exc:
        logger.warning("Skipping unreadable directory %s: %s", directory, exc)
        return []
    return sorted(entries, key=lambda entry: entry.name)


def iter_files(root_dir: str | os.PathLike[str]) -> Iterator[Path]:
    r"""Yield every file reachable from ``root_dir``.

    Each directory listing is read completely before any of its entries is
    yielded, so consumers may create or delete files while iterating.

    Parameters
    ----------
    root_dir : str or os.PathLike
        Directory to traverse.

    Yields
    ------
    Path
        ``root_dir``-prefixed path of each file, in sorted depth-first order.
    """
    for entry in _list_directory(Path(root_dir)):
        path = Path(root_dir) / entry.name
        if entry.is_dir(follow_symlinks=False):
            yield from iter_files(path)
        elif entry.is_file():
            yield path
        else:
            logger.debug("Skipping %s: not a regular file", path)


def walk(root_dir: str | os.PathLike[str], visit: Callable[[Path], None]) -> None:
    """Call ``visit`` once for every file beneath ``root_dir``.

    Directories are recursed into but never passed to ``visit``. Exceptions
    raised by ``visit`` propagate and end the walk.
    """
    for path in iter_files(root_dir):
        visit(path)


__all__ = ["iter_files", "walk"]
