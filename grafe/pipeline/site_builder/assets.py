"""Verbatim copying of static asset trees into the output root.

Used for the theme's ``static/`` directory and then the project's
``static/`` directory. Files are copied byte for byte; when two mirrors
write the same destination the later one wins.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .paths import ensure_parent_dirs, mirror_path
from .walker import walk

logger = logging.getLogger(__name__)


def copy_file(source: Path, destination: Path) -> None:
    """Copy ``source`` to ``destination``, creating parent directories.

    An existing destination file is overwritten. Errors propagate as
    ``OSError``.
    """
    ensure_parent_dirs(destination)
    shutil.copyfile(source, destination)


def mirror_tree(source_root: Path, dest_root: Path) -> int:
    r"""Copy every file under ``source_root`` to the same relative path under ``dest_root``.

    Parameters
    ----------
    source_root : Path
        Tree to mirror. A missing tree mirrors nothing.
    dest_root : Path
        Root that receives the copies.

    Returns
    -------
    int
        Number of files copied.

    Raises
    ------
    OSError
        If a file cannot be read or written; the mirror stops at the first
        failure.

    Examples
    --------
    >>> mirror_tree(Path("theme/static"), Path("public"))  # doctest: +SKIP
    12
    """
    copied = 0

    def visit(path: Path) -> None:
        nonlocal copied
        copy_file(path, mirror_path(path, source_root, dest_root))
        copied += 1

    walk(source_root, visit)
    logger.info("Mirrored %d file(s) from %s into %s", copied, source_root, dest_root)
    return copied


__all__ = ["copy_file", "mirror_tree"]
