"""TypeScript transpilation pass over the finished output tree.

Script sources reach ``public/`` only through the content tree and the two
static mirrors, so this pass runs last: it walks the output tree, replaces
every ``.ts`` file with its compiled ``.js`` sibling and deletes the source.

The compiler is an external collaborator. ``EsbuildTranspiler`` runs the
``esbuild`` executable (TypeScript on stdin, JavaScript on stdout); any
callable with the same ``str -> str`` shape can be passed instead.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from grafe.config import (
    SCRIPT_COMPILED_EXTENSION,
    SCRIPT_SOURCE_EXTENSION,
    TRANSPILER_COMMAND,
    TRANSPILER_TIMEOUT_SECONDS,
)
from grafe.exceptions import AppError, TranspileError

from .paths import change_extension, ensure_parent_dirs, extension_of
from .walker import iter_files

logger = logging.getLogger(__name__)

Transpile = Callable[[str], str]


class EsbuildTranspiler:
    """Compile TypeScript source text to JavaScript with ``esbuild``.

    Parameters
    ----------
    command : list of str, optional
        Command line to execute; defaults to ``TRANSPILER_COMMAND``.
    timeout : float, optional
        Seconds to wait for one file before giving up.
    """

    def __init__(
        self,
        command: list[str] | None = None,
        timeout: float = TRANSPILER_TIMEOUT_SECONDS,
    ) -> None:
        self.command = list(TRANSPILER_COMMAND if command is None else command)
        self.timeout = timeout

    def __call__(self, source: str) -> str:
        r"""Return the JavaScript produced for ``source``.

        Raises
        ------
        TranspileError
            If the executable is missing, exits non-zero, or exceeds the
            timeout. The compiler's stderr is kept in the error context.
        """
        try:
            proc = subprocess.run(
                self.command,
                input=source,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise TranspileError(
                f"Transpiler executable not found: {self.command[0]}",
                context={"command": self.command},
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise TranspileError(
                f"Transpiler timed out after {self.timeout} seconds",
                context={"command": self.command, "timeout": self.timeout},
            ) from exc
        if proc.returncode != 0:
            raise TranspileError(
                f"Transpiler exited with status {proc.returncode}",
                context={
                    "command": self.command,
                    "returncode": proc.returncode,
                    "stderr": proc.stderr.strip(),
                },
            )
        return proc.stdout


def transpile_file(source_path: Path, transpile: Transpile) -> Path:
    """Compile one script in place and delete the source file.

    Returns the path of the compiled file.
    """
    compiled_path = Path(change_extension(source_path, SCRIPT_COMPILED_EXTENSION))
    source = source_path.read_text(encoding="utf-8")
    try:
        compiled = transpile(source)
    except AppError as exc:
        exc.context.setdefault("source", str(source_path))
        raise
    ensure_parent_dirs(compiled_path)
    compiled_path.write_text(compiled, encoding="utf-8")
    source_path.unlink()
    logger.debug("Transpiled %s -> %s", source_path, compiled_path)
    return compiled_path


def transpile_scripts(output_root: Path, transpile: Transpile | None = None) -> int:
    r"""Replace every script source under ``output_root`` with its compiled form.

    Parameters
    ----------
    output_root : Path
        The fully populated output tree.
    transpile : callable, optional
        ``str -> str`` compiler; defaults to a new ``EsbuildTranspiler``.

    Returns
    -------
    int
        Number of files transpiled.

    Raises
    ------
    TranspileError
        On the first file that fails to compile; remaining files are left
        untouched.
    OSError
        If a source cannot be read, the output written, or the source removed.
    """
    engine = transpile if transpile is not None else EsbuildTranspiler()
    scripts = [
        path
        for path in iter_files(output_root)
        if extension_of(path) == SCRIPT_SOURCE_EXTENSION
    ]
    for path in scripts:
        transpile_file(path, engine)
    logger.info("Transpiled %d script(s) under %s", len(scripts), output_root)
    return len(scripts)


__all__ = ["EsbuildTranspiler", "Transpile", "transpile_file", "transpile_scripts"]
