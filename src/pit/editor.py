"""Launching the user's editor and detecting whether they saved.

The editor runs through the platform shell so that ``$EDITOR`` may carry
its own arguments (``EDITOR="code --wait"``)::

    $SHELL -c "<editor> <path>"      # POSIX (default /bin/sh, vim)
    %COMSPEC% /c <editor> <path>     # Windows (default cmd, notepad)

Whether the user saved is decided by the file's modification time: quitting
without writing leaves it untouched, which is how a user declines to fill
in missing values. Saving an unmodified buffer still counts as an edit.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Optional, Union

from pit.exceptions import EditorError

logger = logging.getLogger(__name__)

_DEFAULT_EDITOR_POSIX = "vim"
_DEFAULT_EDITOR_WINDOWS = "notepad"
_DEFAULT_SHELL_POSIX = "/bin/sh"
_DEFAULT_SHELL_WINDOWS = "cmd"


def _is_windows() -> bool:
    """Return True when running on Windows."""
    return os.name == "nt"


def resolve_editor() -> str:
    """Return ``$EDITOR``, or the platform default when it is unset or empty."""
    editor = os.environ.get("EDITOR", "")
    if editor:
        return editor
    return _DEFAULT_EDITOR_WINDOWS if _is_windows() else _DEFAULT_EDITOR_POSIX


def resolve_shell() -> str:
    """Return the command interpreter: ``%COMSPEC%`` on Windows, ``$SHELL`` elsewhere."""
    if _is_windows():
        return os.environ.get("COMSPEC", "") or _DEFAULT_SHELL_WINDOWS
    return os.environ.get("SHELL", "") or _DEFAULT_SHELL_POSIX


def build_command(path: Union[str, Path]) -> list[str]:
    """Build the argv that opens *path* in the editor via the shell."""
    editor = resolve_editor()
    shell = resolve_shell()
    if _is_windows():
        return [shell, "/c", editor, str(path)]
    return [shell, "-c", f"{editor} {shlex.quote(str(path))}"]


@contextmanager
def _terminal_stdin() -> Iterator[Optional[IO[str]]]:
    """Yield the stream the editor should read keystrokes from.

    ``None`` lets the child inherit file descriptor 0 from the caller.
    """
    if _is_windows():
        with open("CONIN$") as conin:
            yield conin
    else:
        yield None


def edit_interactively(path: Union[str, Path]) -> bool:
    """Open *path* in the user's editor and wait for it to exit.

    Standard output and error are inherited from the caller; standard input
    is bound to the terminal so full-screen editors work.

    Returns:
        ``True`` if the file's modification time changed, ``False`` if the
        user quit without saving.

    Raises:
        EditorError: If the shell cannot be spawned or exits non-zero.
        OSError: If *path* cannot be stat'ed.
    """
    before = os.stat(path).st_mtime_ns
    command = build_command(path)
    logger.debug("Launching editor: %s", command)

    try:
        with _terminal_stdin() as stdin:
            completed = subprocess.run(command, stdin=stdin, check=False)
    except OSError as exc:
        raise EditorError(f"Cannot launch editor {command[0]!r}: {exc}") from exc

    if completed.returncode != 0:
        raise EditorError(
            f"Editor exited with status {completed.returncode}: {' '.join(command)}",
            returncode=completed.returncode,
        )

    after = os.stat(path).st_mtime_ns
    return after != before
