"""Exception hierarchy for pit.

All exceptions inherit from :class:`PitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`pit.exit_codes`.
The top-level handler in :func:`pit.app.main` catches ``PitError`` and
exits with the appropriate code.

Plain filesystem failures are not wrapped: they surface as the built-in
:class:`OSError` so callers can inspect ``errno`` directly.

Subclass hierarchy::

    PitError (exit 1)
    +-- ConfigError     (exit 1)
    +-- CodecError      (exit 4)
    +-- EditorError     (exit 5)
    +-- NoChangesError  (exit 3)
"""

from __future__ import annotations

from typing import Optional

from pit.exit_codes import (
    EXIT_CODEC_ERROR,
    EXIT_EDITOR_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_NO_CHANGES,
)


class PitError(Exception):
    """Base exception for all pit errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(PitError):
    """Raised for a malformed ``pit.yaml`` or an unresolvable root directory."""

    exit_code = EXIT_GENERIC_FAILURE


class CodecError(PitError):
    """Raised when a YAML document cannot be decoded into the expected shape.

    Args:
        message: Description of the failure.
        source: Path (or other label) of the document being decoded.
    """

    exit_code = EXIT_CODEC_ERROR

    def __init__(self, message: str, source: str = "<bytes>"):
        super().__init__(f"{source}: {message}")
        self.source = source


class EditorError(PitError):
    """Raised when the editor cannot be launched or exits with a failure.

    Args:
        message: Description of the failure.
        returncode: Exit status of the shell, or ``None`` if it never ran.
    """

    exit_code = EXIT_EDITOR_ERROR

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class NoChangesError(PitError):
    """Raised when the user leaves the editor without saving.

    This is the expected way for a user to decline filling in missing
    keys, not an internal fault.
    """

    exit_code = EXIT_NO_CHANGES

    def __init__(self, message: str = "No changes."):
        super().__init__(message)
