"""Numeric process exit codes for the ``pit`` command.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~pit.exceptions.PitError` subclass. Shell wrappers can
inspect the exit code to tell a user refusal apart from a real failure::

    $ pit get example.com -r password
    $ echo $?
    3   # EXIT_NO_CHANGES -- the editor was closed without saving
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including configuration and I/O errors)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NO_CHANGES = 3
"""The user closed the editor without saving the scratch file."""

EXIT_CODEC_ERROR = 4
"""A config or profile document could not be decoded or encoded."""

EXIT_EDITOR_ERROR = 5
"""The editor could not be launched or exited with a failure status."""
