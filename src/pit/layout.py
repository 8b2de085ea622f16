"""Root directory and file path resolution.

Everything pit stores lives under one per-user root directory, by default
``$HOME/.pit``::

    ~/.pit/               # mode 0700, created on first write
        pit.yaml          # root config, selects the active profile file
        default.yaml      # active profile file (mode 0600)

The root can be redirected for the whole process with :func:`set_root` or
:func:`root_override`, or injected per store via ``StorageLayout(root)``.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from pit.exceptions import ConfigError
from pit.models import Config

logger = logging.getLogger(__name__)

_DIR_NAME = ".pit"
_CONFIG_FILENAME = "pit.yaml"
_PROFILE_SUFFIX = ".yaml"
_ROOT_MODE = 0o700

_root_override: Optional[Path] = None


# --- Process-wide root ---


def default_root() -> Path:
    """Return the root directory used when none is injected.

    Resolution order: the override installed by :func:`set_root`, then
    ``$HOME/.pit``, then :meth:`pathlib.Path.home` when ``HOME`` is unset.

    Raises:
        ConfigError: If no home directory can be determined.
    """
    if _root_override is not None:
        return _root_override
    home = os.environ.get("HOME", "")
    if home:
        return Path(home) / _DIR_NAME
    try:
        return Path.home() / _DIR_NAME
    except (KeyError, RuntimeError) as exc:
        raise ConfigError(f"Cannot determine home directory: {exc}") from exc


def set_root(path: Optional[Union[str, Path]]) -> None:
    """Override the process-wide root directory; ``None`` restores the default."""
    global _root_override
    _root_override = Path(path) if path is not None else None


@contextmanager
def root_override(path: Union[str, Path]) -> Iterator[Path]:
    """Temporarily point the process-wide root at *path*.

    Example::

        with root_override(tmp_path) as root:
            pit.set("example.com", {"username": "me"})
    """
    global _root_override
    previous = _root_override
    _root_override = Path(path)
    try:
        yield _root_override
    finally:
        _root_override = previous


# --- Layout ---


class StorageLayout:
    """Paths of the files pit reads and writes under one root directory.

    Args:
        root: The root directory. It is not created until
            :meth:`ensure_root` is called.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def config_file_path(self) -> Path:
        """Path of the root config document, ``<root>/pit.yaml``."""
        return self._root / _CONFIG_FILENAME

    def profile_file_path(self, config: Config) -> Path:
        """Path of the active profile file, ``<root>/<config.profile>.yaml``."""
        return self._root / f"{config.profile}{_PROFILE_SUFFIX}"

    def ensure_root(self) -> None:
        """Create the root directory with ``0o700`` permissions if missing.

        Idempotent. Only I/O errors other than "already exists" propagate.
        """
        try:
            self._root.mkdir(mode=_ROOT_MODE)
        except FileExistsError:
            return
        # mkdir's mode is filtered by the umask
        os.chmod(self._root, _ROOT_MODE)
        logger.debug("Created root directory %s", self._root)

    def __repr__(self) -> str:
        return f"StorageLayout({str(self._root)!r})"
