"""The two public operations: fetch a profile, and replace a profile.

:meth:`Pit.get` returns the stored profile for a name. When the caller
declares required keys that the profile lacks, the profile is written to a
scratch YAML file with each missing key seeded with its prompt::

    password: password on example.com
    username: hoge

and the user's editor is opened on it. If the user saves, the edited
mapping is persisted with :meth:`Pit.set` and returned; if they quit
without saving, :class:`~pit.exceptions.NoChangesError` is raised.

Nothing is cached between calls: config and profiles are re-read from disk
every time.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional, Union

from pit import editor
from pit.codec import decode_profile, encode, validate_profile
from pit.config import load_config
from pit.exceptions import NoChangesError
from pit.layout import StorageLayout, default_root
from pit.models import Profile, Requires
from pit.store import ProfileStore

logger = logging.getLogger(__name__)


class Pit:
    """Profile store rooted at one directory.

    Args:
        root: Root directory. ``None`` resolves :func:`~pit.layout.default_root`
            on every call, so :func:`~pit.layout.set_root` takes effect.

    Example::

        store = Pit(tmp_path)
        store.set("example.com", {"username": "me"})
        assert store.get("example.com") == {"username": "me"}
    """

    def __init__(self, root: Optional[Union[str, Path]] = None) -> None:
        self._root = Path(root) if root is not None else None

    @property
    def layout(self) -> StorageLayout:
        return StorageLayout(self._root if self._root is not None else default_root())

    def store(self) -> ProfileStore:
        """Load the config and return a store for the active profile file."""
        layout = self.layout
        return ProfileStore(layout, load_config(layout))

    def get(self, name: str, requires: Optional[Requires] = None) -> Profile:
        """Return the profile stored under *name*.

        Args:
            name: Profile name, e.g. a host name.
            requires: Keys the caller needs, mapped to the prompt shown in
                the editor for each missing one.

        Returns:
            The stored profile (empty if unknown), or the profile as edited
            by the user when required keys were missing.

        Raises:
            NoChangesError: If the user closed the editor without saving.
            EditorError: If the editor could not be run.
            CodecError: If a stored or edited document is malformed.
            ConfigError: If ``pit.yaml`` is malformed.
        """
        profiles = self.store().read_profiles()
        profile = dict(profiles.get(name, {}))

        if not requires:
            return profile

        missing = False
        for key, prompt in requires.items():
            if key not in profile:
                profile[key] = prompt
                missing = True

        if not missing:
            return profile

        edited = self._edit(name, profile)
        self.set(name, edited)
        return edited

    def set(self, name: str, data: Mapping[str, str]) -> None:
        """Store *data* under *name*, replacing any previous profile.

        Raises:
            CodecError: If *data* has a non-string key or value (nothing is
                written), or the existing profile file is malformed.
            ConfigError: If ``pit.yaml`` is malformed.
            OSError: If the profile file cannot be written.
        """
        profile = validate_profile(data, name)
        store = self.store()
        profiles = store.read_profiles()
        profiles[name] = profile
        store.write_profiles(profiles)

    def _edit(self, name: str, seeded: Profile) -> Profile:
        """Let the user edit *seeded* in a scratch file and return the result."""
        fd, scratch = tempfile.mkstemp(prefix="pit-", suffix=".yaml")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(encode(seeded))
            logger.debug("Editing profile %r in %s", name, scratch)
            if not editor.edit_interactively(scratch):
                raise NoChangesError()
            with open(scratch, "rb") as f:
                return decode_profile(f.read(), scratch)
        finally:
            try:
                os.unlink(scratch)
            except FileNotFoundError:
                pass


_default = Pit()


def get(name: str, requires: Optional[Requires] = None) -> Profile:
    """Return the profile stored under *name* in the process-wide root.

    See :meth:`Pit.get`.
    """
    return _default.get(name, requires)


def set(name: str, data: Mapping[str, str]) -> None:  # noqa: A001
    """Store *data* under *name* in the process-wide root.

    See :meth:`Pit.set`.
    """
    _default.set(name, data)
