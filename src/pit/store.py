"""Reading and atomically rewriting the active profile file.

The active profile file holds every profile as one YAML mapping::

    example.com:
      password: example-password
      username: example-user

Updates always replace the whole file. The new contents are written to a
scratch file in the OS temp directory and renamed over the target with
``os.replace``. When the temp directory sits on another filesystem the
rename fails with ``EXDEV``; the bytes are then copied into a sibling
scratch file next to the target and *that* is renamed into place, so a
reader only ever sees the old contents or the new contents.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from pit.codec import decode_profile_set, encode
from pit.layout import StorageLayout
from pit.models import Config, ProfileSet

logger = logging.getLogger(__name__)

_FILE_MODE = 0o600


class ProfileStore:
    """Read/write the profile set in the active profile file.

    Args:
        layout: Where the root directory and files live.
        config: The loaded root config selecting the active profile file.
        scratch_dir: Directory for the pre-rename scratch file. ``None``
            uses the OS temp directory.

    Example::

        store = ProfileStore(layout, load_config(layout))
        profiles = store.read_profiles()
        profiles["example.com"] = {"username": "me"}
        store.write_profiles(profiles)
    """

    def __init__(
        self,
        layout: StorageLayout,
        config: Config,
        scratch_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self._layout = layout
        self._path = layout.profile_file_path(config)
        self._scratch_dir = str(scratch_dir) if scratch_dir is not None else None

    @property
    def path(self) -> Path:
        """The filesystem path of the active profile file."""
        return self._path

    def read_profiles(self) -> ProfileSet:
        """Load every profile from the active profile file.

        Returns:
            The decoded profile set, or an empty dict if the file does not
            exist.

        Raises:
            CodecError: If the file is not a valid profile set.
            OSError: For read failures other than the file being absent.
        """
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        return decode_profile_set(data, str(self._path))

    def names(self) -> list[str]:
        """Return the stored profile names, sorted."""
        return sorted(self.read_profiles())

    def write_profiles(self, profiles: ProfileSet) -> None:
        """Replace the active profile file with *profiles*.

        The file ends with ``0o600`` permissions. On any failure the
        previous contents are left intact and scratch files are removed.

        Raises:
            CodecError: If *profiles* cannot be encoded.
            OSError: If the root directory or file cannot be written.
        """
        data = encode(profiles)
        self._layout.ensure_root()

        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._scratch_dir,
        )
        copied = False
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            try:
                os.replace(tmp_path, self._path)
            except OSError as exc:
                if exc.errno != errno.EXDEV:
                    raise
                logger.debug("Cross-device rename to %s, copying instead", self._path)
                self._copy_into_place(tmp_path)
                copied = True
        except BaseException:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise

        if copied:
            # The target is already replaced; a leftover scratch file is not a failed write.
            try:
                os.unlink(tmp_path)
            except OSError as exc:
                logger.warning("Could not remove scratch file %s: %s", tmp_path, exc)
        logger.debug("Wrote %d profiles to %s", len(profiles), self._path)

    def _copy_into_place(self, src: str) -> None:
        """Copy *src* to a sibling scratch file of the target, then rename it over."""
        fd, sibling = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with open(src, "rb") as s, os.fdopen(fd, "wb") as d:
                shutil.copyfileobj(s, d)
                d.flush()
                os.fsync(d.fileno())
            os.chmod(sibling, _FILE_MODE)
            os.replace(sibling, self._path)
        except BaseException:
            try:
                os.unlink(sibling)
            except FileNotFoundError:
                pass
            raise
