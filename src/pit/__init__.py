"""pit -- a per-user store of named credential and config profiles.

Profiles live in a single YAML file under ``~/.pit``. A caller asks for a
profile by name and may declare the keys it needs; when any of them are
missing the user is dropped into ``$EDITOR`` to fill them in, and the edited
profile is persisted before it is returned.

Typical usage::

    import pit

    profile = pit.get("example.com", {
        "username": "your username on example.com",
        "password": "your password on example.com",
    })
    pit.set("example.com", {"username": "me", "password": "secret"})

Modules:
    api: :class:`Pit` and the module-level :func:`get` / :func:`set`.
    layout: Root directory and file path resolution.
    config: Loading the root ``pit.yaml`` document.
    codec: YAML encode/decode boundary.
    store: Atomic reads and writes of the active profile file.
    editor: Launching ``$EDITOR`` and detecting whether the user saved.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer command-line front end.
"""

from pit.api import Pit, get, set
from pit.exceptions import (
    CodecError,
    ConfigError,
    EditorError,
    NoChangesError,
    PitError,
)
from pit.layout import StorageLayout, default_root, root_override, set_root
from pit.models import Config, Profile, ProfileSet, Requires

__version__ = "0.1.0"

__all__ = [
    "CodecError",
    "Config",
    "ConfigError",
    "EditorError",
    "NoChangesError",
    "Pit",
    "PitError",
    "Profile",
    "ProfileSet",
    "Requires",
    "StorageLayout",
    "default_root",
    "get",
    "root_override",
    "set",
    "set_root",
]
