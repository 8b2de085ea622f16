"""Loading the root configuration document.

``<root>/pit.yaml`` selects which profile file is active. pit never writes
this file; when it is absent the defaults apply (``profile: default``).
"""

from __future__ import annotations

from pydantic import ValidationError

from pit.codec import decode
from pit.exceptions import CodecError, ConfigError
from pit.layout import StorageLayout
from pit.models import Config

DEFAULT_CONFIG = b"profile: default\n"


def load_config(layout: StorageLayout) -> Config:
    """Load the root configuration for *layout*.

    Returns:
        The deserialised :class:`~pit.models.Config`. If the file does not
        exist, the default document is used.

    Raises:
        ConfigError: If the file exists but is not valid YAML or fails
            validation.
        OSError: For any read failure other than the file being absent.
    """
    path = layout.config_file_path()
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        data = DEFAULT_CONFIG

    try:
        raw = decode(data, str(path))
    except CodecError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    if raw is None:
        return Config()
    try:
        return Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
