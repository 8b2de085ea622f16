"""YAML encode/decode boundary.

pit stores everything as block-style YAML: string keys, string leaves, and
at most one level of nesting (profile name -> key -> value). This module is
the only place that touches :mod:`yaml`; everything above it works with
plain dicts and :class:`~pit.exceptions.CodecError`.

Documents are loaded with :class:`yaml.BaseLoader`, which skips YAML 1.1
implicit typing: every scalar stays the exact text the user typed
(``0123``, ``12:30``, ``yes``), and a blank value is ``""``.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

import yaml
from pydantic import ValidationError

from pit.exceptions import CodecError
from pit.models import Profile, ProfileSet, profile_adapter, profile_set_adapter


def encode(value: Any) -> bytes:  # noqa: ANN401
    """Serialise *value* as UTF-8 block-style YAML.

    Raises:
        CodecError: If *value* contains objects YAML's safe dumper cannot
            represent.
    """
    try:
        text = yaml.safe_dump(
            value,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=True,
        )
    except yaml.YAMLError as exc:
        raise CodecError(f"Cannot encode value: {exc}") from exc
    return text.encode("utf-8")


def decode(data: Union[bytes, str], source: str = "<bytes>") -> Any:  # noqa: ANN401
    """Parse a YAML document.

    Args:
        data: Raw document bytes (UTF-8) or text.
        source: Label used in error messages, normally the file path.

    Returns:
        The decoded value with every scalar as a string; ``None`` for an
        empty document.

    Raises:
        CodecError: If the document is not valid UTF-8 or not valid YAML.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CodecError(f"Not valid UTF-8: {exc}", source) from exc
    try:
        return yaml.load(data, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise CodecError(f"Invalid YAML: {exc}", source) from exc


def decode_profile(data: Union[bytes, str], source: str = "<bytes>") -> Profile:
    """Decode a single profile (a flat string-to-string mapping).

    An empty document decodes to an empty profile.

    Raises:
        CodecError: If the document is not a mapping of string leaves.
    """
    raw = decode(data, source)
    if raw is None:
        return {}
    try:
        return profile_adapter.validate_python(raw)
    except ValidationError as exc:
        raise CodecError(f"Not a profile mapping: {_summarise(exc)}", source) from exc


def validate_profile(data: Mapping[str, str], source: str = "<profile>") -> Profile:
    """Check that *data* is a flat mapping of strings and return it as a dict.

    Raises:
        CodecError: If any key or value is not a ``str``.
    """
    try:
        return profile_adapter.validate_python(dict(data))
    except ValidationError as exc:
        raise CodecError(f"Not a profile mapping: {_summarise(exc)}", source) from exc


def decode_profile_set(data: Union[bytes, str], source: str = "<bytes>") -> ProfileSet:
    """Decode a profile file body (profile name -> profile).

    An empty document decodes to an empty profile set.

    Raises:
        CodecError: If the document does not have the profile set shape.
    """
    raw = decode(data, source)
    if raw is None:
        return {}
    try:
        return profile_set_adapter.validate_python(raw)
    except ValidationError as exc:
        raise CodecError(f"Not a profile set: {_summarise(exc)}", source) from exc


def _summarise(exc: ValidationError) -> str:
    """Condense a ValidationError into one line of ``location: message`` items."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)
