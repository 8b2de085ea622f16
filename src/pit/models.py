"""Data shapes shared across pit modules.

* :class:`Config` -- the root ``pit.yaml`` document, a Pydantic model.
* :data:`Profile` -- one named collection of string key/value pairs.
* :data:`ProfileSet` -- the body of the active profile file, mapping
  profile names to profiles.
* :data:`Requires` -- keys a caller needs, each mapped to the prompt shown
  to the user when the key is missing.

The profile shapes are plain ``dict`` aliases; validation goes through the
strict :class:`~pydantic.TypeAdapter` instances below. Leaves must already be
``str``: nothing is coerced, so nested maps, lists, ``None`` or ``True`` are
rejected rather than written.
"""

from __future__ import annotations

from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

Profile = dict[str, str]
ProfileSet = dict[str, Profile]
Requires = Mapping[str, str]

DEFAULT_PROFILE = "default"

_LEAF_CONFIG = ConfigDict(strict=True)

profile_adapter: TypeAdapter[Profile] = TypeAdapter(Profile, config=_LEAF_CONFIG)
profile_set_adapter: TypeAdapter[ProfileSet] = TypeAdapter(ProfileSet, config=_LEAF_CONFIG)


class Config(BaseModel):
    """The root configuration document (``~/.pit/pit.yaml``).

    Only ``profile`` is recognised; it names the active profile file
    (``<profile>.yaml``) in the root directory. Unknown keys are ignored.

    Example::

        Config(profile="work")
    """

    model_config = ConfigDict(extra="ignore")

    profile: str = Field(
        default=DEFAULT_PROFILE,
        description="Basename (without extension) of the active profile file",
    )

    @field_validator("profile")
    @classmethod
    def basename_only(cls, value: str) -> str:
        if not value or value in (".", "..") or "/" in value or "\\" in value:
            raise ValueError(f"profile must be a plain file name, got {value!r}")
        return value
