"""Base model for pyvlog data records.

Every telemetry model inherits from :class:`VlogBaseModel` which
provides:

* ``frozen=True``: samples are immutable once decoded.
* ``alias_generator=to_hyphen`` so snake_case fields serialize with the
  hyphenated stream-style keys (``velocity-forward``) consumers expect.
* ``populate_by_name`` so code can construct models with field names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def to_hyphen(name: str) -> str:
    """``velocity_forward`` -> ``velocity-forward``."""
    return name.replace("_", "-")


class VlogBaseModel(BaseModel):
    """Base for pyvlog records."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_hyphen,
    )

    def to_stream_dict(self) -> dict[str, object]:
        """Dump with hyphenated keys, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)
