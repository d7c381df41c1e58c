"""Base model for registry payloads.

Every registry model inherits from :class:`RegistryBaseModel` which
provides:

* ``alias_generator=to_camel`` so the backend's camelCase keys map
  automatically to snake_case fields (and back on dump).
* Frozen instances; stores replace rows instead of mutating them.
* Text coercion for the free-text fields, where the backend may send
  ``null`` or numbers (phone numbers in particular).
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def coerce_text(value: Any) -> str:
    """Normalise a free-text field value to ``str`` (``None`` becomes ``""``)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


Text = Annotated[str, BeforeValidator(coerce_text)]
"""Annotated ``str`` that tolerates ``None`` and numeric payload values."""


def is_blank(value: str) -> bool:
    """Return ``True`` when *value* is empty or whitespace only."""
    return not value.strip()


class RegistryBaseModel(BaseModel):
    """Base for registry payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialise to the backend's camelCase JSON shape."""
        return self.model_dump(mode="json", by_alias=True)
