"""Base model and enum for Nest API responses.

Every Nest response model inherits from :class:`NestBaseModel` which
provides:

* an ``alias_generator=to_pascal`` plus ``populate_by_name`` so that both
  the REST API's snake_case keys and PascalCase keys (``AmbientTemperatureC``)
  map onto the snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None``/NaN values so
  the field default is used, and applies per-model key aliases.
* A ``raw`` dict that captures the original payload.

State enums inherit from :class:`NestEnum` which resolves any value
without a mapped member to ``UNKNOWN``.
"""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_pascal

# Identifier keys whose PascalCase spelling does not follow to_pascal().
COMMON_KEY_ALIASES: dict[str, str] = {
    "StructureID": "structure_id",
    "DeviceID": "device_id",
}


class NestEnum(StrEnum):
    """Base for Nest API state enums.

    Every subclass **must** define ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> NestEnum:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        unknown: NestEnum = cls.UNKNOWN  # type: ignore[attr-defined]
        return unknown

    @classmethod
    def parse(cls, value: Any) -> NestEnum:
        """Coerce an API value, never raising."""
        if isinstance(value, cls):
            return value
        return cls(value)


class NestBaseModel(BaseModel):
    """Base for Nest API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_pascal,
    )

    raw: dict[str, Any] = Field(default_factory=dict, alias="raw")
    """Original API response dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any], aliases: dict[str, str] | None = None) -> dict[str, Any]:
        """Drop ``None``/NaN values and apply key aliases on *values*."""
        working = dict(values)
        if aliases:
            for old_key, new_key in aliases.items():
                if old_key in working and new_key not in working:
                    working[new_key] = working.pop(old_key)

        cleaned: dict[str, Any] = {}
        for key, value in working.items():
            if value is None:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_nest_values(cls, values: Any) -> Any:
        """Strip empty values, apply key aliases, and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)

        aliases: dict[str, str] = getattr(cls, "_KEY_ALIASES", {})
        cleaned = NestBaseModel._clean_dict(original, aliases)

        # Keep an explicitly passed raw= as is.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
