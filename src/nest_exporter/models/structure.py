"""Structure model.

Mapped from the ``/structures`` response: an object keyed by structure id.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import field_validator

from nest_exporter.models._base import COMMON_KEY_ALIASES, NestBaseModel, NestEnum

__all__ = ["AwayState", "Structure"]


class AwayState(NestEnum):
    """Occupancy state of a structure."""

    UNKNOWN = "unknown"
    HOME = "home"
    AWAY = "away"


class Structure(NestBaseModel):
    """A logical location (home) grouping devices."""

    _KEY_ALIASES: ClassVar[dict[str, str]] = {
        **COMMON_KEY_ALIASES,
    }

    structure_id: str = ""
    """Opaque identifier, stable across polls."""
    name: str = ""
    """Display name; used as the ``structure`` metric label."""
    away: AwayState = AwayState.UNKNOWN
    """``home``/``away``; anything else (e.g. ``auto-away``) is ``UNKNOWN``."""

    @field_validator("away", mode="before")
    @classmethod
    def _parse_away(cls, value: Any) -> AwayState:
        return AwayState.parse(value)  # type: ignore[return-value]
