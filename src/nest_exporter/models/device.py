"""Thermostat and device collection models.

Mapped from the ``/devices`` response::

    {"thermostats": {"<device id>": {...}}, "smoke_co_alarms": {...}, ...}

Only thermostats are modelled; other device kinds stay in ``raw``.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from nest_exporter.models._base import COMMON_KEY_ALIASES, NestBaseModel, NestEnum

__all__ = ["DeviceCollection", "HvacState", "Thermostat"]


class HvacState(NestEnum):
    """What the HVAC system is actively doing."""

    UNKNOWN = "unknown"
    HEATING = "heating"
    COOLING = "cooling"
    OFF = "off"


class Thermostat(NestBaseModel):
    """Current state of a single thermostat."""

    _KEY_ALIASES: ClassVar[dict[str, str]] = {
        **COMMON_KEY_ALIASES,
    }

    device_id: str = ""
    name: str = ""
    """Display name; used as the ``device`` metric label."""
    structure_id: str = ""
    """Identifier of the owning structure."""

    # --- Temperature ---
    # The API reports both units; they are kept as sent and never derived
    # from each other since they can differ by rounding.
    ambient_temperature_c: float = 0.0
    ambient_temperature_f: float = 0.0
    target_temperature_c: float = 0.0
    target_temperature_f: float = 0.0

    humidity: float = 0.0
    """Relative humidity in percent (0-100)."""

    hvac_state: HvacState = HvacState.UNKNOWN
    is_using_emergency_heat: bool = False
    """Only meaningful while the HVAC system is neither heating nor cooling."""

    @field_validator("hvac_state", mode="before")
    @classmethod
    def _parse_hvac_state(cls, value: Any) -> HvacState:
        return HvacState.parse(value)  # type: ignore[return-value]


class DeviceCollection(NestBaseModel):
    """All devices visible to the access token."""

    thermostats: dict[str, Thermostat] = Field(default_factory=dict)
    """Thermostats keyed by device id."""
