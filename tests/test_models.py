"""Tests for Pydantic model parsing with NestBaseModel + NestEnum."""

from __future__ import annotations

import pytest

from nest_exporter.models.device import DeviceCollection, HvacState, Thermostat
from nest_exporter.models.structure import AwayState, Structure

# ------------------------------------------------------------------
# NestEnum
# ------------------------------------------------------------------


class TestNestEnum:
    def test_known_value(self) -> None:
        assert AwayState("away") == AwayState.AWAY

    def test_unknown_value_falls_back(self) -> None:
        assert AwayState("auto-away") == AwayState.UNKNOWN
        assert HvacState("eco") == HvacState.UNKNOWN

    def test_case_insensitive(self) -> None:
        assert HvacState(" Heating ") == HvacState.HEATING

    def test_non_string_falls_back(self) -> None:
        assert HvacState.parse(1) == HvacState.UNKNOWN

    def test_parse_passes_members_through(self) -> None:
        assert AwayState.parse(AwayState.HOME) is AwayState.HOME


# ------------------------------------------------------------------
# Structure
# ------------------------------------------------------------------


class TestStructure:
    def test_snake_case_payload(self) -> None:
        structure = Structure.model_validate(
            {"structure_id": "s1", "name": "Home", "away": "home", "country_code": "US"}
        )
        assert structure.structure_id == "s1"
        assert structure.name == "Home"
        assert structure.away == AwayState.HOME
        assert structure.raw["country_code"] == "US"

    def test_pascal_case_payload(self) -> None:
        structure = Structure.model_validate({"StructureID": "s1", "Name": "Home", "Away": "away"})
        assert structure.structure_id == "s1"
        assert structure.away == AwayState.AWAY

    def test_missing_fields_use_defaults(self) -> None:
        structure = Structure.model_validate({"name": None})
        assert structure.name == ""
        assert structure.away == AwayState.UNKNOWN

    def test_frozen(self) -> None:
        structure = Structure.model_validate({"name": "Home"})
        with pytest.raises(ValueError):
            structure.name = "Other"  # type: ignore[misc]


# ------------------------------------------------------------------
# Thermostat / DeviceCollection
# ------------------------------------------------------------------


class TestThermostat:
    SAMPLE_PAYLOAD: dict = {
        "device_id": "d1",
        "structure_id": "s1",
        "name": "Hallway",
        "ambient_temperature_c": 21.5,
        "ambient_temperature_f": 71,
        "target_temperature_c": 22.0,
        "target_temperature_f": 72,
        "humidity": 45,
        "hvac_state": "off",
        "is_using_emergency_heat": True,
        "hvac_mode": "heat",
    }

    def test_parse_full_payload(self) -> None:
        thermostat = Thermostat.model_validate(self.SAMPLE_PAYLOAD)
        assert thermostat.device_id == "d1"
        assert thermostat.structure_id == "s1"
        assert thermostat.ambient_temperature_c == pytest.approx(21.5)
        assert thermostat.ambient_temperature_f == 71
        assert thermostat.target_temperature_c == pytest.approx(22.0)
        assert thermostat.target_temperature_f == 72
        assert thermostat.humidity == 45
        assert thermostat.hvac_state == HvacState.OFF
        assert thermostat.is_using_emergency_heat is True
        assert thermostat.raw["hvac_mode"] == "heat"

    def test_pascal_case_payload(self) -> None:
        thermostat = Thermostat.model_validate(
            {
                "StructureID": "s1",
                "Name": "Hallway",
                "AmbientTemperatureC": 21,
                "AmbientTemperatureF": 70,
                "TargetTemperatureC": 22,
                "TargetTemperatureF": 72,
                "Humidity": 40,
                "HvacState": "heating",
                "IsUsingEmergencyHeat": False,
            }
        )
        assert thermostat.structure_id == "s1"
        assert thermostat.ambient_temperature_c == 21
        assert thermostat.target_temperature_f == 72
        assert thermostat.hvac_state == HvacState.HEATING
        assert thermostat.is_using_emergency_heat is False

    def test_unknown_hvac_state(self) -> None:
        thermostat = Thermostat.model_validate({"hvac_state": "fan_only"})
        assert thermostat.hvac_state == HvacState.UNKNOWN

    def test_nan_is_dropped(self) -> None:
        thermostat = Thermostat.model_validate({"humidity": float("nan")})
        assert thermostat.humidity == 0.0

    def test_invalid_number_raises(self) -> None:
        with pytest.raises(ValueError):
            Thermostat.model_validate({"humidity": "damp"})


class TestDeviceCollection:
    def test_thermostats_keyed_by_id(self) -> None:
        devices = DeviceCollection.model_validate(
            {
                "thermostats": {"d1": TestThermostat.SAMPLE_PAYLOAD},
                "smoke_co_alarms": {"a1": {"name": "Kitchen"}},
            }
        )
        assert list(devices.thermostats) == ["d1"]
        assert devices.thermostats["d1"].name == "Hallway"
        assert "smoke_co_alarms" in devices.raw

    def test_no_thermostats(self) -> None:
        assert DeviceCollection.model_validate({}).thermostats == {}
        assert DeviceCollection.model_validate({"thermostats": None}).thermostats == {}
