"""Typed models for Nest API responses."""

from nest_exporter.models._base import NestBaseModel, NestEnum
from nest_exporter.models.device import DeviceCollection, HvacState, Thermostat
from nest_exporter.models.structure import AwayState, Structure
from nest_exporter.models.token import AccessToken

__all__ = [
    "AccessToken",
    "AwayState",
    "DeviceCollection",
    "HvacState",
    "NestBaseModel",
    "NestEnum",
    "Structure",
    "Thermostat",
]
