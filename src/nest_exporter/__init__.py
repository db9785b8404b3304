"""nest_exporter - Prometheus exporter for the Nest thermostat API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("nest-exporter")
except PackageNotFoundError:
    __version__ = "0+local"

from nest_exporter.client import NestClient
from nest_exporter.config import ExporterConfig, parse_bind_address, parse_duration
from nest_exporter.exceptions import (
    NestAuthorizationError,
    NestConfigError,
    NestError,
    NestFetchError,
)
from nest_exporter.metrics import NestMetrics, Series
from nest_exporter.models import (
    AccessToken,
    AwayState,
    DeviceCollection,
    HvacState,
    Structure,
    Thermostat,
)
from nest_exporter.poller import Poller

__all__ = [
    "__version__",
    "AccessToken",
    "AwayState",
    "DeviceCollection",
    "ExporterConfig",
    "HvacState",
    "NestAuthorizationError",
    "NestClient",
    "NestConfigError",
    "NestError",
    "NestFetchError",
    "NestMetrics",
    "Poller",
    "Series",
    "Structure",
    "Thermostat",
    "parse_bind_address",
    "parse_duration",
]
