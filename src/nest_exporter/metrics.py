"""Process-wide metric state.

All published series live in one dedicated
:class:`prometheus_client.CollectorRegistry`.  The poller is the only
writer; the exposition endpoint reads the registry on every scrape.
``prometheus_client`` synchronizes every child series, so reads and
writes need no further coordination.  A scrape that lands mid-cycle can
observe a partially updated set.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from enum import StrEnum

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

STRUCTURE_LABELS: tuple[str, ...] = ("structure",)
DEVICE_LABELS: tuple[str, ...] = ("structure", "device")

LabelValues = tuple[str, ...]


class Series(StrEnum):
    """Labeled gauge series written by the poller."""

    AWAY = "nest_structure_away"
    AMBIENT_TEMPERATURE_C = "nest_thermostat_ambient_temperature_celcius"
    AMBIENT_TEMPERATURE_F = "nest_thermostat_ambient_temperature_fahrenheit"
    TARGET_TEMPERATURE_C = "nest_thermostat_target_temperature_celcius"
    TARGET_TEMPERATURE_F = "nest_thermostat_target_temperature_fahrenheit"
    HUMIDITY = "nest_thermostat_humidity"
    HVAC_STATE = "nest_thermostat_hvac_state"
    EMERGENCY_HEAT_STATE = "nest_thermostat_emergency_heat_state"


ERRORS_TOTAL = "nest_api_errors_total"
LAST_SUCCESS = "nest_last_successful_poll_timestamp_seconds"

_SERIES_HELP: dict[Series, str] = {
    Series.AWAY: "Away status (1=away 0=home 2=unknown)",
    Series.AMBIENT_TEMPERATURE_C: "Ambient temperature at the Nest thermostat",
    Series.AMBIENT_TEMPERATURE_F: "Ambient temperature at the Nest thermostat",
    Series.TARGET_TEMPERATURE_C: "Target temperature at the Nest thermostat",
    Series.TARGET_TEMPERATURE_F: "Target temperature at the Nest thermostat",
    Series.HUMIDITY: "Humidity at the Nest thermostat",
    Series.HVAC_STATE: "Whether HVAC system is actively 1=heating, -1=cooling or is 0=off",
    Series.EMERGENCY_HEAT_STATE: "Emergency Heat status 1=on 0=off",
}

DEVICE_SERIES: tuple[Series, ...] = tuple(s for s in Series if s is not Series.AWAY)


def label_names(series: Series) -> tuple[str, ...]:
    return STRUCTURE_LABELS if series is Series.AWAY else DEVICE_LABELS


class NestMetrics:
    """Narrow write/read interface over the exporter's registry.

    Parameters
    ----------
    registry : CollectorRegistry or None
        Registry to register the series in.  A fresh one is created when
        omitted, so independent instances never share state.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self._errors = Counter(
            ERRORS_TOTAL,
            "Number of errors encountered",
            registry=self.registry,
        )
        self._last_success = Gauge(
            LAST_SUCCESS,
            "Unix time of the last poll in which every fetch succeeded",
            registry=self.registry,
        )
        self._gauges: dict[Series, Gauge] = {
            series: Gauge(series.value, help_text, label_names(series), registry=self.registry)
            for series, help_text in _SERIES_HELP.items()
        }
        # Label-sets ever written per series; prometheus_client keeps its own
        # children private, and eviction needs to enumerate them.
        self._lock = threading.Lock()
        self._known: dict[Series, set[LabelValues]] = {series: set() for series in Series}

    def set(self, series: Series, labels: Mapping[str, str], value: float) -> None:
        """Write (or overwrite) one sample."""
        names = label_names(series)
        if set(labels) != set(names):
            raise ValueError(f"{series.value} expects labels {names}, got {tuple(labels)}")
        values = tuple(str(labels[name]) for name in names)
        self._gauges[series].labels(*values).set(float(value))
        with self._lock:
            self._known[series].add(values)

    def inc_errors(self) -> None:
        self._errors.inc()

    def mark_success(self, timestamp: float) -> None:
        self._last_success.set(timestamp)

    def retain(self, series: Series, keep: Iterable[LabelValues]) -> int:
        """Remove every label-set of *series* not in *keep*; return how many were removed."""
        keep_set = set(keep)
        with self._lock:
            stale = self._known[series] - keep_set
            self._known[series] -= stale
        for values in stale:
            self._gauges[series].remove(*values)
        return len(stale)

    def snapshot(self) -> dict[tuple[str, tuple[tuple[str, str], ...]], float]:
        """Current value of every published sample.

        Keys are ``(sample name, sorted label pairs)``.
        """
        result: dict[tuple[str, tuple[tuple[str, str], ...]], float] = {}
        for metric in self.registry.collect():
            for sample in metric.samples:
                if sample.name.endswith("_created"):
                    continue
                result[(sample.name, tuple(sorted(sample.labels.items())))] = sample.value
        return result

    def render(self) -> bytes:
        """Serialize the registry in the Prometheus text format."""
        return generate_latest(self.registry)
