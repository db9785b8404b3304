"""Poll the Nest API and project its state onto the exporter's metrics.

One cycle runs two steps:

1. fetch structures, record the id -> name lookup for this cycle and
   write the occupancy gauge of every structure;
2. fetch devices and write the gauges of every thermostat, labeled with
   the name of its structure as seen in step 1.

A failed fetch increments ``nest_api_errors_total`` once and ends the
cycle; values already written stay published.  Nothing is retried
before the next tick.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Protocol

from nest_exporter.exceptions import NestFetchError
from nest_exporter.metrics import DEVICE_SERIES, LabelValues, NestMetrics, Series
from nest_exporter.models.device import DeviceCollection, HvacState, Thermostat
from nest_exporter.models.structure import AwayState, Structure

_logger = logging.getLogger(__name__)

_AWAY_VALUES: dict[AwayState, float] = {
    AwayState.AWAY: 1.0,
    AwayState.HOME: 0.0,
}
_AWAY_UNKNOWN = 2.0

_HVAC_VALUES: dict[HvacState, float] = {
    HvacState.HEATING: 1.0,
    HvacState.COOLING: -1.0,
}
_HVAC_IDLE = 0.0


class StateSource(Protocol):
    """Anything that can fetch structures and devices (e.g. :class:`NestClient`)."""

    async def fetch_structures(self) -> dict[str, Structure]:
        ...

    async def fetch_devices(self) -> DeviceCollection:
        ...


def away_value(state: AwayState) -> float:
    """1 = away, 0 = home, 2 = anything else."""
    return _AWAY_VALUES.get(state, _AWAY_UNKNOWN)


def hvac_value(state: HvacState) -> float:
    """1 = heating, -1 = cooling, 0 = anything else."""
    return _HVAC_VALUES.get(state, _HVAC_IDLE)


class Poller:
    """Fixed-interval poller feeding :class:`NestMetrics`.

    Parameters
    ----------
    source : StateSource
        Where structures and devices come from.
    metrics : NestMetrics
        Metric state to write to.
    interval : float
        Seconds between the start of two cycles.
    evict_stale : bool
        After a fully successful cycle, remove series whose structure or
        thermostat was absent from it.
    clock : callable
        Wall clock used for the last-success timestamp.
    """

    def __init__(
        self,
        source: StateSource,
        metrics: NestMetrics,
        *,
        interval: float,
        evict_stale: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._source = source
        self._metrics = metrics
        self._interval = interval
        self._evict_stale = evict_stale
        self._clock = clock

    @property
    def interval(self) -> float:
        return self._interval

    # ------------------------------------------------------------------
    # One cycle
    # ------------------------------------------------------------------

    async def poll_once(self) -> bool:
        """Run one poll cycle; return ``True`` when both fetches succeeded."""
        try:
            structures = await self._source.fetch_structures()
        except NestFetchError as exc:
            self._record_failure("structures", exc)
            return False
        names = self._apply_structures(structures)

        try:
            devices = await self._source.fetch_devices()
        except NestFetchError as exc:
            self._record_failure("devices", exc)
            return False
        seen_devices = self._apply_devices(devices, names)

        self._metrics.mark_success(self._clock())
        if self._evict_stale:
            self._evict({(name,) for name in names.values()}, seen_devices)
        _logger.debug(
            "Poll finished: %d structure(s), %d thermostat(s)",
            len(structures),
            len(devices.thermostats),
        )
        return True

    def _record_failure(self, what: str, exc: NestFetchError) -> None:
        self._metrics.inc_errors()
        _logger.warning("Fetching %s failed: %s", what, exc)

    def _apply_structures(self, structures: dict[str, Structure]) -> dict[str, str]:
        names: dict[str, str] = {}
        for structure_id, structure in structures.items():
            names[structure_id] = structure.name
            self._metrics.set(Series.AWAY, {"structure": structure.name}, away_value(structure.away))
        return names

    def _apply_devices(self, devices: DeviceCollection, names: dict[str, str]) -> set[LabelValues]:
        seen: set[LabelValues] = set()
        for thermostat in devices.thermostats.values():
            structure_name = names.get(thermostat.structure_id)
            if structure_name is None:
                _logger.debug(
                    "Thermostat %r refers to unknown structure %r",
                    thermostat.name,
                    thermostat.structure_id,
                )
                structure_name = ""
            self._apply_thermostat(thermostat, structure_name)
            seen.add((structure_name, thermostat.name))
        return seen

    def _apply_thermostat(self, thermostat: Thermostat, structure_name: str) -> None:
        labels = {"structure": structure_name, "device": thermostat.name}
        metrics = self._metrics
        metrics.set(Series.AMBIENT_TEMPERATURE_C, labels, thermostat.ambient_temperature_c)
        metrics.set(Series.AMBIENT_TEMPERATURE_F, labels, thermostat.ambient_temperature_f)
        metrics.set(Series.TARGET_TEMPERATURE_C, labels, thermostat.target_temperature_c)
        metrics.set(Series.TARGET_TEMPERATURE_F, labels, thermostat.target_temperature_f)
        metrics.set(Series.HUMIDITY, labels, thermostat.humidity)
        metrics.set(Series.HVAC_STATE, labels, hvac_value(thermostat.hvac_state))
        # Emergency heat is only written while idle; an actively heating or
        # cooling thermostat keeps its previous emergency heat value.
        if thermostat.hvac_state not in _HVAC_VALUES:
            metrics.set(
                Series.EMERGENCY_HEAT_STATE,
                labels,
                1.0 if thermostat.is_using_emergency_heat else 0.0,
            )

    def _evict(self, structures: set[LabelValues], devices: set[LabelValues]) -> None:
        removed = self._metrics.retain(Series.AWAY, structures)
        for series in DEVICE_SERIES:
            removed += self._metrics.retain(series, devices)
        if removed:
            _logger.info("Removed %d stale series", removed)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def _poll_guarded(self) -> None:
        try:
            await self.poll_once()
        except Exception:  # noqa: BLE001 - a bad cycle must not end the loop
            _logger.exception("Unexpected error during poll")

    async def run(self, stop: asyncio.Event) -> None:
        """Poll immediately, then once per interval until *stop* is set.

        Cycles never overlap.  A cycle that overruns its interval causes
        the missed ticks to be skipped rather than queued.
        """
        loop = asyncio.get_running_loop()
        _logger.info("Polling every %.0f s", self._interval)
        await self._poll_guarded()
        next_tick = loop.time() + self._interval

        while not stop.is_set():
            delay = next_tick - loop.time()
            if delay > 0:
                try:
                    await asyncio.wait_for(stop.wait(), timeout=delay)
                except TimeoutError:
                    pass
                else:
                    break

            await self._poll_guarded()

            now = loop.time()
            next_tick += self._interval
            if next_tick <= now:
                skipped = int((now - next_tick) // self._interval) + 1
                _logger.debug("Poll overran its interval, skipping %d tick(s)", skipped)
                next_tick += skipped * self._interval
        _logger.info("Poller stopped")
