from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from nest_exporter.client import NestClient
from nest_exporter.config import ExporterConfig
from nest_exporter.exceptions import NestError, NestFetchError
from nest_exporter.models.device import HvacState
from nest_exporter.models.structure import AwayState


@dataclass
class FakeTransport:
    responses: dict[str, Any] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def get_json(self, endpoint: str) -> Any:
        self.calls.append(endpoint)
        response = self.responses[endpoint]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def config() -> ExporterConfig:
    return ExporterConfig(token="c.token")


@pytest.mark.asyncio
async def test_fetch_structures_keyed_by_id(config: ExporterConfig) -> None:
    transport = FakeTransport(
        responses={
            "/structures": {
                "s1": {"structure_id": "s1", "name": "Home", "away": "home"},
                "s2": {"name": "Cabin", "away": "away"},
            }
        }
    )

    async with NestClient(config, transport=transport) as client:
        structures = await client.fetch_structures()

    assert set(structures) == {"s1", "s2"}
    assert structures["s1"].away == AwayState.HOME
    # Missing ids are filled in from the response keys.
    assert structures["s2"].structure_id == "s2"
    assert transport.calls == ["/structures"]


@pytest.mark.asyncio
async def test_fetch_structures_null_means_empty(config: ExporterConfig) -> None:
    transport = FakeTransport(responses={"/structures": None})

    async with NestClient(config, transport=transport) as client:
        assert await client.fetch_structures() == {}


@pytest.mark.asyncio
async def test_fetch_devices(config: ExporterConfig) -> None:
    transport = FakeTransport(
        responses={
            "/devices": {
                "thermostats": {
                    "d1": {"structure_id": "s1", "name": "Hallway", "hvac_state": "cooling", "humidity": 50},
                },
                "cameras": {"c1": {"name": "Porch"}},
            }
        }
    )

    async with NestClient(config, transport=transport) as client:
        devices = await client.fetch_devices()

    thermostat = devices.thermostats["d1"]
    assert thermostat.device_id == "d1"
    assert thermostat.hvac_state == HvacState.COOLING
    assert thermostat.humidity == 50


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("endpoint", "payload"),
    [
        ("/structures", ["not", "an", "object"]),
        ("/structures", {"s1": "not an object"}),
        ("/devices", {"thermostats": {"d1": {"humidity": "damp"}}}),
        ("/devices", {"thermostats": []}),
    ],
)
async def test_malformed_payload_raises_fetch_error(config: ExporterConfig, endpoint: str, payload: Any) -> None:
    transport = FakeTransport(responses={endpoint: payload})

    async with NestClient(config, transport=transport) as client:
        with pytest.raises(NestFetchError) as exc_info:
            if endpoint == "/structures":
                await client.fetch_structures()
            else:
                await client.fetch_devices()
    assert exc_info.value.endpoint == endpoint


@pytest.mark.asyncio
async def test_transport_errors_propagate_unchanged(config: ExporterConfig) -> None:
    error = NestFetchError("HTTP 401 from /devices", status_code=401, endpoint="/devices")
    transport = FakeTransport(responses={"/devices": error})

    async with NestClient(config, transport=transport) as client:
        with pytest.raises(NestFetchError) as exc_info:
            await client.fetch_devices()
    assert exc_info.value is error


@pytest.mark.asyncio
async def test_client_requires_context_manager(config: ExporterConfig) -> None:
    client = NestClient(config)
    with pytest.raises(NestError, match="not initialized"):
        await client.fetch_structures()
