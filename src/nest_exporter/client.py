"""High-level async client for the Nest REST API."""

from __future__ import annotations

from typing import Any

import aiohttp

from nest_exporter._api.devices import fetch_devices
from nest_exporter._api.structures import fetch_structures
from nest_exporter._transport import BearerTransport, Transport
from nest_exporter.config import ExporterConfig
from nest_exporter.exceptions import NestError
from nest_exporter.models.device import DeviceCollection
from nest_exporter.models.structure import Structure


class NestClient:
    """Async read-only client for the Nest REST API.

    Usage::

        async with NestClient(config) as client:
            structures = await client.fetch_structures()
            devices = await client.fetch_devices()

    Every fetch either returns a complete collection or raises
    :class:`~nest_exporter.exceptions.NestFetchError`.  The client never
    retries; that is left to the caller.
    """

    def __init__(
        self,
        config: ExporterConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> NestClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = BearerTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise NestError("Client not initialized. Use 'async with NestClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_structures(self) -> dict[str, Structure]:
        """Return all structures visible to the token, keyed by structure id."""
        return await fetch_structures(self._require_transport())

    async def fetch_devices(self) -> DeviceCollection:
        """Return all devices visible to the token."""
        return await fetch_devices(self._require_transport())
