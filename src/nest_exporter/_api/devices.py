"""Devices endpoint.

Endpoint:
  - /devices
"""

from __future__ import annotations

import logging

from nest_exporter._api._common import require_object, validate_model
from nest_exporter._constants import ENDPOINT_DEVICES
from nest_exporter._transport import Transport
from nest_exporter.models.device import DeviceCollection

_logger = logging.getLogger(__name__)


async def fetch_devices(transport: Transport) -> DeviceCollection:
    """Fetch every device visible to the access token."""
    decoded = require_object(ENDPOINT_DEVICES, await transport.get_json(ENDPOINT_DEVICES))
    devices = validate_model(ENDPOINT_DEVICES, DeviceCollection, decoded)

    # Fill in ids the payload only carries as keys.
    missing_ids = {key: t for key, t in devices.thermostats.items() if not t.device_id}
    if missing_ids:
        thermostats = dict(devices.thermostats)
        for key, thermostat in missing_ids.items():
            thermostats[key] = thermostat.model_copy(update={"device_id": key})
        devices = devices.model_copy(update={"thermostats": thermostats})

    _logger.debug("Fetched %d thermostat(s)", len(devices.thermostats))
    return devices
