"""Structures endpoint.

Endpoint:
  - /structures
"""

from __future__ import annotations

import logging

from nest_exporter._api._common import require_object, validate_model
from nest_exporter._constants import ENDPOINT_STRUCTURES
from nest_exporter._transport import Transport
from nest_exporter.models.structure import Structure

_logger = logging.getLogger(__name__)


async def fetch_structures(transport: Transport) -> dict[str, Structure]:
    """Fetch every structure visible to the access token, keyed by id."""
    decoded = require_object(ENDPOINT_STRUCTURES, await transport.get_json(ENDPOINT_STRUCTURES))

    structures: dict[str, Structure] = {}
    for structure_id, item in decoded.items():
        structure = validate_model(ENDPOINT_STRUCTURES, Structure, item)
        if not structure.structure_id:
            structure = structure.model_copy(update={"structure_id": structure_id})
        structures[structure_id] = structure
    _logger.debug("Fetched %d structure(s)", len(structures))
    return structures
