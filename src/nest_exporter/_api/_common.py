"""Shared helpers for Nest API endpoint modules.

It is internal to nest_exporter and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from nest_exporter.exceptions import NestFetchError

TModel = TypeVar("TModel", bound=BaseModel)


def require_object(endpoint: str, decoded: Any) -> dict[str, Any]:
    """Return *decoded* as a dict; ``null`` means an empty collection."""
    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise NestFetchError(
            f"{endpoint} returned {type(decoded).__name__}, expected an object",
            endpoint=endpoint,
        )
    return decoded


def validate_model(endpoint: str, model: type[TModel], payload: Any) -> TModel:
    """Validate *payload* into *model*, mapping failures to :class:`NestFetchError`."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise NestFetchError(
            f"Malformed {model.__name__} from {endpoint}: {exc}",
            endpoint=endpoint,
        ) from exc
