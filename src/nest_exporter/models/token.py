"""Access token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class AccessToken(BaseModel):
    """Token returned by the OAuth code exchange.

    Parameters
    ----------
    access_token : str
        Bearer token for the Nest API.
    expires_in : int
        Lifetime of the token in seconds.
    raw : dict
        Full decoded response for access to additional fields.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    expires_in: int = 0
    raw: dict[str, Any]
