"""Custom exception hierarchy for nest_exporter."""

from __future__ import annotations


class NestError(Exception):
    """Base exception for all nest_exporter errors."""


class NestConfigError(NestError):
    """Invalid or missing configuration."""


class NestFetchError(NestError):
    """A read from the Nest API failed.

    Covers network failures, rejected credentials, non-200 responses and
    payloads that cannot be parsed.  Callers are not expected to tell these
    apart; ``status_code`` and ``endpoint`` are carried for logging only.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class NestAuthorizationError(NestError):
    """Exchanging an authorization code for an access token failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
