"""Exporter configuration."""

from __future__ import annotations

import dataclasses
import os
import re
from typing import Any

from nest_exporter._constants import (
    BASE_URL,
    DEFAULT_BIND_ADDRESS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
)
from nest_exporter.exceptions import NestConfigError

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def parse_duration(value: str | float | int) -> float:
    """Parse a duration into seconds.

    Accepts plain numbers (seconds) and Go-style strings such as ``"2m"``,
    ``"90s"`` or ``"1h30m"``.

    Raises :class:`NestConfigError` for anything else.
    """
    if isinstance(value, (int, float)):
        return float(value)
    text = value.strip()
    if not text:
        raise NestConfigError("duration must not be empty")
    try:
        return float(text)
    except ValueError:
        pass

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise NestConfigError(f"invalid duration: {value!r}")
    return total


def parse_bind_address(value: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``":9264"``) binds every interface.
    """
    host, sep, port = value.strip().rpartition(":")
    if not sep or not port.isdigit():
        raise NestConfigError(f"invalid listen address: {value!r}")
    host = host.strip("[]")
    return host or "0.0.0.0", int(port)


@dataclasses.dataclass(frozen=True)
class ExporterConfig:
    """Exporter configuration.

    Parameters
    ----------
    token : str
        Nest API access token, obtained once with ``nest-exporter-auth``.
    bind_address : str
        Listen address of the metrics endpoint, ``host:port``.
    poll_interval : float
        Seconds between two polls of the Nest API.
    base_url : str
        Nest API base URL.
    request_timeout : float
        Total timeout in seconds for a single API request.
    evict_stale : bool
        Drop series of structures and thermostats that are missing from
        a fully successful poll.  Off by default: series then keep their
        last value for the lifetime of the process.
    """

    token: str
    bind_address: str = DEFAULT_BIND_ADDRESS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    base_url: str = BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    evict_stale: bool = False

    def __post_init__(self) -> None:
        if not self.token or not self.token.strip():
            raise NestConfigError("must supply an auth token")
        if self.poll_interval <= 0:
            raise NestConfigError(f"poll interval must be positive, got {self.poll_interval}")
        if self.request_timeout <= 0:
            raise NestConfigError(f"request timeout must be positive, got {self.request_timeout}")
        parse_bind_address(self.bind_address)

    @property
    def listen(self) -> tuple[str, int]:
        """``(host, port)`` for the metrics endpoint."""
        return parse_bind_address(self.bind_address)

    @classmethod
    def from_env(cls, **overrides: Any) -> ExporterConfig:
        """Create configuration from environment variables.

        Reads ``NEST_TOKEN`` and the optional ``NEST_EXPORTER_*`` /
        ``NEST_API_URL`` variables.  Keyword arguments whose value is not
        ``None`` take precedence over the environment.
        """
        env = os.environ
        overrides = {k: v for k, v in overrides.items() if v is not None}

        config_kwargs: dict[str, Any] = {}
        _ENV_CONFIG_MAP = {
            "NEST_TOKEN": "token",
            "NEST_EXPORTER_ADDR": "bind_address",
            "NEST_API_URL": "base_url",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val
        config_kwargs.setdefault("token", "")

        poll_env = env.get("NEST_EXPORTER_POLL")
        if poll_env is not None:
            config_kwargs["poll_interval"] = parse_duration(poll_env)

        timeout_env = env.get("NEST_EXPORTER_TIMEOUT")
        if timeout_env is not None:
            config_kwargs["request_timeout"] = parse_duration(timeout_env)

        config_kwargs["evict_stale"] = _env_bool(env.get("NEST_EXPORTER_EVICT_STALE"), False)

        for key in ("poll_interval", "request_timeout"):
            if key in overrides:
                overrides[key] = parse_duration(overrides[key])
        config_kwargs.update(overrides)

        return cls(**config_kwargs)
