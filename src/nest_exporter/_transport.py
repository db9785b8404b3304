"""HTTP transport with bearer authentication and redirect handling."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol
from urllib.parse import urljoin, urlsplit

import aiohttp

from nest_exporter._constants import MAX_REDIRECTS, REDIRECT_STATUSES, USER_AGENT
from nest_exporter._redact import redact_for_log
from nest_exporter.config import ExporterConfig
from nest_exporter.exceptions import NestFetchError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`BearerTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...


class BearerTransport:
    """Authenticated JSON reads against the Nest REST API.

    The API answers the first request with a redirect to a data host.
    Redirects are followed by hand so the bearer header is sent again
    (aiohttp drops it on cross-host redirects), and the data host is
    reused for subsequent requests until a request fails.
    """

    def __init__(self, config: ExporterConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._base_url = config.base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    @property
    def base_url(self) -> str:
        """Base URL the next request goes to."""
        return self._base_url

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "authorization": f"Bearer {self._config.token}",
            "user-agent": USER_AGENT,
        }

    def _remember_redirect(self, url: str, endpoint: str) -> None:
        path = urlsplit(url).path
        if not path.endswith(endpoint):
            return
        base = url.split("?", 1)[0][: -len(endpoint)].rstrip("/")
        if base and base != self._base_url:
            _logger.debug("Following API redirect to %s", base)
            self._base_url = base

    async def _get_body(self, endpoint: str) -> bytes:
        url = f"{self._base_url}{endpoint}"
        headers = self._headers()
        _logger.debug("GET %s headers=%s", url, redact_for_log(headers))

        for _ in range(MAX_REDIRECTS + 1):
            async with self._http.get(
                url,
                headers=headers,
                allow_redirects=False,
                timeout=self._timeout,
            ) as resp:
                if resp.status in REDIRECT_STATUSES:
                    location = resp.headers.get("Location")
                    if not location:
                        raise NestFetchError(
                            f"HTTP {resp.status} from {endpoint} without Location header",
                            status_code=resp.status,
                            endpoint=endpoint,
                        )
                    url = urljoin(str(resp.url), location)
                    self._remember_redirect(url, endpoint)
                    continue

                body = await resp.read()
                if resp.status != 200:
                    raise NestFetchError(
                        f"HTTP {resp.status} from {endpoint}: {body[:200].decode(errors='replace')}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
                return body

        raise NestFetchError(f"Too many redirects from {endpoint}", endpoint=endpoint)

    async def get_json(self, endpoint: str) -> Any:
        """GET *endpoint* and return the decoded JSON body."""
        try:
            body = await self._get_body(endpoint)
        except NestFetchError:
            self._base_url = self._config.base_url.rstrip("/")
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            self._base_url = self._config.base_url.rstrip("/")
            raise NestFetchError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        try:
            result = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise NestFetchError(
                f"Invalid JSON from {endpoint}: {body[:200]!r}",
                endpoint=endpoint,
            ) from exc

        _logger.debug("Response from %s: %s", endpoint, redact_for_log(result))
        return result
