"""One-shot OAuth code exchange: ``nest-exporter-auth``.

Exchanges the PIN/authorization code shown by the Nest developer console
for a long-lived access token that ``nest-exporter`` is then started with.

Usage
-----
::

    nest-exporter-auth --client <client id> --secret <client secret> --code <pin> [--state <state>]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import aiohttp

from nest_exporter._constants import AUTH_URL, USER_AGENT
from nest_exporter._redact import redact_for_log
from nest_exporter.exceptions import NestAuthorizationError
from nest_exporter.models.token import AccessToken

_logger = logging.getLogger(__name__)


def parse_token_response(payload: Any) -> AccessToken:
    if not isinstance(payload, dict) or not payload.get("access_token"):
        raise NestAuthorizationError(f"No access token in response: {redact_for_log(payload)}")
    return AccessToken(
        access_token=str(payload["access_token"]),
        expires_in=int(payload.get("expires_in") or 0),
        raw=payload,
    )


async def exchange_code(
    http_session: aiohttp.ClientSession,
    *,
    client_id: str,
    client_secret: str,
    code: str,
    url: str = AUTH_URL,
) -> AccessToken:
    """Exchange an authorization *code* for an :class:`AccessToken`."""
    form = {
        "client_id": client_id,
        "client_secret": client_secret,
        "code": code,
        "grant_type": "authorization_code",
    }
    _logger.debug("POST %s form=%s", url, redact_for_log(form))
    try:
        async with http_session.post(url, data=form, headers={"user-agent": USER_AGENT}) as resp:
            text = await resp.text()
            if resp.status != 200:
                raise NestAuthorizationError(
                    f"HTTP {resp.status} from token endpoint: {text[:200]}",
                    status_code=resp.status,
                )
    except aiohttp.ClientError as exc:
        raise NestAuthorizationError(f"Token request failed: {exc!r}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise NestAuthorizationError(f"Invalid JSON from token endpoint: {text[:200]}") from exc
    return parse_token_response(payload)


async def _run(args: argparse.Namespace) -> AccessToken:
    _logger.debug("Exchanging code for client %s (state %s)", args.client, args.state)
    async with aiohttp.ClientSession() as session:
        return await exchange_code(
            session,
            client_id=args.client,
            client_secret=args.secret,
            code=args.code,
            url=args.url,
        )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="nest-exporter-auth",
        description="Exchange a Nest authorization code for an access token.",
    )
    parser.add_argument("--client", required=True, help="client id")
    parser.add_argument("--secret", required=True, help="client secret")
    parser.add_argument("--code", required=True, help="authorization code (PIN)")
    parser.add_argument("--state", default="STATE", help="OAuth state the authorization URL was opened with")
    parser.add_argument("--url", default=AUTH_URL, help=argparse.SUPPRESS)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        token = asyncio.run(_run(args))
    except NestAuthorizationError as exc:
        _logger.error("error authorizing: %s", exc)
        return 1

    print(f"token: {token.access_token}")
    print(f"expires in: {token.expires_in}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
