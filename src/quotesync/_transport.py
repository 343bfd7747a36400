"""HTTP+JSON transport for the remote quote service."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from quotesync._constants import USER_AGENT
from quotesync.config import SyncConfig
from quotesync.exceptions import QuoteTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the endpoint module.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        ...


class HttpTransport:
    """JSON transport over a caller-owned :class:`aiohttp.ClientSession`.

    Every failure (network, timeout, non-2xx status, invalid JSON) is
    raised as :class:`QuoteTransportError`.
    """

    def __init__(self, config: SyncConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _url(self, endpoint: str) -> str:
        return f"{self._config.base_url.rstrip('/')}{endpoint}"

    async def _request(self, method: str, endpoint: str, payload: Mapping[str, Any] | None = None) -> Any:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        body: str | None = None
        if payload is not None:
            headers["content-type"] = "application/json; charset=UTF-8"
            body = json.dumps(payload, separators=(",", ":"))

        url = self._url(endpoint)
        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise QuoteTransportError(
                        f"HTTP {resp.status} from {method} {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except QuoteTransportError:
            raise
        except TimeoutError as exc:
            raise QuoteTransportError(
                f"{method} {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise QuoteTransportError(
                f"{method} {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise QuoteTransportError(
                f"Invalid JSON from {method} {endpoint}: {text[:200]}",
                status_code=resp.status,
                endpoint=endpoint,
            ) from exc

    async def get_json(self, endpoint: str) -> Any:
        return await self._request("GET", endpoint)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        return await self._request("POST", endpoint, payload)
