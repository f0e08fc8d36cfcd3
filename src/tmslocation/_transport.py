"""HTTP transport for location updates."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from tmslocation._constants import USER_AGENT
from tmslocation._redact import redact_for_log
from tmslocation.config import TmsConfig
from tmslocation.exceptions import TmsTransportError
from tmslocation.models.location import LocationFix

_logger = logging.getLogger(__name__)


class LocationTransport(Protocol):
    """Structural transport interface used by the tracker.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpLocationTransport`) concrete.
    """

    async def publish(self, driver_id: str, fix: LocationFix) -> dict[str, Any]:
        ...


class HttpLocationTransport:
    """POSTs location fixes as JSON to the TMS backend."""

    def __init__(
        self,
        config: TmsConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        if self._config.api_token:
            headers["authorization"] = f"Bearer {self._config.api_token}"
        return headers

    async def publish(self, driver_id: str, fix: LocationFix) -> dict[str, Any]:
        """Send one location update and return the decoded JSON reply.

        An empty reply body decodes to ``{}``.
        """
        endpoint = self._config.location_endpoint
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        payload = fix.to_payload(driver_id)

        _logger.debug("POST %s", url)
        if self._config.api_trace_enabled:
            _logger.debug("Request body: %s", redact_for_log(payload))

        try:
            async with self._http.post(
                url,
                data=json.dumps(payload),
                headers=self._headers(),
                timeout=self._timeout,
            ) as resp:
                body = await resp.read()
                if not 200 <= resp.status < 300:
                    raise TmsTransportError(
                        f"HTTP {resp.status} from {endpoint}: {body[:200].decode('utf-8', errors='replace')}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except TmsTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise TmsTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise TmsTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TmsTransportError(
                f"Response from {endpoint} is not valid UTF-8",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return {}

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TmsTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body_json, dict):
            raise TmsTransportError(
                f"Unexpected response shape from {endpoint}",
                endpoint=endpoint,
            )

        if self._config.api_trace_enabled:
            _logger.debug("Response body: %s", redact_for_log(body_json))
        return body_json
