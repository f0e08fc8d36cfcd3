from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from typing import Any

import aiohttp
import pytest

from tmslocation._transport import HttpLocationTransport
from tmslocation.config import TmsConfig
from tmslocation.exceptions import TmsTransportError
from tmslocation.models.location import LocationFix


class _FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self._body = body

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeSession:
    def __init__(
        self,
        status: int = 200,
        text: str | bytes = '{"success": true}',
        error: Exception | None = None,
    ) -> None:
        self._status = status
        self._body = text if isinstance(text, bytes) else text.encode("utf-8")
        self._error = error
        self.requests: list[dict[str, Any]] = []

    def post(self, url: str, *, data: str, headers: dict[str, str], timeout: Any) -> _FakeResponse:
        self.requests.append({"url": url, "body": json.loads(data), "headers": headers})
        if self._error is not None:
            raise self._error
        return _FakeResponse(self._status, self._body)


def _fix() -> LocationFix:
    return LocationFix(latitude=12.9716, longitude=77.5946, accuracy=12.0, timestamp=datetime(2026, 1, 1, tzinfo=UTC))


def _transport(session: _FakeSession, **config: Any) -> HttpLocationTransport:
    return HttpLocationTransport(TmsConfig(base_url="https://tms.example.edu/", **config), session)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_publish_posts_json_with_bearer_token() -> None:
    session = _FakeSession()
    result = await _transport(session, api_token="tok").publish("driver-7", _fix())

    assert result == {"success": True}
    request = session.requests[0]
    assert request["url"] == "https://tms.example.edu/api/driver/location"
    assert request["headers"]["authorization"] == "Bearer tok"
    assert request["body"]["driver_id"] == "driver-7"
    assert request["body"]["latitude"] == 12.9716
    assert request["body"]["timestamp"] == "2026-01-01T00:00:00+00:00"


@pytest.mark.asyncio
async def test_publish_without_token_omits_authorization() -> None:
    session = _FakeSession()
    await _transport(session).publish("driver-7", _fix())
    assert "authorization" not in session.requests[0]["headers"]


@pytest.mark.asyncio
async def test_empty_body_decodes_to_empty_dict() -> None:
    assert await _transport(_FakeSession(status=204, text="")).publish("d", _fix()) == {}


@pytest.mark.asyncio
async def test_non_2xx_raises_with_status() -> None:
    with pytest.raises(TmsTransportError) as exc_info:
        await _transport(_FakeSession(status=401, text='{"error": "Unauthorized"}')).publish("d", _fix())

    assert exc_info.value.status_code == 401
    assert exc_info.value.endpoint == "/api/driver/location"


@pytest.mark.asyncio
async def test_invalid_json_raises() -> None:
    with pytest.raises(TmsTransportError):
        await _transport(_FakeSession(text="<html>")).publish("d", _fix())


@pytest.mark.asyncio
async def test_non_object_json_raises() -> None:
    with pytest.raises(TmsTransportError):
        await _transport(_FakeSession(text="[1]")).publish("d", _fix())


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()])
async def test_client_errors_are_wrapped(error: Exception) -> None:
    with pytest.raises(TmsTransportError) as exc_info:
        await _transport(_FakeSession(error=error)).publish("d", _fix())

    assert exc_info.value.status_code is None
    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_invalid_utf8_body_raises_transport_error() -> None:
    with pytest.raises(TmsTransportError) as exc_info:
        await _transport(_FakeSession(text=b'{"ok": "\xff\xfe"}')).publish("d", _fix())

    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


@pytest.mark.asyncio
async def test_error_status_with_undecodable_body_keeps_status() -> None:
    with pytest.raises(TmsTransportError) as exc_info:
        await _transport(_FakeSession(status=502, text=b"\xff\xfe bad gateway")).publish("d", _fix())

    assert exc_info.value.status_code == 502
