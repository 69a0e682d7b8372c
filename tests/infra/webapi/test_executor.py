"""WebAPIExecutor のステータス分類・キー付与・タイムアウトを検証する。"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from steam_webapi.infra.webapi.dto import SteamModel
from steam_webapi.infra.webapi.executor import REQUEST_TIMEOUT_SECONDS, WebAPIExecutor
from steam_webapi.shared.config import WebAPICredentials
from steam_webapi.shared.exceptions import (
    DecodeError,
    InvalidResponseError,
    InvalidStatusCodeError,
    NoAPIKeyError,
    RateLimitedError,
    RequestTimeoutError,
    ServiceUnavailableError,
    TransportError,
    WebAPIError,
)

API_KEY = "0123456789ABCDEF0123456789ABCDEF"


class Payload(SteamModel):
    ok: bool = False
    value: int = 0


class CountingTransport:
    """リクエストを記録し、ハンドラの応答を返すスタブ。"""

    def __init__(self, handler: Callable[[httpx.Request], Any]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self._handler(request)
        if asyncio.iscoroutine(result):
            result = await result
        return result


def _json_response(status: int, payload: Any) -> Callable[[httpx.Request], httpx.Response]:
    return lambda _request: httpx.Response(status, content=json.dumps(payload).encode())


def _build_executor(
    transport: CountingTransport,
    *,
    api_key: str = API_KEY,
    timeout: float = 20.0,
) -> WebAPIExecutor:
    return WebAPIExecutor(
        credentials=WebAPICredentials(api_key=api_key),
        base_url="https://api.example.com",
        timeout=timeout,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)),
    )


@pytest.mark.asyncio
async def test_get_injects_key_and_format() -> None:
    transport = CountingTransport(_json_response(200, {"ok": True, "value": 7}))
    executor = _build_executor(transport)

    result = await executor.get("/ISteamApps/GetAppList/v2", {"appid": "440"}, Payload)

    assert result == Payload(ok=True, value=7)
    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/ISteamApps/GetAppList/v2"
    assert request.url.params["key"] == API_KEY
    assert request.url.params["format"] == "json"
    assert request.url.params["appid"] == "440"
    # パラメータ名順で並ぶ
    assert str(request.url).endswith(f"?appid=440&format=json&key={API_KEY}")


@pytest.mark.asyncio
async def test_get_without_params_still_sends_key() -> None:
    transport = CountingTransport(_json_response(200, {}))
    executor = _build_executor(transport)

    await executor.get("/ISteamWebAPIUtil/GetSupportedAPIList/v0001/", None, Payload)

    assert transport.requests[0].url.params["key"] == API_KEY


@pytest.mark.asyncio
async def test_query_values_are_form_encoded() -> None:
    transport = CountingTransport(_json_response(200, {}))
    executor = _build_executor(transport)

    await executor.get("/path", {"filter": "\\appid\\440", "name": "a b&c"}, Payload)

    params = transport.requests[0].url.params
    assert params["filter"] == "\\appid\\440"
    assert params["name"] == "a b&c"
    assert "a+b%26c" in str(transport.requests[0].url) or "a%20b%26c" in str(
        transport.requests[0].url
    )


@pytest.mark.asyncio
async def test_missing_key_short_circuits() -> None:
    transport = CountingTransport(_json_response(200, {}))
    executor = _build_executor(transport, api_key="")

    with pytest.raises(NoAPIKeyError):
        await executor.get("/path", {}, Payload)

    assert transport.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error"),
    [
        (503, ServiceUnavailableError),
        (429, RateLimitedError),
        (500, InvalidStatusCodeError),
        (404, InvalidStatusCodeError),
    ],
)
async def test_status_codes_are_classified(status: int, error: type[WebAPIError]) -> None:
    transport = CountingTransport(_json_response(status, {"ok": True}))
    executor = _build_executor(transport)

    with pytest.raises(error) as exc_info:
        await executor.get("/path", {}, Payload)

    assert exc_info.value.status_code == status
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_non_json_error_status_reports_status() -> None:
    transport = CountingTransport(lambda _request: httpx.Response(502, content=b"<html>bad gateway"))
    executor = _build_executor(transport)

    with pytest.raises(InvalidStatusCodeError) as exc_info:
        await executor.get("/path", {}, Payload)

    assert exc_info.value.status_code == 502
    assert "502" in str(exc_info.value)


@pytest.mark.asyncio
async def test_invalid_json_is_decode_error() -> None:
    transport = CountingTransport(lambda _request: httpx.Response(200, content=b"not json"))
    executor = _build_executor(transport)

    with pytest.raises(DecodeError) as exc_info:
        await executor.get("/path", {}, Payload)

    assert exc_info.value.__cause__ is not None


@pytest.mark.asyncio
async def test_shape_mismatch_is_decode_error() -> None:
    transport = CountingTransport(_json_response(200, {"value": "not-an-int"}))
    executor = _build_executor(transport)

    with pytest.raises(DecodeError):
        await executor.get("/path", {}, Payload)


@pytest.mark.asyncio
async def test_success_predicate_failure_is_invalid_response() -> None:
    transport = CountingTransport(_json_response(200, {"ok": False}))
    executor = _build_executor(transport)

    with pytest.raises(InvalidResponseError):
        await executor.get("/path", {}, Payload, success=lambda r: r.ok)


@pytest.mark.asyncio
async def test_transport_failure_is_wrapped() -> None:
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    executor = _build_executor(CountingTransport(fail))

    with pytest.raises(TransportError) as exc_info:
        await executor.get("/path", {}, Payload)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_request_ceiling_timeout() -> None:
    async def hang(_request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(10)
        return httpx.Response(200, content=b"{}")

    executor = _build_executor(CountingTransport(hang), timeout=0.05)

    loop = asyncio.get_running_loop()
    started = loop.time()
    with pytest.raises(RequestTimeoutError):
        await executor.get("/path", {}, Payload)

    assert loop.time() - started < 2


@pytest.mark.asyncio
async def test_caller_deadline_shorter_than_ceiling() -> None:
    async def hang(_request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(10)
        return httpx.Response(200, content=b"{}")

    executor = _build_executor(CountingTransport(hang))

    with pytest.raises(TimeoutError):
        async with asyncio.timeout(0.05):
            await executor.get("/path", {}, Payload)


@pytest.mark.asyncio
async def test_cancellation_returns_promptly() -> None:
    entered = asyncio.Event()

    async def hang(_request: httpx.Request) -> httpx.Response:
        entered.set()
        await asyncio.sleep(10)
        return httpx.Response(200, content=b"{}")

    executor = _build_executor(CountingTransport(hang))
    task = asyncio.create_task(executor.get("/path", {}, Payload))
    await asyncio.wait_for(entered.wait(), timeout=1)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await asyncio.wait_for(task, timeout=1)


@pytest.mark.asyncio
async def test_key_change_applies_to_next_request() -> None:
    transport = CountingTransport(_json_response(200, {}))
    executor = _build_executor(transport)
    new_key = "F" * 32

    executor.credentials.set_key(new_key)
    await executor.get("/path", {}, Payload)

    assert transport.requests[0].url.params["key"] == new_key


def test_timeout_is_capped_at_ceiling() -> None:
    executor = WebAPIExecutor(credentials=WebAPICredentials(), timeout=120)

    assert executor.timeout == REQUEST_TIMEOUT_SECONDS
