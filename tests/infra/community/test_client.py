from __future__ import annotations

import asyncio

import httpx
import pytest

from steam_webapi.infra.community.client import (
    COMMUNITY_TIMEOUT_SECONDS,
    SteamCommunityClient,
    parse_group_members,
)
from steam_webapi.shared.exceptions import (
    InvalidStatusCodeError,
    RateLimitedError,
    RequestTimeoutError,
    TransportError,
    ValidationFailureError,
)

GROUP_ID = 103582791429521412
MEMBERS_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<memberList>
  <groupID64>103582791429521412</groupID64>
  <memberCount>2</memberCount>
  <members>
    <steamID64>76561197961279983</steamID64>
    <steamID64>76561197960287930</steamID64>
  </members>
</memberList>
"""


def _client(handler, *, timeout: float = COMMUNITY_TIMEOUT_SECONDS) -> SteamCommunityClient:
    return SteamCommunityClient(
        timeout=timeout,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_parse_group_members() -> None:
    assert parse_group_members(MEMBERS_XML) == [76561197961279983, 76561197960287930]
    assert parse_group_members("<memberList><members></members></memberList>") == []


def test_parse_group_members_rejects_invalid_id() -> None:
    with pytest.raises(ValidationFailureError, match="Found invalid ID: 123"):
        parse_group_members("<steamID64>76561197961279983</steamID64><steamID64>123</steamID64>")


@pytest.mark.asyncio
async def test_get_group_members_fetches_xml() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, content=MEMBERS_XML.encode())

    members = await _client(handler).get_group_members(GROUP_ID)

    assert members == [76561197961279983, 76561197960287930]
    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == f"https://steamcommunity.com/gid/{GROUP_ID}/memberslistxml/?xml=1"
    assert "key" not in request.url.params


@pytest.mark.asyncio
@pytest.mark.parametrize("group_id", [0, 76561197961279983, 103582791429521408])
async def test_invalid_group_id_makes_no_request(group_id: int) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, content=MEMBERS_XML.encode())

    with pytest.raises(ValidationFailureError):
        await _client(handler).get_group_members(group_id)

    assert requests == []


@pytest.mark.asyncio
async def test_status_errors_are_classified() -> None:
    responses = iter([httpx.Response(429), httpx.Response(403)])

    client = _client(lambda _request: next(responses))

    with pytest.raises(RateLimitedError):
        await client.get_group_members(GROUP_ID)
    with pytest.raises(InvalidStatusCodeError) as exc_info:
        await client.get_group_members(GROUP_ID)
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_transport_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadError("connection reset", request=request)

    with pytest.raises(TransportError):
        await _client(handler).get_group_members(GROUP_ID)


@pytest.mark.asyncio
async def test_request_ceiling_timeout() -> None:
    async def hang(_request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(10)
        return httpx.Response(200, text=MEMBERS_XML)

    client = _client(hang, timeout=0.05)

    loop = asyncio.get_running_loop()
    started = loop.time()
    with pytest.raises(RequestTimeoutError):
        await client.get_group_members(GROUP_ID)

    assert loop.time() - started < 2


@pytest.mark.asyncio
async def test_cancellation_returns_promptly() -> None:
    entered = asyncio.Event()

    async def hang(_request: httpx.Request) -> httpx.Response:
        entered.set()
        await asyncio.sleep(10)
        return httpx.Response(200, text=MEMBERS_XML)

    client = _client(hang)
    task = asyncio.create_task(client.get_group_members(GROUP_ID))
    await asyncio.wait_for(entered.wait(), timeout=1)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await asyncio.wait_for(task, timeout=1)


def test_timeout_is_capped_at_ceiling() -> None:
    assert SteamCommunityClient(timeout=120).timeout == COMMUNITY_TIMEOUT_SECONDS
    assert SteamCommunityClient(timeout=0.5).timeout == 0.5
