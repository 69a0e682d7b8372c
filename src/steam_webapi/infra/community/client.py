"""steamcommunity.com の XML ページを取得するクライアント。

Web API ではなくコミュニティサイトを直接参照するため API キーは不要だが、
Web API よりも厳しくレート制限される。
"""

from __future__ import annotations

import asyncio
import re

import httpx

from steam_webapi.core.steamid import parse_group_id, parse_steam_id64
from steam_webapi.shared.exceptions import (
    RequestTimeoutError,
    TransportError,
    ValidationFailureError,
    WebAPIError,
    raise_for_status,
)
from steam_webapi.shared.logging import get_logger
from steam_webapi.shared.types import GroupID, SteamID64

COMMUNITY_URL = "https://steamcommunity.com"
COMMUNITY_TIMEOUT_SECONDS = 20.0

_MEMBER_PATTERN = re.compile(r"<steamID64>(\d+)</steamID64>")


def parse_group_members(document: str) -> list[SteamID64]:
    """メンバー一覧 XML から SteamID64 を抽出する。不正な ID があれば即座に失敗する。"""

    members: list[SteamID64] = []
    for match in _MEMBER_PATTERN.finditer(document):
        try:
            members.append(parse_steam_id64(match.group(1)))
        except ValidationFailureError as exc:
            raise ValidationFailureError(f"Found invalid ID: {match.group(1)}") from exc
    return members


class SteamCommunityClient:
    """グループメンバー一覧 (memberslistxml) を取得する。"""

    def __init__(
        self,
        *,
        base_url: str = COMMUNITY_URL,
        timeout: float = COMMUNITY_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
        logger=None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = min(timeout, COMMUNITY_TIMEOUT_SECONDS)
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient()
        self._logger = logger or get_logger(__name__)

    @property
    def timeout(self) -> float:
        return self._timeout

    async def get_group_members(self, group_id: GroupID | int) -> list[SteamID64]:
        """グループの全メンバーを 1 リクエストで取得する。

        グループ ID が不正な場合は通信せずに `ValidationFailureError` を送出する。
        """

        gid = parse_group_id(group_id)
        url = f"{self._base_url}/gid/{gid}/memberslistxml/"
        self._logger.debug("community_request", group_id=gid)

        try:
            async with asyncio.timeout(self._timeout):
                async with self._http_client.stream(
                    "GET", url, params={"xml": "1"}, timeout=self._timeout
                ) as response:
                    body = await response.aread()
                    status_code = response.status_code
        except (TimeoutError, httpx.TimeoutException) as exc:
            self._logger.warning("community_request_timeout", group_id=gid)
            raise RequestTimeoutError() from exc
        except httpx.HTTPError as exc:
            self._logger.warning("community_transport_error", group_id=gid, message=str(exc))
            raise TransportError() from exc

        try:
            raise_for_status(status_code)
        except WebAPIError:
            self._logger.warning("community_status_error", group_id=gid, status_code=status_code)
            raise

        members = parse_group_members(body.decode("utf-8", errors="replace"))
        self._logger.debug("community_group_members", group_id=gid, count=len(members))
        return members

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()


__all__ = [
    "COMMUNITY_URL",
    "SteamCommunityClient",
    "parse_group_members",
]
