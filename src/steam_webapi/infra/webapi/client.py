"""Steam Web API クライアント実装。"""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable, Mapping, Sequence
from types import TracebackType
from typing import Protocol, TypeVar

import httpx
from pydantic import BaseModel

from steam_webapi.core.steamid import join_batch
from steam_webapi.core.vanity import parse_vanity_query
from steam_webapi.infra.community.client import SteamCommunityClient
from steam_webapi.shared.config import AppSettings, WebAPICredentials, get_settings
from steam_webapi.shared.exceptions import InvalidResponseError, ValidationFailureError
from steam_webapi.shared.logging import get_logger
from steam_webapi.shared.types import AppID, GroupID, SteamID64

from .cache import CacheKey, MemoryCache
from .dto import (
    App,
    AppListEnvelope,
    AppNewsEnvelope,
    Asset,
    AssetClassInfoEnvelope,
    BadgeProgressEnvelope,
    BadgeQuestStatus,
    BadgesEnvelope,
    BadgeStatus,
    CurrentPlayersEnvelope,
    Friend,
    FriendListEnvelope,
    NewsItem,
    NewsOptions,
    OwnedGame,
    OwnedGamesEnvelope,
    PlayerBansEnvelope,
    PlayerBanState,
    PlayerItems,
    PlayerItemsEnvelope,
    PlayerStats,
    PlayerStatsEnvelope,
    PlayerSummariesEnvelope,
    PlayerSummary,
    RecentGame,
    RecentGamesEnvelope,
    SchemaItem,
    SchemaItemsEnvelope,
    SchemaOverview,
    SchemaOverviewEnvelope,
    SchemaURLEnvelope,
    Server,
    ServerAtAddress,
    ServerListEnvelope,
    ServersAtAddressEnvelope,
    SteamLevelEnvelope,
    StoreMetaData,
    StoreMetaDataEnvelope,
    SupportedAPIInterface,
    SupportedAPIListEnvelope,
    UserGroupListEnvelope,
    VanityURLEnvelope,
    VersionCheckEnvelope,
    VersionCheckInfo,
)
from .executor import WebAPIExecutor

SERVER_LIST_LIMIT = 25000
RECENT_GAMES_COUNT = 10

AppScopedKey = tuple[CacheKey, AppID]

K = TypeVar("K", CacheKey, AppScopedKey)
V = TypeVar("V")


def _detached(value: V) -> V:
    """キャッシュと呼び出し側でコンテナを共有しないための複製。"""

    if isinstance(value, list):
        return list(value)  # type: ignore[return-value]
    if isinstance(value, BaseModel):
        return value.model_copy(deep=True)
    return value


class SteamWebAPIClientProtocol(Protocol):
    """CLI 層から利用するためのプロトコル。"""

    async def get_app_list(self, *, use_cache: bool = True) -> list[App]:
        """公開アプリ一覧を取得する。"""

    async def get_player_summaries(self, steam_ids: Sequence[SteamID64]) -> list[PlayerSummary]:
        """プレイヤー概要を取得する。"""

    async def resolve_vanity_url(self, query: str) -> SteamID64:
        """バニティ URL を SteamID64 へ解決する。"""

    async def get_schema_items(self, app_id: AppID, *, use_cache: bool = True) -> list[SchemaItem]:
        """アイテムスキーマを全ページ分取得する。"""

    async def get_group_members(self, group_id: GroupID) -> list[SteamID64]:
        """グループ所属メンバーを取得する。"""

    async def aclose(self) -> None:
        """保持している HTTP クライアントを閉じる。"""


class SteamWebAPIClient(SteamWebAPIClientProtocol):
    """各エンドポイントを型付きで呼び出すクライアント。

    静的なリソース (アプリ一覧・スキーマ・ストアメタデータ・API 一覧) は
    インメモリキャッシュを経由し、`use_cache=False` で明示的に再取得できる。
    """

    def __init__(
        self,
        *,
        executor: WebAPIExecutor,
        community: SteamCommunityClient | None = None,
        cache_expiry_seconds: float | None = None,
        logger=None,
    ) -> None:
        self._executor = executor
        self._community = community or SteamCommunityClient()
        self._cache_expiry = cache_expiry_seconds
        self._logger = logger or get_logger(__name__)
        self._apps_cache: MemoryCache[CacheKey, list[App]] = MemoryCache()
        self._api_list_cache: MemoryCache[CacheKey, list[SupportedAPIInterface]] = MemoryCache()
        self._schema_url_cache: MemoryCache[AppScopedKey, str] = MemoryCache()
        self._schema_items_cache: MemoryCache[AppScopedKey, list[SchemaItem]] = MemoryCache()
        self._schema_overview_cache: MemoryCache[AppScopedKey, SchemaOverview] = MemoryCache()
        self._store_metadata_cache: MemoryCache[AppScopedKey, StoreMetaData] = MemoryCache()

    @property
    def credentials(self) -> WebAPICredentials:
        return self._executor.credentials

    def _lookup(self, cache: MemoryCache[K, V], key: K, use_cache: bool) -> V | None:
        if not use_cache:
            return None
        cached, found = cache.get(key)
        label = key.value if isinstance(key, CacheKey) else f"{key[0].value}:{key[1]}"
        if found:
            self._logger.debug("cache_hit", key=label)
            return _detached(cached)
        self._logger.debug("cache_miss", key=label)
        return None

    def _remember(self, cache: MemoryCache[K, V], key: K, value: V) -> None:
        cache.set(key, _detached(value), self._cache_expiry)

    # --- ISteamApps ---------------------------------------------------------------

    async def get_app_list(self, *, use_cache: bool = True) -> list[App]:
        """ストア/ライブラリに公開されている全プログラムの一覧。"""

        cached = self._lookup(self._apps_cache, CacheKey.APPS, use_cache)
        if cached is not None:
            return cached

        envelope = await self._executor.get("/ISteamApps/GetAppList/v2", None, AppListEnvelope)
        apps = envelope.applist.apps
        self._remember(self._apps_cache, CacheKey.APPS, apps)
        return apps

    async def get_servers_at_address(
        self, address: str | ipaddress.IPv4Address | ipaddress.IPv6Address
    ) -> list[ServerAtAddress]:
        """IP アドレスに紐づく Steam 互換サーバー一覧。"""

        try:
            ip = ipaddress.ip_address(str(address))
        except ValueError as exc:
            raise ValidationFailureError(f"Invalid ip address: {address!r}") from exc

        envelope = await self._executor.get(
            "/ISteamApps/GetServersAtAddress/v0001",
            {"addr": str(ip)},
            ServersAtAddressEnvelope,
            success=lambda r: r.response.success,
        )
        return envelope.response.servers

    async def up_to_date_check(self, app_id: AppID, version: int) -> VersionCheckInfo:
        """指定バージョンが最新か確認する。"""

        envelope = await self._executor.get(
            "/ISteamApps/UpToDateCheck/v1",
            {"appid": str(app_id), "version": str(version)},
            VersionCheckEnvelope,
            success=lambda r: r.response.success,
        )
        return envelope.response

    # --- ISteamUser ---------------------------------------------------------------

    async def get_player_summaries(self, steam_ids: Sequence[SteamID64]) -> list[PlayerSummary]:
        """GetPlayerSummaries。1 回の呼び出しで最大 100 件。"""

        envelope = await self._executor.get(
            "/ISteamUser/GetPlayerSummaries/v0002/",
            {"steamids": join_batch(steam_ids)},
            PlayerSummariesEnvelope,
        )
        return envelope.response.players

    async def get_player_bans(self, steam_ids: Sequence[SteamID64]) -> list[PlayerBanState]:
        """期限切れで非表示になった BAN も含めて取得する。最大 100 件。"""

        envelope = await self._executor.get(
            "/ISteamUser/GetPlayerBans/v1/",
            {"steamids": join_batch(steam_ids)},
            PlayerBansEnvelope,
        )
        return envelope.players

    async def get_user_group_list(self, steam_id: SteamID64) -> list[GroupID]:
        envelope = await self._executor.get(
            "/ISteamUser/GetUserGroupList/v1",
            {"steamid": str(steam_id)},
            UserGroupListEnvelope,
            success=lambda r: r.response.success,
        )
        return [group.gid for group in envelope.response.groups]

    async def get_friend_list(self, steam_id: SteamID64) -> list[Friend]:
        """公開プロフィールのフレンド一覧。"""

        envelope = await self._executor.get(
            "/ISteamUser/GetFriendList/v1",
            {"steamid": str(steam_id)},
            FriendListEnvelope,
        )
        return envelope.friendslist.friends

    async def resolve_vanity_url(self, query: str) -> SteamID64:
        """バニティ名・プロフィール URL を SteamID64 へ解決する。

        `/profiles/<id>` 形式は通信せずにその場で確定する。
        """

        parsed = parse_vanity_query(query)
        if parsed.steam_id is not None:
            return parsed.steam_id

        envelope = await self._executor.get(
            "/ISteamUser/ResolveVanityURL/v0001/",
            {"vanityurl": parsed.vanity_name or ""},
            VanityURLEnvelope,
            success=lambda r: r.response.success == 1,
        )
        steam_id = envelope.response.steam_id
        if steam_id is None:
            raise InvalidResponseError("Vanity URL resolved without a steam id")
        return steam_id

    # --- IGameServersService ------------------------------------------------------

    async def get_server_list(self, filters: Mapping[str, str] | None = None) -> list[Server]:
        """マスターサーバーの一覧。`filters` は `\\key\\value` 形式に連結される。"""

        filter_value = "".join(f"\\{key}\\{value}" for key, value in (filters or {}).items())
        envelope = await self._executor.get(
            "/IGameServersService/GetServerList/v1",
            {"filter": filter_value, "limit": str(SERVER_LIST_LIMIT)},
            ServerListEnvelope,
        )
        return envelope.response.servers

    # --- ISteamNews / ISteamUserStats -----------------------------------------------

    async def get_news_for_app(
        self, app_id: AppID, options: NewsOptions | None = None
    ) -> list[NewsItem]:
        params = {"appid": str(app_id)}
        if options is not None:
            params.update(options.to_params())
        envelope = await self._executor.get(
            "/ISteamNews/GetNewsForApp/v0002", params, AppNewsEnvelope
        )
        return envelope.appnews.news_items

    async def get_number_of_current_players(self, app_id: AppID) -> int:
        envelope = await self._executor.get(
            "/ISteamUserStats/GetNumberOfCurrentPlayers/v1",
            {"appid": str(app_id)},
            CurrentPlayersEnvelope,
            success=lambda r: r.response.result == 1,
        )
        return envelope.response.player_count

    async def get_user_stats_for_game(self, steam_id: SteamID64, app_id: AppID) -> PlayerStats:
        """ゲーム内統計と実績。プロフィールの公開設定に依存する。"""

        envelope = await self._executor.get(
            "/ISteamUserStats/GetUserStatsForGame/v2",
            {"steamid": str(steam_id), "appid": str(app_id)},
            PlayerStatsEnvelope,
        )
        return envelope.playerstats

    # --- IEconItems_<appid> ---------------------------------------------------------

    async def get_player_items(self, steam_id: SteamID64, app_id: AppID) -> PlayerItems:
        envelope = await self._executor.get(
            f"/IEconItems_{app_id}/GetPlayerItems/v0001/",
            {"steamid": str(steam_id)},
            PlayerItemsEnvelope,
        )
        return PlayerItems(
            items=tuple(envelope.result.items),
            num_backpack_slots=envelope.result.num_backpack_slots,
        )

    async def get_schema_overview(self, app_id: AppID, *, use_cache: bool = True) -> SchemaOverview:
        """アイテムが取りうる属性・品質などの概要。"""

        key: AppScopedKey = (CacheKey.SCHEMA_OVERVIEW, app_id)
        cached = self._lookup(self._schema_overview_cache, key, use_cache)
        if cached is not None:
            return cached

        envelope = await self._executor.get(
            f"/IEconItems_{app_id}/GetSchemaOverview/v0001/",
            {"language": self.credentials.language},
            SchemaOverviewEnvelope,
        )
        self._remember(self._schema_overview_cache, key, envelope.result)
        return envelope.result

    async def get_schema_items(self, app_id: AppID, *, use_cache: bool = True) -> list[SchemaItem]:
        """ページングされたスキーマアイテムを結合して返す。

        `next` が 0 のページに到達した時点で、そのページを追加せずに終了する。
        途中で失敗した場合は部分結果を返さない。
        """

        key: AppScopedKey = (CacheKey.SCHEMA_ITEMS, app_id)
        cached = self._lookup(self._schema_items_cache, key, use_cache)
        if cached is not None:
            return cached

        items: list[SchemaItem] = []
        cursor = 0
        while True:
            envelope = await self._executor.get(
                f"/IEconItems_{app_id}/GetSchemaItems/v1/",
                {"start": str(cursor), "language": self.credentials.language},
                SchemaItemsEnvelope,
            )
            page = envelope.result
            self._logger.debug(
                "schema_items_page", app_id=app_id, start=cursor, next=page.next, size=len(page.items)
            )
            if page.next == 0:
                break
            items.extend(page.items)
            cursor = page.next

        self._remember(self._schema_items_cache, key, items)
        return items

    async def get_schema_url(self, app_id: AppID, *, use_cache: bool = True) -> str:
        """items_game.txt の URL。"""

        key: AppScopedKey = (CacheKey.SCHEMA_URL, app_id)
        cached = self._lookup(self._schema_url_cache, key, use_cache)
        if cached is not None:
            return cached

        envelope = await self._executor.get(
            f"/IEconItems_{app_id}/GetSchemaURL/v0001/",
            {},
            SchemaURLEnvelope,
            success=lambda r: r.result.status == 1,
        )
        url = envelope.result.items_game_url
        self._remember(self._schema_url_cache, key, url)
        return url

    async def get_store_metadata(self, app_id: AppID, *, use_cache: bool = True) -> StoreMetaData:
        key: AppScopedKey = (CacheKey.STORE_METADATA, app_id)
        cached = self._lookup(self._store_metadata_cache, key, use_cache)
        if cached is not None:
            return cached

        envelope = await self._executor.get(
            f"/IEconItems_{app_id}/GetStoreMetaData/v0001/",
            {"language": self.credentials.language},
            StoreMetaDataEnvelope,
        )
        self._remember(self._store_metadata_cache, key, envelope.result)
        return envelope.result

    # --- ISteamWebAPIUtil -----------------------------------------------------------

    async def get_supported_api_list(self, *, use_cache: bool = True) -> list[SupportedAPIInterface]:
        """利用可能な Web API インターフェースの一覧。"""

        cached = self._lookup(self._api_list_cache, CacheKey.API_LIST, use_cache)
        if cached is not None:
            return cached

        envelope = await self._executor.get(
            "/ISteamWebAPIUtil/GetSupportedAPIList/v0001/", {}, SupportedAPIListEnvelope
        )
        interfaces = envelope.apilist.interfaces
        self._remember(self._api_list_cache, CacheKey.API_LIST, interfaces)
        return interfaces

    # --- IPlayerService -------------------------------------------------------------

    async def get_steam_level(self, steam_id: SteamID64) -> int:
        envelope = await self._executor.get(
            "/IPlayerService/GetSteamLevel/v1/",
            {"steamid": str(steam_id)},
            SteamLevelEnvelope,
        )
        return envelope.response.player_level

    async def get_recently_played_games(self, steam_id: SteamID64) -> list[RecentGame]:
        """最近プレイしたゲーム。空の場合は大抵プライバシー設定による。"""

        envelope = await self._executor.get(
            "/IPlayerService/GetRecentlyPlayedGames/v1",
            {"steamid": str(steam_id), "count": str(RECENT_GAMES_COUNT)},
            RecentGamesEnvelope,
        )
        return envelope.response.games

    async def get_owned_games(self, steam_id: SteamID64) -> list[OwnedGame]:
        """所有ゲーム一覧。無料プレイのゲームも含める。"""

        envelope = await self._executor.get(
            "/IPlayerService/GetOwnedGames/v1",
            {
                "steamid": str(steam_id),
                "include_appinfo": "true",
                "include_played_free_games": "true",
            },
            OwnedGamesEnvelope,
        )
        return envelope.response.games

    async def get_badges(self, steam_id: SteamID64) -> BadgeStatus:
        envelope = await self._executor.get(
            "/IPlayerService/GetBadges/v1",
            {"steamid": str(steam_id)},
            BadgesEnvelope,
        )
        return envelope.response

    async def get_community_badge_progress(self, steam_id: SteamID64) -> list[BadgeQuestStatus]:
        envelope = await self._executor.get(
            "/IPlayerService/GetCommunityBadgeProgress/v1",
            {"steamid": str(steam_id)},
            BadgeProgressEnvelope,
        )
        return envelope.response.quests

    # --- ISteamEconomy --------------------------------------------------------------

    async def get_asset_class_info(self, app_id: AppID, class_ids: Iterable[int]) -> list[Asset]:
        """アイテム/アセットのクラス情報。ローカライズ文字列は設定言語で返る。"""

        ids = list(class_ids)
        if not ids:
            raise ValidationFailureError("At least one class id is required")

        params = {
            "appid": str(app_id),
            "language": self.credentials.language,
            "class_count": str(len(ids)),
        }
        for index, class_id in enumerate(ids):
            params[f"classid{index}"] = str(class_id)

        envelope = await self._executor.get(
            "/ISteamEconomy/GetAssetClassInfo/v0001",
            params,
            AssetClassInfoEnvelope,
            success=lambda r: r.success,
        )
        return envelope.assets()

    # --- steamcommunity.com ---------------------------------------------------------

    async def get_group_members(self, group_id: GroupID) -> list[SteamID64]:
        """グループの全メンバー。Web API ではなくコミュニティの XML を解析する。"""

        return await self._community.get_group_members(group_id)

    async def aclose(self) -> None:
        await self._executor.aclose()
        await self._community.aclose()

    async def __aenter__(self) -> SteamWebAPIClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def build_webapi_client(
    *,
    settings: AppSettings | None = None,
    credentials: WebAPICredentials | None = None,
    http_client: httpx.AsyncClient | None = None,
    logger=None,
) -> SteamWebAPIClient:
    """共有設定から Steam Web API クライアントを構築するファクトリ。"""

    app_settings = settings or get_settings()
    steam_settings = app_settings.steam
    executor = WebAPIExecutor(
        credentials=credentials or WebAPICredentials.from_settings(steam_settings),
        base_url=str(steam_settings.base_url),
        timeout=steam_settings.request_timeout_seconds,
        http_client=http_client,
        logger=logger,
    )
    community = SteamCommunityClient(
        base_url=str(steam_settings.community_url),
        timeout=steam_settings.community_timeout_seconds,
        http_client=http_client,
        logger=logger,
    )
    return SteamWebAPIClient(
        executor=executor,
        community=community,
        cache_expiry_seconds=steam_settings.cache_expiry_seconds,
        logger=logger,
    )


__all__ = [
    "RECENT_GAMES_COUNT",
    "SERVER_LIST_LIMIT",
    "SteamWebAPIClient",
    "SteamWebAPIClientProtocol",
    "build_webapi_client",
]
