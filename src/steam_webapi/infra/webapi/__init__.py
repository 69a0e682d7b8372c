"""Steam Web API 向け infra 層パッケージ。"""

from .cache import DEFAULT_CACHE_EXPIRY_SECONDS, CacheKey, MemoryCache
from .client import SteamWebAPIClient, SteamWebAPIClientProtocol, build_webapi_client
from .dto import (
    App,
    Asset,
    Badge,
    BadgeQuestStatus,
    BadgeStatus,
    Friend,
    InventoryItem,
    NewsItem,
    NewsOptions,
    OwnedGame,
    PlayerBanState,
    PlayerItems,
    PlayerStats,
    PlayerSummary,
    RecentGame,
    SchemaItem,
    SchemaOverview,
    Server,
    ServerAtAddress,
    StoreMetaData,
    SupportedAPIInterface,
    VersionCheckInfo,
)
from .executor import BASE_URL, REQUEST_TIMEOUT_SECONDS, WebAPIExecutor

__all__ = [
    "BASE_URL",
    "DEFAULT_CACHE_EXPIRY_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
    "App",
    "Asset",
    "Badge",
    "BadgeQuestStatus",
    "BadgeStatus",
    "CacheKey",
    "Friend",
    "InventoryItem",
    "MemoryCache",
    "NewsItem",
    "NewsOptions",
    "OwnedGame",
    "PlayerBanState",
    "PlayerItems",
    "PlayerStats",
    "PlayerSummary",
    "RecentGame",
    "SchemaItem",
    "SchemaOverview",
    "Server",
    "ServerAtAddress",
    "SteamWebAPIClient",
    "SteamWebAPIClientProtocol",
    "StoreMetaData",
    "SupportedAPIInterface",
    "VersionCheckInfo",
    "WebAPIExecutor",
    "build_webapi_client",
]
