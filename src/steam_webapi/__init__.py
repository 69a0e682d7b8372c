"""Steam Web API の型付きクライアント。"""

from steam_webapi.infra.webapi import SteamWebAPIClient, WebAPIExecutor, build_webapi_client
from steam_webapi.shared.config import WebAPICredentials

__all__ = [
    "SteamWebAPIClient",
    "WebAPICredentials",
    "WebAPIExecutor",
    "build_webapi_client",
]
