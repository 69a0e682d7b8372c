"""共有レイヤの公開インターフェース。"""

from .config import AppSettings, SteamSettings, WebAPICredentials, get_settings
from .exceptions import (
    BaseAppError,
    ConfigurationError,
    DecodeError,
    InvalidConfigurationError,
    InvalidResponseError,
    InvalidStatusCodeError,
    NoAPIKeyError,
    RateLimitedError,
    RequestTimeoutError,
    ServiceUnavailableError,
    TransportError,
    ValidationFailureError,
    WebAPIError,
)
from .logging import configure_logging, get_logger
from .types import AppID, GroupID, SteamID64

__all__ = [
    "AppSettings",
    "SteamSettings",
    "WebAPICredentials",
    "get_settings",
    "configure_logging",
    "get_logger",
    "BaseAppError",
    "ConfigurationError",
    "DecodeError",
    "InvalidConfigurationError",
    "InvalidResponseError",
    "InvalidStatusCodeError",
    "NoAPIKeyError",
    "RateLimitedError",
    "RequestTimeoutError",
    "ServiceUnavailableError",
    "TransportError",
    "ValidationFailureError",
    "WebAPIError",
    "AppID",
    "GroupID",
    "SteamID64",
]
