"""共通例外。Steam Web API 呼び出しの失敗条件をフラットに定義する。"""

from __future__ import annotations


class BaseAppError(Exception):
    """全レイヤで共有するベース例外。"""

    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ConfigurationError(BaseAppError):
    """設定読み込みや不足を示すエラー。"""

    default_message = "Configuration is invalid or missing"


class InvalidConfigurationError(ConfigurationError):
    """API キーや言語コードの形式が不正な場合のエラー。"""

    default_message = "Invalid Steam Web API configuration value"


class WebAPIError(BaseAppError):
    """Steam Web API 呼び出し共通の例外。"""

    default_message = "Steam Web API request failed"


class NoAPIKeyError(WebAPIError):
    """API キー未設定のまま認証付きリクエストを行おうとした。"""

    default_message = (
        "No steam web api key, to obtain one see: "
        "https://steamcommunity.com/dev/apikey and call set_key()"
    )


class TransportError(WebAPIError):
    """DNS・接続・I/O など通信レベルの失敗。"""

    default_message = "Failed to perform http request"


class RequestTimeoutError(WebAPIError):
    """リクエストが上限時間内に完了しなかった。"""

    default_message = "Request deadline exceeded"


class DecodeError(WebAPIError):
    """レスポンスボディが期待する JSON 形状ではない。"""

    default_message = "Failed to decode JSON response"


class InvalidStatusCodeError(WebAPIError):
    """200 以外のステータスコード。"""

    default_message = "Invalid status code received"

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"Invalid status code received: {status_code}")


class ServiceUnavailableError(WebAPIError):
    """Steam 側が 503 を返した。"""

    default_message = "Service Unavailable"
    status_code = 503


class RateLimitedError(WebAPIError):
    """Steam 側が 429 を返した。"""

    default_message = "Rate limited"
    status_code = 429


class InvalidResponseError(WebAPIError):
    """HTTP 200 だがペイロード内の成功フラグが失敗を示している。"""

    default_message = "Invalid response"


class ValidationFailureError(WebAPIError):
    """呼び出し側の引数が前提条件を満たさない。"""

    default_message = "Invalid request arguments"


def raise_for_status(status_code: int) -> None:
    """HTTP ステータスコードを Web API の例外へ分類する。"""

    if status_code == 200:
        return
    if status_code == ServiceUnavailableError.status_code:
        raise ServiceUnavailableError()
    if status_code == RateLimitedError.status_code:
        raise RateLimitedError()
    raise InvalidStatusCodeError(status_code)


__all__ = [
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
    "raise_for_status",
]
