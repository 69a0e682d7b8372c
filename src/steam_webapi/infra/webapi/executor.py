"""Steam Web API への単一 GET リクエストを実行する基盤。"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

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
    raise_for_status,
)
from steam_webapi.shared.logging import get_logger

BASE_URL = "https://api.steampowered.com"
REQUEST_TIMEOUT_SECONDS = 20.0
RESPONSE_FORMAT = "json"

ModelT = TypeVar("ModelT", bound=BaseModel)


class WebAPIExecutor:
    """認証パラメータを付与して GET を 1 回だけ行い、レスポンスをモデルへ変換する。

    リトライは行わない。失敗は分類済みの例外として呼び出し側へそのまま返す。
    """

    def __init__(
        self,
        *,
        credentials: WebAPICredentials,
        base_url: str = BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
        logger=None,
    ) -> None:
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout = min(timeout, REQUEST_TIMEOUT_SECONDS)
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient()
        self._logger = logger or get_logger(__name__)

    @property
    def credentials(self) -> WebAPICredentials:
        return self._credentials

    @property
    def timeout(self) -> float:
        """実際に適用される上限秒数。20 秒を超える指定は 20 秒に丸める。"""

        return self._timeout

    async def get(
        self,
        path: str,
        params: Mapping[str, str] | None,
        target: type[ModelT],
        *,
        success: Callable[[ModelT], bool] | None = None,
    ) -> ModelT:
        """`path` へ GET し、ボディを `target` として検証して返す。

        Raises:
            NoAPIKeyError: API キー未設定。通信は行わない。
            RequestTimeoutError: 上限時間 (既定 20 秒) を超過した。
            TransportError: 接続・I/O エラー。
            ServiceUnavailableError / RateLimitedError / InvalidStatusCodeError: 200 以外。
            DecodeError: JSON として、または `target` として不正。
            InvalidResponseError: `success` 判定が False。
        """

        api_key = self._credentials.api_key
        if not api_key:
            raise NoAPIKeyError()

        query = dict(params or {})
        query["key"] = api_key
        query["format"] = RESPONSE_FORMAT
        url = f"{self._base_url}{path}"

        self._logger.debug("webapi_request", path=path, params=sorted(params or {}))
        status_code, body = await self._fetch(url, sorted(query.items()), path=path)

        try:
            raise_for_status(status_code)
        except (ServiceUnavailableError, RateLimitedError, InvalidStatusCodeError):
            self._logger.warning("webapi_status_error", path=path, status_code=status_code)
            raise

        try:
            result = target.model_validate_json(body)
        except ValidationError as exc:
            self._logger.warning("webapi_decode_failed", path=path, errors=exc.error_count())
            raise DecodeError() from exc

        if success is not None and not success(result):
            self._logger.warning("webapi_invalid_response", path=path)
            raise InvalidResponseError()
        return result

    async def _fetch(
        self,
        url: str,
        query: list[tuple[str, str]],
        *,
        path: str,
    ) -> tuple[int, bytes]:
        try:
            async with asyncio.timeout(self._timeout):
                async with self._http_client.stream(
                    "GET", url, params=query, timeout=self._timeout
                ) as response:
                    body = await response.aread()
                    return response.status_code, body
        except (TimeoutError, httpx.TimeoutException) as exc:
            self._logger.warning("webapi_request_timeout", path=path, timeout=self._timeout)
            raise RequestTimeoutError() from exc
        except httpx.HTTPError as exc:
            self._logger.warning("webapi_transport_error", path=path, message=str(exc))
            raise TransportError() from exc

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> WebAPIExecutor:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


__all__ = [
    "BASE_URL",
    "REQUEST_TIMEOUT_SECONDS",
    "WebAPIExecutor",
]
