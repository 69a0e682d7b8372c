"""アプリケーション全体で共有する設定ローダーと API 資格情報。"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError, InvalidConfigurationError
from .locks import ReadWriteLock
from .logging import get_logger

EnvName = Literal["local", "test", "staging", "production"]

API_KEY_LENGTH = 32
LANGUAGE_LENGTH = 5
DEFAULT_LANGUAGE = "en_US"
MAX_TIMEOUT_SECONDS = 20.0


class SteamSettings(BaseModel):
    """Steam Web API 関連の設定。"""

    api_key: SecretStr | None = Field(None, description="Steam Web API key (32 chars)")
    language: str = Field(DEFAULT_LANGUAGE, description="翻訳付きレスポンスの言語コード")
    base_url: AnyHttpUrl = Field(
        "https://api.steampowered.com", description="Steam Web API のベース URL"
    )
    community_url: AnyHttpUrl = Field(
        "https://steamcommunity.com", description="Steam コミュニティサイトのベース URL"
    )
    request_timeout_seconds: float = Field(
        MAX_TIMEOUT_SECONDS,
        gt=0,
        le=MAX_TIMEOUT_SECONDS,
        description="Web API リクエストの上限秒数",
    )
    community_timeout_seconds: float = Field(
        MAX_TIMEOUT_SECONDS,
        gt=0,
        le=MAX_TIMEOUT_SECONDS,
        description="コミュニティ XML 取得の上限秒数",
    )
    cache_expiry_seconds: int = Field(900, ge=0, description="静的リソースのキャッシュ有効秒数")


class AppSettings(BaseSettings):
    """共有設定。`.env` 読み込みと環境変数バリデーションを担う。"""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: EnvName = Field("local", description="実行環境識別子")
    log_level: str = Field("INFO", description="ルートロガーのログレベル")
    steam: SteamSettings = Field(default_factory=SteamSettings)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """設定をロードし、再利用する。

    LRU キャッシュによりプロセス内での重複読み込みを防ぎ、
    `pytest` などから `get_settings.cache_clear()` を呼び出すことで再読込できる。
    """

    try:
        return AppSettings()
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


class WebAPICredentials:
    """クライアント単位で保持する API キーと言語設定。

    読み取りは共有ロック、更新は排他ロックで行い、値は常に丸ごと差し替える。
    """

    def __init__(self, api_key: str = "", language: str = DEFAULT_LANGUAGE) -> None:
        self._lock = ReadWriteLock()
        self._api_key = ""
        self._language = DEFAULT_LANGUAGE
        self.set_key(api_key)
        if language != DEFAULT_LANGUAGE:
            self.set_language(language)

    @classmethod
    def from_settings(cls, settings: SteamSettings) -> WebAPICredentials:
        """環境変数由来の値が不正な場合は警告を出して既定値のまま扱う。"""

        credentials = cls()
        logger = get_logger(__name__)
        if settings.language != DEFAULT_LANGUAGE:
            try:
                credentials.set_language(settings.language)
            except InvalidConfigurationError as exc:
                logger.warning(
                    "invalid_language_from_env", language=settings.language, message=str(exc)
                )
        if settings.api_key is not None:
            try:
                credentials.set_key(settings.api_key.get_secret_value())
            except InvalidConfigurationError as exc:
                logger.warning("invalid_api_key_from_env", message=str(exc))
        return credentials

    @property
    def api_key(self) -> str:
        with self._lock.read():
            return self._api_key

    @property
    def language(self) -> str:
        with self._lock.read():
            return self._language

    def set_key(self, key: str) -> None:
        """API キーを設定する。空文字はキーの解除を意味する。"""

        if len(key) not in (0, API_KEY_LENGTH):
            msg = f"Tried to set invalid key, must be {API_KEY_LENGTH} chars or 0 to remove it"
            raise InvalidConfigurationError(msg)
        with self._lock.write():
            self._api_key = key

    def set_language(self, language: str) -> None:
        """ISO639-1 言語コード + ISO 3166-1 国コード (例: en_US, de_DE) を設定する。"""

        if len(language) != LANGUAGE_LENGTH:
            raise InvalidConfigurationError("Invalid ISO_639-1 language code")
        with self._lock.write():
            self._language = language.lower()

    def __repr__(self) -> str:
        return f"WebAPICredentials(api_key_set={bool(self.api_key)}, language={self.language!r})"


__all__ = [
    "API_KEY_LENGTH",
    "AppSettings",
    "DEFAULT_LANGUAGE",
    "MAX_TIMEOUT_SECONDS",
    "EnvName",
    "SteamSettings",
    "WebAPICredentials",
    "get_settings",
]
