"""バニティ URL / プロフィール URL の解釈。"""

from __future__ import annotations

from dataclasses import dataclass

from steam_webapi.shared.exceptions import ValidationFailureError
from steam_webapi.shared.types import SteamID64

from .steamid import parse_steam_id64

PROFILES_MARKER = "profiles/"
VANITY_MARKER = "id/"


@dataclass(slots=True, frozen=True)
class VanityQuery:
    """解釈結果。`steam_id` が確定していればリモート解決は不要。"""

    steam_id: SteamID64 | None = None
    vanity_name: str | None = None

    @property
    def needs_resolution(self) -> bool:
        return self.steam_id is None


def parse_vanity_query(query: str) -> VanityQuery:
    """自由入力をプロフィール ID またはバニティ名へ正規化する。

    - `.../profiles/<17桁>` はその場で SteamID64 として確定する
    - `.../id/<name>` は `<name>` をバニティ名として扱う
    - それ以外は入力全体をバニティ名として扱う
    """

    normalized = "".join(query.split())
    if PROFILES_MARKER in normalized:
        tail = normalized[normalized.index(PROFILES_MARKER) + len(PROFILES_MARKER) :]
        return VanityQuery(steam_id=parse_steam_id64(tail.removesuffix("/")))

    if VANITY_MARKER in normalized:
        normalized = normalized[normalized.index(VANITY_MARKER) + len(VANITY_MARKER) :]
        normalized = normalized.removesuffix("/")

    if not normalized:
        raise ValidationFailureError("Empty vanity name")
    return VanityQuery(vanity_name=normalized)


__all__ = ["PROFILES_MARKER", "VANITY_MARKER", "VanityQuery", "parse_vanity_query"]
