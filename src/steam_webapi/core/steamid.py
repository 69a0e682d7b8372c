"""Steam の 64bit 識別子に関する検証ユーティリティ。"""

from __future__ import annotations

from collections.abc import Iterable

from steam_webapi.shared.exceptions import ValidationFailureError
from steam_webapi.shared.types import GroupID, SteamID64

STEAM_ID64_DIGITS = 17
MAX_BATCH_SIZE = 100

_UINT64_MAX = 2**64 - 1
_ACCOUNT_TYPE_CLAN = 7


def parse_steam_id64(value: str | int) -> SteamID64:
    """10進表現の SteamID64 を検証して返す。

    64bit 整数として解釈でき、かつ 17 桁であることを要求する。
    """

    if isinstance(value, bool):
        raise ValidationFailureError(f"Invalid steam id: {value!r}")
    if isinstance(value, int):
        parsed = value
    else:
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise ValidationFailureError(f"Failed to parse int from query: {value!r}")
        parsed = int(text)

    if not 0 < parsed <= _UINT64_MAX:
        raise ValidationFailureError(f"Steam id out of 64bit range: {parsed}")
    if len(str(parsed)) != STEAM_ID64_DIGITS:
        raise ValidationFailureError(f"Invalid string length: {parsed}")
    return SteamID64(parsed)


def is_valid_group_id(group_id: int) -> bool:
    """グループ (clan) 用の 64bit ID として妥当か判定する。"""

    if isinstance(group_id, bool) or not isinstance(group_id, int):
        return False
    if not 0 < group_id <= _UINT64_MAX:
        return False
    account_type = (group_id >> 52) & 0xF
    account_id = group_id & 0xFFFFFFFF
    return account_type == _ACCOUNT_TYPE_CLAN and account_id > 0


def parse_group_id(value: str | int) -> GroupID:
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationFailureError(f"Invalid steam group ID: {value!r}") from exc
    if not is_valid_group_id(parsed):
        raise ValidationFailureError(f"Invalid steam group ID: {value!r}")
    return GroupID(parsed)


def join_batch(steam_ids: Iterable[SteamID64 | int], *, limit: int = MAX_BATCH_SIZE) -> str:
    """バッチ API 向けに ID 群を検証しカンマ区切りへ変換する。"""

    ids = [str(steam_id) for steam_id in steam_ids]
    if not ids:
        raise ValidationFailureError("Too few steam ids, min 1")
    if len(ids) > limit:
        raise ValidationFailureError(f"Too many steam ids, max {limit}")
    return ",".join(ids)


__all__ = [
    "MAX_BATCH_SIZE",
    "STEAM_ID64_DIGITS",
    "is_valid_group_id",
    "join_batch",
    "parse_group_id",
    "parse_steam_id64",
]
