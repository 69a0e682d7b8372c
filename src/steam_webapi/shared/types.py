"""共有型・ユーティリティ。"""

from __future__ import annotations

from typing import NewType

SteamID64 = NewType("SteamID64", int)
GroupID = NewType("GroupID", int)
AppID = NewType("AppID", int)

__all__ = [
    "AppID",
    "GroupID",
    "SteamID64",
]
