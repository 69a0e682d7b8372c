"""ネットワークに依存しない識別子・入力の解釈ロジック。"""

from .steamid import (
    MAX_BATCH_SIZE,
    is_valid_group_id,
    join_batch,
    parse_group_id,
    parse_steam_id64,
)
from .vanity import VanityQuery, parse_vanity_query

__all__ = [
    "MAX_BATCH_SIZE",
    "VanityQuery",
    "is_valid_group_id",
    "join_batch",
    "parse_group_id",
    "parse_steam_id64",
    "parse_vanity_query",
]
