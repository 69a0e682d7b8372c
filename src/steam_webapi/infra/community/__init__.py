"""Steam コミュニティサイト向け infra 層パッケージ。"""

from .client import COMMUNITY_URL, SteamCommunityClient, parse_group_members

__all__ = ["COMMUNITY_URL", "SteamCommunityClient", "parse_group_members"]
