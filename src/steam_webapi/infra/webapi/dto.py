"""Steam Web API のレスポンスモデル。

各エンドポイントのエンベロープ (`response` / `result` など) もここで定義し、
`WebAPIExecutor.get` の `target` として利用する。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from steam_webapi.shared.types import AppID, GroupID, SteamID64

MEDIA_IMAGE_URL = "https://media.steampowered.com/steamcommunity/public/images/apps/{app_id}/{hash}.jpg"


class SteamModel(BaseModel):
    """レスポンスモデル共通の基底。未知のフィールドは無視する。"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PersonaState(IntEnum):
    OFFLINE = 0
    ONLINE = 1
    BUSY = 2
    AWAY = 3
    SNOOZE = 4
    LOOKING_FOR_TRADE = 5
    LOOKING_TO_PLAY = 6


class ProfileState(IntEnum):
    NEW = 0
    CONFIGURED = 1


class VisibilityState(IntEnum):
    """認証なしの Web API では PRIVATE(1) か PUBLIC(3) のみが返る。"""

    PRIVATE = 1
    FRIENDS = 2
    PUBLIC = 3


class EconBanState(str, Enum):
    NONE = "none"
    PROBATION = "probation"
    BANNED = "banned"


class App(SteamModel):
    app_id: AppID = Field(alias="appid")
    name: str


class PlayerSummary(SteamModel):
    steam_id: SteamID64 = Field(alias="steamid")
    community_visibility_state: VisibilityState = Field(
        VisibilityState.PRIVATE, alias="communityvisibilitystate"
    )
    profile_state: ProfileState = Field(ProfileState.NEW, alias="profilestate")
    persona_name: str = Field("", alias="personaname")
    profile_url: str = Field("", alias="profileurl")
    avatar: str = ""
    avatar_medium: str = Field("", alias="avatarmedium")
    avatar_full: str = Field("", alias="avatarfull")
    avatar_hash: str = Field("", alias="avatarhash")
    persona_state: PersonaState = Field(PersonaState.OFFLINE, alias="personastate")
    real_name: str = Field("", alias="realname")
    primary_clan_id: str = Field("", alias="primaryclanid")
    time_created: int = Field(0, alias="timecreated")
    # 1: Offline, 2: Online, 4: Golden, 64: Big Picture, 256: Web, 512: Mobile, 1024: Controller
    persona_state_flags: int = Field(0, alias="personastateflags")
    loc_country_code: str = Field("", alias="loccountrycode")
    loc_state_code: str = Field("", alias="locstatecode")
    loc_city_id: int = Field(0, alias="loccityid")
    last_logoff: int = Field(0, alias="lastlogoff")
    comment_permission: int = Field(0, alias="commentpermission")


class PlayerBanState(SteamModel):
    steam_id: SteamID64 = Field(alias="SteamId")
    community_banned: bool = Field(False, alias="CommunityBanned")
    vac_banned: bool = Field(False, alias="VACBanned")
    number_of_vac_bans: int = Field(0, alias="NumberOfVACBans")
    days_since_last_ban: int = Field(0, alias="DaysSinceLastBan")
    number_of_game_bans: int = Field(0, alias="NumberOfGameBans")
    economy_ban: EconBanState = Field(EconBanState.NONE, alias="EconomyBan")


class Friend(SteamModel):
    steam_id: SteamID64 = Field(alias="steamid")
    relationship: str = ""
    friend_since: int = 0


class ServerAtAddress(SteamModel):
    addr: str
    gms_index: int = Field(0, alias="gmsindex")
    app_id: AppID = Field(alias="appid")
    game_dir: str = Field("", alias="gamedir")
    region: int = 0
    secure: bool = False
    lan: bool = False
    game_port: int = Field(0, alias="gameport")
    spec_port: int = Field(0, alias="specport")


class Server(SteamModel):
    addr: str
    game_port: int = Field(0, alias="gameport")
    steam_id: str = Field("", alias="steamid")
    name: str = ""
    app_id: int = Field(0, alias="appid")
    game_dir: str = Field("", alias="gamedir")
    version: str = ""
    product: str = ""
    region: int = 0
    players: int = 0
    max_players: int = 0
    bots: int = 0
    map: str = ""
    secure: bool = False
    dedicated: bool = False
    os: str = ""
    game_type: str = Field("", alias="gametype")


class VersionCheckInfo(SteamModel):
    success: bool = False
    up_to_date: bool = False
    version_is_listable: bool = False
    required_version: int = 0
    message: str = ""


@dataclass(slots=True)
class NewsOptions:
    """GetNewsForApp の任意パラメータ。0 / 空は未指定として扱う。"""

    max_length: int = 0
    end_date: int = 0
    count: int = 0
    feeds: tuple[str, ...] = ()

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.max_length > 0:
            params["maxlength"] = str(self.max_length)
        if self.count > 0:
            params["count"] = str(self.count)
        if self.end_date > 0:
            params["end_date"] = str(self.end_date)
        if self.feeds:
            params["feeds"] = ",".join(self.feeds)
        return params


class NewsItem(SteamModel):
    gid: int
    title: str = ""
    url: str = ""
    is_external_url: bool = False
    author: str = ""
    contents: str = ""
    feed_label: str = Field("", alias="feedlabel")
    date: int = 0
    feed_name: str = Field("", alias="feedname")
    feed_type: int = 0
    app_id: int = Field(0, alias="appid")
    tags: list[str] = Field(default_factory=list)


class PlayerStat(SteamModel):
    name: str
    value: float = 0


class PlayerAchievement(SteamModel):
    name: str
    achieved: int = 0


class PlayerStats(SteamModel):
    steam_id: SteamID64 = Field(alias="steamID")
    game_name: str = Field("", alias="gameName")
    stats: list[PlayerStat] = Field(default_factory=list)
    achievements: list[PlayerAchievement] = Field(default_factory=list)


class EquippedSlot(SteamModel):
    class_id: int = Field(0, alias="class")
    slot: int = 0


class ItemAttribute(SteamModel):
    def_index: int = Field(0, alias="defindex")
    value: Any = None
    float_value: float = 0.0


class InventoryItem(SteamModel):
    id: int
    original_id: int = 0
    def_index: int = Field(0, alias="defindex")
    level: int = 0
    quality: int = 0
    inventory: int = 0
    quantity: int = 0
    origin: int = 0
    equipped: list[EquippedSlot] = Field(default_factory=list)
    flag_cannot_trade: bool = False
    flag_cannot_craft: bool = False
    attributes: list[ItemAttribute] = Field(default_factory=list)


@dataclass(slots=True)
class PlayerItems:
    """バックパックの内容と総スロット数。"""

    items: tuple[InventoryItem, ...]
    num_backpack_slots: int


class SchemaOverview(SteamModel):
    """アイテムが取りうる属性の一覧。下位構造は量が多いため辞書のまま保持する。"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: int = 0
    items_game_url: str = ""
    qualities: dict[str, int] = Field(default_factory=dict)
    origin_names: list[dict[str, Any]] = Field(default_factory=list, alias="originNames")
    attributes: list[dict[str, Any]] = Field(default_factory=list)
    item_sets: list[dict[str, Any]] = Field(default_factory=list)
    attribute_controlled_attached_particles: list[dict[str, Any]] = Field(default_factory=list)
    item_levels: list[dict[str, Any]] = Field(default_factory=list)
    kill_eater_score_types: list[dict[str, Any]] = Field(default_factory=list)
    string_lookups: list[dict[str, Any]] = Field(default_factory=list)


class SchemaItemCapabilities(SteamModel):
    paintable: bool = False
    nameable: bool = False
    can_craft_if_purchased: bool = False
    can_gift_wrap: bool = False
    can_craft_count: bool = False
    can_craft_mark: bool = False
    can_be_restored: bool = False
    strange_parts: bool = False
    can_card_upgrade: bool = False
    can_strangify: bool = False
    can_killstreakify: bool = False
    can_consume: bool = False


class SchemaItemStyle(SteamModel):
    name: str = ""


class SchemaAttribute(SteamModel):
    name: str = ""
    class_name: str = Field("", alias="class")
    value: Any = None


class SchemaItem(SteamModel):
    name: str = ""
    def_index: int = Field(0, alias="defindex")
    item_class: str = ""
    item_type_name: str = ""
    item_name: str = ""
    item_description: str = ""
    proper_name: bool = False
    item_slot: str = ""
    model_player: str | None = None
    item_quality: int = 0
    image_inventory: str | None = None
    min_ilevel: int = 0
    max_ilevel: int = 0
    image_url: str | None = None
    image_url_large: str | None = None
    drop_type: str = ""
    craft_class: str = ""
    craft_material_type: str = ""
    capabilities: SchemaItemCapabilities = Field(default_factory=SchemaItemCapabilities)
    styles: list[SchemaItemStyle] = Field(default_factory=list)
    used_by_classes: list[str] = Field(default_factory=list)
    attributes: list[SchemaAttribute] = Field(default_factory=list)


class StoreMetaData(SteamModel):
    """ストア UI のメタデータ。構造が頻繁に変わるため上位キーのみ型付けする。"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    carousel_data: dict[str, Any] = Field(default_factory=dict)
    tabs: list[dict[str, Any]] = Field(default_factory=list)
    filters: list[dict[str, Any]] = Field(default_factory=list)
    sorting: dict[str, Any] = Field(default_factory=dict)
    dropdown_data: dict[str, Any] = Field(default_factory=dict)
    player_class_data: list[dict[str, Any]] = Field(default_factory=list)
    home_page_data: dict[str, Any] = Field(default_factory=dict)


class SupportedAPIParameter(SteamModel):
    name: str
    type: str = ""
    optional: bool = False
    description: str = ""


class SupportedAPIMethod(SteamModel):
    name: str
    version: int = 0
    http_method: str = Field("", alias="httpmethod")
    parameters: list[SupportedAPIParameter] = Field(default_factory=list)


class SupportedAPIInterface(SteamModel):
    name: str
    methods: list[SupportedAPIMethod] = Field(default_factory=list)


class RecentGame(SteamModel):
    app_id: AppID = Field(alias="appid")
    name: str = ""
    playtime_2weeks: int = 0
    playtime_forever: int = 0
    img_icon_url: str = ""
    img_logo_url: str = ""
    playtime_windows_forever: int = 0
    playtime_mac_forever: int = 0
    playtime_linux_forever: int = 0


class OwnedGame(SteamModel):
    app_id: AppID = Field(alias="appid")
    name: str = ""
    playtime_forever: int = 0
    img_icon_url: str = ""
    img_logo_url: str = ""
    playtime_windows_forever: int = 0
    playtime_mac_forever: int = 0
    playtime_linux_forever: int = 0
    has_community_visible_stats: bool = False
    playtime_2weeks: int = 0

    @property
    def icon_url(self) -> str:
        return MEDIA_IMAGE_URL.format(app_id=self.app_id, hash=self.img_icon_url)

    @property
    def logo_url(self) -> str:
        return MEDIA_IMAGE_URL.format(app_id=self.app_id, hash=self.img_logo_url)


class Badge(SteamModel):
    badge_id: int = Field(alias="badgeid")
    level: int = 0
    completion_time: int = 0
    xp: int = 0
    scarcity: int = 0
    # トレーディングカード由来のバッジのみ
    app_id: int | None = Field(None, alias="appid")
    community_item_id: str | None = Field(None, alias="communityitemid")
    border_color: int | None = None


class BadgeStatus(SteamModel):
    badges: list[Badge] = Field(default_factory=list)
    player_xp: int = 0
    player_level: int = 0
    player_xp_needed_to_level_up: int = 0
    player_xp_needed_current_level: int = 0


class BadgeQuestStatus(SteamModel):
    quest_id: int = Field(alias="questid")
    completed: bool = False


class Asset(SteamModel):
    class_id: str = Field("", alias="classid")
    name: str = ""
    type: str = ""
    tradable: str = ""
    icon_url: str = ""
    background_color: str = ""
    name_color: str = ""
    descriptions: Any = None
    fraud_warnings: Any = Field(None, alias="fraudwarnings")
    actions: Any = None


# --- エンドポイントごとのエンベロープ -------------------------------------------------


class _AppListBody(SteamModel):
    apps: list[App] = Field(default_factory=list)


class AppListEnvelope(SteamModel):
    applist: _AppListBody = Field(default_factory=_AppListBody)


class _PlayersBody(SteamModel):
    players: list[PlayerSummary] = Field(default_factory=list)


class PlayerSummariesEnvelope(SteamModel):
    response: _PlayersBody = Field(default_factory=_PlayersBody)


class PlayerBansEnvelope(SteamModel):
    players: list[PlayerBanState] = Field(default_factory=list)


class _GroupRef(SteamModel):
    gid: GroupID


class _UserGroupListBody(SteamModel):
    success: bool = False
    groups: list[_GroupRef] = Field(default_factory=list)


class UserGroupListEnvelope(SteamModel):
    response: _UserGroupListBody = Field(default_factory=_UserGroupListBody)


class _FriendsBody(SteamModel):
    friends: list[Friend] = Field(default_factory=list)


class FriendListEnvelope(SteamModel):
    friendslist: _FriendsBody = Field(default_factory=_FriendsBody)


class _ServersAtAddressBody(SteamModel):
    success: bool = False
    servers: list[ServerAtAddress] = Field(default_factory=list)


class ServersAtAddressEnvelope(SteamModel):
    response: _ServersAtAddressBody = Field(default_factory=_ServersAtAddressBody)


class _ServerListBody(SteamModel):
    servers: list[Server] = Field(default_factory=list)


class ServerListEnvelope(SteamModel):
    response: _ServerListBody = Field(default_factory=_ServerListBody)


class VersionCheckEnvelope(SteamModel):
    response: VersionCheckInfo = Field(default_factory=VersionCheckInfo)


class _AppNewsBody(SteamModel):
    app_id: int = Field(0, alias="appid")
    news_items: list[NewsItem] = Field(default_factory=list, alias="newsitems")
    count: int = 0


class AppNewsEnvelope(SteamModel):
    appnews: _AppNewsBody = Field(default_factory=_AppNewsBody)


class _CurrentPlayersBody(SteamModel):
    player_count: int = 0
    result: int = 0


class CurrentPlayersEnvelope(SteamModel):
    response: _CurrentPlayersBody = Field(default_factory=_CurrentPlayersBody)


class PlayerStatsEnvelope(SteamModel):
    playerstats: PlayerStats


class _PlayerItemsBody(SteamModel):
    status: int = 0
    num_backpack_slots: int = 0
    items: list[InventoryItem] = Field(default_factory=list)


class PlayerItemsEnvelope(SteamModel):
    result: _PlayerItemsBody = Field(default_factory=_PlayerItemsBody)


class SchemaOverviewEnvelope(SteamModel):
    result: SchemaOverview = Field(default_factory=SchemaOverview)


class SchemaItemsPage(SteamModel):
    status: int = 0
    items_game_url: str = ""
    items: list[SchemaItem] = Field(default_factory=list)
    next: int = 0


class SchemaItemsEnvelope(SteamModel):
    result: SchemaItemsPage = Field(default_factory=SchemaItemsPage)


class _SchemaURLBody(SteamModel):
    status: int = 0
    items_game_url: str = ""


class SchemaURLEnvelope(SteamModel):
    result: _SchemaURLBody = Field(default_factory=_SchemaURLBody)


class StoreMetaDataEnvelope(SteamModel):
    result: StoreMetaData = Field(default_factory=StoreMetaData)


class _APIListBody(SteamModel):
    interfaces: list[SupportedAPIInterface] = Field(default_factory=list)


class SupportedAPIListEnvelope(SteamModel):
    apilist: _APIListBody = Field(default_factory=_APIListBody)


class _VanityBody(SteamModel):
    steam_id: SteamID64 | None = Field(None, alias="steamid")
    success: int = 0
    message: str = ""


class VanityURLEnvelope(SteamModel):
    response: _VanityBody = Field(default_factory=_VanityBody)


class _SteamLevelBody(SteamModel):
    player_level: int = 0


class SteamLevelEnvelope(SteamModel):
    response: _SteamLevelBody = Field(default_factory=_SteamLevelBody)


class _RecentGamesBody(SteamModel):
    total_count: int = 0
    games: list[RecentGame] = Field(default_factory=list)


class RecentGamesEnvelope(SteamModel):
    response: _RecentGamesBody = Field(default_factory=_RecentGamesBody)


class _OwnedGamesBody(SteamModel):
    game_count: int = 0
    games: list[OwnedGame] = Field(default_factory=list)


class OwnedGamesEnvelope(SteamModel):
    response: _OwnedGamesBody = Field(default_factory=_OwnedGamesBody)


class BadgesEnvelope(SteamModel):
    response: BadgeStatus = Field(default_factory=BadgeStatus)


class _BadgeProgressBody(SteamModel):
    quests: list[BadgeQuestStatus] = Field(default_factory=list)


class BadgeProgressEnvelope(SteamModel):
    response: _BadgeProgressBody = Field(default_factory=_BadgeProgressBody)


class AssetClassInfoEnvelope(SteamModel):
    """`result` はクラス ID をキーにした辞書と `success` フラグの混在。

    アセットはデコード時に検証されるため、形状が不正なら `DecodeError` になる。
    失敗時は `success` と並んで `error` 文字列が返る。
    """

    result: dict[str, Asset | bool | str] = Field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.result.get("success") is True

    def assets(self) -> list[Asset]:
        return [value for value in self.result.values() if isinstance(value, Asset)]


__all__ = [
    "App",
    "Asset",
    "Badge",
    "BadgeQuestStatus",
    "BadgeStatus",
    "EconBanState",
    "Friend",
    "InventoryItem",
    "NewsItem",
    "NewsOptions",
    "OwnedGame",
    "PersonaState",
    "PlayerBanState",
    "PlayerItems",
    "PlayerStats",
    "PlayerSummary",
    "ProfileState",
    "RecentGame",
    "SchemaItem",
    "SchemaItemsPage",
    "SchemaOverview",
    "Server",
    "ServerAtAddress",
    "SteamModel",
    "StoreMetaData",
    "SupportedAPIInterface",
    "SupportedAPIMethod",
    "SupportedAPIParameter",
    "VersionCheckInfo",
    "VisibilityState",
]
