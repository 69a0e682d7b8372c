from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from steam_webapi.core.steamid import parse_group_id, parse_steam_id64
from steam_webapi.infra.webapi import (
    App,
    PlayerSummary,
    SchemaItem,
    SteamWebAPIClientProtocol,
    build_webapi_client,
)
from steam_webapi.shared.exceptions import (
    RateLimitedError,
    ServiceUnavailableError,
    WebAPIError,
)
from steam_webapi.shared.logging import get_logger
from steam_webapi.shared.types import AppID

T = TypeVar("T")


class OutputFormat(str, Enum):
    """出力形式。"""

    TABLE = "table"
    JSON = "json"


app = typer.Typer(help="Steam Web API の参照コマンド")

OutputOption = Annotated[
    OutputFormat,
    typer.Option(
        "--output",
        "-f",
        case_sensitive=False,
        help="出力形式(table/json)",
    ),
]


def _run(operation: Callable[[SteamWebAPIClientProtocol], Awaitable[T]], *, logger) -> T:
    """クライアントを構築してコルーチンを実行し、Web API 例外を終了コードへ変換する。"""

    async def _invoke() -> T:
        client = build_webapi_client(logger=logger)
        try:
            return await operation(client)
        finally:
            await client.aclose()

    try:
        return asyncio.run(_invoke())
    except (RateLimitedError, ServiceUnavailableError) as exc:
        logger.warning("Steam Web API unavailable", error=str(exc))
        typer.echo("Steam Web API が一時的に利用できません。時間をおいて再実行してください。")
        raise typer.Exit(code=2) from exc
    except WebAPIError as exc:
        logger.error("Steam Web API リクエストに失敗", error=str(exc))
        typer.echo(f"Steam Web API の呼び出しに失敗しました: {exc}")
        raise typer.Exit(code=1) from exc


def _console() -> Console:
    return Console(force_terminal=False, color_system=None)


def _render_json(payload: object) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _render_apps(apps: Iterable[App]) -> None:
    table = Table(title="Steam Apps")
    table.add_column("AppID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    for item in apps:
        table.add_row(str(item.app_id), item.name)
    _console().print(table)


def _render_summaries(players: Iterable[PlayerSummary]) -> None:
    table = Table(title="Player Summaries")
    table.add_column("SteamID", style="cyan", no_wrap=True)
    table.add_column("Persona", style="bold")
    table.add_column("State")
    table.add_column("Visibility")
    table.add_column("Profile")
    for player in players:
        table.add_row(
            str(player.steam_id),
            player.persona_name,
            player.persona_state.name.lower(),
            player.community_visibility_state.name.lower(),
            player.profile_url or "-",
        )
    _console().print(table)


def _render_schema_items(items: Iterable[SchemaItem]) -> None:
    table = Table(title="Schema Items")
    table.add_column("DefIndex", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Class")
    table.add_column("Slot")
    for item in items:
        table.add_row(
            str(item.def_index),
            item.item_name or item.name,
            item.item_class,
            item.item_slot or "-",
        )
    _console().print(table)


@app.command()
def apps(
    limit: Annotated[int, typer.Option("--limit", "-l", min=0, help="表示件数 (0 で全件)")] = 20,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """公開アプリの一覧を表示する。"""

    logger = get_logger("cli.webapi.apps")
    result = _run(lambda client: client.get_app_list(), logger=logger)
    selected = result[:limit] if limit > 0 else result
    logger.info("アプリ一覧の取得完了", total=len(result), shown=len(selected))

    if output is OutputFormat.JSON:
        _render_json([item.model_dump(mode="json") for item in selected])
    else:
        _render_apps(selected)


@app.command()
def summaries(
    steam_ids: Annotated[list[str], typer.Argument(help="SteamID64 (最大 100 件)")],
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """プレイヤー概要を表示する。"""

    logger = get_logger("cli.webapi.summaries", count=len(steam_ids))
    try:
        ids = [parse_steam_id64(value) for value in steam_ids]
    except WebAPIError as exc:
        typer.echo(f"SteamID が不正です: {exc}")
        raise typer.Exit(code=1) from exc

    players = _run(lambda client: client.get_player_summaries(ids), logger=logger)
    if output is OutputFormat.JSON:
        _render_json([player.model_dump(mode="json") for player in players])
    else:
        _render_summaries(players)


@app.command()
def resolve(
    query: Annotated[str, typer.Argument(help="バニティ名またはプロフィール URL")],
) -> None:
    """バニティ名・プロフィール URL を SteamID64 に解決する。"""

    logger = get_logger("cli.webapi.resolve")
    steam_id = _run(lambda client: client.resolve_vanity_url(query), logger=logger)
    typer.echo(str(steam_id))


@app.command("group-members")
def group_members(
    group_id: Annotated[str, typer.Argument(help="グループの 64bit ID")],
) -> None:
    """グループの全メンバーの SteamID64 を 1 行ずつ表示する。"""

    logger = get_logger("cli.webapi.group_members", group_id=group_id)
    try:
        gid = parse_group_id(group_id)
    except WebAPIError as exc:
        typer.echo(f"グループ ID が不正です: {exc}")
        raise typer.Exit(code=1) from exc

    members = _run(lambda client: client.get_group_members(gid), logger=logger)
    for member in members:
        typer.echo(str(member))


@app.command("schema-items")
def schema_items(
    app_id: Annotated[int, typer.Argument(help="対象アプリの AppID (例: 440)")],
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """アイテムスキーマを表示する。"""

    logger = get_logger("cli.webapi.schema_items", app_id=app_id)
    items = _run(lambda client: client.get_schema_items(AppID(app_id)), logger=logger)

    if output is OutputFormat.JSON:
        _render_json([item.model_dump(mode="json") for item in items])
    else:
        _render_schema_items(items)
