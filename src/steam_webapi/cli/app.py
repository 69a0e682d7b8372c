from __future__ import annotations

import typer

from steam_webapi.cli.commands import webapi
from steam_webapi.shared.config import get_settings
from steam_webapi.shared.logging import configure_logging

app = typer.Typer(help="Steam Web API クライアントの CLI")

app.add_typer(webapi.app, name="webapi", help="Steam Web API の参照系コマンド")


def main() -> None:
    """エントリポイント。ログレベルは `LOG_LEVEL` 環境変数で切り替える。"""

    configure_logging(get_settings().log_level)
    app()


if __name__ == "__main__":  # pragma: no cover - CLI エントリ
    main()
