from __future__ import annotations

import logging

import pytest

from steam_webapi.shared.logging import REDACTED, _coerce_level, get_logger, redact_secrets


@pytest.mark.parametrize(
    ("level", "expected"),
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (logging.ERROR, logging.ERROR)],
)
def test_coerce_level(level: str | int, expected: int) -> None:
    assert _coerce_level(level) == expected


def test_coerce_level_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unsupported log level"):
        _coerce_level("loud")


def test_get_logger_binds_initial_values() -> None:
    logger = get_logger("tests.logging", request_id="abc")

    assert logger is not None
    assert hasattr(logger, "info")


def test_redact_secrets_masks_api_key() -> None:
    event = {"event": "webapi_request", "key": "0123456789ABCDEF0123456789ABCDEF", "path": "/x"}

    result = redact_secrets(None, "info", event)

    assert result["key"] == REDACTED
    assert result["path"] == "/x"


def test_redact_secrets_keeps_empty_values() -> None:
    assert redact_secrets(None, "info", {"event": "e", "api_key": ""})["api_key"] == ""
