from __future__ import annotations

import pytest

from steam_webapi.shared.exceptions import (
    InvalidStatusCodeError,
    NoAPIKeyError,
    RateLimitedError,
    ServiceUnavailableError,
    WebAPIError,
    raise_for_status,
)


def test_raise_for_status_accepts_ok() -> None:
    raise_for_status(200)


@pytest.mark.parametrize(
    ("status", "error"),
    [(503, ServiceUnavailableError), (429, RateLimitedError), (201, InvalidStatusCodeError)],
)
def test_raise_for_status_classifies(status: int, error: type[WebAPIError]) -> None:
    with pytest.raises(error) as exc_info:
        raise_for_status(status)

    assert exc_info.value.status_code == status
    assert isinstance(exc_info.value, WebAPIError)


def test_default_messages() -> None:
    assert "steamcommunity.com/dev/apikey" in str(NoAPIKeyError())
    assert str(InvalidStatusCodeError(418)) == "Invalid status code received: 418"
    assert str(RateLimitedError("slow down")) == "slow down"
