"""Device token shape tests."""

import pytest

from photoquest.middleware.device_token import is_valid_device_token, mint_device_token


def test_minted_token_is_valid() -> None:
    assert is_valid_device_token(mint_device_token())


@pytest.mark.parametrize(
    "token",
    [None, "", "abc", "A" * 32, "g" * 32, "0" * 31, "0" * 33, "x" * 100, "0" * 32 + "\n"],
)
def test_malformed_tokens_rejected(token) -> None:
    assert not is_valid_device_token(token)
