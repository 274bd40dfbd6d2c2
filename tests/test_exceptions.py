import pytest

from better_disperse.exceptions import (
    UNEXPECTED_ERROR_MESSAGE,
    UserRejected,
    exception_from_error,
    format_error,
    is_user_rejection,
)


class RpcError(Exception):
    def __init__(self, message, short_message=None):
        super().__init__(message)
        self.short_message = short_message


def test_format_error_prefers_short_message():
    assert format_error(RpcError("Full error message", "Short message")) == "Short message"


def test_format_error_without_short_message():
    assert format_error(RpcError("Full error message")) == "Full error message"


def test_format_error_regular_exception():
    assert format_error(ValueError("Regular error")) == "Regular error"


def test_format_error_string():
    assert format_error("String error") == "String error"


@pytest.mark.parametrize("error", [None, 123, {}, Exception()])
def test_format_error_unknown(error):
    assert format_error(error) == UNEXPECTED_ERROR_MESSAGE


@pytest.mark.parametrize("message", [
    "User rejected the request.",
    "MetaMask Tx Signature: User denied transaction signature.",
])
def test_user_rejection(message):
    error = RpcError(message)

    assert is_user_rejection(error)
    assert isinstance(exception_from_error(error), UserRejected)


@pytest.mark.parametrize("error", [Exception("Network error"), "User rejected", None])
def test_not_user_rejection(error):
    assert not is_user_rejection(error)
