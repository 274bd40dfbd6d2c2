class DisperseException(ValueError):
    pass


class InvalidAmount(DisperseException):
    pass


class InvalidTokenAddress(DisperseException):
    pass


class InvalidRange(DisperseException):
    pass


class InvalidPrecision(DisperseException):
    pass


class ContractNotVerified(DisperseException):
    pass


class UserRejected(DisperseException):
    pass


class ChainMismatch(DisperseException):
    pass


UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

error_msg_to_exception: dict[str, type[DisperseException]] = {
    # EIP-1193 code 4001 phrasing used by injected wallets
    "User rejected": UserRejected,
    # MetaMask legacy signing
    "User denied": UserRejected,
}


def format_error(error) -> str:
    """
    :return: Short human-readable message for an external-call failure
    """
    if isinstance(error, BaseException):
        short_message = getattr(error, "short_message", None) or getattr(error, "message", None)
        if isinstance(short_message, str) and short_message:
            return short_message
        return str(error) or UNEXPECTED_ERROR_MESSAGE
    if isinstance(error, str):
        return error
    return UNEXPECTED_ERROR_MESSAGE


def exception_from_error(error) -> DisperseException | None:
    if isinstance(error, DisperseException):
        return error
    if not isinstance(error, BaseException):
        return None

    message = str(error)
    for error_msg, exception_class in error_msg_to_exception.items():
        if error_msg in message:
            return exception_class(message)
    return None


def is_user_rejection(error) -> bool:
    return isinstance(exception_from_error(error), UserRejected)
