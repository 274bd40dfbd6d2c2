import re

from eth_utils import is_address

from ..exceptions import InvalidAmount

AMOUNT_PATTERN = re.compile(r"^([0-9]+)(?:\.([0-9]+))?$")


def is_valid_address(address: str) -> bool:
    """
    :return: True for a 0x-prefixed, 40 hex digit address in any letter case
    """
    return isinstance(address, str) and address.startswith("0x") and is_address(address.lower())


def parse_units(amount: str, decimals: int) -> int:
    """
    Exact conversion of a decimal string into the smallest currency unit.

    :raises: InvalidAmount if the text is not a plain decimal
        or carries more fractional digits than `decimals`
    """
    match = AMOUNT_PATTERN.match(amount.strip())
    if match is None:
        raise InvalidAmount(f"Not a decimal amount: {amount!r}")

    integer_part, fraction_part = match.group(1), match.group(2) or ""
    if len(fraction_part) > decimals:
        raise InvalidAmount(f"Amount {amount!r} has more than {decimals} decimal places")

    return int(integer_part) * 10 ** decimals + int(fraction_part.ljust(decimals, "0") or "0")


def format_units(value: int, decimals: int) -> str:
    """
    Inverse of `parse_units`, without trailing zeros: 1500000 with 6 decimals is "1.5"
    """
    sign = "-" if value < 0 else ""
    integer_part, fraction_part = divmod(abs(value), 10 ** decimals)
    fraction = str(fraction_part).rjust(decimals, "0").rstrip("0") if decimals else ""
    if fraction:
        return f"{sign}{integer_part}.{fraction}"
    return f"{sign}{integer_part}"
