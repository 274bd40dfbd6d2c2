import random
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Iterable

from .exceptions import InvalidPrecision, InvalidRange

MAX_DECIMAL_PLACES = 18


def _format_amount(amount: float | Decimal | str, decimal_places: int) -> str:
    quantum = Decimal(1).scaleb(-decimal_places)
    amount = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP, context=Context(prec=100))
    return format(amount, "f")


def _check_decimal_places(decimal_places: int):
    if not 0 <= decimal_places <= MAX_DECIMAL_PLACES:
        raise InvalidPrecision(f"Decimal places must be between 0 and {MAX_DECIMAL_PLACES}")


def generate_random_amount(
        min_amount: float,
        max_amount: float,
        decimal_places: int,
        *,
        rng: random.Random = None,
) -> str:
    """
    :return: Uniform draw from [min_amount, max_amount) rounded to exactly `decimal_places` digits
    :raises: InvalidRange, InvalidPrecision
    """
    if min_amount >= max_amount:
        raise InvalidRange("Minimum amount must be less than maximum amount")
    _check_decimal_places(decimal_places)

    rng = rng or random
    amount = rng.random() * (max_amount - min_amount) + min_amount
    return _format_amount(amount, decimal_places)


def generate_addresses_with_random_amounts(
        addresses: Iterable[str],
        min_amount: float,
        max_amount: float,
        decimal_places: int,
        *,
        rng: random.Random = None,
) -> str:
    return "\n".join(
        f"{address} {generate_random_amount(min_amount, max_amount, decimal_places, rng=rng)}"
        for address in addresses
    )


def generate_addresses_with_uniform_amount(
        addresses: Iterable[str],
        amount: float | Decimal | str,
        decimal_places: int,
) -> str:
    _check_decimal_places(decimal_places)
    formatted_amount = _format_amount(amount, decimal_places)
    return "\n".join(f"{address} {formatted_amount}" for address in addresses)
