import random
from decimal import Decimal

import pytest

from better_disperse.exceptions import InvalidPrecision, InvalidRange
from better_disperse.generator import (
    generate_addresses_with_random_amounts,
    generate_addresses_with_uniform_amount,
    generate_random_amount,
)
from better_disperse.parser import parse_recipients

ADDRESSES = [
    "0x314ab97b76e39d63c78d5c86c2daf8eaa306b182",
    "0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a",
    "0x141ca95b6177615fb1417cf70e930e102bf8f584",
]


def test_random_amount_within_range():
    rng = random.Random(42)
    for _ in range(200):
        amount = generate_random_amount(0.1, 0.3, 4, rng=rng)

        assert Decimal("0.1") <= Decimal(amount) <= Decimal("0.3")
        assert len(amount.split(".")[1]) == 4


def test_random_amount_zero_decimal_places():
    amount = generate_random_amount(1, 10, 0, rng=random.Random(1))

    assert "." not in amount
    assert 1 <= int(amount) <= 10


def test_random_amount_rounds():
    class FixedRandom(random.Random):
        def random(self):
            return 0.5

    # 0 + 0.5 * (0.0126 - 0) = 0.0063, rounds up to 0.01 rather than truncating to 0.00
    assert generate_random_amount(0, 0.0126, 2, rng=FixedRandom()) == "0.01"


def test_invalid_range():
    with pytest.raises(InvalidRange):
        generate_random_amount(5, 1, 2)
    with pytest.raises(InvalidRange):
        generate_random_amount(1, 1, 2)


@pytest.mark.parametrize("decimal_places", [-1, 19])
def test_invalid_precision(decimal_places):
    with pytest.raises(InvalidPrecision):
        generate_random_amount(1, 5, decimal_places)


def test_random_amounts_for_addresses():
    text = generate_addresses_with_random_amounts(ADDRESSES, 0.1, 0.3, 2, rng=random.Random(7))
    lines = text.split("\n")

    assert len(lines) == len(ADDRESSES)
    for address, line in zip(ADDRESSES, lines):
        line_address, amount = line.split(" ")
        assert line_address == address
        assert Decimal("0.1") <= Decimal(amount) <= Decimal("0.3")


def test_uniform_amount_for_addresses():
    text = generate_addresses_with_uniform_amount(ADDRESSES, 0.5, 3)

    assert text.split("\n") == [f"{address} 0.500" for address in ADDRESSES]


def test_uniform_amount_invalid_precision():
    with pytest.raises(InvalidPrecision):
        generate_addresses_with_uniform_amount(ADDRESSES, 1, 19)


def test_uniform_amount_parses_back():
    text = generate_addresses_with_uniform_amount(ADDRESSES, 0.25, 2)

    recipients = parse_recipients(text, 18)

    assert [r.address for r in recipients] == ADDRESSES
    assert all(r.value == 250000000000000000 for r in recipients)


def test_random_amounts_parse_back():
    text = generate_addresses_with_random_amounts(ADDRESSES, 1, 2, 6, rng=random.Random(3))

    recipients = parse_recipients(text, 6)

    assert [r.address for r in recipients] == ADDRESSES
    assert all(1000000 <= r.value <= 2000000 for r in recipients)
