import itertools

import pytest

from better_disperse.exceptions import InvalidAmount
from better_disperse.ledger import total_amount
from better_disperse.parser import iter_recipient_matches, parse_recipients
from better_disperse.utils.eth import format_units, parse_units

TEXT = """0x314ab97b76e39d63c78d5c86c2daf8eaa306b182 3.141592
0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a,2.7182
0x141ca95b6177615fb1417cf70e930e102bf8f584=1.41421"""


def test_space_separator():
    recipients = parse_recipients("0x314ab97b76e39d63c78d5c86c2daf8eaa306b182 3.141592", 18)

    assert len(recipients) == 1
    assert recipients[0].address == "0x314ab97b76e39d63c78d5c86c2daf8eaa306b182"
    assert recipients[0].value == 3141592000000000000


@pytest.mark.parametrize("separator", [",", "=", ":", ";", "\t", " , ", "=\n"])
def test_separators(separator):
    recipients = parse_recipients(f"0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a{separator}2.7182", 18)

    assert [r.value for r in recipients] == [2718200000000000000]


def test_multiple_lines_keep_order():
    recipients = parse_recipients(TEXT, 18)

    assert [r.address for r in recipients] == [
        "0x314ab97b76e39d63c78d5c86c2daf8eaa306b182",
        "0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a",
        "0x141ca95b6177615fb1417cf70e930e102bf8f584",
    ]
    assert [r.value for r in recipients] == [3141592000000000000, 2718200000000000000, 1414210000000000000]


def test_decimals():
    text = "0x314ab97b76e39d63c78d5c86c2daf8eaa306b182 100"

    assert parse_recipients(text, 6)[0].value == 100000000
    assert parse_recipients(text, 18)[0].value == 100000000000000000000
    assert parse_recipients(text, 0)[0].value == 100


def test_skips_invalid_lines():
    text = """0x314ab97b76e39d63c78d5c86c2daf8eaa306b182 3.141592
invalid line
0x12345 1.0
0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a,2.7182"""

    recipients = parse_recipients(text, 18)

    assert [r.address for r in recipients] == [
        "0x314ab97b76e39d63c78d5c86c2daf8eaa306b182",
        "0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a",
    ]


def test_excess_precision_drops_only_that_entry():
    text = """0x314ab97b76e39d63c78d5c86c2daf8eaa306b182 1.1234567
0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a 2.5"""

    recipients = parse_recipients(text, 6)

    assert len(recipients) == 1
    assert recipients[0].address == "0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a"
    assert recipients[0].value == 2500000


def test_empty_input():
    assert parse_recipients("", 18) == []
    assert parse_recipients("nothing to see here", 18) == []


def test_lowercases_addresses():
    recipients = parse_recipients("0x314AB97B76E39D63C78D5C86C2DAF8EAA306B182 1", 18)

    assert recipients[0].address == "0x314ab97b76e39d63c78d5c86c2daf8eaa306b182"


def test_duplicates_are_kept():
    text = "0x314ab97b76e39d63c78d5c86c2daf8eaa306b182 1\n0x314ab97b76e39d63c78d5c86c2daf8eaa306b182 2"

    recipients = parse_recipients(text, 18)

    assert len(recipients) == 2
    assert total_amount(recipients) == 3 * 10 ** 18


def test_pair_may_span_lines():
    # The scan is not line-anchored: an address alone on a line pairs with the next line's number
    text = "0x314ab97b76e39d63c78d5c86c2daf8eaa306b182\n5"

    recipients = parse_recipients(text, 18)

    assert [(r.address, r.value) for r in recipients] == [
        ("0x314ab97b76e39d63c78d5c86c2daf8eaa306b182", 5 * 10 ** 18),
    ]


def test_tokenizer_is_restartable():
    first = list(iter_recipient_matches(TEXT))
    second = list(iter_recipient_matches(TEXT))

    assert first == second
    assert len(first) == 3


def test_total_is_order_independent():
    recipients = parse_recipients(TEXT, 18)
    expected = sum(r.value for r in recipients)

    for permutation in itertools.permutations(recipients):
        assert total_amount(permutation) == expected


def test_parse_units():
    assert parse_units("3.141592", 18) == 3141592000000000000
    assert parse_units("0", 18) == 0
    assert parse_units("7", 0) == 7
    assert parse_units("0.000001", 6) == 1


@pytest.mark.parametrize("amount", ["1.0000001", "1e5", "1,000", "-1", "abc", ""])
def test_parse_units_rejects(amount):
    with pytest.raises(InvalidAmount):
        parse_units(amount, 6)


def test_format_units():
    assert format_units(1500000000000000000, 18) == "1.5"
    assert format_units(1000000, 6) == "1"
    assert format_units(0, 18) == "0"
    assert format_units(-5000, 3) == "-5"
    assert format_units(42, 0) == "42"
