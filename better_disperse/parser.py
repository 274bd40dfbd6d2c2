"""Recipient text grammar.

One entry is a ``0x``-prefixed 40 hex digit address, one or more separators
(comma, whitespace, ``=``, ``:`` or ``;``) and a non-negative decimal amount::

    0x314ab97b76e39d63c78d5c86c2daf8eaa306b182 3.141592
    0x271bffabd0f79b8bd4d7a1c245b7ec5b576ea98a,2.7182
    0x141ca95b6177615fb1417cf70e930e102bf8f584=1.41421

Matches are collected over the whole text, not per line.
"""
import logging
import re
from typing import Iterator

from .exceptions import InvalidAmount
from .models import Recipient
from .utils.eth import is_valid_address, parse_units

RECIPIENT_PATTERN = re.compile(r"(0x[0-9a-fA-F]{40})[,\s=:;]+([0-9]+(?:\.[0-9]+)?)")

logger = logging.getLogger(__name__)


def iter_recipient_matches(text: str) -> Iterator[tuple[str, str]]:
    """
    :return: Yield (lowercased address, amount text) pairs in the order they appear
    """
    for match in RECIPIENT_PATTERN.finditer(text):
        yield match.group(1).lower(), match.group(2)


def parse_recipients(
        text: str,
        decimals: int,
        *,
        logger: logging.Logger = logger,
) -> list[Recipient]:
    recipients = []
    for address, amount in iter_recipient_matches(text):
        if not is_valid_address(address):
            logger.debug("Skipping invalid address %s", address)
            continue

        try:
            value = parse_units(amount, decimals)
        except InvalidAmount as e:
            logger.debug("Skipping %s: %s", address, e)
            continue

        recipients.append(Recipient(address=address, value=value))

    logger.debug("Found %d recipients", len(recipients))
    return recipients
