from typing import Iterable

from pydantic import BaseModel

from .enums import CurrencyMode
from .models import Recipient, TokenInfo
from .utils.eth import format_units

NEEDS_ALLOWANCE = "needs allowance"
TOTAL_EXCEEDS_BALANCE = "total exceeds balance"

NATIVE_DECIMALS = 18


def total_amount(recipients: Iterable[Recipient]) -> int:
    return sum((recipient.value for recipient in recipients), 0)


def get_balance(
        sending: CurrencyMode | None,
        token: TokenInfo,
        native_balance: int | None = None,
) -> int:
    if sending == CurrencyMode.TOKEN:
        return token.balance or 0
    return native_balance or 0


def left_amount(
        recipients: Iterable[Recipient],
        sending: CurrencyMode | None,
        token: TokenInfo,
        native_balance: int | None = None,
) -> int:
    """
    :return: Balance minus total, negative when funds are insufficient
    """
    return get_balance(sending, token, native_balance) - total_amount(recipients)


def effective_allowance(allowance: int | None, token: TokenInfo) -> int:
    """
    :param allowance: Freshly queried on-chain allowance, if any
    :return: Fresh allowance, else the one cached on the token, else zero
    """
    if allowance is not None:
        return allowance
    return token.allowance or 0


def disperse_message(
        recipients: Iterable[Recipient],
        sending: CurrencyMode | None,
        token: TokenInfo,
        native_balance: int | None = None,
) -> str | None:
    recipients = list(recipients)
    if sending == CurrencyMode.TOKEN and (token.allowance or 0) < total_amount(recipients):
        return NEEDS_ALLOWANCE
    if left_amount(recipients, sending, token, native_balance) < 0:
        return TOTAL_EXCEEDS_BALANCE
    return None


def get_decimals(sending: CurrencyMode | None, token: TokenInfo) -> int:
    if sending == CurrencyMode.TOKEN and token.decimals is not None:
        return token.decimals
    return NATIVE_DECIMALS


def get_symbol(sending: CurrencyMode | None, token: TokenInfo, native_symbol: str = "ETH") -> str:
    if sending == CurrencyMode.TOKEN:
        return token.symbol or "???"
    return native_symbol


def format_balance(balance: int, decimals: int, symbol: str) -> str:
    return f"{format_units(balance, decimals)} {symbol}"


class Ledger(BaseModel):
    total: int
    balance: int
    left: int
    allowance: int
    decimals: int
    symbol: str
    message: str | None = None

    @property
    def is_eligible(self) -> bool:
        return self.message is None

    @classmethod
    def calculate(
            cls,
            recipients: Iterable[Recipient],
            sending: CurrencyMode | None,
            token: TokenInfo,
            native_balance: int | None = None,
            allowance: int | None = None,
            native_symbol: str = "ETH",
    ) -> "Ledger":
        recipients = list(recipients)
        allowance = effective_allowance(allowance, token)
        token = token.model_copy(update={"allowance": allowance})
        return cls(
            total=total_amount(recipients),
            balance=get_balance(sending, token, native_balance),
            left=left_amount(recipients, sending, token, native_balance),
            allowance=allowance,
            decimals=get_decimals(sending, token),
            symbol=get_symbol(sending, token, native_symbol),
            message=disperse_message(recipients, sending, token, native_balance),
        )
