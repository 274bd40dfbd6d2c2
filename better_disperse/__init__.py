from .enums import AppState, CurrencyMode, WalletStatus
from .generator import (
    generate_random_amount,
    generate_addresses_with_random_amounts,
    generate_addresses_with_uniform_amount,
)
from .ledger import Ledger
from .locator import BytecodeCache, ContractLocator
from .models import Recipient, TokenInfo, CandidateAddress, VerifiedAddress, SessionSignals
from .parser import parse_recipients
from .session import Session, reduce_app_state


__all__ = [
    "AppState",
    "CurrencyMode",
    "WalletStatus",
    "generate_random_amount",
    "generate_addresses_with_random_amounts",
    "generate_addresses_with_uniform_amount",
    "Ledger",
    "BytecodeCache",
    "ContractLocator",
    "Recipient",
    "TokenInfo",
    "CandidateAddress",
    "VerifiedAddress",
    "SessionSignals",
    "parse_recipients",
    "Session",
    "reduce_app_state",
]
