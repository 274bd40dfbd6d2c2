from .contract import Contract
from .erc20 import ERC20, load_token_info, validate_token_address

__all__ = [
    "Contract",
    "ERC20",
    "load_token_info",
    "validate_token_address",
]
