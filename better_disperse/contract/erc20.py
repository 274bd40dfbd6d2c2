import asyncio
from typing import TYPE_CHECKING

from eth_typing import ChecksumAddress, BlockIdentifier
from web3.types import Wei

from ._abi import ERC20_ABI
from .contract import Contract
from ..exceptions import InvalidTokenAddress
from ..models import TokenInfo
from ..utils.eth import is_valid_address

if TYPE_CHECKING:
    from ..chain import Chain


class ERC20(Contract):
    def __init__(
            self,
            chain: "Chain",
            address: ChecksumAddress | str,
            abi=None,
    ):
        abi = abi or ERC20_ABI
        super().__init__(chain, address, abi)

    async def name(self) -> str:
        return await self.functions.name().call()

    async def symbol(self) -> str:
        return await self.functions.symbol().call()

    async def decimals(self) -> int:
        return await self.functions.decimals().call()

    async def get_balance(
            self,
            address: ChecksumAddress | str,
            block_identifier: BlockIdentifier = "latest",
    ) -> Wei:
        return await self.functions.balanceOf(address).call(block_identifier=block_identifier)

    async def get_allowance(
            self,
            owner: ChecksumAddress | str,
            spender: ChecksumAddress | str,
            block_identifier: BlockIdentifier = "latest",
    ) -> Wei:
        return await self.functions.allowance(owner, spender).call(block_identifier=block_identifier)


def validate_token_address(address: str) -> str:
    """
    :raises: InvalidTokenAddress
    """
    if not is_valid_address(address):
        raise InvalidTokenAddress("invalid token address")
    return address


async def load_token_info(
        chain: "Chain",
        address: str,
        account: ChecksumAddress | str = None,
        spender: ChecksumAddress | str = None,
) -> TokenInfo:
    """
    Read token metadata, plus the balance of `account`
    and its allowance for `spender` when they are given.

    :raises: InvalidTokenAddress
    """
    token = ERC20(chain, validate_token_address(address))
    name, symbol, decimals = await asyncio.gather(token.name(), token.symbol(), token.decimals())

    balance = allowance = None
    if account is not None:
        balance = await token.get_balance(account)
        if spender is not None:
            allowance = await token.get_allowance(account, spender)

    return TokenInfo(
        address=token.address,
        name=name,
        symbol=symbol,
        decimals=decimals,
        balance=balance,
        allowance=allowance,
    )
