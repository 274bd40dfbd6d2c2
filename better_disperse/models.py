from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import CurrencyMode, WalletStatus


class NativeCurrency(BaseModel):
    name: str = "Ether"
    symbol: str = "ETH"
    decimals: int = 18


class Recipient(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str = Field(pattern=r"^0x[0-9a-f]{40}$")
    value: int = Field(ge=0)

    @field_validator("address", mode="before")
    @classmethod
    def lowercase_address(cls, address):
        return address.lower() if isinstance(address, str) else address


class TokenInfo(BaseModel):
    address: str | None = None
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    balance: int | None = None
    allowance: int | None = None

    @property
    def is_complete(self) -> bool:
        """
        :return: True if the token can be used for sending
        """
        return bool(self.address) and self.decimals is not None and bool(self.symbol)


class CandidateAddress(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    label: str


# A candidate confirmed by bytecode on the current chain
VerifiedAddress = CandidateAddress


class SessionSignals(BaseModel):
    model_config = ConfigDict(extra="forbid")

    provider_available: bool = True
    status: WalletStatus = WalletStatus.DISCONNECTED
    chain_id: int | None = None
    is_chain_supported: bool = False
    is_contract_deployed: bool = False
    is_bytecode_loading: bool = False
    has_contract_address: bool = False
    sending: CurrencyMode | None = None
    token: TokenInfo = Field(default_factory=TokenInfo)

    @property
    def is_connected(self) -> bool:
        return self.status == WalletStatus.CONNECTED

    @property
    def is_currency_specified(self) -> bool:
        if self.sending == CurrencyMode.ETHER:
            return True
        if self.sending == CurrencyMode.TOKEN:
            return self.token.is_complete
        return False
