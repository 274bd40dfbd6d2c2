from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .models import CandidateAddress, NativeCurrency
from .locator import default_candidates
from .utils.eth import is_valid_address
from .utils.file import load_toml

LEGACY_DISPERSE_ADDRESS = "0xD152f549545093347A162Dce210e7293f1452150"


class Deployment(BaseModel):
    legacy_address: str | None = LEGACY_DISPERSE_ADDRESS
    createx_address: str | None = None
    # Runtime bytecode of the disperse contract, without constructor metadata
    runtime: str | None = None

    @field_validator("legacy_address", "createx_address")
    @classmethod
    def check_address(cls, address):
        if address is not None and not is_valid_address(address):
            raise ValueError(f"Invalid contract address: {address}")
        return address


class DisperseConfig(BaseModel):
    rpc: str | None = None
    provider_timeout: int = 15
    proxy: str | None = None
    supported_chain_ids: list[int] = Field(default_factory=list)
    custom_contract_address: str | None = None
    bytecode_cache_size: int = Field(default=128, ge=1)
    native_currency: NativeCurrency = Field(default_factory=NativeCurrency)
    deployment: Deployment = Field(default_factory=Deployment)

    @field_validator("custom_contract_address")
    @classmethod
    def check_custom_address(cls, address):
        if address is not None and not is_valid_address(address):
            raise ValueError(f"Invalid custom contract address: {address}")
        return address

    @classmethod
    def from_file(cls, filepath: Path | str) -> "DisperseConfig":
        return cls(**load_toml(filepath))

    def is_chain_supported(self, chain_id: int | None) -> bool:
        return chain_id is not None and chain_id in self.supported_chain_ids

    def candidates(self) -> list[CandidateAddress]:
        return default_candidates(
            self.deployment.legacy_address,
            self.deployment.createx_address,
            self.custom_contract_address,
        )
