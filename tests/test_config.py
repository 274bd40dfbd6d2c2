import pytest
from pydantic import ValidationError

from better_disperse.config import LEGACY_DISPERSE_ADDRESS, DisperseConfig

from .constants import CREATEX, CUSTOM, RUNTIME

CONFIG = f"""
rpc = "http://localhost:8545"
supported_chain_ids = [1, 137]
custom_contract_address = "{CUSTOM}"
bytecode_cache_size = 16

[native_currency]
name = "Polygon"
symbol = "POL"

[deployment]
createx_address = "{CREATEX}"
runtime = "{RUNTIME}"
"""


def test_from_file(tmp_path):
    filepath = tmp_path / "disperse.toml"
    filepath.write_text(CONFIG)

    config = DisperseConfig.from_file(filepath)

    assert config.rpc == "http://localhost:8545"
    assert config.bytecode_cache_size == 16
    assert config.native_currency.symbol == "POL"
    assert config.native_currency.decimals == 18
    assert config.deployment.runtime == RUNTIME
    assert [(c.address, c.label) for c in config.candidates()] == [
        (LEGACY_DISPERSE_ADDRESS, "legacy"),
        (CREATEX, "createx"),
        (CUSTOM, "custom"),
    ]


def test_defaults():
    config = DisperseConfig()

    assert [c.label for c in config.candidates()] == ["legacy"]
    assert not config.is_chain_supported(1)


def test_is_chain_supported():
    config = DisperseConfig(supported_chain_ids=[1, 137])

    assert config.is_chain_supported(137)
    assert not config.is_chain_supported(10)
    assert not config.is_chain_supported(None)


def test_invalid_custom_address():
    with pytest.raises(ValidationError):
        DisperseConfig(custom_contract_address="0x1234")
