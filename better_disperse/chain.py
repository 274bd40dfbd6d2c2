from better_proxy import Proxy
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.middleware import ExtraDataToPOAMiddleware
from web3.types import BlockIdentifier, Wei

from .exceptions import ChainMismatch
from .models import NativeCurrency


class Chain(AsyncWeb3):
    provider: AsyncHTTPProvider

    def __init__(
            self,
            rpc: str,
            *,
            name: str = None,
            native_currency: NativeCurrency = None,
            # Connection settings
            provider_timeout: int = 15,
            proxy: str | Proxy = None,
            # Middleware
            use_poa_middleware: bool = True,
    ):
        self.name = name
        self.native_currency = native_currency or NativeCurrency()

        http_provider = AsyncHTTPProvider(
            rpc,
            request_kwargs={"timeout": provider_timeout},
        )
        http_provider.cache_allowed_requests = True
        super().__init__(provider=http_provider)

        if use_poa_middleware:
            self.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        self._proxy = None
        self.proxy = proxy

    def __str__(self):
        return f"{self.name}"

    def __repr__(self):
        return f"{self.__class__.__name__}(rpc={self.provider.endpoint_uri}, name={self.name})"

    @property
    def proxy(self) -> Proxy | None:
        return self._proxy

    @proxy.setter
    def proxy(self, proxy: str | Proxy | None):
        if proxy is None:
            self._proxy = None
            if "proxy" in self.provider._request_kwargs:
                del self.provider._request_kwargs["proxy"]
            return

        if isinstance(proxy, str):
            proxy = Proxy.from_str(proxy)
        self._proxy = proxy

        self.provider._request_kwargs["proxy"] = self._proxy.as_url

    async def get_bytecode(
            self,
            address: ChecksumAddress | str,
            chain_id: int = None,
            block_identifier: BlockIdentifier = "latest",
    ) -> str:
        """
        :return: Deployed code as a 0x-prefixed hex string, "0x" when there is none
        :raises: ChainMismatch if the node serves another chain than `chain_id`
        """
        if chain_id is not None:
            node_chain_id = await self.eth.chain_id
            if node_chain_id != chain_id:
                raise ChainMismatch(f"RPC serves chain {node_chain_id}, expected {chain_id}")

        code = await self.eth.get_code(to_checksum_address(address), block_identifier)
        return "0x" + bytes(code).hex()

    async def get_native_balance(
            self,
            address: ChecksumAddress | str,
            block_identifier: BlockIdentifier = "latest",
    ) -> Wei:
        return await self.eth.get_balance(to_checksum_address(address), block_identifier)
