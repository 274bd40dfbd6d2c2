"""Disperse contract discovery.

Candidate addresses are checked one at a time, in order, by comparing the code
deployed at each of them with the expected runtime bytecode::

    Pending(0) -> Pending(1) -> ... -> Verified(candidate) | Exhausted()

A lookup that errors parks the locator in ``Failed(index)`` until the next
request retries the same candidate. A chain change resets the locator to
``Pending(0)`` and bumps its generation; bytecode that arrives for an older
generation is ignored.
"""
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from .exceptions import format_error
from .models import CandidateAddress, VerifiedAddress

logger = logging.getLogger(__name__)

EMPTY_BYTECODE = "0x"

BytecodeFetcher = Callable[[str, int], Awaitable[str | bytes | None]]


def normalize_bytecode(bytecode: str | bytes | None) -> str:
    if bytecode is None:
        return ""
    if isinstance(bytecode, (bytes, bytearray)):
        return bytes(bytecode).hex()
    bytecode = bytecode.lower()
    return bytecode[2:] if bytecode.startswith("0x") else bytecode


def is_empty_bytecode(bytecode: str | bytes | None) -> bool:
    return not normalize_bytecode(bytecode)


CacheKey = tuple[str, str]


def cache_key(bytecode: str | bytes | None, expected_runtime: str | None) -> CacheKey:
    """
    :return: (normalized expected runtime, normalized observed bytecode)
    """
    return normalize_bytecode(expected_runtime), normalize_bytecode(bytecode)


class BytecodeCache:
    """
    (expected runtime, observed bytecode) -> match decision,
    least recently used entries evicted first.
    """

    def __init__(self, maxsize: int = 128):
        if maxsize < 1:
            raise ValueError("maxsize must be positive")
        self.maxsize = maxsize
        self._data: OrderedDict[CacheKey, bool] = OrderedDict()
        self._lock = threading.Lock()

    def __repr__(self):
        return f"{self.__class__.__name__}(maxsize={self.maxsize}, size={len(self)})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._data

    def get(self, key: CacheKey) -> bool | None:
        with self._lock:
            if key not in self._data:
                return None
            self._data.move_to_end(key)
            return self._data[key]

    def set(self, key: CacheKey, is_match: bool):
        with self._lock:
            self._data[key] = is_match
            self._data.move_to_end(key)
            while len(self._data) > self.maxsize:
                self._data.popitem(last=False)

    def clear(self):
        with self._lock:
            self._data.clear()


def is_disperse_contract(
        bytecode: str | bytes | None,
        expected_runtime: str,
        cache: BytecodeCache = None,
) -> bool:
    """
    Exact match, or the expected runtime followed by immutable constructor data.
    Comparison ignores letter case and the 0x prefix.
    """
    if is_empty_bytecode(bytecode):
        return False

    key = cache_key(bytecode, expected_runtime)
    if cache is not None:
        is_match = cache.get(key)
        if is_match is not None:
            return is_match

    runtime, code = key
    is_match = bool(runtime) and code.startswith(runtime)

    if cache is not None:
        cache.set(key, is_match)
    return is_match


def default_candidates(
        legacy_address: str | None,
        createx_address: str | None = None,
        custom_address: str | None = None,
) -> list[CandidateAddress]:
    candidates = [
        (legacy_address, "legacy"),
        (createx_address, "createx"),
        (custom_address, "custom"),
    ]
    return [CandidateAddress(address=address, label=label) for address, label in candidates if address]


def can_deploy_to_network(chain_id: int | None) -> bool:
    return isinstance(chain_id, int) and chain_id > 0


@dataclass(frozen=True)
class Pending:
    index: int


@dataclass(frozen=True)
class Verified:
    address: VerifiedAddress


@dataclass(frozen=True)
class Failed:
    index: int


@dataclass(frozen=True)
class Exhausted:
    pass


LocatorState = Pending | Failed | Verified | Exhausted


@dataclass(frozen=True)
class BytecodeRequest:
    generation: int
    chain_id: int
    candidate: CandidateAddress


class ContractLocator:
    def __init__(
            self,
            candidates: Sequence[CandidateAddress],
            expected_runtime: str,
            *,
            cache: BytecodeCache = None,
            logger: logging.Logger = logger,
    ):
        self.expected_runtime = expected_runtime
        self.cache = cache if cache is not None else BytecodeCache()
        self.logger = logger

        self._candidates = list(candidates)
        self._chain_id: int | None = None
        self._is_connected = False
        self._generation = 0
        self._state: LocatorState = Pending(0)
        self._in_flight: BytecodeRequest | None = None

    def __repr__(self):
        return f"{self.__class__.__name__}(chain_id={self._chain_id}, state={self._state})"

    @property
    def candidates(self) -> list[CandidateAddress]:
        return list(self._candidates)

    @property
    def chain_id(self) -> int | None:
        return self._chain_id

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> LocatorState:
        return self._state

    @property
    def verified_address(self) -> VerifiedAddress | None:
        if isinstance(self._state, Verified):
            return self._state.address
        return None

    @property
    def is_contract_deployed(self) -> bool:
        return self.verified_address is not None

    @property
    def has_contract_address(self) -> bool:
        return bool(self._candidates)

    @property
    def contract_address(self) -> str | None:
        """
        :return: Verified address, falling back to the first candidate
        """
        if self.verified_address is not None:
            return self.verified_address.address
        return self._candidates[0].address if self._candidates else None

    @property
    def is_loading(self) -> bool:
        """
        :return: True while discovery for the current chain has not concluded.
            False after a failed lookup until it is retried.
        """
        return (isinstance(self._state, Pending)
                and self._is_connected
                and self._chain_id is not None
                and self._state.index < len(self._candidates))

    def _restart(self):
        self._generation += 1
        self._state = Pending(0)
        self._in_flight = None
        self._settle()

    def _settle(self):
        if isinstance(self._state, Pending) and self._state.index >= len(self._candidates):
            self.logger.debug("No valid contract found on chain %s", self._chain_id)
            self._state = Exhausted()

    def reset(self, chain_id: int | None):
        """
        Drop the verified address and restart from the first candidate.
        A no-op when `chain_id` is unchanged.
        """
        if chain_id == self._chain_id:
            return
        self.logger.debug("Chain changed from %s to %s, restarting discovery", self._chain_id, chain_id)
        self._chain_id = chain_id
        self._restart()

    def set_connected(self, is_connected: bool):
        self._is_connected = is_connected

    def set_candidates(self, candidates: Sequence[CandidateAddress]):
        candidates = list(candidates)
        if candidates == self._candidates:
            return
        self.logger.debug("Potential disperse addresses: %s", candidates)
        self._candidates = candidates
        self._restart()

    def next_request(self) -> BytecodeRequest | None:
        """
        :return: The lookup to perform next, or None when nothing is left to check
            or a lookup is already in flight
        """
        if self._in_flight is not None:
            return None
        if not self._is_connected or not self._chain_id:
            return None
        if not isinstance(self._state, (Pending, Failed)):
            return None

        self._state = Pending(self._state.index)
        candidate = self._candidates[self._state.index]
        self.logger.debug("Checking contract at %s address: %s", candidate.label, candidate.address)
        self._in_flight = BytecodeRequest(self._generation, self._chain_id, candidate)
        return self._in_flight

    def _accepts(self, request: BytecodeRequest) -> bool:
        if request.generation != self._generation or request != self._in_flight:
            self.logger.debug("Ignoring stale bytecode for %s on chain %s",
                              request.candidate.address, request.chain_id)
            return False
        return True

    def on_bytecode(self, request: BytecodeRequest, bytecode: str | bytes | None) -> LocatorState:
        if not self._accepts(request):
            return self._state
        self._in_flight = None

        self.logger.debug("Chain %s, address %s, code length: %d",
                          request.chain_id, request.candidate.address, len(normalize_bytecode(bytecode)))

        if is_disperse_contract(bytecode, self.expected_runtime, self.cache):
            self.logger.debug("Found valid disperse contract at %s address: %s",
                              request.candidate.label, request.candidate.address)
            self._state = Verified(request.candidate)
            return self._state

        self._state = Pending(self._state.index + 1)
        self._settle()
        return self._state

    def on_request_failed(self, request: BytecodeRequest):
        """
        Release a failed lookup without advancing, so it is retried on the next request.
        """
        if self._accepts(request):
            self._in_flight = None
            self._state = Failed(self._state.index)

    async def verify(
            self,
            fetch_bytecode: BytecodeFetcher,
            *,
            on_error: Callable[[str], None] = None,
    ) -> VerifiedAddress | None:
        """
        Check candidates one by one until one matches or none are left.

        :param fetch_bytecode: async (address, chain ID) -> deployed code
        :param on_error: Receives a short message when a lookup fails.
            Without it the lookup exception propagates.
        """
        while (request := self.next_request()) is not None:
            try:
                bytecode = await fetch_bytecode(request.candidate.address, request.chain_id)
            except Exception as e:
                self.on_request_failed(request)
                if on_error is None:
                    raise
                self.logger.warning("Bytecode lookup failed for %s: %s", request.candidate.address, e)
                on_error(format_error(e))
                return None
            self.on_bytecode(request, bytecode)

        return self.verified_address
