from enum import Enum, IntEnum


class AppState(IntEnum):
    WALLET_REQUIRED = 0
    UNLOCK_WALLET = 1
    NETWORK_UNAVAILABLE = 2
    CONNECTED_TO_WALLET = 3
    SELECTED_CURRENCY = 4
    ENTERED_AMOUNTS = 5


class WalletStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    RECONNECTING = "reconnecting"
    CONNECTED = "connected"

    @property
    def is_transient(self) -> bool:
        return self in (WalletStatus.CONNECTING, WalletStatus.RECONNECTING)


class CurrencyMode(str, Enum):
    ETHER = "ether"
    TOKEN = "token"
