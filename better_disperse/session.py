import logging
from typing import Sequence

from .enums import AppState, CurrencyMode, WalletStatus
from .ledger import get_decimals
from .models import Recipient, SessionSignals, TokenInfo
from .parser import parse_recipients

logger = logging.getLogger(__name__)


def _currency_state(signals: SessionSignals) -> AppState:
    if signals.is_currency_specified:
        return AppState.SELECTED_CURRENCY
    return AppState.CONNECTED_TO_WALLET


def reduce_app_state(previous: AppState, signals: SessionSignals) -> AppState:
    """
    Derive the application state from a full set of signals.
    Returns `previous` unchanged while the signals are not conclusive.
    """
    if not signals.provider_available:
        return AppState.WALLET_REQUIRED
    if signals.status.is_transient or signals.sending is None:
        return previous

    if signals.status == WalletStatus.DISCONNECTED:
        return AppState.UNLOCK_WALLET

    if not signals.is_contract_deployed or not signals.is_chain_supported:
        if signals.is_bytecode_loading and signals.has_contract_address:
            return previous
        if not signals.is_contract_deployed:
            return AppState.NETWORK_UNAVAILABLE
        # Verified contract on a chain outside the built-in list

    return _currency_state(signals)


class Session:
    """
    Holds the latest signals and the state derived from them.

    Every signal change re-derives the state from scratch; `enter_recipients`
    is the only transition that is not a function of the signals.
    The last recipient text is kept and parsed again whenever the currency
    or token changes, so amounts follow the selected decimals.
    """

    def __init__(
            self,
            signals: SessionSignals = None,
            *,
            state: AppState = AppState.UNLOCK_WALLET,
            logger: logging.Logger = logger,
    ):
        self.logger = logger
        self._state = state
        self._signals = signals or SessionSignals()
        self._recipients_text: str | None = None
        self._recipients: list[Recipient] = []
        if self._signals.sending is None:
            self.logger.debug("Setting initial currency to ether")
            self._signals = self._signals.model_copy(update={"sending": CurrencyMode.ETHER})
        self._recompute()

    def __repr__(self):
        return f"{self.__class__.__name__}(state={self._state.name}, sending={self.sending})"

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def signals(self) -> SessionSignals:
        return self._signals

    @property
    def sending(self) -> CurrencyMode | None:
        return self._signals.sending

    @property
    def token(self) -> TokenInfo:
        return self._signals.token

    @property
    def decimals(self) -> int:
        return get_decimals(self.sending, self.token)

    @property
    def recipients(self) -> list[Recipient]:
        return list(self._recipients)

    def _set_state(self, state: AppState):
        if state != self._state:
            self.logger.debug("AppState changed to: %s", state.name)
        self._state = state

    def _recompute(self) -> AppState:
        self._set_state(reduce_app_state(self._state, self._signals))
        return self._state

    def update(self, **signals) -> AppState:
        """
        Replace any subset of the signals and re-derive the state.
        Nothing happens when every given signal already has that value.

        :raises pydantic.ValidationError: on an unknown signal name or a bad value
        """
        new_signals = SessionSignals.model_validate({**self._signals.model_dump(), **signals})
        if new_signals == self._signals:
            return self._state

        self._signals = new_signals
        self.logger.debug(
            "Wallet status: %s, chain: %s, supported: %s, contract: %s",
            self._signals.status.value,
            self._signals.chain_id,
            self._signals.is_chain_supported,
            self._signals.is_contract_deployed,
        )
        return self._recompute()

    def select_currency(self, sending: CurrencyMode) -> AppState:
        sending = CurrencyMode(sending)
        self.logger.debug("Sending type changed to: %s", sending.value)
        if sending == CurrencyMode.TOKEN and not self.token.is_complete:
            self.reset_token(sending=sending)
        else:
            self.update(sending=sending)
        self._reparse_amounts()
        return self._state

    def select_token(self, token: TokenInfo) -> AppState:
        self.logger.debug("Token updated: %s", token)
        self.update(sending=CurrencyMode.TOKEN, token=token)
        self._reparse_amounts()
        return self._state

    def reset_token(self, *, sending: CurrencyMode = None) -> AppState:
        update = {"token": TokenInfo()}
        if sending is not None:
            update["sending"] = sending
        self._signals = self._signals.model_copy(update=update)
        if self._state >= AppState.CONNECTED_TO_WALLET:
            self._set_state(AppState.CONNECTED_TO_WALLET)
        return self._state

    def enter_recipients(self, recipients: Sequence[Recipient]) -> AppState:
        """
        Move to ENTERED_AMOUNTS once recipients exist for a fully specified currency.
        """
        if recipients and self._signals.is_currency_specified and self._state >= AppState.SELECTED_CURRENCY:
            self._set_state(AppState.ENTERED_AMOUNTS)
        return self._state

    def parse_amounts(self, text: str) -> list[Recipient]:
        """
        Parse recipient text with the decimals of the selected currency
        and keep the text for later currency or token changes.
        """
        self._recipients_text = text
        self._recipients = parse_recipients(text, self.decimals, logger=self.logger)
        self.enter_recipients(self._recipients)
        return self.recipients

    def _reparse_amounts(self):
        if self._recipients_text is not None:
            self.parse_amounts(self._recipients_text)
