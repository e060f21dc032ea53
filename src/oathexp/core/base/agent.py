from __future__ import annotations

import logging
from typing import Protocol

from smartcard.Exceptions import CardConnectionException, SmartcardException

from oathexp.core.smartcard import APDU, Response, TransportError

lg = logging.getLogger(__name__)


class Transport(Protocol):
    """Synchronous byte exchange with a card."""

    def transmit(self, command: bytes) -> bytes: ...


class Agent:
    """Agent that manages card connectivity and APDU transmission.

    Protocol-specific operations live in standalone protocol classes
    (ISO7816, OathProtocol) that receive agent.transmit as a callable.
    Terminals construct the protocol objects they need.

    Any failure of the underlying transport surfaces as TransportError;
    the agent never retries or reconnects on its own.
    """

    def __init__(self, card, reader: str | None = None) -> None:
        self._card = card
        self._reader = reader

    def connect(self) -> None:
        """Discover a reader with a card present and connect.

        When a reader name was configured, only readers whose name contains
        it are tried.
        """
        available = self._card.list_readers()
        if self._reader:
            available = [r for r in available if self._reader.lower() in str(r).lower()]
        if not available:
            raise TransportError(
                f"no readers matching '{self._reader}'" if self._reader else "no readers found"
            )
        for reader in available:
            try:
                self._card.connect(reader)
                lg.info("connected to %s", reader)
                return
            except SmartcardException:
                lg.debug("no card on %s", reader)
        raise TransportError("no card found on any reader")

    def disconnect(self) -> None:
        """Disconnect from the card."""
        self._card.disconnect()

    def get_atr(self) -> bytes:
        """Return the ATR of the connected card."""
        return self._card.get_atr()

    def transmit(self, apdu: APDU) -> Response:
        """Send one APDU and return the raw response (no status check)."""
        try:
            raw = self._card.transmit(apdu.to_bytes())
        except (CardConnectionException, RuntimeError, OSError) as exc:
            raise TransportError(str(exc)) from exc
        return Response.from_bytes(raw)
