from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from smartcard.CardConnection import CardConnection
from smartcard.System import readers

from oathexp.core.smartcard.observer import LoggingCardObserver

if TYPE_CHECKING:
    from smartcard.reader.Reader import Reader

lg = logging.getLogger(__name__)


class Card:
    """Wrapper around pyscard for smartcard communication."""

    def __init__(self, redact: Callable[[bytes], bytes] | None = None) -> None:
        self._connection: CardConnection | None = None
        self._observer = LoggingCardObserver(redact)

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @staticmethod
    def list_readers() -> list[Reader]:
        return readers()

    def connect(self, reader: Reader) -> None:
        self._connection = reader.createConnection()
        self._connection.addObserver(self._observer)
        try:
            self._connection.connect()
        except Exception:
            self._connection.deleteObserver(self._observer)
            self._connection = None
            raise

    def disconnect(self) -> None:
        if self._connection is not None:
            self._connection.disconnect()
            self._connection.deleteObserver(self._observer)
            self._connection = None

    def get_atr(self) -> bytes:
        if self._connection is None:
            raise RuntimeError("not connected to a card")
        return bytes(self._connection.getATR())

    def transmit(self, command: bytes) -> bytes:
        """Send raw command bytes, return raw response bytes (data + SW1 SW2)."""
        if self._connection is None:
            raise RuntimeError("not connected to a card")
        data, sw1, sw2 = self._connection.transmit(list(command))
        return bytes(data) + bytes([sw1, sw2])
