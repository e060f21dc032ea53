from __future__ import annotations

import logging
from collections.abc import Callable

from smartcard.CardConnectionObserver import CardConnectionObserver

from oathexp.core.smartcard.errors import SW_NAMES
from oathexp.core.smartcard.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


LINE_BYTES = 16

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"


def color_sw(sw1: int) -> str:
    """Return ANSI color for a status word: green for success, red for error."""
    if sw1 == 0x90 or sw1 == 0x61:
        return _GREEN
    return _RED


def format_sw(sw: int) -> str:
    """Colored ``XXXX`` status word, with its symbolic name when known."""
    name = SW_NAMES.get(sw)
    label = f"{sw:04X} {name}" if name else f"{sw:04X}"
    return f"{color_sw(sw >> 8)}{label}{_RESET}"


class LoggingCardObserver(CardConnectionObserver):
    """CardConnectionObserver that logs APDU traffic via Python logging.

    *redact* maps an outgoing command to the bytes that may be logged, so
    that key material never reaches the TRACE output.
    """

    def __init__(self, redact: Callable[[bytes], bytes] | None = None) -> None:
        self._redact = redact

    def _log_hex(self, prefix: str, data: bytes) -> None:
        """Log hex data, wrapping at LINE_BYTES bytes per line."""
        pad = " " * len(prefix)
        for i in range(0, len(data), LINE_BYTES):
            chunk = data[i : i + LINE_BYTES].hex(" ").upper()
            lg.log(TRACE, "%s%s", prefix if i == 0 else pad, chunk)

    def update(self, observable, event):
        if event.type in ("connect", "reconnect", "disconnect"):
            lg.log(PROTOCOL, event.type)

        elif event.type == "command":
            command = bytes(event.args[0])
            if self._redact is not None:
                command = self._redact(command)
            self._log_hex(">> ", command)

        elif event.type == "response":
            data, sw1, sw2 = event.args[0], event.args[1], event.args[2]
            if data:
                self._log_hex("<< ", bytes(data))
            lg.log(TRACE, "<< %s", format_sw((sw1 << 8) | sw2))
