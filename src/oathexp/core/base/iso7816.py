from __future__ import annotations

import logging
from collections.abc import Callable

from oathexp.core.smartcard import APDU, ProtocolError, Response
from oathexp.core.smartcard.logging import PROTOCOL
from oathexp.core.smartcard.observer import format_sw

lg = logging.getLogger(__name__)

# Upper bound on GET RESPONSE rounds for one logical command.
MAX_CONTINUATIONS = 64


class ISO7816:
    """ISO 7816-4 protocol operations."""

    def __init__(self, transmit: Callable[[APDU], Response]) -> None:
        self._transmit = transmit

    def _send(self, label: str, apdu: APDU) -> Response:
        resp = self._transmit(apdu)
        lg.log(PROTOCOL, "%s %s", label, format_sw(resp.sw))
        return resp

    def exchange(self, label: str, apdu: APDU) -> Response:
        """Send *apdu* and collect 61xx continuations into one response.

        Raises StatusError for any terminal status other than 9000, and
        ProtocolError if the card keeps signalling more data past
        MAX_CONTINUATIONS rounds.
        """
        resp = self._send(label, apdu)
        buf = bytearray(resp.data)
        rounds = 0
        while resp.more_data:
            if rounds == MAX_CONTINUATIONS:
                raise ProtocolError(
                    f"{label}: still more data after {MAX_CONTINUATIONS} GET RESPONSE rounds"
                )
            rounds += 1
            resp = self.send_get_response()
            buf.extend(resp.data)
        return Response(data=bytes(buf), sw1=resp.sw1, sw2=resp.sw2).check()

    # -- commands --

    def send_select(
        self, data: bytes, p1: int = 0x04, p2: int = 0x00, le: int | None = None,
    ) -> Response:
        """SELECT (00 A4). P1=selection method, P2=response control."""
        apdu = APDU(cla=0x00, ins=0xA4, p1=p1, p2=p2, data=data, le=le)
        return self.exchange(f"SELECT {data.hex().upper()}", apdu)

    def send_get_response(self) -> Response:
        """GET RESPONSE (00 C0 00 00): fetch the next chunk after 61xx."""
        apdu = APDU(cla=0x00, ins=0xC0, p1=0x00, p2=0x00)
        return self._send("GET RESPONSE", apdu)
