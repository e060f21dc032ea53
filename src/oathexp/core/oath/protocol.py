"""OATH applet commands.

Each ``send_`` method maps to exactly one logical APDU command. Responses
are fully reassembled (61xx continuations included) and status-checked;
a non-9000 status raises StatusError.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from oathexp.core.base.iso7816 import ISO7816
from oathexp.core.oath import tags
from oathexp.core.smartcard import APDU, Response
from oathexp.core.smartcard.tlv import TLV, encode

lg = logging.getLogger(__name__)

AID = bytes.fromhex("A0000005272101")

INS_PUT = 0x01
INS_DELETE = 0x02
INS_RESET = 0x04
INS_LIST = 0xA1
INS_CALCULATE = 0xA2
INS_CALCULATE_ALL = 0xA4

# P2 for CALCULATE / CALCULATE ALL: 01 = truncated response.
_P2_TRUNCATE = 0x01

# RESET only proceeds with this exact P1 P2 confirmation.
_RESET_CONFIRM = (0xDE, 0xAD)


def redact_command(command: bytes) -> bytes:
    """Mask key material in a PUT command for logging."""
    if len(command) <= 5 or command[1] != INS_PUT:
        return command
    body = bytearray(command)
    if command[4] == 0x00 and len(command) > 7:
        # extended Lc: 00 Lc_hi Lc_lo
        offset = 7
        end = offset + int.from_bytes(command[5:7], "big")
    else:
        offset = 5
        end = offset + command[4]
    end = min(end, len(body))
    while offset + 2 <= end:
        tag, length = body[offset], body[offset + 1]
        start = offset + 2
        if tag == tags.KEY:
            # keep type/algorithm and digits, mask the secret
            for i in range(start + 2, min(start + length, len(body))):
                body[i] = 0xFF
        offset = start + length
    return bytes(body)


class OathProtocol:
    """Protocol operations for the OATH applet."""

    def __init__(self, transmit: Callable[[APDU], Response]) -> None:
        self._iso = ISO7816(transmit)

    def _send(self, label: str, ins: int, p1: int = 0x00, p2: int = 0x00,
              *nodes: TLV) -> Response:
        apdu = APDU(cla=0x00, ins=ins, p1=p1, p2=p2, data=encode(*nodes))
        return self._iso.exchange(label, apdu)

    # -- commands --

    def send_select(self) -> Response:
        """SELECT the OATH applet by AID (00 A4 04 00)."""
        return self._iso.send_select(AID)

    def send_list(self) -> Response:
        """LIST (00 A1 00 00)."""
        return self._send("LIST", INS_LIST)

    def send_put(self, name: TLV, key: TLV) -> Response:
        """PUT (00 01 00 00, NAME + KEY)."""
        return self._send("PUT", INS_PUT, 0x00, 0x00, name, key)

    def send_delete(self, name: TLV) -> Response:
        """DELETE (00 02 00 00, NAME)."""
        return self._send("DELETE", INS_DELETE, 0x00, 0x00, name)

    def send_reset(self) -> Response:
        """RESET (00 04 DE AD). Wipes every credential."""
        p1, p2 = _RESET_CONFIRM
        return self._send("RESET", INS_RESET, p1, p2)

    def send_calculate(self, name: TLV, challenge: TLV, truncate: bool = True) -> Response:
        """CALCULATE (00 A2 00 01, NAME + CHALLENGE). P2=00 for the full HMAC."""
        p2 = _P2_TRUNCATE if truncate else 0x00
        return self._send("CALCULATE", INS_CALCULATE, 0x00, p2, name, challenge)

    def send_calculate_all(self, challenge: TLV) -> Response:
        """CALCULATE ALL (00 A4 00 01, CHALLENGE)."""
        return self._send("CALCULATE ALL", INS_CALCULATE_ALL, 0x00, _P2_TRUNCATE, challenge)
