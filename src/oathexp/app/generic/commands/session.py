"""Session management and raw APDU commands."""

from __future__ import annotations

import logging

from oathexp.core.generic import AtrMessage, RawAPDUMessage

lg = logging.getLogger(__name__)

# Commands that receive raw string kwargs (no conversion).
_raw_commands: set[str] = {"apdu"}

# Parameter names always parsed as hex.
_hex_params: set[str] = set()


def cmd_connect(runner) -> bool:
    """Connect to the card."""
    runner._terminal.connect()
    return True


def cmd_disconnect(runner) -> bool:
    """Disconnect from the card."""
    runner._terminal.disconnect()
    return True


def cmd_reconnect(runner) -> bool:
    """Disconnect and reconnect the card (applet must be selected again)."""
    runner._terminal.disconnect()
    runner._terminal.connect()
    return True


def cmd_atr(runner) -> bool:
    """Read the card's ATR."""
    result = runner._terminal.send(AtrMessage())
    runner._info.atr = result.atr
    lg.info("ATR: %s", result.atr.hex(" ").upper())
    return True


def cmd_apdu(runner, *, apdu: str = "") -> bool:
    """Send a raw APDU given as hex (CLA INS P1 P2 [Lc data] [Le])."""
    raw = bytes.fromhex(apdu)
    if len(raw) < 4:
        lg.error("APDU too short: need at least 4 bytes (CLA INS P1 P2)")
        return False
    data, le = b"", None
    if len(raw) == 5:
        le = raw[4]
    elif len(raw) > 5:
        lc = raw[4]
        data = raw[5 : 5 + lc]
        if len(data) != lc:
            lg.error("APDU Lc=%02X but only %d data bytes", lc, len(data))
            return False
        if len(raw) == 6 + lc:
            le = raw[5 + lc]
    msg = RawAPDUMessage(cla=raw[0], ins=raw[1], p1=raw[2], p2=raw[3], data=data, le=le)
    result = runner._terminal.send(msg)
    lg.info("<< %s SW=%04X", result.data.hex(" ").upper() if result.data else "", result.sw)
    return result.sw == 0x9000
