"""OATH applet commands."""

from __future__ import annotations

import base64
import logging
from datetime import datetime

from oathexp.app.oath.display import format_applet, format_credentials
from oathexp.core.oath import (
    Algorithm,
    CalculateAllMessage,
    CalculateMessage,
    DeleteMessage,
    ListMessage,
    OathType,
    PutMessage,
    ResetMessage,
    SelectAppletMessage,
)

lg = logging.getLogger(__name__)

# Commands that receive raw string kwargs (no conversion).
_raw_commands: set[str] = {"put", "delete", "calculate", "calculate_all", "reset"}

# Parameter names always parsed as hex.
_hex_params: set[str] = set()


# --- Helpers ---


def parse_time(value: str) -> datetime | float | None:
    """Parse ``time=``: empty for now, Unix seconds, or ISO 8601."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        pass
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_secret(secret: str = "", text: str = "", b32: str = "") -> bytes | None:
    """Decode the one secret argument given; None if there is none."""
    given = [v for v in (secret, text, b32) if v]
    if len(given) > 1:
        raise ValueError("give only one of secret=HEX, text=ASCII, b32=BASE32")
    if secret:
        return bytes.fromhex(secret)
    if text:
        return text.encode("utf-8")
    if b32:
        s = b32.replace(" ", "").upper()
        return base64.b32decode(s + "=" * (-len(s) % 8))
    return None


# --- Commands ---


def cmd_select(runner) -> bool:
    """SELECT the OATH applet."""
    result = runner._terminal.send(SelectAppletMessage())
    runner._info.applet = result.info
    lg.info("OATH applet\n%s", format_applet(result.info))
    return True


def cmd_list(runner) -> bool:
    """List stored credentials."""
    result = runner._terminal.send(ListMessage())
    runner._info.credentials = result.credentials
    lg.info("%d credential(s)\n%s", len(result.credentials),
            format_credentials(result.credentials))
    return True


def cmd_put(
    runner, *, name: str = "", secret: str = "", text: str = "", b32: str = "",
    type: str = "", algorithm: str = "", digits: str = "",
) -> bool:
    """Store a credential (name=, secret=HEX | text= | b32=, type, algorithm, digits)."""
    if not name:
        lg.error("put: name is required")
        return False
    defaults = runner._defaults
    msg = PutMessage(
        name=name,
        secret=parse_secret(secret, text, b32),
        type=OathType.parse(type) if type else defaults.type,
        algorithm=Algorithm.parse(algorithm) if algorithm else defaults.algorithm,
        digits=int(digits) if digits else defaults.digits,
    )
    runner._terminal.send(msg)
    return True


def cmd_delete(runner, *, name: str = "") -> bool:
    """Delete a credential by name."""
    if not name:
        lg.error("delete: name is required")
        return False
    runner._terminal.send(DeleteMessage(name=name))
    runner._info.credentials.pop(name, None)
    runner._info.codes.pop(name, None)
    return True


def cmd_reset(runner, *, confirm: str = "") -> bool:
    """Wipe every credential (requires 'confirm')."""
    if confirm.lower() not in ("true", "yes"):
        lg.error("reset erases all credentials; run 'reset confirm' to proceed")
        return False
    runner._terminal.send(ResetMessage())
    runner._info.credentials = {}
    runner._info.codes = {}
    return True


def cmd_calculate(runner, *, name: str = "", time: str = "", full: str = "") -> bool:
    """Compute one code (name=, time=ISO8601|SECONDS, full=true for untruncated)."""
    if not name:
        lg.error("calculate: name is required")
        return False
    truncate = full.lower() not in ("true", "yes")
    result = runner._terminal.send(
        CalculateMessage(name=name, timestamp=parse_time(time), truncate=truncate)
    )
    runner._info.codes[name] = result.code
    lg.info("%s: %s", name, result.code)
    return True


def cmd_calculate_all(runner, *, time: str = "") -> bool:
    """Compute codes for all credentials (time=ISO8601|SECONDS)."""
    result = runner._terminal.send(CalculateAllMessage(timestamp=parse_time(time)))
    runner._info.codes = result.codes
    lg.info("%d code(s)\n%s", len(result.codes),
            format_credentials(runner._info.credentials, result.codes))
    return True
