"""OATH-specific errors."""

from __future__ import annotations

from oathexp.core.smartcard.errors import ProtocolError, StatusError


class UnsupportedAlgorithm(ProtocolError, ValueError):
    """Algorithm or credential type outside the supported table."""


class NotSelected(StatusError):
    """Operation attempted before the OATH applet was selected."""

    def __init__(self, message: str = "OATH applet not selected") -> None:
        super().__init__(None, message)
