from __future__ import annotations

from dataclasses import dataclass

from oathexp.core.base import Message, Result


@dataclass
class AtrMessage(Message):
    """Request the ATR of the connected card."""


@dataclass
class AtrResult(Result):
    atr: bytes


@dataclass
class RawAPDUMessage(Message):
    """Send a raw APDU to the card, bypassing applet session checks."""

    cla: int
    ins: int
    p1: int
    p2: int
    data: bytes = b""
    le: int | None = None


@dataclass
class RawAPDUResult(Result):
    data: bytes
    sw: int
