"""OATH messages and results.

One Message/Result pair per applet operation. Failures are raised by the
terminal, so results carry only the data of a successful call.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from oathexp.core.base import Message, Result
from oathexp.core.oath.types import Algorithm, AppletInfo, Credential, OathType


@dataclass
class SelectAppletMessage(Message):
    """SELECT the OATH applet."""


@dataclass
class SelectAppletResult(Result):
    info: AppletInfo


@dataclass
class ListMessage(Message):
    """List stored credentials."""


@dataclass
class ListResult(Result):
    credentials: dict[str, Credential]


@dataclass
class PutMessage(Message):
    """Store a credential."""

    name: str
    secret: bytes | None = None
    type: OathType = OathType.TOTP
    algorithm: Algorithm = Algorithm.SHA256
    digits: int = 6


@dataclass
class PutResult(Result):
    success: bool


@dataclass
class DeleteMessage(Message):
    """Delete a credential by name."""

    name: str


@dataclass
class DeleteResult(Result):
    success: bool


@dataclass
class ResetMessage(Message):
    """Wipe the applet."""


@dataclass
class ResetResult(Result):
    success: bool


@dataclass
class CalculateMessage(Message):
    """Compute the code of one credential."""

    name: str
    timestamp: datetime | float | None = None
    truncate: bool = True


@dataclass
class CalculateResult(Result):
    name: str
    code: str


@dataclass
class CalculateAllMessage(Message):
    """Compute codes for every credential."""

    timestamp: datetime | float | None = None


@dataclass
class CalculateAllResult(Result):
    codes: dict[str, str | None]
