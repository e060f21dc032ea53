"""OATH card information collected during a session."""

from __future__ import annotations

from dataclasses import dataclass, field

from oathexp.app.generic.cardinfo import CardInfo
from oathexp.core.oath import Algorithm, AppletInfo, Credential, OathType


@dataclass
class PutDefaults:
    """Defaults applied by ``put`` when an argument is omitted."""

    type: OathType = OathType.TOTP
    algorithm: Algorithm = Algorithm.SHA256
    digits: int = 6


@dataclass
class OathCardInfo(CardInfo):
    """Card information for the OATH applet.

    ``credentials`` and ``codes`` hold the last LIST and CALCULATE ALL
    answers, for display only; operations always query the card.
    """

    applet: AppletInfo | None = None
    credentials: dict[str, Credential] = field(default_factory=dict)
    codes: dict[str, str | None] = field(default_factory=dict)
