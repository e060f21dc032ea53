from oathexp.core.smartcard.card import Card
from oathexp.core.smartcard.errors import (
    CardError,
    NoSpace,
    NoSuchObject,
    ProtocolError,
    StatusError,
    TransportError,
    WrongSyntax,
)
from oathexp.core.smartcard.logging import PROTOCOL, TRACE
from oathexp.core.smartcard.types import APDU, Response

__all__ = [
    "APDU",
    "Card",
    "CardError",
    "NoSpace",
    "NoSuchObject",
    "PROTOCOL",
    "ProtocolError",
    "Response",
    "StatusError",
    "TRACE",
    "TransportError",
    "WrongSyntax",
]
