"""Card communication errors and status word mapping."""

from __future__ import annotations

SW_SUCCESS = 0x9000

SW_NAMES: dict[int, str] = {
    0x6581: "NoSpace",
    0x6700: "WrongSyntax",
    0x6982: "SecurityStatusNotSatisfied",
    0x6984: "DataInvalid",
    0x6985: "ConditionsNotSatisfied",
    0x6A80: "WrongSyntax",
    0x6A82: "NoSuchObject",
    0x6D00: "InsNotSupported",
    0x6E00: "ClaNotSupported",
}


class CardError(Exception):
    """Base class for all card communication errors."""


class TransportError(CardError):
    """I/O failure talking to the reader. Invalidates the session."""


class ProtocolError(CardError):
    """Malformed or unparseable response."""


class StatusError(CardError):
    """Non-success status word returned by the card."""

    def __init__(self, sw: int | None, message: str | None = None) -> None:
        self.sw = sw
        self.name = SW_NAMES.get(sw, "Unknown") if sw is not None else type(self).__name__
        if message is None:
            message = f"{self.name} (SW={sw:04X})" if sw is not None else self.name
        super().__init__(message)


class NoSuchObject(StatusError):
    """6A82: referenced object does not exist."""


class NoSpace(StatusError):
    """6581: not enough memory on the card."""


class WrongSyntax(StatusError):
    """6A80/6700: malformed command data or length."""


_SW_ERRORS: dict[int, type[StatusError]] = {
    0x6581: NoSpace,
    0x6700: WrongSyntax,
    0x6A80: WrongSyntax,
    0x6A82: NoSuchObject,
}


def status_error(sw: int) -> StatusError:
    """Build the most specific StatusError for *sw*."""
    return _SW_ERRORS.get(sw, StatusError)(sw)
