"""OATH credential store session.

OathApplet drives one selected applet over one card connection. It keeps
no credential cache: every query goes to the card. The session is an
explicit two-state machine:

    UNSELECTED --select()--> SELECTED
    SELECTED --deselect() / TransportError / failed select()--> UNSELECTED

Every operation other than select() requires SELECTED.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from oathexp.core.oath import otp, records
from oathexp.core.oath.errors import NotSelected
from oathexp.core.oath.protocol import OathProtocol
from oathexp.core.oath.types import Algorithm, AppletInfo, Credential, OathType
from oathexp.core.smartcard import (
    APDU,
    NoSuchObject,
    Response,
    TransportError,
    WrongSyntax,
)
from oathexp.core.smartcard.tlv import MAX_LENGTH, TLV

lg = logging.getLogger(__name__)

PUT_DIGITS = (6, 7, 8)

Timestamp = datetime | float | int


class SessionState(Enum):
    UNSELECTED = "unselected"
    SELECTED = "selected"


class OathApplet:
    """Operations on the OATH applet's credential store."""

    def __init__(self, transmit: Callable[[APDU], Response]) -> None:
        self._transmit = transmit
        self._proto = OathProtocol(self._checked_transmit)
        self._state = SessionState.UNSELECTED
        self._info: AppletInfo | None = None

    def _checked_transmit(self, apdu: APDU) -> Response:
        try:
            return self._transmit(apdu)
        except TransportError:
            if self._state is SessionState.SELECTED:
                lg.warning("transport failure, applet deselected")
            self.deselect()
            raise

    def _require_selected(self) -> None:
        if self._state is not SessionState.SELECTED:
            raise NotSelected()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def info(self) -> AppletInfo | None:
        """SELECT data for the current session, None when unselected."""
        return self._info

    # -- session --

    def select(self) -> AppletInfo:
        """Select the OATH applet and start a session."""
        self.deselect()
        resp = self._proto.send_select()
        info = records.parse_select(resp.data)
        self._state = SessionState.SELECTED
        self._info = info
        lg.info("OATH applet selected, version %s", info.version_string or "(unknown)")
        if info.locked:
            lg.warning("applet is protected by an access code; commands will be refused")
        return info

    def deselect(self) -> None:
        self._state = SessionState.UNSELECTED
        self._info = None

    # -- queries --

    def list(self) -> dict[str, Credential]:
        """Return every stored credential, in the card's order."""
        self._require_selected()
        resp = self._proto.send_list()
        return records.parse_list(resp.data)

    def calculate(
        self,
        name: str,
        timestamp: Timestamp | None = None,
        truncate: bool = True,
        type: OathType | str | None = None,
    ) -> str:
        """Compute the current code for one credential.

        The credential type decides the moving factor: TOTP sends the time
        step for *timestamp* (default now), HOTP lets the card use and
        advance its own counter. Without *type* the type is looked up
        with LIST first.
        """
        self._require_selected()
        if type is None:
            credential = self.list().get(name)
            if credential is None:
                raise NoSuchObject(0x6A82, f"no credential named '{name}'")
            oath_type = credential.type
        else:
            oath_type = OathType.parse(type)

        moving_factor = None
        if oath_type is OathType.TOTP:
            moving_factor = otp.time_step(_now(timestamp))
        resp = self._proto.send_calculate(
            _name_tlv(name), records.challenge_tlv(moving_factor), truncate
        )
        return records.parse_calculate(resp.data)

    def calculate_all(self, timestamp: Timestamp | None = None) -> dict[str, str | None]:
        """Compute codes for every credential.

        Entries the card cannot answer with the shared time challenge (HOTP
        credentials) map to None; use calculate() for those.
        """
        self._require_selected()
        challenge = records.challenge_tlv(otp.time_step(_now(timestamp)))
        resp = self._proto.send_calculate_all(challenge)
        return records.parse_calculate_all(resp.data)

    # -- mutations --

    def put(
        self,
        name: str,
        secret: bytes | None = None,
        type: OathType | str = OathType.TOTP,
        algorithm: Algorithm | str = Algorithm.SHA256,
        digits: int = otp.DEFAULT_DIGITS,
    ) -> bool:
        """Store a credential. A missing secret stores an empty key."""
        self._require_selected()
        oath_type = OathType.parse(type)
        algorithm = Algorithm.parse(algorithm)
        if digits not in PUT_DIGITS:
            raise WrongSyntax(None, f"digits must be one of {PUT_DIGITS}, got {digits}")
        key = records.key_tlv(oath_type, algorithm, digits, secret or b"")
        self._proto.send_put(_name_tlv(name), key)
        lg.info("stored %s credential '%s' (%s, %d digits)",
                oath_type.name, name, algorithm.name, digits)
        return True

    def delete(self, name: str) -> bool:
        """Delete one credential by name."""
        self._require_selected()
        self._proto.send_delete(_name_tlv(name))
        lg.info("deleted credential '%s'", name)
        return True

    def reset(self) -> bool:
        """Wipe every credential and setting from the applet."""
        self._require_selected()
        self._proto.send_reset()
        lg.info("applet reset")
        return True


def _name_tlv(name: str) -> TLV:
    # NAME is a short TLV
    if len(name.encode("utf-8")) > MAX_LENGTH:
        raise WrongSyntax(None, f"name longer than {MAX_LENGTH} bytes: {name[:16]}...")
    return records.name_tlv(name)


def _now(timestamp: Timestamp | None) -> Timestamp:
    return time.time() if timestamp is None else timestamp

