"""OATH terminal.

Extends GenericTerminal, so ATR and raw APDUs stay available next
to the OATH messages. Each @handles method forwards a typed Message to
the OathApplet session and wraps the answer in a Result.
"""

from __future__ import annotations

import logging

from oathexp.core.base import Agent, handles
from oathexp.core.generic import GenericTerminal, RawAPDUMessage, RawAPDUResult
from oathexp.core.oath.applet import OathApplet
from oathexp.core.oath.messages import (
    CalculateAllMessage,
    CalculateAllResult,
    CalculateMessage,
    CalculateResult,
    DeleteMessage,
    DeleteResult,
    ListMessage,
    ListResult,
    PutMessage,
    PutResult,
    ResetMessage,
    ResetResult,
    SelectAppletMessage,
    SelectAppletResult,
)
from oathexp.core.smartcard import TransportError

lg = logging.getLogger(__name__)


class OathTerminal(GenericTerminal):
    """Terminal for the OATH applet."""

    def __init__(self, agent: Agent) -> None:
        super().__init__(agent)
        self._applet = OathApplet(agent.transmit)

    @property
    def applet(self) -> OathApplet:
        return self._applet

    def disconnect(self) -> None:
        self._applet.deselect()
        super().disconnect()

    def _raw_apdu(self, message: RawAPDUMessage) -> RawAPDUResult:
        # a raw SELECT by name may switch the card to another applet
        if message.ins == 0xA4 and message.p1 == 0x04:
            lg.warning("raw SELECT issued, OATH applet deselected")
            self._applet.deselect()
        try:
            return super()._raw_apdu(message)
        except TransportError:
            self._applet.deselect()
            raise

    @handles(SelectAppletMessage)
    def _select(self, message: SelectAppletMessage) -> SelectAppletResult:
        return SelectAppletResult(info=self._applet.select())

    @handles(ListMessage)
    def _list(self, message: ListMessage) -> ListResult:
        return ListResult(credentials=self._applet.list())

    @handles(PutMessage)
    def _put(self, message: PutMessage) -> PutResult:
        ok = self._applet.put(
            message.name,
            message.secret,
            type=message.type,
            algorithm=message.algorithm,
            digits=message.digits,
        )
        return PutResult(success=ok)

    @handles(DeleteMessage)
    def _delete(self, message: DeleteMessage) -> DeleteResult:
        return DeleteResult(success=self._applet.delete(message.name))

    @handles(ResetMessage)
    def _reset(self, message: ResetMessage) -> ResetResult:
        return ResetResult(success=self._applet.reset())

    @handles(CalculateMessage)
    def _calculate(self, message: CalculateMessage) -> CalculateResult:
        code = self._applet.calculate(
            message.name, message.timestamp, truncate=message.truncate
        )
        return CalculateResult(name=message.name, code=code)

    @handles(CalculateAllMessage)
    def _calculate_all(self, message: CalculateAllMessage) -> CalculateAllResult:
        return CalculateAllResult(codes=self._applet.calculate_all(message.timestamp))
