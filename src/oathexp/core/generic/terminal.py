from __future__ import annotations

from oathexp.core.base import Terminal, handles
from oathexp.core.generic.messages import (
    AtrMessage,
    AtrResult,
    RawAPDUMessage,
    RawAPDUResult,
)
from oathexp.core.smartcard import APDU


class GenericTerminal(Terminal):
    """Terminal with card-agnostic messages: ATR and raw APDUs."""

    @handles(AtrMessage)
    def _atr(self, message: AtrMessage) -> AtrResult:
        return AtrResult(atr=self._agent.get_atr())

    @handles(RawAPDUMessage)
    def _raw_apdu(self, message: RawAPDUMessage) -> RawAPDUResult:
        apdu = APDU(message.cla, message.ins, message.p1, message.p2,
                    message.data, message.le)
        response = self._agent.transmit(apdu)
        return RawAPDUResult(data=response.data, sw=response.sw)
