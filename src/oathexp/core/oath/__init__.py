from oathexp.core.oath.applet import OathApplet, SessionState
from oathexp.core.oath.errors import NotSelected, UnsupportedAlgorithm
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
from oathexp.core.oath.protocol import AID, OathProtocol, redact_command
from oathexp.core.oath.terminal import OathTerminal
from oathexp.core.oath.types import Algorithm, AppletInfo, Credential, OathType

__all__ = [
    "AID",
    "Algorithm",
    "AppletInfo",
    "CalculateAllMessage",
    "CalculateAllResult",
    "CalculateMessage",
    "CalculateResult",
    "Credential",
    "DeleteMessage",
    "DeleteResult",
    "ListMessage",
    "ListResult",
    "NotSelected",
    "OathApplet",
    "OathProtocol",
    "OathTerminal",
    "OathType",
    "PutMessage",
    "PutResult",
    "ResetMessage",
    "ResetResult",
    "SelectAppletMessage",
    "SelectAppletResult",
    "SessionState",
    "UnsupportedAlgorithm",
]
