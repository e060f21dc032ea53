from oathexp.core.generic.messages import (
    AtrMessage,
    AtrResult,
    RawAPDUMessage,
    RawAPDUResult,
)
from oathexp.core.generic.terminal import GenericTerminal

__all__ = [
    "GenericTerminal",
    "AtrMessage",
    "AtrResult",
    "RawAPDUMessage",
    "RawAPDUResult",
]
