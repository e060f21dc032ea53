from __future__ import annotations

import logging

TRACE = 15
PROTOCOL = 18
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PROTOCOL, "PROTOCOL")

FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def configure(verbose: bool = False) -> None:
    """Set up root logging: TRACE shows raw APDUs, PROTOCOL one line per command."""
    logging.basicConfig(level=TRACE if verbose else PROTOCOL, format=FORMAT)
