"""OATH runner.

Combines the session commands (connect/disconnect/atr/apdu) and runner
settings from the generic package with the OATH applet commands.
"""

from __future__ import annotations

from oathexp.app.generic.commands import COMMAND_MODULES as GENERIC_MODULES
from oathexp.app.generic.runner import Runner
from oathexp.app.oath.cardinfo import OathCardInfo, PutDefaults
from oathexp.app.oath.commands import COMMAND_MODULES as OATH_MODULES
from oathexp.core.oath import Algorithm, OathTerminal, OathType
from oathexp.core.oath.applet import PUT_DIGITS


class OathRunner(Runner):
    """Runner for the OATH applet."""

    def __init__(self, terminal: OathTerminal) -> None:
        super().__init__(terminal, GENERIC_MODULES + OATH_MODULES)
        self._info = OathCardInfo()
        self._defaults = PutDefaults()

    @property
    def defaults(self) -> PutDefaults:
        return self._defaults

    def _complete_value(self, cmd: str, key: str, prefix: str) -> list[str]:
        # credential names come from the last 'list', no card round trip
        if key == "name" and cmd != "put":
            return sorted(self._info.credentials)
        if key == "type":
            return [t.name.lower() for t in OathType]
        if key == "algorithm":
            return [a.name.lower() for a in Algorithm]
        if key == "digits":
            return [str(d) for d in PUT_DIGITS]
        return []
