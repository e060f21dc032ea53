"""OATH session orchestrator.

Constructs the full stack (Card -> Agent -> Terminal -> Runner),
connects, runs a command file, the REPL, or the default summary, and
disconnects.
"""

from __future__ import annotations

import logging

from oathexp.app.oath.runner import OathRunner
from oathexp.core.base import Agent
from oathexp.core.oath import OathTerminal, redact_command
from oathexp.core.smartcard import Card

lg = logging.getLogger(__name__)

# Commands run when neither a file nor the REPL is requested.
SUMMARY = ["select", "list", "calculate_all"]


def session(
    file: str | None = None,
    interactive: bool = False,
    reader: str | None = None,
) -> bool:
    """Open an OATH session. Returns True if every command succeeded."""
    card = Card(redact=redact_command)
    agent = Agent(card, reader=reader)
    terminal = OathTerminal(agent)
    runner = OathRunner(terminal)

    ok = False
    try:
        terminal.connect()
        if file:
            ok = runner.run_file(file)
        elif interactive:
            runner.run_interactive()
            ok = True
        else:
            ok = runner.run_lines(SUMMARY)
    except Exception as exc:
        terminal.on_error(exc)
    finally:
        terminal.disconnect()
    return ok
