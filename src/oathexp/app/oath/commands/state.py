"""State display and put defaults."""

from __future__ import annotations

import logging

from oathexp.app.oath.display import format_card_info
from oathexp.core.oath import Algorithm, OathType
from oathexp.core.oath.applet import PUT_DIGITS

lg = logging.getLogger(__name__)

_raw_commands: set[str] = set()

_hex_params: set[str] = set()


def cmd_display(runner) -> bool:
    """Display collected card information."""
    lg.info("\n%s", format_card_info(runner._info))
    return True


def _set_type(runner, value: str) -> None:
    runner._defaults.type = OathType.parse(value)
    lg.info("type = %s", runner._defaults.type.name)


def _set_algorithm(runner, value: str) -> None:
    runner._defaults.algorithm = Algorithm.parse(value)
    lg.info("algorithm = %s", runner._defaults.algorithm.name)


def _set_digits(runner, value: str) -> None:
    digits = int(value)
    if digits not in PUT_DIGITS:
        raise ValueError(f"digits must be one of {PUT_DIGITS}, got {digits}")
    runner._defaults.digits = digits
    lg.info("digits = %d", digits)


_settings: dict[str, callable] = {
    "type": _set_type,
    "algorithm": _set_algorithm,
    "digits": _set_digits,
}
