"""Generic runner settings."""

from __future__ import annotations

import logging

lg = logging.getLogger(__name__)

# No commands that receive raw string kwargs.
_raw_commands: set[str] = set()

# No hex params.
_hex_params: set[str] = set()


def _set_log(runner, value: str) -> None:
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        lg.warning("unknown log level: %s", value)
        return
    logging.getLogger().setLevel(level)
    lg.info("log = %s", value.upper())


def _set_stop_on_error(runner, value: str) -> None:
    runner._stop_on_error = value.lower() in ("true", "yes", "1")
    lg.info("stop_on_error = %s", runner._stop_on_error)


_settings: dict[str, callable] = {
    "log": _set_log,
    "stop_on_error": _set_stop_on_error,
}
