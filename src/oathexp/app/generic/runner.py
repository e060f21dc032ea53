"""Runner: holds session state, dispatches commands."""

from __future__ import annotations

import inspect
import logging
from functools import partial
try:
    import readline
except ImportError:
    readline = None  # type: ignore[assignment]
import shlex
from types import ModuleType

from oathexp.app.generic.cardinfo import CardInfo
from oathexp.core.smartcard import CardError, StatusError

lg = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"quit", "exit"})


class QuitRequested(Exception):
    """Raised by 'quit' or 'exit' to end a script or the REPL."""


def parse_value(s: str) -> int | str | bool:
    """Parse a command argument value.

    Returns bool for true/false literals, int for decimal or 0x-prefixed
    numbers, otherwise the raw string.
    """
    low = s.lower()
    if low in ("true", "yes"):
        return True
    if low in ("false", "no"):
        return False
    try:
        return int(s, 16) if low.startswith("0x") else int(s)
    except ValueError:
        return s


def parse_command(line: str) -> tuple[str, dict[str, str]] | None:
    """Split ``name key=value flag ...`` into (name, raw_kwargs).

    Everything after ``#`` is a comment. A bare word is a flag and maps to
    "true". Returns None for blank and comment-only lines.
    """
    stripped = line.split("#", 1)[0].strip()
    if not stripped:
        return None
    name, *words = shlex.split(stripped)
    kwargs: dict[str, str] = {}
    for word in words:
        key, sep, value = word.partition("=")
        kwargs[key] = value if sep else "true"
    return name, kwargs


class Runner:
    """Holds session state and dispatches commands.

    Commands are the ``cmd_*`` functions of the given modules. A module
    may also export ``_raw_commands`` (commands that receive every
    argument as a string), ``_hex_params`` (argument names always parsed
    as hex) and ``_settings`` (handlers for ``set key=value``).
    """

    prompt = "oathexp> "

    def __init__(self, terminal, command_modules: list[ModuleType]) -> None:
        self._terminal = terminal
        self._info = CardInfo()
        self._stop_on_error = True

        self._commands: dict[str, callable] = {}
        self._descriptions: dict[str, str] = {}
        self._params: dict[str, list[str]] = {}
        self._raw_commands: set[str] = {"set"}
        self._hex_params: set[str] = set()
        self._settings: dict[str, callable] = {}
        self._matches: list[str] = []
        for mod in command_modules:
            for name in dir(mod):
                if name.startswith("cmd_"):
                    self._register(name[4:], partial(getattr(mod, name), self))
            self._raw_commands |= getattr(mod, "_raw_commands", set())
            self._hex_params |= getattr(mod, "_hex_params", set())
            self._settings.update(getattr(mod, "_settings", {}))

        # help and set live on the runner itself
        for attr in dir(self):
            if attr.startswith("cmd_"):
                self._register(attr[4:], getattr(self, attr))

    def _register(self, name: str, func: callable) -> None:
        self._commands[name] = func
        doc = inspect.getdoc(getattr(func, "func", func)) or ""
        self._descriptions[name] = doc.split("\n", 1)[0]
        params = [p for p in inspect.signature(func).parameters if p != "kwargs"]
        if params:
            self._params[name] = params

    @property
    def terminal(self):
        return self._terminal

    @property
    def info(self) -> CardInfo:
        return self._info

    # --- Commands ---

    def cmd_help(self) -> bool:
        """List available commands."""
        width = max(len(n) for n in self._descriptions)
        lines = [f"  {n:{width}s}  {d}" for n, d in sorted(self._descriptions.items())]
        lg.info("Commands:\n%s", "\n".join(lines))
        return True

    def cmd_set(self, **kwargs: str) -> bool:
        """Set runner configuration (set key=value ...)."""
        unknown = [k for k in kwargs if k not in self._settings]
        for k in unknown:
            lg.warning("unknown setting: %s (known: %s)", k, ", ".join(sorted(self._settings)))
        for k, v in kwargs.items():
            if k not in unknown:
                self._settings[k](self, v)
        return not unknown

    # --- Execution ---

    def _convert(self, name: str, raw_kwargs: dict[str, str]) -> dict:
        if name in self._raw_commands:
            return raw_kwargs
        return {
            k: int(v, 16) if k in self._hex_params else parse_value(v)
            for k, v in raw_kwargs.items()
        }

    def execute(self, line: str) -> bool:
        """Parse and execute one command line. Returns True on success.

        Raises QuitRequested for 'quit' and 'exit'.
        """
        parsed = parse_command(line)
        if parsed is None:
            return True
        name, raw_kwargs = parsed
        if name in EXIT_COMMANDS:
            raise QuitRequested
        cmd = self._commands.get(name)
        if cmd is None:
            lg.error("unknown command: %s (try 'help')", name)
            return False
        try:
            return cmd(**self._convert(name, raw_kwargs))
        except (TypeError, ValueError) as exc:
            lg.error("bad arguments for '%s': %s", name, exc)
        except StatusError as exc:
            lg.error("%s failed: %s", name, exc)
        except CardError as exc:
            lg.error("%s failed: %s: %s", name, type(exc).__name__, exc)
        except Exception as exc:
            lg.error("command '%s' failed: %s", name, exc)
        return False

    # --- Completion ---

    def _complete_value(self, cmd: str, key: str, prefix: str) -> list[str]:
        """Candidate values for ``key=`` of *cmd*. Subclasses extend this."""
        return []

    def _candidates(self, buf: str, text: str) -> list[str]:
        words = buf.lstrip().split()
        if not words or (len(words) == 1 and not buf.endswith(" ")):
            names = sorted(self._commands) + sorted(EXIT_COMMANDS)
            return [n for n in names if n.startswith(text)]
        cmd = words[0]
        key, sep, prefix = text.partition("=")
        if sep:
            return [f"{key}={v}" for v in self._complete_value(cmd, key, prefix)
                    if v.startswith(prefix)]
        keys = list(self._settings) if cmd == "set" else self._params.get(cmd, [])
        used = {w.partition("=")[0] for w in words[1:]}
        return [f"{k}=" for k in keys if k.startswith(text) and k not in used]

    def _complete(self, text: str, state: int) -> str | None:
        """Readline completer: commands, parameter names, then values."""
        if state == 0:
            self._matches = self._candidates(readline.get_line_buffer(), text)
        return self._matches[state] if state < len(self._matches) else None

    # --- Scripts and REPL ---

    def run_lines(self, lines: list[str]) -> bool:
        """Execute command lines in order. Returns True if all succeed.

        With stop_on_error (the default) the first failure ends the run;
        otherwise the remaining lines still execute and the result is True.
        """
        for lineno, line in enumerate(lines, 1):
            try:
                ok = self.execute(line)
            except QuitRequested:
                break
            if not ok and self._stop_on_error:
                lg.error("stopped at line %d: %s", lineno, line.strip())
                return False
        return True

    def run_file(self, path: str) -> bool:
        """Read and execute commands from a file. Returns True if all succeed."""
        with open(path) as f:
            return self.run_lines(f.readlines())

    def run_interactive(self) -> None:
        """Interactive REPL with readline completion. Ends on quit or EOF."""
        if readline is not None:
            readline.set_completer(self._complete)
            readline.set_completer_delims(" ")
            readline.parse_and_bind("tab: complete")
        lg.info("interactive mode, type 'help' for commands, 'quit' to exit")
        while True:
            try:
                line = input(self.prompt)
            except (EOFError, KeyboardInterrupt):
                print()
                return
            try:
                self.execute(line)
            except QuitRequested:
                return
