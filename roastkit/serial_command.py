"""Tokenise and dispatch line-based commands arriving on a serial stream."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator

__all__ = ["BUFFER_SIZE", "MAX_COMMAND_LENGTH", "CommandParser"]

BUFFER_SIZE = 32  # longest line, command plus arguments
MAX_COMMAND_LENGTH = 12  # significant characters of a command name


def _upper(char: str) -> str:
    """Upper-case ASCII letters only, leaving every other character alone."""
    return char.upper() if "a" <= char <= "z" else char


def _printable(char: str) -> bool:
    return " " <= char <= "~"


class CommandParser:
    """Collects characters into lines and calls the handler of each command.

    Incoming letters are upper-cased. When the terminator arrives the line is
    split on the delimiter characters; the first token names the command and
    the handler registered for it is called with no arguments. The handler
    fetches the remaining tokens with :meth:`next_token`. An unknown command
    goes to the default handler, if one is set, together with its name.
    """

    def __init__(self, terminator: str = "\n", delimiter: str = ";") -> None:
        if len(terminator) != 1:
            raise ValueError("terminator must be a single character")
        if not delimiter:
            raise ValueError("delimiter must hold at least one character")
        self.terminator = terminator
        self.delimiter = delimiter
        self._split = re.compile("[" + re.escape(delimiter) + "]+")
        self._commands: list[tuple[str, Callable[[], object]]] = []
        self._default: Callable[[str], object] | None = None
        self._buffer: list[str] = []
        self._tokens: Iterator[str] = iter(())

    def add_command(self, name: str, handler: Callable[[], object]) -> None:
        """Register ``handler`` for ``name``; only its first 12 characters count."""
        self._commands.append((name[:MAX_COMMAND_LENGTH], handler))

    def set_default_handler(self, handler: Callable[[str], object] | None) -> None:
        """Set the handler called with the name of an unrecognised command."""
        self._default = handler

    def feed(self, data: str | bytes | Iterable[int] | Iterable[str]) -> None:
        """Process incoming characters, dispatching every completed line."""
        for item in data:
            char = _upper(chr(item) if isinstance(item, int) else item)
            if char == self.terminator:
                self._dispatch("".join(self._buffer))
                self.clear()
            elif _printable(char) and len(self._buffer) < BUFFER_SIZE:
                self._buffer.append(char)

    def clear(self) -> None:
        """Discard the partly received line and any unread arguments."""
        self._buffer.clear()
        self._tokens = iter(())

    def next_token(self) -> str | None:
        """The next argument of the command being handled, or None."""
        return next(self._tokens, None)

    def commands(self) -> list[str]:
        """Names of the registered commands, in registration order."""
        return [name for name, _ in self._commands]

    def _dispatch(self, line: str) -> None:
        self._tokens = (token for token in self._split.split(line) if token)
        command = self.next_token()
        if command is None:
            return
        key = command[:MAX_COMMAND_LENGTH]
        for name, handler in self._commands:
            if name == key:
                handler()
                return
        if self._default is not None:
            self._default(command)