"""Path-data parser: converts a raw ``d`` attribute string into a ``Path``.

Tolerates every optional separator the grammar allows: commas, arbitrary
whitespace, a sign starting the next number (``10-50``), a second decimal
point starting the next number (``.2.30``) and arc flags written without
separators (``a1 1 0 011 1``).
"""

from __future__ import annotations

import logging
import re

from pathopt.svg.command import Command, Kind, Path

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_SEPARATOR_RE = re.compile(r"[\s,]*")
_WHITESPACE_RE = re.compile(r"\s*")

_LETTERS: dict[str, Kind] = {kind.value: kind for kind in Kind}


class PathParseError(ValueError):
    """Raised for malformed path data. ``offset`` points at the offending character."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def done(self) -> bool:
        return self.pos >= len(self.text)

    def skip_whitespace(self) -> None:
        self.pos = _WHITESPACE_RE.match(self.text, self.pos).end()

    def skip_separators(self) -> None:
        self.pos = _SEPARATOR_RE.match(self.text, self.pos).end()

    def at_letter(self) -> bool:
        return not self.done and self.text[self.pos].upper() in _LETTERS

    def read_letter(self) -> tuple[Kind, bool]:
        char = self.text[self.pos]
        kind = _LETTERS.get(char.upper())
        if kind is None:
            raise PathParseError(f"Unknown command {char!r}", self.pos)
        self.pos += 1
        return kind, char.islower()

    def read_number(self) -> float:
        match = _NUMBER_RE.match(self.text, self.pos)
        if match is None:
            found = self.text[self.pos] if not self.done else "end of data"
            raise PathParseError(f"Expected number, found {found!r}", self.pos)
        self.pos = match.end()
        return float(match.group())

    def read_flag(self) -> float:
        if self.done or self.text[self.pos] not in "01":
            found = self.text[self.pos] if not self.done else "end of data"
            raise PathParseError(f"Expected arc flag, found {found!r}", self.pos)
        self.pos += 1
        return float(self.text[self.pos - 1])

    def read_args(self, kind: Kind) -> tuple[float, ...]:
        args: list[float] = []
        for slot in range(kind.arity):
            if slot:
                self.skip_separators()
            if kind is Kind.ARC and slot in (3, 4):
                args.append(self.read_flag())
            else:
                args.append(self.read_number())
        return tuple(args)


def parse_path_data(text: str) -> Path:
    """Parse a path-data string. Raises ``PathParseError`` on malformed input."""
    scanner = _Scanner(text)
    commands: list[Command] = []

    scanner.skip_whitespace()
    while not scanner.done:
        offset = scanner.pos
        kind, relative = scanner.read_letter()
        if not commands and kind is not Kind.MOVE:
            raise PathParseError("Path data must start with a move", offset)
        scanner.skip_separators()

        if kind is Kind.CLOSE:
            commands.append(Command(Kind.CLOSE))
            continue

        # Repeated argument groups: an implicit move repeats as a line.
        repeat_kind = Kind.LINE if kind is Kind.MOVE else kind
        current, implicit = kind, False
        while True:
            args = scanner.read_args(current)
            commands.append(Command(current, args, relative=relative, implicit=implicit))
            scanner.skip_separators()
            if scanner.done or scanner.at_letter():
                break
            current, implicit = repeat_kind, True

    logger.debug("Parsed path data: %d commands", len(commands))
    return Path(commands)
