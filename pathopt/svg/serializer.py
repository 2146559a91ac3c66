"""Write minimal path-data strings from commands."""

from __future__ import annotations

import re
from collections.abc import Iterable

import numpy as np

from pathopt.svg.command import ARC_FLAG_SLOTS, Command, Kind

_LEADING_ZERO_RE = re.compile(r"^(-?)0\.(?=\d)")

# Integers above this are not exactly representable and print in exponent form.
_MAX_EXACT_INT = 2.0**53


def format_number(value: float) -> str:
    """Shortest decimal text for ``value``: no trailing zeros, no leading zero."""
    if value == 0:
        return "0"
    value = float(value)
    if value.is_integer() and abs(value) < _MAX_EXACT_INT:
        text = str(int(value))
    else:
        text = _LEADING_ZERO_RE.sub(r"\1.", np.format_float_positional(value, trim="-"))
    scientific = np.format_float_scientific(value, trim="-", exp_digits=1).replace("e+", "e")
    return scientific if len(scientific) < len(text) else text


def _format_args(command: Command) -> list[str]:
    tokens = []
    for slot, value in enumerate(command.args):
        if command.kind is Kind.ARC and slot in ARC_FLAG_SLOTS:
            tokens.append("1" if value else "0")
        else:
            tokens.append(format_number(value))
    return tokens


def _needs_space(previous: str, token: str, negative_extra_space: bool) -> bool:
    if not previous:
        return False
    if not negative_extra_space:
        return True
    if token.startswith("-"):
        return False
    # ".5" after "1.5" can only start a new number.
    if token.startswith(".") and "." in previous and "e" not in previous:
        return False
    return True


def serialize_command(
    command: Command,
    previous: Command | None = None,
    negative_extra_space: bool = True,
) -> str:
    """Serialize one command. ``previous`` decides the separator before an implicit command."""
    tokens = _format_args(command)
    if command.implicit:
        last = _format_args(previous)[-1] if previous is not None and previous.args else ""
        parts = []
    else:
        last = ""
        parts = [command.letter]
    for token in tokens:
        if _needs_space(last, token, negative_extra_space):
            parts.append(" ")
        parts.append(token)
        last = token
    return "".join(parts)


def serialize_path(commands: Iterable[Command], negative_extra_space: bool = True) -> str:
    parts = []
    previous: Command | None = None
    for command in commands:
        parts.append(serialize_command(command, previous, negative_extra_space))
        previous = command
    return "".join(parts)
