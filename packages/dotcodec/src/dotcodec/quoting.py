"""Lexical rules shared by the printer and the lexer.

The DOT language accepts an identifier in one of four forms:

* a run of alphabetic (``[a-zA-Z\\200-\\377]``) characters, underscores or
  digits, not beginning with a digit;
* a numeral ``[-]?(.[0-9]+ | [0-9]+(.[0-9]*)?)``;
* a double-quoted string, possibly containing escaped quotes (``\\"``);
* an HTML string (``<...>``).

A numeral names a node by its spelling: ``1``, ``1.0``, ``.5`` and ``0.5`` are
four different nodes. Plain integers read as ``int``; every other numeral
keeps its text as a ``Numeral``.

Strings that look like numerals print unquoted, so the string ``"12"`` and the
integer ``12`` print identically and parse back as the integer. The format
itself does not say which reading is right; callers that need the string must
not rely on a round trip.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum

KEYWORDS = frozenset({"node", "edge", "graph", "digraph", "subgraph", "strict"})
COMPASS_POINTS = frozenset({"n", "ne", "e", "se", "s", "sw", "w", "nw", "c", "_"})

_NUMERAL = re.compile(r"-?(\.[0-9]+|[0-9]+(\.[0-9]*)?)")
_PLAIN_INTEGER = re.compile(r"0|-?[1-9][0-9]*")


@dataclass(slots=True, frozen=True)
class Html:
    """An HTML-like string, printed between angle brackets."""

    text: str


@dataclass(slots=True, frozen=True)
class Numeral:
    """A numeral identifier in its written form, e.g. ``1.0``, ``.5`` or ``007``.

    Plain integers are always ``int`` so that each spelling has exactly one
    value.
    """

    text: str

    def __post_init__(self) -> None:
        if not is_numeral(self.text) or is_plain_integer(self.text):
            raise ValueError(f"Not a numeral other than a plain integer: {self.text!r}")

    @property
    def value(self) -> int | float:
        return float(self.text) if "." in self.text else int(self.text)


class IdentifierKind(str, Enum):
    BARE = "bare"
    NUMERAL = "numeral"
    QUOTED = "quoted"
    HTML = "html"


def is_id_start(char: str) -> bool:
    return char == "_" or _is_ascii_alpha(char) or "\x80" <= char <= "\xff"


def is_id_char(char: str) -> bool:
    return is_id_start(char) or "0" <= char <= "9"


def is_keyword(text: str) -> bool:
    return text.lower() in KEYWORDS


def is_compass_point(text: str) -> bool:
    return text in COMPASS_POINTS


def is_id_string(text: str) -> bool:
    """True when ``text`` can be printed bare without being mistaken for a keyword."""
    if not text or not is_id_start(text[0]):
        return False
    return all(is_id_char(char) for char in text) and not is_keyword(text)


def is_numeral(text: str) -> bool:
    return _NUMERAL.fullmatch(text) is not None


def is_plain_integer(text: str) -> bool:
    return _PLAIN_INTEGER.fullmatch(text) is not None


def numeral_id(text: str) -> int | Numeral:
    """The identifier a numeral spelling names."""
    if is_plain_integer(text):
        return int(text)
    return Numeral(text)


def match_numeral(source: str, index: int) -> str | None:
    match = _NUMERAL.match(source, index)
    if match is None:
        return None
    return match.group(0)


def classify(value: object) -> IdentifierKind:
    if isinstance(value, Html):
        return IdentifierKind.HTML
    if isinstance(value, Numeral):
        return IdentifierKind.NUMERAL
    if isinstance(value, bool):
        return IdentifierKind.BARE
    if isinstance(value, int):
        return IdentifierKind.NUMERAL
    if isinstance(value, float):
        return IdentifierKind.NUMERAL if math.isfinite(value) else classify(repr(value))
    text = str(value)
    if is_id_string(text):
        return IdentifierKind.BARE
    if is_numeral(text):
        return IdentifierKind.NUMERAL
    return IdentifierKind.QUOTED


def escape_quotes(text: str) -> str:
    return text.replace('"', '\\"')


def quote(text: str) -> str:
    return '"' + escape_quotes(text) + '"'


def _is_ascii_alpha(char: str) -> bool:
    return "a" <= char <= "z" or "A" <= char <= "Z"
