"""Per-type printing behaviour for atomic DOT values.

Each supported value type has a ``DotPrinter``. ``unquoted`` is the form used
when a value is composed into a larger printed value; ``quoted`` is the form
used when the value stands alone as an identifier and must be quoted if it is
not a bare ID string, a numeral or an HTML string.

DOT has no boolean or list values. Booleans print as ``true``/``false`` and
lists as a quoted ``[a, b]``; both parse back as ``str``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from decimal import Decimal

from dotcodec.quoting import Html, Numeral, escape_quotes, is_id_string, is_numeral, quote


class DotPrinter(ABC):
    @abstractmethod
    def unquoted(self, value) -> str:
        ...

    def quoted(self, value) -> str:
        return self.unquoted(value)

    def unquoted_list(self, values: Sequence) -> str:
        return "[" + ", ".join(self.unquoted(value) for value in values) + "]"

    def quoted_list(self, values: Sequence) -> str:
        # The bracketed form always contains characters that need quoting.
        return '"' + self.unquoted_list(values) + '"'


class IntPrinter(DotPrinter):
    def unquoted(self, value: int) -> str:
        return str(value)


class FloatPrinter(DotPrinter):
    def unquoted(self, value: float) -> str:
        if not math.isfinite(value):
            return repr(value)
        text = format(Decimal(repr(value)), "f")
        if "." not in text:
            text += ".0"
        return text

    def quoted(self, value: float) -> str:
        if not math.isfinite(value):
            return _STR.quoted(repr(value))
        return self.unquoted(value)


class BoolPrinter(DotPrinter):
    def unquoted(self, value: bool) -> str:
        return "true" if value else "false"


class StrPrinter(DotPrinter):
    """A list of single characters prints as one string, not as a bracketed list."""

    def unquoted(self, value: str) -> str:
        if is_id_string(value):
            return value
        return escape_quotes(value)

    def quoted(self, value: str) -> str:
        if is_id_string(value) or is_numeral(value):
            return value
        return quote(value)

    def unquoted_list(self, values: Sequence) -> str:
        if _all_chars(values):
            return self.unquoted("".join(values))
        return super().unquoted_list(values)

    def quoted_list(self, values: Sequence) -> str:
        if _all_chars(values):
            return self.quoted("".join(values))
        return super().quoted_list(values)


class NumeralPrinter(DotPrinter):
    def unquoted(self, value: Numeral) -> str:
        return value.text


class HtmlPrinter(DotPrinter):
    def unquoted(self, value: Html) -> str:
        return "<" + value.text + ">"


_INT = IntPrinter()
_FLOAT = FloatPrinter()
_BOOL = BoolPrinter()
_STR = StrPrinter()
_NUMERAL = NumeralPrinter()
_HTML = HtmlPrinter()


def printer_for(value) -> DotPrinter:
    if isinstance(value, bool):
        return _BOOL
    if isinstance(value, int):
        return _INT
    if isinstance(value, float):
        return _FLOAT
    if isinstance(value, Html):
        return _HTML
    if isinstance(value, Numeral):
        return _NUMERAL
    if isinstance(value, str):
        return _STR
    raise TypeError(f"No DOT printer for values of type {type(value).__name__}")


def to_dot(value) -> str:
    if isinstance(value, (list, tuple)):
        return _list_printer(value).quoted_list(value)
    return printer_for(value).quoted(value)


def unqt_dot(value) -> str:
    if isinstance(value, (list, tuple)):
        return _list_printer(value).unquoted_list(value)
    return printer_for(value).unquoted(value)


def print_field(name: str, value) -> str:
    return to_dot(name) + "=" + to_dot(value)


def _all_chars(values: Sequence) -> bool:
    return all(isinstance(value, str) and len(value) == 1 for value in values)


def _list_printer(values: Sequence) -> DotPrinter:
    if not values:
        return _INT
    return printer_for(values[0])
