"""Textual clean-up run once before lexing.

* ``//`` and ``/* */`` comments become whitespace (block comments keep their
  newlines so reported line numbers stay correct);
* lines starting with ``#`` (C preprocessor output) are blanked;
* backslash-newline inside a quoted string is removed;
* ``"abc" + "def"`` is joined into ``"abcdef"``.

Quoted and HTML strings are otherwise copied verbatim, so running this over
printer output changes nothing.
"""

import logging

from dotcodec.errors import DotSyntaxError

logger = logging.getLogger("dotcodec.parser.preprocess")


def preprocess(source: str) -> str:
    output: list[str] = []
    index = 0
    length = len(source)
    at_line_start = True

    while index < length:
        char = source[index]

        if char == "\n":
            output.append(char)
            at_line_start = True
            index += 1
            continue

        if char.isspace():
            output.append(char)
            index += 1
            continue

        if at_line_start and char == "#":
            index = _skip_to_line_end(source, index)
            continue

        at_line_start = False

        if source.startswith("//", index):
            index = _skip_to_line_end(source, index)
            continue

        if source.startswith("/*", index):
            end = source.find("*/", index + 2)
            if end == -1:
                raise DotSyntaxError(
                    "Unterminated comment", position=index, source=source, expected="'*/'"
                )
            newlines = source.count("\n", index, end)
            output.append("\n" * newlines if newlines else " ")
            index = end + 2
            continue

        if char == '"':
            index = _copy_string(source, index, output)
            continue

        if char == "<":
            end = _html_end(source, index)
            output.append(source[index:end])
            index = end
            continue

        output.append(char)
        index += 1

    return "".join(output)


def _skip_to_line_end(source: str, index: int) -> int:
    end = source.find("\n", index)
    return len(source) if end == -1 else end


def _copy_string(source: str, index: int, output: list[str]) -> int:
    """Copy a quoted string, joining any ``+``-concatenated strings after it."""
    parts: list[str] = []
    content, index = _read_string_body(source, index)
    parts.append(content)

    while True:
        next_index = _concatenation_target(source, index)
        if next_index is None:
            break
        content, index = _read_string_body(source, next_index)
        parts.append(content)

    if len(parts) > 1:
        logger.debug("Joined %d concatenated strings", len(parts))
    output.append('"' + "".join(parts) + '"')
    return index


def _read_string_body(source: str, index: int) -> tuple[str, int]:
    start = index
    index += 1
    result: list[str] = []

    while index < len(source):
        char = source[index]
        if char == '"':
            return "".join(result), index + 1
        if char == "\\" and index + 1 < len(source):
            following = source[index + 1]
            if following == "\n":
                index += 2
                continue
            if following == "\r" and source.startswith("\n", index + 2):
                index += 3
                continue
            result.append(char)
            result.append(following)
            index += 2
            continue
        result.append(char)
        index += 1

    raise DotSyntaxError(
        "Unterminated string literal", position=start, source=source, expected="'\"'"
    )


def _concatenation_target(source: str, index: int) -> int | None:
    index = _skip_whitespace(source, index)
    if not source.startswith("+", index):
        return None
    index = _skip_whitespace(source, index + 1)
    if not source.startswith('"', index):
        raise DotSyntaxError(
            "Expected a quoted string after '+'",
            position=index,
            source=source,
            expected="'\"'",
            found=source[index : index + 1] or None,
        )
    return index


def _skip_whitespace(source: str, index: int) -> int:
    while index < len(source) and source[index].isspace():
        index += 1
    return index


def _html_end(source: str, index: int) -> int:
    depth = 0
    start = index
    while index < len(source):
        char = source[index]
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1

    raise DotSyntaxError(
        "Unterminated HTML string", position=start, source=source, expected="'>'"
    )
