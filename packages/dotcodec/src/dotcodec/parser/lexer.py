from dataclasses import dataclass

from dotcodec.errors import DotSyntaxError
from dotcodec.quoting import is_id_char, is_id_start, is_keyword, match_numeral


@dataclass(slots=True, frozen=True)
class Token:
    kind: str
    value: str
    position: int


SINGLE_CHAR_TOKENS = {
    "{": "LBRACE",
    "}": "RBRACE",
    "[": "LBRACKET",
    "]": "RBRACKET",
    "=": "EQUALS",
    ",": "COMMA",
    ";": "SEMICOLON",
    ":": "COLON",
}

ID_KINDS = frozenset({"IDENT", "NUMERAL", "STRING", "HTML"})


def lex(source: str) -> list[Token]:
    """Split pre-processed DOT text into tokens."""
    tokens: list[Token] = []
    index = 0
    length = len(source)

    while index < length:
        char = source[index]
        if char.isspace():
            index += 1
            continue

        if char == '"':
            value, end = _read_string(source, index)
            tokens.append(Token("STRING", value, index))
            index = end
            continue

        if char == "<":
            value, end = _read_html(source, index)
            tokens.append(Token("HTML", value, index))
            index = end
            continue

        if source.startswith("->", index):
            tokens.append(Token("ARROW", "->", index))
            index += 2
            continue

        if source.startswith("--", index):
            tokens.append(Token("LINE", "--", index))
            index += 2
            continue

        token_kind = SINGLE_CHAR_TOKENS.get(char)
        if token_kind is not None:
            tokens.append(Token(token_kind, char, index))
            index += 1
            continue

        numeral = match_numeral(source, index)
        if numeral is not None:
            end = index + len(numeral)
            if end < length and is_id_char(source[end]):
                raise DotSyntaxError(
                    "Identifier cannot start with a digit",
                    position=index,
                    source=source,
                    found=source[index : end + 1],
                )
            tokens.append(Token("NUMERAL", numeral, index))
            index = end
            continue

        if is_id_start(char):
            value, end = _read_identifier(source, index)
            if is_keyword(value):
                tokens.append(Token("KEYWORD", value.lower(), index))
            else:
                tokens.append(Token("IDENT", value, index))
            index = end
            continue

        raise DotSyntaxError(
            f"Unexpected character {char!r}", position=index, source=source, found=char
        )

    tokens.append(Token("EOF", "", len(source)))
    return tokens


def _read_string(source: str, index: int) -> tuple[str, int]:
    start = index
    index += 1
    result: list[str] = []

    while index < len(source):
        char = source[index]
        if char == '"':
            return "".join(result), index + 1
        if char == "\\" and index + 1 < len(source):
            following = source[index + 1]
            if following != '"':
                result.append(char)
            result.append(following)
            index += 2
            continue
        result.append(char)
        index += 1

    raise DotSyntaxError(
        "Unterminated string literal", position=start, source=source, expected="'\"'"
    )


def _read_html(source: str, index: int) -> tuple[str, int]:
    start = index
    depth = 0
    while index < len(source):
        char = source[index]
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth == 0:
                return source[start + 1 : index], index + 1
        index += 1

    raise DotSyntaxError(
        "Unterminated HTML string", position=start, source=source, expected="'>'"
    )


def _read_identifier(source: str, index: int) -> tuple[str, int]:
    start = index
    while index < len(source) and is_id_char(source[index]):
        index += 1
    return source[start:index], index
