import logging
import warnings

from dotcodec.config import CodecSettings, get_default_settings
from dotcodec.errors import DotSyntaxError, LexicalAmbiguity
from dotcodec.extract import block_node_ids
from dotcodec.parser.ast import (
    CLUSTER_PREFIX,
    Attribute,
    AttributeValue,
    AttributeKind,
    Attributes,
    Edge,
    GeneralisedGraph,
    GeneralisedStatements,
    GlobalAttributes,
    Graph,
    Html,
    Node,
    NodeId,
    Port,
    Statement,
    Subgraph,
    from_generalised,
)
from dotcodec.parser.lexer import ID_KINDS, Token, lex
from dotcodec.parser.preprocess import preprocess
from dotcodec.quoting import is_compass_point, is_numeral, numeral_id

logger = logging.getLogger("dotcodec.parser")

Endpoint = tuple[NodeId, Port | None]

_DEFAULT_KINDS = {
    "graph": AttributeKind.GRAPH,
    "node": AttributeKind.NODE,
    "edge": AttributeKind.EDGE,
}


class DotParser:
    """Parses pre-processed DOT text into a ``GeneralisedGraph``."""

    def __init__(self, source: str, settings: CodecSettings | None = None):
        self._source = source
        self._tokens = lex(source)
        self._index = 0
        self._settings = settings or get_default_settings()
        self._directed = True
        self._depth = 0

    def parse(self) -> GeneralisedGraph:
        strict = False
        if self._peek_keyword("strict"):
            self._consume()
            strict = True

        token = self._peek()
        if token.kind != "KEYWORD" or token.value not in {"graph", "digraph"}:
            raise self._error("Expected graph header", expected="'graph' or 'digraph'")
        self._consume()
        self._directed = token.value == "digraph"

        graph_id = None
        if self._peek().kind in ID_KINDS:
            graph_id = self._parse_id()

        self._expect("LBRACE")
        items = self._parse_statement_list()
        self._expect("RBRACE")
        self._expect("EOF")

        logger.debug(
            "Parsed %s with %d top-level statements",
            "digraph" if self._directed else "graph",
            len(items),
        )
        return GeneralisedGraph(
            strict=strict,
            directed=self._directed,
            graph_id=graph_id,
            statements=GeneralisedStatements(items=tuple(items)),
        )

    def _parse_statement_list(self) -> list[Statement]:
        items: list[Statement] = []
        while self._peek().kind not in {"RBRACE", "EOF"}:
            self._parse_statement(items)
            if self._peek().kind == "SEMICOLON":
                self._consume()
        return items

    def _parse_statement(self, items: list[Statement]) -> None:
        token = self._peek()

        if token.kind == "KEYWORD" and token.value in _DEFAULT_KINDS:
            self._consume()
            if self._peek().kind != "LBRACKET":
                raise self._error(f"Expected attribute list after {token.value!r}", expected="'['")
            items.append(
                GlobalAttributes(kind=_DEFAULT_KINDS[token.value], attributes=self._parse_attr_list())
            )
            return

        if token.kind == "LBRACE" or (token.kind == "KEYWORD" and token.value == "subgraph"):
            subgraph = self._parse_subgraph()
            items.append(subgraph)
            if self._at_edge_operator():
                operand = [(node_id, None) for node_id in block_node_ids(subgraph.statements)]
                self._parse_edge_statement(operand, items)
            return

        if token.kind not in ID_KINDS:
            raise self._error("Expected statement", expected="a statement")

        if self._peek(1).kind == "EQUALS":
            name = self._parse_name()
            self._expect("EQUALS")
            value = self._parse_value()
            items.append(
                GlobalAttributes(kind=AttributeKind.GRAPH, attributes=(Attribute(name, value),))
            )
            return

        node_id = self._parse_id()
        port = self._parse_port()
        if self._at_edge_operator():
            self._parse_edge_statement([(node_id, port)], items)
            return

        if port is not None:
            logger.debug("Ignoring port on node statement for %r", node_id)
        items.append(Node(node_id=node_id, attributes=self._parse_attr_list(optional=True)))

    def _parse_edge_statement(self, first: list[Endpoint], items: list[Statement]) -> None:
        operands = [first]
        while self._at_edge_operator():
            operator = self._consume()
            expected = "ARROW" if self._directed else "LINE"
            if operator.kind != expected:
                raise self._error(
                    "Edge operator does not match graph type",
                    expected="'->'" if self._directed else "'--'",
                    token=operator,
                )
            operands.append(self._parse_edge_operand(items))

        attrs = self._parse_attr_list(optional=True)

        for left, right in zip(operands, operands[1:]):
            for tail, tail_port in left:
                for head, head_port in right:
                    items.append(
                        Edge(
                            tail=tail,
                            head=head,
                            attributes=attrs,
                            tail_port=tail_port,
                            head_port=head_port,
                        )
                    )

    def _parse_edge_operand(self, items: list[Statement]) -> list[Endpoint]:
        token = self._peek()
        if token.kind == "LBRACE" or (token.kind == "KEYWORD" and token.value == "subgraph"):
            subgraph = self._parse_subgraph()
            items.append(subgraph)
            return [(node_id, None) for node_id in block_node_ids(subgraph.statements)]
        node_id = self._parse_id()
        return [(node_id, self._parse_port())]

    def _parse_subgraph(self) -> Subgraph:
        is_cluster = False
        subgraph_id = None
        if self._peek_keyword("subgraph"):
            self._consume()
            if self._peek().kind in ID_KINDS:
                is_cluster, subgraph_id = self._parse_subgraph_name()

        brace = self._expect("LBRACE")
        self._depth += 1
        if self._depth > self._settings.max_nesting_depth:
            raise DotSyntaxError(
                f"Subgraphs nested deeper than {self._settings.max_nesting_depth} levels",
                position=brace.position,
                source=self._source,
            )
        items = self._parse_statement_list()
        self._expect("RBRACE")
        self._depth -= 1

        return Subgraph(
            is_cluster=is_cluster,
            subgraph_id=subgraph_id,
            statements=GeneralisedStatements(items=tuple(items)),
        )

    def _parse_subgraph_name(self) -> tuple[bool, NodeId | None]:
        token = self._peek()
        if token.kind in {"IDENT", "STRING"} and token.value.startswith(CLUSTER_PREFIX):
            self._consume()
            suffix = token.value[len(CLUSTER_PREFIX) :]
            if suffix.startswith("_"):
                suffix = suffix[1:]
            if not suffix:
                return True, None
            return True, numeral_id(suffix) if is_numeral(suffix) else suffix
        return False, self._parse_id()

    def _parse_port(self) -> Port | None:
        if self._peek().kind != "COLON":
            return None
        self._consume()

        token = self._peek()
        if token.kind not in ID_KINDS:
            raise self._error("Expected port name or compass point", expected="an identifier")
        name = self._parse_id()

        if self._peek().kind == "COLON":
            self._consume()
            compass = self._peek()
            if compass.kind != "IDENT" or not is_compass_point(compass.value):
                raise self._error("Expected compass point", expected="a compass point")
            self._consume()
            return Port(name=name, compass=compass.value)

        if token.kind == "IDENT" and is_compass_point(token.value):
            logger.debug("Reading bare port %r as a compass point", token.value)
            if self._settings.warn_on_ambiguity:
                warnings.warn(
                    LexicalAmbiguity(
                        f"{token.value!r} at position {token.position} is both a port name "
                        "and a compass point; reading it as a compass point"
                    ),
                    stacklevel=2,
                )
            return Port(compass=token.value)

        return Port(name=name)

    def _parse_attr_list(self, optional: bool = False) -> Attributes:
        if optional and self._peek().kind != "LBRACKET":
            return ()

        attrs: list[Attribute] = []
        self._expect("LBRACKET")
        while True:
            while self._peek().kind != "RBRACKET":
                name = self._parse_name()
                self._expect("EQUALS")
                attrs.append(Attribute(name, self._parse_value()))
                if self._peek().kind in {"COMMA", "SEMICOLON"}:
                    self._consume()
            self._expect("RBRACKET")
            if self._peek().kind != "LBRACKET":
                return tuple(attrs)
            self._consume()

    def _parse_name(self) -> str:
        token = self._peek()
        if token.kind not in {"IDENT", "STRING", "NUMERAL"}:
            raise self._error("Expected attribute name", expected="an identifier")
        return self._consume().value

    def _parse_id(self) -> NodeId:
        token = self._peek()
        if token.kind not in ID_KINDS:
            raise self._error("Expected identifier", expected="an identifier")
        self._consume()
        if token.kind == "NUMERAL":
            return numeral_id(token.value)
        if token.kind == "HTML":
            return Html(token.value)
        return token.value

    def _parse_value(self) -> AttributeValue:
        # Attribute values are numbers; only identifiers keep their spelling.
        if self._peek().kind == "NUMERAL":
            return _numeral_value(self._consume().value)
        return self._parse_id()

    def _at_edge_operator(self) -> bool:
        return self._peek().kind in {"ARROW", "LINE"}

    def _peek_keyword(self, value: str) -> bool:
        token = self._peek()
        return token.kind == "KEYWORD" and token.value == value

    def _expect(self, kind: str) -> Token:
        token = self._peek()
        if token.kind != kind:
            raise self._error(f"Unexpected {token.kind}", expected=kind)
        return self._consume()

    def _error(
        self, message: str, expected: str | None = None, token: Token | None = None
    ) -> DotSyntaxError:
        token = token or self._peek()
        return DotSyntaxError(
            message,
            position=token.position,
            source=self._source,
            expected=expected,
            found=token.value if token.kind != "EOF" else "end of input",
        )

    def _peek(self, offset: int = 0) -> Token:
        index = min(self._index + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _consume(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token


def parse_generalised(source: str, settings: CodecSettings | None = None) -> GeneralisedGraph:
    return DotParser(preprocess(source), settings).parse()


def parse_dot(source: str, settings: CodecSettings | None = None) -> Graph:
    return from_generalised(parse_generalised(source, settings))


def _numeral_value(text: str) -> int | float:
    if "." in text:
        return float(text)
    return int(text)
