"""Printing, parsing and normalising Graphviz DOT graphs."""

from dotcodec.augment import LabelledGraph, NetworkXGraph, augment, dot_node_id
from dotcodec.canonical import canonicalise
from dotcodec.config import CodecSettings, get_default_settings, set_default_settings
from dotcodec.errors import ConfigurationError, DotError, DotSyntaxError, LexicalAmbiguity
from dotcodec.extract import edge_information, edges, node_information, nodes
from dotcodec.parser.ast import (
    Attribute,
    AttributeKind,
    Edge,
    GeneralisedGraph,
    GeneralisedStatements,
    GlobalAttributes,
    Graph,
    Html,
    Node,
    Numeral,
    Port,
    Statements,
    Subgraph,
    from_generalised,
    to_generalised,
)
from dotcodec.parser.parser import parse_dot, parse_generalised
from dotcodec.parser.preprocess import preprocess
from dotcodec.printer import print_dot
from dotcodec.transitive import transitive_reduction

__all__ = [
    "Attribute",
    "AttributeKind",
    "CodecSettings",
    "ConfigurationError",
    "DotError",
    "DotSyntaxError",
    "Edge",
    "GeneralisedGraph",
    "GeneralisedStatements",
    "GlobalAttributes",
    "Graph",
    "Html",
    "LabelledGraph",
    "LexicalAmbiguity",
    "NetworkXGraph",
    "Node",
    "Numeral",
    "Port",
    "Statements",
    "Subgraph",
    "augment",
    "canonicalise",
    "dot_node_id",
    "edge_information",
    "edges",
    "from_generalised",
    "get_default_settings",
    "node_information",
    "nodes",
    "parse_dot",
    "parse_generalised",
    "preprocess",
    "print_dot",
    "set_default_settings",
    "to_generalised",
    "transitive_reduction",
]
