"""Render graph values as DOT text.

Output is fully left-justified: one statement per line with no indentation.
Printing a ``Graph`` and its generalised form produce the same text because
both are printed from the same statement sequence.
"""

from __future__ import annotations

from dotcodec.parser.ast import (
    CLUSTER_PREFIX,
    AnyGraph,
    Attributes,
    Edge,
    GlobalAttributes,
    Node,
    NodeId,
    Port,
    Statement,
    StatementBlock,
    Subgraph,
)
from dotcodec.printing import print_field, printer_for, to_dot
from dotcodec.quoting import is_compass_point, quote


def print_dot(graph: AnyGraph) -> str:
    lines: list[str] = []
    header = "digraph" if graph.directed else "graph"
    if graph.strict:
        header = "strict " + header
    if graph.graph_id is not None:
        header += " " + to_dot(graph.graph_id)
    lines.append(header + " {")
    _print_block(graph.statements, graph.directed, lines)
    lines.append("}")
    return "\n".join(lines) + "\n"


def print_attributes(attributes: Attributes) -> str:
    return "[" + ", ".join(print_field(attr.name, attr.value) for attr in attributes) + "]"


def cluster_name(subgraph_id: NodeId | None) -> str:
    """The printed name of a cluster, e.g. ``cluster_a`` or ``cluster``."""
    if subgraph_id is None:
        return CLUSTER_PREFIX
    if isinstance(subgraph_id, str):
        raw = subgraph_id
    else:
        raw = printer_for(subgraph_id).unquoted(subgraph_id)
    return CLUSTER_PREFIX + "_" + raw


def _print_block(block: StatementBlock, directed: bool, lines: list[str]) -> None:
    for statement in block.sequence():
        _print_statement(statement, directed, lines)


def _print_statement(statement: Statement, directed: bool, lines: list[str]) -> None:
    if isinstance(statement, GlobalAttributes):
        lines.append(f"{statement.kind.value} {print_attributes(statement.attributes)};")
    elif isinstance(statement, Subgraph):
        _print_subgraph(statement, directed, lines)
    elif isinstance(statement, Node):
        lines.append(to_dot(statement.node_id) + _attribute_suffix(statement.attributes) + ";")
    else:
        lines.append(_print_edge(statement, directed))


def _print_subgraph(subgraph: Subgraph, directed: bool, lines: list[str]) -> None:
    if subgraph.is_cluster:
        header = f"subgraph {to_dot(cluster_name(subgraph.subgraph_id))} {{"
    elif subgraph.subgraph_id is not None:
        header = f"subgraph {to_dot(subgraph.subgraph_id)} {{"
    else:
        header = "subgraph {"
    lines.append(header)
    _print_block(subgraph.statements, directed, lines)
    lines.append("}")


def _print_edge(edge: Edge, directed: bool) -> str:
    operator = " -> " if directed else " -- "
    return (
        to_dot(edge.tail)
        + _print_port(edge.tail_port)
        + operator
        + to_dot(edge.head)
        + _print_port(edge.head_port)
        + _attribute_suffix(edge.attributes)
        + ";"
    )


def _print_port(port: Port | None) -> str:
    if port is None:
        return ""
    text = ""
    if port.name is not None:
        if isinstance(port.name, str) and is_compass_point(port.name):
            # A bare compass word in this position reads as a compass point.
            text += ":" + quote(port.name)
        else:
            text += ":" + to_dot(port.name)
    if port.compass is not None:
        text += ":" + port.compass
    return text


def _attribute_suffix(attributes: Attributes) -> str:
    if not attributes:
        return ""
    return " " + print_attributes(attributes)
