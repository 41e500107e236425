from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from dotcodec.quoting import Html, Numeral

CLUSTER_PREFIX = "cluster"

# Floats are not identifiers: they print as numerals and read back as Numeral.
NodeId = Union[str, int, Numeral, Html]
# Booleans, tuples and lists print as bare words or quoted lists and read back
# as str.
AttributeValue = Union[str, int, float, bool, Numeral, Html, tuple, list]


@dataclass(slots=True, frozen=True)
class Attribute:
    name: str
    value: AttributeValue


Attributes = tuple[Attribute, ...]


class AttributeKind(str, Enum):
    GRAPH = "graph"
    NODE = "node"
    EDGE = "edge"


@dataclass(slots=True, frozen=True)
class GlobalAttributes:
    kind: AttributeKind
    attributes: Attributes = ()


@dataclass(slots=True, frozen=True)
class Node:
    node_id: NodeId
    attributes: Attributes = ()


@dataclass(slots=True, frozen=True)
class Port:
    name: NodeId | None = None
    compass: str | None = None

    def __post_init__(self) -> None:
        if self.name is None and self.compass is None:
            raise ValueError("A port needs a name, a compass point or both")


@dataclass(slots=True, frozen=True)
class Edge:
    tail: NodeId
    head: NodeId
    attributes: Attributes = ()
    tail_port: Port | None = None
    head_port: Port | None = None


@dataclass(slots=True, frozen=True)
class Statements:
    """Statements grouped by category, printed in this field order."""

    attributes: tuple[GlobalAttributes, ...] = ()
    subgraphs: tuple[Subgraph, ...] = ()
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()

    def sequence(self) -> tuple[Statement, ...]:
        return (*self.attributes, *self.subgraphs, *self.nodes, *self.edges)


@dataclass(slots=True, frozen=True)
class GeneralisedStatements:
    """Statements in any order, exactly as written."""

    items: tuple[Statement, ...] = ()

    def sequence(self) -> tuple[Statement, ...]:
        return self.items


StatementBlock = Union[Statements, GeneralisedStatements]


@dataclass(slots=True, frozen=True)
class Subgraph:
    is_cluster: bool = False
    subgraph_id: NodeId | None = None
    statements: StatementBlock = Statements()

    def __post_init__(self) -> None:
        if self.is_cluster:
            # Printed as cluster_<id> and read back from that text.
            if isinstance(self.subgraph_id, Html) or self.subgraph_id == "":
                raise ValueError(f"Cluster id cannot be {self.subgraph_id!r}")
        elif isinstance(self.subgraph_id, str) and self.subgraph_id.startswith(CLUSTER_PREFIX):
            raise ValueError(
                f"Subgraph {self.subgraph_id!r} would read back as a cluster; "
                "use is_cluster=True"
            )

    @property
    def key(self) -> tuple[bool, NodeId] | None:
        if self.subgraph_id is None:
            return None
        return (self.is_cluster, self.subgraph_id)


Statement = Union[GlobalAttributes, Subgraph, Node, Edge]


@dataclass(slots=True, frozen=True)
class Graph:
    strict: bool = False
    directed: bool = True
    graph_id: NodeId | None = None
    statements: Statements = Statements()


@dataclass(slots=True, frozen=True)
class GeneralisedGraph:
    strict: bool = False
    directed: bool = True
    graph_id: NodeId | None = None
    statements: GeneralisedStatements = GeneralisedStatements()


AnyGraph = Union[Graph, GeneralisedGraph]


def to_generalised(graph: Graph) -> GeneralisedGraph:
    return GeneralisedGraph(
        strict=graph.strict,
        directed=graph.directed,
        graph_id=graph.graph_id,
        statements=_generalise_block(graph.statements),
    )


def from_generalised(graph: GeneralisedGraph) -> Graph:
    """Group statements by category, keeping their relative order within each."""
    return Graph(
        strict=graph.strict,
        directed=graph.directed,
        graph_id=graph.graph_id,
        statements=_categorise_block(graph.statements),
    )


def _generalise_block(block: StatementBlock) -> GeneralisedStatements:
    items: list[Statement] = []
    for statement in block.sequence():
        if isinstance(statement, Subgraph):
            statement = Subgraph(
                is_cluster=statement.is_cluster,
                subgraph_id=statement.subgraph_id,
                statements=_generalise_block(statement.statements),
            )
        items.append(statement)
    return GeneralisedStatements(items=tuple(items))


def _categorise_block(block: StatementBlock) -> Statements:
    attributes: list[GlobalAttributes] = []
    subgraphs: list[Subgraph] = []
    nodes: list[Node] = []
    edges: list[Edge] = []

    for statement in block.sequence():
        if isinstance(statement, GlobalAttributes):
            attributes.append(statement)
        elif isinstance(statement, Subgraph):
            subgraphs.append(
                Subgraph(
                    is_cluster=statement.is_cluster,
                    subgraph_id=statement.subgraph_id,
                    statements=_categorise_block(statement.statements),
                )
            )
        elif isinstance(statement, Node):
            nodes.append(statement)
        else:
            edges.append(statement)

    return Statements(
        attributes=tuple(attributes),
        subgraphs=tuple(subgraphs),
        nodes=tuple(nodes),
        edges=tuple(edges),
    )
