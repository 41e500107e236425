"""Structural information implied by a graph's statements.

Nodes exist whether they are declared with a node statement or only appear as
an edge endpoint, at any subgraph depth.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from dotcodec.parser.ast import (
    AnyGraph,
    Attribute,
    AttributeKind,
    AttributeValue,
    Attributes,
    Edge,
    GlobalAttributes,
    Node,
    NodeId,
    StatementBlock,
    Subgraph,
)

SubgraphPath = tuple[tuple[bool, NodeId | None], ...]


@dataclass(slots=True, frozen=True)
class NodeInfo:
    node_id: NodeId
    attributes: Attributes
    # Each path lists the (is_cluster, id) of enclosing subgraphs; () is the root.
    paths: tuple[SubgraphPath, ...]


@dataclass(slots=True)
class _NodeState:
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    paths: list[SubgraphPath] = field(default_factory=list)


def nodes(graph: AnyGraph) -> set[NodeId]:
    return set(block_node_ids(graph.statements))


def edges(graph: AnyGraph) -> list[tuple[NodeId, NodeId]]:
    """Every edge as a (tail, head) pair, in statement order; duplicates are kept."""
    return [(edge.tail, edge.head) for edge in iter_edges(graph.statements)]


def block_node_ids(block: StatementBlock) -> list[NodeId]:
    """Node IDs in order of first appearance."""
    seen: dict[NodeId, None] = {}
    _collect_node_ids(block, seen)
    return list(seen)


def iter_edges(block: StatementBlock) -> Iterator[Edge]:
    for statement in block.sequence():
        if isinstance(statement, Edge):
            yield statement
        elif isinstance(statement, Subgraph):
            yield from iter_edges(statement.statements)


def node_information(graph: AnyGraph) -> dict[NodeId, NodeInfo]:
    """Effective attributes and subgraph membership of every node.

    A node picks up the ``node [...]`` defaults in force where it is first
    seen; explicit attributes from any later statement override them.
    """
    states: dict[NodeId, _NodeState] = {}
    _walk(graph.statements, (), {}, {}, states, [])
    return {
        node_id: NodeInfo(
            node_id=node_id,
            attributes=_to_attributes(state.attributes),
            paths=tuple(state.paths),
        )
        for node_id, state in states.items()
    }


def edge_information(graph: AnyGraph) -> list[Edge]:
    """Every edge with the ``edge [...]`` defaults in force at its statement applied."""
    collected: list[Edge] = []
    _walk(graph.statements, (), {}, {}, {}, collected)
    return collected


def _collect_node_ids(block: StatementBlock, seen: dict[NodeId, None]) -> None:
    for statement in block.sequence():
        if isinstance(statement, Node):
            seen.setdefault(statement.node_id, None)
        elif isinstance(statement, Edge):
            seen.setdefault(statement.tail, None)
            seen.setdefault(statement.head, None)
        elif isinstance(statement, Subgraph):
            _collect_node_ids(statement.statements, seen)


def _walk(
    block: StatementBlock,
    path: SubgraphPath,
    node_defaults: dict[str, AttributeValue],
    edge_defaults: dict[str, AttributeValue],
    states: dict[NodeId, _NodeState],
    collected: list[Edge],
) -> None:
    node_defaults = dict(node_defaults)
    edge_defaults = dict(edge_defaults)

    for statement in block.sequence():
        if isinstance(statement, GlobalAttributes):
            if statement.kind is AttributeKind.NODE:
                node_defaults.update(_to_dict(statement.attributes))
            elif statement.kind is AttributeKind.EDGE:
                edge_defaults.update(_to_dict(statement.attributes))
        elif isinstance(statement, Subgraph):
            _walk(
                statement.statements,
                path + ((statement.is_cluster, statement.subgraph_id),),
                node_defaults,
                edge_defaults,
                states,
                collected,
            )
        elif isinstance(statement, Node):
            state = _touch(states, statement.node_id, path, node_defaults)
            state.attributes.update(_to_dict(statement.attributes))
        else:
            _touch(states, statement.tail, path, node_defaults)
            _touch(states, statement.head, path, node_defaults)
            merged = dict(edge_defaults)
            merged.update(_to_dict(statement.attributes))
            collected.append(
                Edge(
                    tail=statement.tail,
                    head=statement.head,
                    attributes=_to_attributes(merged),
                    tail_port=statement.tail_port,
                    head_port=statement.head_port,
                )
            )


def _touch(
    states: dict[NodeId, _NodeState],
    node_id: NodeId,
    path: SubgraphPath,
    node_defaults: dict[str, AttributeValue],
) -> _NodeState:
    state = states.get(node_id)
    if state is None:
        state = _NodeState(attributes=dict(node_defaults))
        states[node_id] = state
    if path not in state.paths:
        state.paths.append(path)
    return state


def _to_dict(attributes: Attributes) -> dict[str, AttributeValue]:
    return {attr.name: attr.value for attr in attributes}


def _to_attributes(values: dict[str, AttributeValue]) -> Attributes:
    return tuple(Attribute(name, value) for name, value in values.items())
