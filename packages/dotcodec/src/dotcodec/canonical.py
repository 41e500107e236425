"""Normal form for graph values.

``canonicalise`` is idempotent: running it over its own output returns an equal
value. The normal form

* resolves duplicate attribute names (last wins) and sorts attributes by name;
* merges the default-attribute statements of each scope into at most one
  ``graph``, one ``node`` and one ``edge`` statement, in that order;
* inlines anonymous, non-cluster subgraphs that set no defaults, and drops
  anonymous subgraphs that end up without nodes, edges or subgraphs;
* merges subgraphs with the same name and cluster flag within a scope;
* merges node statements for the same node within a scope;
* collapses parallel edges in strict graphs into the first one;
* orders each scope as defaults, subgraphs, nodes, edges.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from dotcodec.parser.ast import (
    AnyGraph,
    Attribute,
    AttributeKind,
    AttributeValue,
    Attributes,
    Edge,
    GeneralisedStatements,
    GlobalAttributes,
    Graph,
    Node,
    NodeId,
    Statement,
    StatementBlock,
    Statements,
    Subgraph,
)

logger = logging.getLogger("dotcodec.canonical")


def canonicalise(graph: AnyGraph) -> Graph:
    sequence = graph.statements.sequence()
    if graph.strict:
        sequence = _collapse_parallel_edges(sequence, graph.directed)

    statements = _canonical_block(sequence)
    logger.debug(
        "Canonicalised graph: %d defaults, %d subgraphs, %d nodes, %d edges at top level",
        len(statements.attributes),
        len(statements.subgraphs),
        len(statements.nodes),
        len(statements.edges),
    )
    return Graph(
        strict=graph.strict,
        directed=graph.directed,
        graph_id=graph.graph_id,
        statements=statements,
    )


def normalise_attributes(attributes: Attributes) -> Attributes:
    merged: dict[str, AttributeValue] = {}
    for attr in attributes:
        merged[attr.name] = attr.value
    return _sorted_attributes(merged)


def _canonical_block(sequence: tuple[Statement, ...]) -> Statements:
    defaults: dict[AttributeKind, dict[str, AttributeValue]] = {}
    subgraph_order: list[tuple[bool, NodeId] | Subgraph] = []
    named: dict[tuple[bool, NodeId], tuple[Subgraph, list[Statement]]] = {}
    node_attrs: dict[NodeId, dict[str, AttributeValue]] = {}
    edges: list[Edge] = []

    for statement in _flatten(sequence):
        if isinstance(statement, GlobalAttributes):
            scope = defaults.setdefault(statement.kind, {})
            for attr in statement.attributes:
                scope[attr.name] = attr.value
        elif isinstance(statement, Subgraph):
            key = statement.key
            if key is None:
                subgraph_order.append(statement)
            elif key in named:
                named[key][1].extend(statement.statements.sequence())
            else:
                named[key] = (statement, list(statement.statements.sequence()))
                subgraph_order.append(key)
        elif isinstance(statement, Node):
            merged = node_attrs.setdefault(statement.node_id, {})
            for attr in statement.attributes:
                merged[attr.name] = attr.value
        else:
            edges.append(replace(statement, attributes=normalise_attributes(statement.attributes)))

    subgraphs: list[Subgraph] = []
    for entry in subgraph_order:
        if isinstance(entry, Subgraph):
            block = _canonical_block(entry.statements.sequence())
            if not (block.subgraphs or block.nodes or block.edges):
                continue
            subgraphs.append(Subgraph(is_cluster=entry.is_cluster, statements=block))
        else:
            first, collected = named[entry]
            subgraphs.append(
                Subgraph(
                    is_cluster=first.is_cluster,
                    subgraph_id=first.subgraph_id,
                    statements=_canonical_block(tuple(collected)),
                )
            )

    return Statements(
        attributes=tuple(
            GlobalAttributes(kind=kind, attributes=_sorted_attributes(defaults[kind]))
            for kind in AttributeKind
            if defaults.get(kind)
        ),
        subgraphs=tuple(subgraphs),
        nodes=tuple(
            Node(node_id=node_id, attributes=_sorted_attributes(attrs))
            for node_id, attrs in node_attrs.items()
        ),
        edges=tuple(edges),
    )


def _flatten(sequence: tuple[Statement, ...]):
    for statement in sequence:
        if (
            isinstance(statement, Subgraph)
            and not statement.is_cluster
            and statement.subgraph_id is None
            and not _sets_defaults(statement.statements)
        ):
            yield from _flatten(statement.statements.sequence())
        else:
            yield statement


def _sets_defaults(block: StatementBlock) -> bool:
    return any(
        isinstance(statement, GlobalAttributes) and statement.attributes
        for statement in block.sequence()
    )


def _collapse_parallel_edges(
    sequence: tuple[Statement, ...], directed: bool
) -> tuple[Statement, ...]:
    merged: dict[object, dict[str, AttributeValue]] = {}
    _merge_edge_attributes(sequence, directed, merged)
    return _keep_first_edges(sequence, directed, merged, set())


def _merge_edge_attributes(
    sequence: tuple[Statement, ...],
    directed: bool,
    merged: dict[object, dict[str, AttributeValue]],
) -> None:
    for statement in sequence:
        if isinstance(statement, Edge):
            attrs = merged.setdefault(_edge_key(statement, directed), {})
            for attr in statement.attributes:
                attrs[attr.name] = attr.value
        elif isinstance(statement, Subgraph):
            _merge_edge_attributes(statement.statements.sequence(), directed, merged)


def _keep_first_edges(
    sequence: tuple[Statement, ...],
    directed: bool,
    merged: dict[object, dict[str, AttributeValue]],
    emitted: set[object],
) -> tuple[Statement, ...]:
    kept: list[Statement] = []
    for statement in sequence:
        if isinstance(statement, Edge):
            key = _edge_key(statement, directed)
            if key in emitted:
                continue
            emitted.add(key)
            statement = replace(statement, attributes=_sorted_attributes(merged[key]))
        elif isinstance(statement, Subgraph):
            statement = replace(
                statement,
                statements=GeneralisedStatements(
                    items=_keep_first_edges(
                        statement.statements.sequence(), directed, merged, emitted
                    )
                ),
            )
        kept.append(statement)
    return tuple(kept)


def _edge_key(edge: Edge, directed: bool) -> object:
    if directed:
        return (edge.tail, edge.head)
    return frozenset((edge.tail, edge.head))


def _sorted_attributes(values: dict[str, AttributeValue]) -> Attributes:
    return tuple(Attribute(name, values[name]) for name in sorted(values))
