"""Lift labelled graphs into the DOT model.

Augmenting only attaches attributes: the resulting ``Graph`` has exactly the
input's nodes and edges. Parallel edges are told apart by an index attribute
(``CodecSettings.edge_index_attribute``). Edges whose projection already sets
it keep their value; the rest get the lowest indices not taken in their group.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import Any, Protocol, TypeVar, Union, runtime_checkable

import networkx as nx

from dotcodec.config import CodecSettings, get_default_settings
from dotcodec.parser.ast import (
    Attribute,
    AttributeValue,
    Attributes,
    Edge,
    GlobalAttributes,
    Graph,
    Html,
    Node,
    NodeId,
    Numeral,
    Statements,
    Subgraph,
)
from dotcodec.printing import to_dot, unqt_dot
from dotcodec.quoting import numeral_id

logger = logging.getLogger("dotcodec.augment")

N = TypeVar("N")
E = TypeVar("E")

AttributeSource = Union[
    Mapping[str, AttributeValue], Iterable[Union[Attribute, tuple[str, AttributeValue]]]
]


@runtime_checkable
class LabelledGraph(Protocol[N, E]):
    """What the augmenter needs from a graph: labelled nodes, labelled edges, lookup."""

    def labelled_nodes(self) -> Iterable[tuple[Hashable, N]]:
        ...

    def labelled_edges(self) -> Iterable[tuple[Hashable, Hashable, E]]:
        ...

    def is_directed(self) -> bool:
        ...

    def has_node(self, node: Hashable) -> bool:
        ...


class NetworkXGraph:
    """``LabelledGraph`` view of a networkx graph; labels are the data dicts."""

    def __init__(self, graph: nx.Graph):
        self._graph = graph

    def labelled_nodes(self) -> Iterable[tuple[Hashable, dict[str, Any]]]:
        return self._graph.nodes(data=True)

    def labelled_edges(self) -> Iterable[tuple[Hashable, Hashable, dict[str, Any]]]:
        # Multigraphs yield one triple per parallel edge.
        return self._graph.edges(data=True)

    def is_directed(self) -> bool:
        return self._graph.is_directed()

    def has_node(self, node: Hashable) -> bool:
        return self._graph.has_node(node)


def dot_node_id(node: Hashable) -> NodeId:
    """The DOT identifier used for a node identity."""
    if isinstance(node, bool):
        return str(node)
    if isinstance(node, (str, int, Numeral, Html)):
        return node
    if isinstance(node, float) and math.isfinite(node):
        return numeral_id(unqt_dot(node))
    return str(node)


def augment(
    graph: LabelledGraph[N, E] | nx.Graph,
    node_attributes: Callable[[N], AttributeSource],
    edge_attributes: Callable[[E], AttributeSource],
    *,
    cluster_by: Callable[[Hashable, N], NodeId | None] | None = None,
    global_attributes: Iterable[GlobalAttributes] = (),
    settings: CodecSettings | None = None,
) -> Graph:
    """Convert ``graph`` into a ``Graph`` whose attributes come from its labels.

    Args:
        graph: Any ``LabelledGraph``; networkx graphs are wrapped automatically.
        node_attributes: Projects a node label to attributes.
        edge_attributes: Projects an edge label to attributes.
        cluster_by: Optionally names the cluster a node is drawn in.
        global_attributes: Default-attribute statements for the top level.
        settings: Overrides the module-level default settings.

    Raises:
        ValueError: If an edge endpoint is not a node of ``graph`` or two node
            identities map to the same DOT identifier.
    """
    if isinstance(graph, nx.Graph):
        graph = NetworkXGraph(graph)
    settings = settings or get_default_settings()

    ids: dict[Hashable, NodeId] = {}
    owners: dict[NodeId, Hashable] = {}
    top_nodes: list[Node] = []
    clusters: dict[NodeId, list[Node]] = {}

    for node, label in graph.labelled_nodes():
        node_id = dot_node_id(node)
        owner = owners.setdefault(node_id, node)
        if owner != node:
            raise ValueError(f"Nodes {owner!r} and {node!r} share the DOT identifier {node_id!r}")
        ids[node] = node_id

        statement = Node(node_id=node_id, attributes=_as_attributes(node_attributes(label)))
        cluster = cluster_by(node, label) if cluster_by is not None else None
        if cluster is None:
            top_nodes.append(statement)
        else:
            clusters.setdefault(cluster, []).append(statement)

    directed = graph.is_directed()
    raw_edges: list[tuple[NodeId, NodeId, Attributes]] = []
    for tail, head, label in graph.labelled_edges():
        for endpoint in (tail, head):
            if not graph.has_node(endpoint) or endpoint not in ids:
                raise ValueError(f"Edge endpoint {endpoint!r} is not a node of the graph")
        raw_edges.append((ids[tail], ids[head], _as_attributes(edge_attributes(label))))

    edges = _disambiguate(raw_edges, directed, settings.edge_index_attribute)

    logger.debug(
        "Augmented graph with %d nodes, %d edges and %d clusters",
        len(ids),
        len(edges),
        len(clusters),
    )
    return Graph(
        strict=False,
        directed=directed,
        statements=Statements(
            attributes=tuple(global_attributes),
            subgraphs=tuple(
                Subgraph(is_cluster=True, subgraph_id=cluster, statements=Statements(nodes=tuple(members)))
                for cluster, members in clusters.items()
            ),
            nodes=tuple(top_nodes),
            edges=tuple(edges),
        ),
    )


def _disambiguate(
    raw_edges: list[tuple[NodeId, NodeId, Attributes]], directed: bool, index_attribute: str
) -> list[Edge]:
    groups: dict[object, list[int]] = {}
    for position, (tail, head, _) in enumerate(raw_edges):
        groups.setdefault(_pair_key(tail, head, directed), []).append(position)

    attributes = [attrs for _, _, attrs in raw_edges]
    for positions in groups.values():
        if len(positions) < 2:
            continue
        # Compared as printed text: 1 and "1" are the same attribute value in DOT.
        taken = {
            to_dot(attr.value)
            for position in positions
            for attr in attributes[position]
            if attr.name == index_attribute
        }
        free = (index for index in itertools.count() if to_dot(index) not in taken)
        for position in positions:
            if not any(attr.name == index_attribute for attr in attributes[position]):
                attributes[position] += (Attribute(index_attribute, next(free)),)

    return [
        Edge(tail=tail, head=head, attributes=attrs)
        for (tail, head, _), attrs in zip(raw_edges, attributes)
    ]


def _pair_key(tail: NodeId, head: NodeId, directed: bool) -> object:
    if directed:
        return (tail, head)
    return frozenset((tail, head))


def _as_attributes(source: AttributeSource) -> Attributes:
    if isinstance(source, Mapping):
        return tuple(Attribute(str(name), value) for name, value in source.items())
    attributes = []
    for item in source:
        if isinstance(item, Attribute):
            attributes.append(item)
        else:
            name, value = item
            attributes.append(Attribute(str(name), value))
    return tuple(attributes)
