"""Transitive reduction of a graph's edge relation."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from dataclasses import replace
from typing import TypeVar

import networkx as nx

from dotcodec.extract import iter_edges
from dotcodec.parser.ast import (
    AnyGraph,
    Edge,
    GeneralisedStatements,
    NodeId,
    StatementBlock,
    Statements,
    Subgraph,
)

logger = logging.getLogger("dotcodec.transitive")

G = TypeVar("G", bound=AnyGraph)


def transitive_reduction(graph: G) -> G:
    """Drop every edge implied by a longer path, keeping reachability intact.

    Edges are treated as directed from tail to head. Repeated edges between the
    same tail and head collapse to the first. Edges are then visited in
    statement order and removed while another path of two or more edges joins
    their endpoints. Nodes, subgraphs and the attributes of kept edges are left
    as they are.
    """
    pairs = [(edge.tail, edge.head) for edge in iter_edges(graph.statements)]
    removed = _redundant_edges(pairs)
    if not removed:
        return graph

    logger.debug("Transitive reduction removed %d of %d edges", len(removed), len(pairs))
    statements = _filter_block(graph.statements, removed, itertools.count())
    return replace(graph, statements=statements)


def _redundant_edges(pairs: list[tuple[NodeId, NodeId]]) -> set[int]:
    removed: set[int] = set()
    graph = nx.DiGraph()
    for index, pair in enumerate(pairs):
        if graph.has_edge(*pair):
            removed.add(index)
        else:
            graph.add_edge(*pair)

    # One pass reaches the fixed point: removals keep reachability unchanged.
    for index, (source, target) in enumerate(pairs):
        if index in removed:
            continue
        graph.remove_edge(source, target)
        if _has_longer_path(graph, source, target):
            removed.add(index)
        else:
            graph.add_edge(source, target)
    return removed


def _has_longer_path(graph: nx.DiGraph, source: NodeId, target: NodeId) -> bool:
    # The direct edge is out of the graph, so each path found has two or more edges.
    return any(nx.has_path(graph, successor, target) for successor in graph.successors(source))


def _filter_block(block: StatementBlock, removed: set[int], counter: Iterator[int]):
    if isinstance(block, Statements):
        # Same traversal order as Statements.sequence(): subgraphs before edges.
        subgraphs = tuple(_filter_subgraph(sub, removed, counter) for sub in block.subgraphs)
        edges = tuple(edge for edge in block.edges if next(counter) not in removed)
        return replace(block, subgraphs=subgraphs, edges=edges)

    items = []
    for statement in block.items:
        if isinstance(statement, Subgraph):
            items.append(_filter_subgraph(statement, removed, counter))
        elif isinstance(statement, Edge):
            if next(counter) not in removed:
                items.append(statement)
        else:
            items.append(statement)
    return GeneralisedStatements(items=tuple(items))


def _filter_subgraph(subgraph: Subgraph, removed: set[int], counter: Iterator[int]) -> Subgraph:
    return replace(subgraph, statements=_filter_block(subgraph.statements, removed, counter))
