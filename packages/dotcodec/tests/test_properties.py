"""Property-based tests for the codec.

1. Printing then parsing returns the original graph, in both forms.
2. Printed text is left alone by the pre-processor.
3. Every edge endpoint is a node; categorising keeps nodes and edges.
4. Canonicalisation and transitive reduction are idempotent.
5. Transitive reduction keeps reachability.
6. Augmenting keeps structure and tells parallel edges apart.
"""

from __future__ import annotations

from collections import Counter, defaultdict

import hypothesis.strategies as st
import networkx as nx
from hypothesis import given, settings

from dotcodec.augment import augment
from dotcodec.canonical import canonicalise
from dotcodec.extract import edges, nodes
from dotcodec.parser.ast import from_generalised, to_generalised
from dotcodec.parser.parser import parse_dot, parse_generalised
from dotcodec.parser.preprocess import preprocess
from dotcodec.printer import print_dot
from dotcodec.transitive import transitive_reduction
from graph_strategies import generalised_graphs, graphs, labelled_multigraphs

_SETTINGS = settings(max_examples=75, deadline=None)


# =============================================================================
# Printing and parsing
# =============================================================================


@_SETTINGS
@given(graphs())
def test_print_then_parse_is_identity(graph):
    assert parse_dot(print_dot(graph)) == graph


@_SETTINGS
@given(generalised_graphs())
def test_generalised_print_then_parse_is_identity(graph):
    assert parse_generalised(print_dot(graph)) == graph


@_SETTINGS
@given(graphs())
def test_both_forms_print_the_same_text(graph):
    assert print_dot(to_generalised(graph)) == print_dot(graph)


@_SETTINGS
@given(generalised_graphs())
def test_printed_text_needs_no_preprocessing(graph):
    text = print_dot(graph)

    assert preprocess(text) == text


# =============================================================================
# Structure
# =============================================================================


@_SETTINGS
@given(generalised_graphs())
def test_edge_endpoints_are_nodes(graph):
    found = nodes(graph)

    assert all(tail in found and head in found for tail, head in edges(graph))


@_SETTINGS
@given(generalised_graphs())
def test_categorising_keeps_nodes_and_edges(graph):
    categorised = from_generalised(graph)

    assert nodes(categorised) == nodes(graph)
    assert Counter(edges(categorised)) == Counter(edges(graph))


# =============================================================================
# Normal forms
# =============================================================================


@_SETTINGS
@given(st.one_of(graphs(), generalised_graphs()))
def test_canonicalise_is_idempotent(graph):
    once = canonicalise(graph)

    assert canonicalise(once) == once


@_SETTINGS
@given(st.one_of(graphs(), generalised_graphs()))
def test_canonicalise_keeps_nodes(graph):
    assert nodes(canonicalise(graph)) == nodes(graph)


@_SETTINGS
@given(st.one_of(graphs(), generalised_graphs()))
def test_transitive_reduction_keeps_reachability(graph):
    reduced = transitive_reduction(graph)

    closure = nx.transitive_closure(nx.DiGraph(edges(graph)))
    reduced_closure = nx.transitive_closure(nx.DiGraph(edges(reduced)))

    assert set(reduced_closure.edges()) == set(closure.edges())
    assert nodes(reduced) == nodes(graph)
    assert transitive_reduction(reduced) == reduced


# =============================================================================
# Augmenting
# =============================================================================


@_SETTINGS
@given(st.booleans().flatmap(lambda directed: labelled_multigraphs(directed=directed)))
def test_augment_keeps_structure(graph):
    result = augment(
        graph,
        lambda label: {"label": label["letter"]},
        lambda label: {"weight": label["weight"]},
    )

    assert result.directed == graph.is_directed()
    assert result.graph_id is None
    assert result.statements.attributes == ()
    assert nodes(result) == set(graph.nodes())
    assert Counter(edges(result)) == Counter(graph.edges())


@_SETTINGS
@given(st.booleans().flatmap(lambda directed: labelled_multigraphs(directed=directed)))
def test_augment_tells_parallel_edges_apart(graph):
    result = augment(graph, lambda label: {}, lambda label: {"weight": label["weight"]})

    groups = defaultdict(list)
    for edge in result.statements.edges:
        key = (edge.tail, edge.head) if result.directed else frozenset((edge.tail, edge.head))
        groups[key].append(edge.attributes)

    for attribute_sets in groups.values():
        assert len(set(attribute_sets)) == len(attribute_sets)
