from collections import Counter

from dotcodec.extract import edge_information, edges, node_information, nodes
from dotcodec.parser.ast import (
    Attribute,
    Edge,
    Graph,
    Node,
    Numeral,
    Statements,
    Subgraph,
    to_generalised,
)
from dotcodec.parser.parser import parse_dot, parse_generalised


def test_nodes_include_edge_only_endpoints():
    graph = parse_dot("digraph { a -> b; subgraph s { c -> d; { e } } }")

    assert nodes(graph) == {"a", "b", "c", "d", "e"}


def test_repeated_node_statements_name_one_node():
    graph = parse_dot("graph { a; a; }")

    assert nodes(graph) == {"a"}
    assert edges(graph) == []


def test_edges_keep_duplicates_in_statement_order():
    graph = parse_generalised("digraph { a -> b; subgraph { b -> c } a -> b; }")

    assert edges(graph) == [("a", "b"), ("b", "c"), ("a", "b")]
    assert Counter(edges(graph)) == Counter({("a", "b"): 2, ("b", "c"): 1})


def test_empty_graph_has_no_nodes_or_edges():
    graph = Graph(statements=Statements(subgraphs=(Subgraph(),)))

    assert nodes(graph) == set()
    assert edges(graph) == []


def test_categorised_and_generalised_forms_agree():
    graph = Graph(
        statements=Statements(
            subgraphs=(Subgraph(subgraph_id="s", statements=Statements(nodes=(Node(1),))),),
            nodes=(Node("x"),),
            edges=(Edge("x", Numeral("2.5")),),
        )
    )

    assert nodes(graph) == nodes(to_generalised(graph)) == {1, "x", Numeral("2.5")}
    assert edges(graph) == edges(to_generalised(graph)) == [("x", Numeral("2.5"))]


def test_node_information_applies_defaults_where_first_seen():
    graph = parse_generalised(
        """
        digraph {
          node [shape=box];
          a;
          subgraph cluster_c { a [label=A]; b; }
          b [color=red];
          node [shape=circle];
          c;
        }
        """
    )

    info = node_information(graph)

    assert info["a"].attributes == (Attribute("shape", "box"), Attribute("label", "A"))
    assert info["a"].paths == ((), ((True, "c"),))
    assert info["b"].attributes == (Attribute("shape", "box"), Attribute("color", "red"))
    assert info["b"].paths == (((True, "c"),), ())
    assert info["c"].attributes == (Attribute("shape", "circle"),)


def test_edge_information_merges_scoped_defaults():
    graph = parse_generalised(
        """
        digraph {
          edge [color=gray];
          a -> b;
          subgraph s { edge [style=dashed]; b -> c [color=red]; }
          c -> d;
        }
        """
    )

    assert edge_information(graph) == [
        Edge("a", "b", (Attribute("color", "gray"),)),
        Edge("b", "c", (Attribute("color", "red"), Attribute("style", "dashed"))),
        Edge("c", "d", (Attribute("color", "gray"),)),
    ]


def test_numerals_with_equal_values_are_distinct_nodes():
    graph = parse_dot("graph { 1; 1.0; .5; 0.5; }")

    assert nodes(graph) == {1, Numeral("1.0"), Numeral(".5"), Numeral("0.5")}
    assert len(nodes(graph)) == 4


def test_numeral_edge_endpoints_keep_their_spelling():
    graph = parse_generalised("digraph { 1.0 -> 1; 2 -> 2. }")

    assert edges(graph) == [(Numeral("1.0"), 1), (2, Numeral("2."))]
