from dotcodec.canonical import canonicalise, normalise_attributes
from dotcodec.parser.ast import (
    Attribute,
    AttributeKind,
    Edge,
    GlobalAttributes,
    Graph,
    Node,
    Numeral,
    Statements,
    Subgraph,
)
from dotcodec.parser.parser import parse_dot, parse_generalised
from dotcodec.printer import print_dot


def test_normalise_attributes_keeps_last_value_and_sorts():
    attrs = (Attribute("x", 1), Attribute("a", 2), Attribute("x", 3))

    assert normalise_attributes(attrs) == (Attribute("a", 2), Attribute("x", 3))


def test_canonicalise_groups_merges_and_flattens():
    graph = parse_generalised(
        """
        digraph G {
          b -> c [z=1, a=2, z=3];
          node [shape=box];
          { x; y -> z }
          a [label=A];
          node [color=red];
          a [shape=circle];
          subgraph s { p; }
          subgraph s { q; }
          subgraph cluster_k { node [shape=oval] }
          { node [color=blue] }
        }
        """
    )

    result = canonicalise(graph)

    assert result == Graph(
        directed=True,
        graph_id="G",
        statements=Statements(
            attributes=(
                GlobalAttributes(
                    AttributeKind.NODE, (Attribute("color", "red"), Attribute("shape", "box"))
                ),
            ),
            subgraphs=(
                Subgraph(subgraph_id="s", statements=Statements(nodes=(Node("p"), Node("q")))),
                Subgraph(
                    is_cluster=True,
                    subgraph_id="k",
                    statements=Statements(
                        attributes=(
                            GlobalAttributes(AttributeKind.NODE, (Attribute("shape", "oval"),)),
                        )
                    ),
                ),
            ),
            nodes=(
                Node("x"),
                Node("a", (Attribute("label", "A"), Attribute("shape", "circle"))),
            ),
            edges=(
                Edge("b", "c", (Attribute("a", 2), Attribute("z", 3))),
                Edge("y", "z"),
            ),
        ),
    )


def test_defaults_are_ordered_graph_node_edge():
    graph = parse_dot("graph { edge [w=1]; node [s=2]; graph [r=3]; node [] }")

    kinds = [stmt.kind for stmt in canonicalise(graph).statements.attributes]

    assert kinds == [AttributeKind.GRAPH, AttributeKind.NODE, AttributeKind.EDGE]


def test_anonymous_cluster_is_kept_unless_empty():
    graph = parse_dot("digraph { subgraph cluster { a } subgraph cluster { } }")

    assert canonicalise(graph).statements.subgraphs == (
        Subgraph(is_cluster=True, statements=Statements(nodes=(Node("a"),))),
    )


def test_strict_graphs_collapse_parallel_edges():
    graph = parse_generalised(
        "strict graph { a -- b [w=1]; subgraph s { b -- a [c=2]; } a -- b [w=3]; }"
    )

    result = canonicalise(graph)

    assert result.statements.edges == (Edge("a", "b", (Attribute("c", 2), Attribute("w", 3))),)
    assert result.statements.subgraphs == (Subgraph(subgraph_id="s"),)


def test_strict_digraph_keeps_opposite_directions():
    graph = parse_dot("strict digraph { a -> b; b -> a; a -> b; }")

    assert canonicalise(graph).statements.edges == (Edge("a", "b"), Edge("b", "a"))


def test_parallel_edges_survive_in_non_strict_graphs():
    graph = parse_dot("digraph { a -> b; a -> b; }")

    assert canonicalise(graph).statements.edges == (Edge("a", "b"), Edge("a", "b"))


def test_canonicalise_is_idempotent_and_printable():
    graph = parse_generalised(
        "strict digraph { node [b=1, a=2]; {c -> d} subgraph s { e } subgraph s { f } "
        "{ edge [x=1] g -> h } c [k=v] c [j=w] }"
    )

    once = canonicalise(graph)

    assert canonicalise(once) == once
    assert parse_dot(print_dot(once)) == once


def test_numerals_with_equal_values_are_not_merged():
    graph = parse_generalised("graph { 1 [a=x]; 1.0 [a=y]; .5; 0.5; 1 -- 1.0 }")

    result = canonicalise(graph)
    printed = print_dot(result)

    assert {node.node_id for node in result.statements.nodes} == {
        1,
        Numeral("1.0"),
        Numeral(".5"),
        Numeral("0.5"),
    }
    assert result.statements.edges == (Edge(1, Numeral("1.0")),)
    assert "1.0 [a=y];" in printed
    assert "1 [a=x];" in printed
    assert parse_dot(printed) == result
