import pytest

from dotcodec.parser.ast import (
    Edge,
    Graph,
    Html,
    Node,
    Numeral,
    Port,
    Statements,
    Subgraph,
)
from dotcodec.parser.parser import parse_dot
from dotcodec.printer import print_dot


def test_port_needs_a_name_or_a_compass_point():
    with pytest.raises(ValueError, match="port needs"):
        Port()

    assert Port(name="p").compass is None
    assert Port(compass="ne").name is None


@pytest.mark.parametrize("subgraph_id", [Html("x"), ""])
def test_cluster_ids_must_survive_the_cluster_prefix(subgraph_id):
    with pytest.raises(ValueError, match="Cluster id"):
        Subgraph(is_cluster=True, subgraph_id=subgraph_id)


@pytest.mark.parametrize("subgraph_id", ["clusterx", "cluster", "cluster_1"])
def test_plain_subgraph_ids_cannot_look_like_clusters(subgraph_id):
    with pytest.raises(ValueError, match="read back as a cluster"):
        Subgraph(subgraph_id=subgraph_id)


def test_accepted_subgraph_ids_print_and_parse_back():
    graph = Graph(
        statements=Statements(
            subgraphs=(
                Subgraph(subgraph_id=Html("<b>s</b>"), statements=Statements(nodes=(Node("a"),))),
                Subgraph(subgraph_id="Cluster"),
                Subgraph(is_cluster=True, subgraph_id="x"),
                Subgraph(is_cluster=True, subgraph_id="_y"),
                Subgraph(is_cluster=True, subgraph_id=Numeral("2.0")),
                Subgraph(is_cluster=True, subgraph_id=7),
            ),
            edges=(Edge("a", "b", tail_port=Port(compass="_"), head_port=Port(name=Numeral(".5"))),),
        )
    )

    assert parse_dot(print_dot(graph)) == graph
