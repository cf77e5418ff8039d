"""
Tests for graph queries over connections.
"""
from strategy_builder.features.connections.application import (
    connections_into,
    find_dependency_blocks,
    find_dependent_blocks,
    find_shortest_path,
    get_input_connections,
    get_output_connections,
)

from conftest import connect, make_block, number_node
from strategy_builder.shared.domain.value_objects import DataKind


def _diamond():
    """a -> b, a -> c, b -> d, c -> d"""
    a, b, c = number_node("a"), number_node("b"), number_node("c")
    d = make_block("d", inputs=(("x", DataKind.NUMBER, True), ("y", DataKind.NUMBER, True)))
    connections = [
        connect("ab", a, b),
        connect("ac", a, c),
        connect("bd", b, d, input_index=0),
        connect("cd", c, d, input_index=1),
    ]
    return connections


class TestPortQueries:

    def test_input_and_output_connections(self):
        connections = _diamond()
        assert [c.id for c in get_input_connections("d", connections)] == ["bd", "cd"]
        assert [c.id for c in get_output_connections("a", connections)] == ["ab", "ac"]
        assert get_input_connections("a", connections) == []

    def test_connections_into_single_port(self):
        """Only connections on the named input are returned."""
        connections = _diamond()
        assert [c.id for c in connections_into("d_input_1", connections)] == ["cd"]


class TestReachability:

    def test_dependents_breadth_first(self):
        assert find_dependent_blocks("a", _diamond()) == ["b", "c", "d"]
        assert find_dependent_blocks("d", _diamond()) == []

    def test_dependencies(self):
        """Upstream search walks connections backwards."""
        assert sorted(find_dependency_blocks("d", _diamond())) == ["a", "b", "c"]


class TestShortestPath:

    def test_path_found(self):
        assert find_shortest_path("a", "d", _diamond()) == ["a", "b", "d"]

    def test_same_block(self):
        assert find_shortest_path("b", "b", []) == ["b"]

    def test_unreachable(self):
        """Paths follow connection direction only."""
        assert find_shortest_path("d", "a", _diamond()) is None
