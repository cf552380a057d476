"""Tests for the graph store and induced subgraph views."""

import pytest

from molsep.core.exceptions import ResourceError
from molsep.core.graph import Graph, Subgraph
from conftest import make_graph


class TestGraphStore:

    def test_add_vertex_returns_dense_ids(self):
        graph = Graph()
        assert graph.add_vertex("A", 5) == 0
        assert graph.add_vertex("B", 3) == 1
        assert graph.n_vertices == 2
        assert graph.vertex(1).name == "B"
        assert graph.vertex(1).weight == 3
        assert graph.vertex(1).index_original == 1

    def test_add_edge_updates_both_endpoints(self):
        graph = make_graph([("A", 1), ("B", 1)], [("A", "B", 4)])
        assert graph.n_edges == 1
        assert graph.neighbours(0) == [1]
        assert graph.neighbours(1) == [0]
        edge = next(graph.edges())
        assert (edge.source, edge.target, edge.weight) == (0, 1, 4)

    def test_add_edge_rejects_unknown_vertex(self):
        graph = make_graph([("A", 1)], [])
        with pytest.raises(IndexError):
            graph.add_edge(0, 3, 1)

    def test_neighbours_are_distinct_and_exclude_self(self):
        graph = make_graph(
            [("A", 1), ("B", 1), ("C", 1)],
            [("A", "B", 1), ("A", "B", 2), ("A", "A", 1), ("A", "C", 1)]
        )
        assert graph.neighbours(0) == [1, 2]
        assert graph.degree(0) == 4


class TestInducedSubgraph:

    def test_index_map_points_to_original_vertices(self, triangle_with_pendant):
        subgraph = triangle_with_pendant.induced_subgraph([1, 2, 3])
        assert subgraph.index_map == [1, 2, 3]
        assert subgraph.n_vertices == 3
        # only B-C lies inside {B, C, D}
        assert subgraph.edges == [(0, 1)]
        assert subgraph.edge_weights == [1]

    def test_parallel_edges_are_kept_and_self_loops_dropped(self):
        graph = make_graph(
            [("A", 1), ("B", 1)],
            [("A", "B", 1), ("A", "B", 2), ("B", "B", 9)]
        )
        subgraph = graph.induced_subgraph([0, 1])
        assert subgraph.edges == [(0, 1), (0, 1)]
        assert subgraph.edge_weights == [1, 2]

    def test_empty_subgraph(self, triangle_with_pendant):
        subgraph = triangle_with_pendant.induced_subgraph([])
        assert subgraph.n_vertices == 0
        assert subgraph.n_edges == 0

    def test_extraction_leaves_parent_unchanged(self, triangle_with_pendant):
        before = (
            list(triangle_with_pendant.names),
            list(triangle_with_pendant.edge_sources),
            [list(a) for a in triangle_with_pendant.adjacency],
        )
        first = triangle_with_pendant.induced_subgraph([1, 2, 3])
        second = triangle_with_pendant.induced_subgraph([0, 2])
        first.release()
        assert second.edges == [(0, 1)]
        after = (
            list(triangle_with_pendant.names),
            list(triangle_with_pendant.edge_sources),
            [list(a) for a in triangle_with_pendant.adjacency],
        )
        assert before == after

    def test_context_manager_releases_storage(self, triangle_with_pendant):
        with triangle_with_pendant.induced_subgraph([0, 1, 2]) as subgraph:
            assert isinstance(subgraph, Subgraph)
            assert subgraph.n_edges == 3
        assert subgraph.n_vertices == 0
        assert subgraph.n_edges == 0
        assert triangle_with_pendant.n_edges == 4

    def test_allocation_failure_becomes_resource_error(self, triangle_with_pendant):
        class ExhaustedAdjacency(list):
            def __iter__(self):
                raise MemoryError()

        triangle_with_pendant.adjacency[0] = ExhaustedAdjacency(triangle_with_pendant.adjacency[0])
        with pytest.raises(ResourceError) as excinfo:
            triangle_with_pendant.induced_subgraph([0, 1, 2])
        assert excinfo.value.resource_type == "memory"
        assert excinfo.value.stage == "separation"
        assert isinstance(excinfo.value.__cause__, MemoryError)
