"""Pytest configuration and shared fixtures."""

import random
from typing import Dict, Sequence, Tuple

import pytest

from molsep.core.graph import Graph


def make_graph(
    vertices: Sequence[Tuple[str, int]],
    edges: Sequence[Tuple[str, str, int]]
) -> Graph:
    """Build a graph from (name, weight) vertices and (name, name, weight) edges."""
    graph = Graph()
    ids: Dict[str, int] = {}
    for name, weight in vertices:
        ids[name] = graph.add_vertex(name, weight)
    for u, v, weight in edges:
        graph.add_edge(ids[u], ids[v], weight)
    return graph


def random_graph(seed: int, n_vertices: int = 30, edge_probability: float = 0.2) -> Graph:
    """Erdos-Renyi style graph with a fixed seed."""
    rng = random.Random(seed)
    graph = Graph()
    for i in range(n_vertices):
        graph.add_vertex(f"bc{i}", rng.randint(1, 50))
    for u in range(n_vertices):
        for v in range(u + 1, n_vertices):
            if rng.random() < edge_probability:
                graph.add_edge(u, v, rng.randint(1, 20))
    return graph


@pytest.fixture
def triangle_with_pendant():
    """Triangle A-B-C plus pendant D on A."""
    return make_graph(
        [("A", 5), ("B", 3), ("C", 4), ("D", 2)],
        [("A", "B", 1), ("A", "C", 1), ("A", "D", 1), ("B", "C", 1)]
    )


@pytest.fixture
def two_molecule_barcode():
    """
    Barcode X tagging two molecules: its neighbours form two disjoint
    triangles {A1, A2, A3} and {B1, B2, B3}.
    """
    vertices = [("X", 10)] + [(f"{p}{i}", 1) for p in "AB" for i in (1, 2, 3)]
    edges = [("X", f"{p}{i}", 2) for p in "AB" for i in (1, 2, 3)]
    for p in "AB":
        edges += [(f"{p}1", f"{p}2", 3), (f"{p}2", f"{p}3", 3), (f"{p}1", f"{p}3", 3)]
    return make_graph(vertices, edges)


@pytest.fixture
def complete_graph_k4():
    names = ["A", "B", "C", "D"]
    return make_graph(
        [(name, i + 1) for i, name in enumerate(names)],
        [(u, v, 7) for i, u in enumerate(names) for v in names[i + 1:]]
    )


@pytest.fixture
def graph_tsv(tmp_path):
    """Write TSV graph text to a file and return its path."""
    counter = {"n": 0}

    def _write(text: str):
        counter["n"] += 1
        path = tmp_path / f"graph{counter['n']}.tsv"
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def scenario_tsv():
    return (
        "U\tm\n"
        "A\t5\n"
        "B\t3\n"
        "C\t4\n"
        "D\t2\n"
        "\n"
        "U\tV\tm\n"
        "A\tB\t1\n"
        "A\tC\t1\n"
        "A\tD\t1\n"
        "B\tC\t1\n"
    )
