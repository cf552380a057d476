"""Biconnected component decomposition of neighbourhood subgraphs."""

import logging
from typing import Iterator, List, Set, Tuple

from molsep.core.graph import Subgraph
from molsep.core.types import BiconnectedComponents


logger = logging.getLogger(__name__)


def biconnected_components(subgraph: Subgraph) -> BiconnectedComponents:
    """
    Label every edge with its biconnected component and find articulation points.

    Iterative depth-first search tracking discovery order and low-link values.
    Edges are pushed on a stack as they are explored; when a DFS child v of u
    finishes with low[v] >= disc[u], everything above the tree edge (u, v) is
    one biconnected component and u separates it from the rest (u is an
    articulation point unless it is a DFS root with a single child).

    Runs in O(V + E). Parallel edges between two vertices form one component.

    Args:
        subgraph: Subgraph to decompose

    Returns:
        BiconnectedComponents with per-edge labels (local edge order),
        articulation points (local vertex ids) and the component count.
        Empty, single-vertex and edgeless inputs give empty results.
    """
    n_vertices = subgraph.n_vertices
    n_edges = subgraph.n_edges

    if n_vertices == 0 or n_edges == 0:
        return BiconnectedComponents(edge_components=[-1] * n_edges)

    adjacency = subgraph.adjacency
    discovery = [-1] * n_vertices
    low = [0] * n_vertices
    edge_components = [-1] * n_edges
    articulation_points: Set[int] = set()
    edge_stack: List[int] = []
    counter = 0
    n_components = 0

    for root in range(n_vertices):
        if discovery[root] != -1 or not adjacency[root]:
            continue

        discovery[root] = low[root] = counter
        counter += 1
        root_children = 0
        # frames: (vertex, tree edge used to reach it, neighbour iterator)
        stack: List[Tuple[int, int, Iterator[Tuple[int, int]]]] = [
            (root, -1, iter(adjacency[root]))
        ]

        while stack:
            v, parent_edge, neighbours = stack[-1]
            descended = False

            for w, edge_id in neighbours:
                if edge_id == parent_edge:
                    continue
                if discovery[w] == -1:
                    edge_stack.append(edge_id)
                    discovery[w] = low[w] = counter
                    counter += 1
                    stack.append((w, edge_id, iter(adjacency[w])))
                    descended = True
                    break
                if discovery[w] < discovery[v]:
                    # back edge to an ancestor
                    edge_stack.append(edge_id)
                    if discovery[w] < low[v]:
                        low[v] = discovery[w]

            if descended:
                continue

            stack.pop()
            if not stack:
                break

            u = stack[-1][0]
            if low[v] < low[u]:
                low[u] = low[v]

            if low[v] >= discovery[u]:
                while True:
                    edge_id = edge_stack.pop()
                    edge_components[edge_id] = n_components
                    if edge_id == parent_edge:
                        break
                n_components += 1

                if u == root:
                    root_children += 1
                else:
                    articulation_points.add(u)

        if root_children > 1:
            articulation_points.add(root)

    logger.debug(
        f"Found {n_components} biconnected components and {len(articulation_points)} "
        f"articulation points in subgraph of {n_vertices} vertices"
    )

    return BiconnectedComponents(
        edge_components=edge_components,
        articulation_points=articulation_points,
        n_components=n_components
    )
