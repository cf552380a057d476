"""Arena-backed barcode graph and read-only induced subgraph views."""

from typing import Dict, Iterable, Iterator, List, Tuple

from molsep.core.types import Vertex, Edge
from molsep.core.exceptions import ResourceError


class Graph:
    """
    Undirected weighted graph with vertices and edges stored in flat arrays.

    Vertex ids are dense integers assigned in insertion order and double as
    the original-index that induced subgraphs map back to. Edges keep their
    insertion order, which is also the order they are written out in.
    """

    def __init__(self) -> None:
        self.names: List[str] = []
        self.weights: List[int] = []
        self.edge_sources: List[int] = []
        self.edge_targets: List[int] = []
        self.edge_weights: List[int] = []
        # adjacency[v] holds (neighbour, edge id) pairs
        self.adjacency: List[List[Tuple[int, int]]] = []

    def __len__(self) -> int:
        return len(self.names)

    @property
    def n_vertices(self) -> int:
        return len(self.names)

    @property
    def n_edges(self) -> int:
        return len(self.edge_weights)

    def add_vertex(self, name: str, weight: int = 0) -> int:
        """Add a vertex and return its id."""
        vertex_id = len(self.names)
        self.names.append(name)
        self.weights.append(weight)
        self.adjacency.append([])
        return vertex_id

    def add_edge(self, u: int, v: int, weight: int = 0) -> int:
        """Add an undirected edge between two existing vertices and return its id."""
        if not (0 <= u < len(self.names) and 0 <= v < len(self.names)):
            raise IndexError(f"Edge ({u}, {v}) references a vertex outside the graph")
        edge_id = len(self.edge_weights)
        self.edge_sources.append(u)
        self.edge_targets.append(v)
        self.edge_weights.append(weight)
        self.adjacency[u].append((v, edge_id))
        if u != v:
            self.adjacency[v].append((u, edge_id))
        return edge_id

    def vertex(self, vertex_id: int) -> Vertex:
        return Vertex(
            name=self.names[vertex_id],
            weight=self.weights[vertex_id],
            index_original=vertex_id
        )

    def edges(self) -> Iterator[Edge]:
        for source, target, weight in zip(self.edge_sources, self.edge_targets, self.edge_weights):
            yield Edge(source=source, target=target, weight=weight)

    def degree(self, vertex_id: int) -> int:
        return len(self.adjacency[vertex_id])

    def neighbours(self, vertex_id: int) -> List[int]:
        """Distinct neighbours of a vertex, excluding the vertex itself."""
        return list(dict.fromkeys(
            w for w, _ in self.adjacency[vertex_id] if w != vertex_id
        ))

    def induced_subgraph(self, vertices: Iterable[int]) -> "Subgraph":
        """
        Extract the subgraph induced by a vertex subset.

        The parent graph is only read, so several workers may extract
        subgraphs from the same parent at once. Self-loops are not carried
        into the subgraph.

        Args:
            vertices: Original vertex ids to include

        Returns:
            Subgraph whose index_map maps local ids back to original ids

        Raises:
            ResourceError: If the subgraph cannot be allocated
        """
        vertices = list(vertices)
        try:
            index_map = list(dict.fromkeys(vertices))
            local_ids: Dict[int, int] = {original: local for local, original in enumerate(index_map)}
            adjacency: List[List[Tuple[int, int]]] = [[] for _ in index_map]
            edges: List[Tuple[int, int]] = []
            edge_weights: List[int] = []

            for local_u, original_u in enumerate(index_map):
                for original_w, edge_id in self.adjacency[original_u]:
                    local_w = local_ids.get(original_w)
                    # each edge is seen from both endpoints; keep it once
                    if local_w is None or local_w <= local_u:
                        continue
                    local_edge = len(edges)
                    edges.append((local_u, local_w))
                    edge_weights.append(self.edge_weights[edge_id])
                    adjacency[local_u].append((local_w, local_edge))
                    adjacency[local_w].append((local_u, local_edge))

        except MemoryError as e:
            raise ResourceError(
                f"Unable to allocate neighbourhood subgraph of {len(vertices)} vertices",
                resource_type="memory",
                stage="separation"
            ) from e

        return Subgraph(index_map=index_map, edges=edges, edge_weights=edge_weights,
                        adjacency=adjacency)


class Subgraph:
    """
    Read-only induced subgraph view.

    Holds only local index lists; vertex identities are recovered through
    index_map (local id -> original-index of the parent graph).
    """

    def __init__(
        self,
        index_map: List[int],
        edges: List[Tuple[int, int]],
        edge_weights: List[int],
        adjacency: List[List[Tuple[int, int]]]
    ) -> None:
        self.index_map = index_map
        self.edges = edges
        self.edge_weights = edge_weights
        self.adjacency = adjacency

    def __enter__(self) -> "Subgraph":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()

    @property
    def n_vertices(self) -> int:
        return len(self.index_map)

    @property
    def n_edges(self) -> int:
        return len(self.edges)

    def release(self) -> None:
        """Drop the subgraph's storage; the parent graph is untouched."""
        self.index_map = []
        self.edges = []
        self.edge_weights = []
        self.adjacency = []
