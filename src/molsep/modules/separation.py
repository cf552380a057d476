"""Per-vertex molecule separation over the whole barcode graph."""

import logging
import multiprocessing
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, Iterator, List, Optional, Tuple

from molsep.core.graph import Graph
from molsep.core.exceptions import PipelineError
from molsep.modules.assignment import LocalTable, get_strategy


logger = logging.getLogger(__name__)

# Graph and strategy shared by every task of one worker process
_worker_graph: Optional[Graph] = None
_worker_strategy: Optional[str] = None


class MoleculeTable:
    """
    Global molecule table: one local table per vertex of the input graph.

    Pre-sized with one slot per vertex. A slot can be written exactly once;
    after all slots are filled the table is complete and only read.
    """

    def __init__(self, n_vertices: int) -> None:
        self._slots: List[Optional[LocalTable]] = [None] * n_vertices
        self._n_assigned = 0

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, vertex_id: int) -> LocalTable:
        table = self._slots[vertex_id]
        if table is None:
            raise KeyError(f"No molecule table assigned for vertex {vertex_id}")
        return table

    def __iter__(self) -> Iterator[LocalTable]:
        for vertex_id in range(len(self._slots)):
            yield self[vertex_id]

    def assign(self, vertex_id: int, table: LocalTable) -> None:
        """Write the local table of a vertex into its slot."""
        if self._slots[vertex_id] is not None:
            raise PipelineError(
                f"Molecule table slot {vertex_id} has already been assigned",
                stage="separation"
            )
        self._slots[vertex_id] = table
        self._n_assigned += 1

    @property
    def is_complete(self) -> bool:
        return self._n_assigned == len(self._slots)

    def n_molecules(self, vertex_id: int) -> int:
        """Number of molecule vertices the barcode expands into."""
        table = self[vertex_id]
        return max(table.values()) + 1 if table else 0


def separate_vertex(graph: Graph, vertex_id: int, strategy: str = "bc") -> LocalTable:
    """
    Separate the molecules of one barcode.

    The neighbourhood subgraph (the vertex itself excluded) lives only for the
    duration of this call.

    Args:
        graph: Input barcode graph
        vertex_id: Anchor vertex
        strategy: Name of the separation strategy

    Returns:
        Local molecule table of the anchor vertex
    """
    separate = get_strategy(strategy)
    with graph.induced_subgraph(graph.neighbours(vertex_id)) as subgraph:
        return separate(subgraph)


def separate_molecules(
    graph: Graph,
    strategy: str = "bc",
    threads: int = 1,
    chunk_size: Optional[int] = None
) -> MoleculeTable:
    """
    Run molecule separation for every vertex of the graph.

    Vertices are independent, so with threads > 1 they are split into
    contiguous chunks and processed by a process pool. Worker results are
    written into the table by this function only.

    Args:
        graph: Input barcode graph
        strategy: Name of the separation strategy
        threads: Number of worker processes
        chunk_size: Vertices per task (defaults to an even split over 4x workers)

    Returns:
        Complete MoleculeTable

    Raises:
        ConfigurationError: Unsupported strategy
        ResourceError: A neighbourhood subgraph could not be allocated
    """
    # fail on an unknown strategy before any work is scheduled
    get_strategy(strategy)

    n_vertices = graph.n_vertices
    molecule_table = MoleculeTable(n_vertices)
    max_workers = min(threads, multiprocessing.cpu_count(), max(n_vertices, 1))

    if max_workers <= 1 or n_vertices < 2:
        _separate_sequential(graph, strategy, molecule_table)
    else:
        _separate_parallel(graph, strategy, molecule_table, max_workers, chunk_size)

    if not molecule_table.is_complete:
        raise PipelineError("Molecule separation did not cover every vertex", stage="separation")

    return molecule_table


def _separate_sequential(graph: Graph, strategy: str, molecule_table: MoleculeTable) -> None:
    """Sequential separation for small graphs or a single thread."""
    for vertex_id in range(graph.n_vertices):
        molecule_table.assign(vertex_id, separate_vertex(graph, vertex_id, strategy))


def _separate_parallel(
    graph: Graph,
    strategy: str,
    molecule_table: MoleculeTable,
    max_workers: int,
    chunk_size: Optional[int]
) -> None:
    n_vertices = graph.n_vertices
    if not chunk_size:
        chunk_size = max(1, -(-n_vertices // (max_workers * 4)))
    chunks = [
        (start, min(start + chunk_size, n_vertices))
        for start in range(0, n_vertices, chunk_size)
    ]

    logger.info(
        f"Separating {n_vertices} vertices in {len(chunks)} chunks using {max_workers} processes"
    )

    with ProcessPoolExecutor(
        max_workers=max_workers,
        initializer=_init_worker,
        initargs=(graph, strategy)
    ) as executor:
        future_to_chunk = {
            executor.submit(_separate_chunk, start, stop): (start, stop)
            for start, stop in chunks
        }

        for future in as_completed(future_to_chunk):
            start, stop = future_to_chunk[future]
            try:
                chunk_results = future.result()
            except Exception as e:
                logger.error(f"Molecule separation failed for vertices {start}-{stop - 1}: {e}")
                for pending in future_to_chunk:
                    pending.cancel()
                raise

            for vertex_id, table in chunk_results:
                molecule_table.assign(vertex_id, table)
            logger.debug(f"Completed vertices {start}-{stop - 1}")


def _init_worker(graph: Graph, strategy: str) -> None:
    global _worker_graph, _worker_strategy
    _worker_graph = graph
    _worker_strategy = strategy


def _separate_chunk(start: int, stop: int) -> List[Tuple[int, Dict[int, int]]]:
    return [
        (vertex_id, separate_vertex(_worker_graph, vertex_id, _worker_strategy))
        for vertex_id in range(start, stop)
    ]
