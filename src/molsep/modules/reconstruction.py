"""Build the molecule-separated graph from per-barcode molecule tables."""

import logging
from typing import List

from molsep.core.graph import Graph
from molsep.core.exceptions import PipelineError
from molsep.modules.separation import MoleculeTable


logger = logging.getLogger(__name__)


def molecule_name(barcode: str, molecule: int) -> str:
    return f"{barcode}_{molecule}"


def build_molecule_graph(graph: Graph, molecule_table: MoleculeTable) -> Graph:
    """
    Generate a molecule-separated graph.

    Every barcode v becomes max(table[v]) + 1 molecule vertices named
    ``<barcode>_<molecule>`` carrying the barcode weight; barcodes with an
    empty table disappear. An edge (u, v) of the input graph is kept only when
    u placed v in a molecule and v placed u in a molecule, and is then drawn
    between exactly those two molecule vertices with the original weight.

    The input graph may itself be the output of an earlier round.

    Args:
        graph: Input barcode graph
        molecule_table: Complete molecule table of the input graph

    Returns:
        Molecule-separated graph

    Raises:
        PipelineError: If the molecule table is incomplete or sized for another graph
    """
    if len(molecule_table) != graph.n_vertices or not molecule_table.is_complete:
        raise PipelineError(
            "Molecule table must be complete before the molecule graph is built",
            stage="reconstruction"
        )

    molecule_graph = Graph()
    # first molecule vertex id of each barcode
    first_molecule: List[int] = []

    for vertex_id in range(graph.n_vertices):
        first_molecule.append(molecule_graph.n_vertices)
        barcode = graph.names[vertex_id]
        weight = graph.weights[vertex_id]
        for molecule in range(molecule_table.n_molecules(vertex_id)):
            molecule_graph.add_vertex(molecule_name(barcode, molecule), weight)

    dropped = 0
    for edge in graph.edges():
        u_molecule = molecule_table[edge.source].get(edge.target)
        v_molecule = molecule_table[edge.target].get(edge.source)
        if u_molecule is None or v_molecule is None:
            dropped += 1
            continue
        molecule_graph.add_edge(
            first_molecule[edge.source] + u_molecule,
            first_molecule[edge.target] + v_molecule,
            edge.weight
        )

    logger.info(
        f"Molecule graph has {molecule_graph.n_vertices} vertices and "
        f"{molecule_graph.n_edges} edges ({dropped} edges dropped)"
    )

    return molecule_graph
