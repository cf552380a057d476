"""
Summary statistics for a molecule separation run.

This module provides:
- Per-barcode table of degree, molecule count and assigned neighbours
- Run-level summary of barcodes, molecules and kept/dropped edges
"""

import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import numpy as np
import pandas as pd

from molsep.core.graph import Graph
from molsep.modules.separation import MoleculeTable


logger = logging.getLogger(__name__)


def create_barcode_table(graph: Graph, molecule_table: MoleculeTable) -> pd.DataFrame:
    """
    Create per-barcode separation table.

    Args:
        graph: Input barcode graph
        molecule_table: Complete molecule table of the graph

    Returns:
        DataFrame with barcode, degree, molecules and assigned_neighbours columns
    """
    n_vertices = graph.n_vertices
    return pd.DataFrame({
        "barcode": pd.Series(graph.names, dtype=object),
        "degree": np.fromiter(
            (len(graph.neighbours(v)) for v in range(n_vertices)), dtype=np.int64, count=n_vertices
        ),
        "molecules": np.fromiter(
            (molecule_table.n_molecules(v) for v in range(n_vertices)),
            dtype=np.int64, count=n_vertices
        ),
        "assigned_neighbours": np.fromiter(
            (len(molecule_table[v]) for v in range(n_vertices)), dtype=np.int64, count=n_vertices
        ),
    })


def summarize_separation(
    graph: Graph,
    molecule_table: MoleculeTable,
    molecule_graph: Graph
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Calculate separation statistics.

    Args:
        graph: Input barcode graph
        molecule_table: Complete molecule table of the graph
        molecule_graph: Molecule-separated graph built from the table

    Returns:
        Tuple of (per-barcode table, summary statistics)
    """
    barcodes = create_barcode_table(graph, molecule_table)
    molecules = barcodes["molecules"].to_numpy()

    separated = molecules[molecules > 0]
    histogram = barcodes["molecules"].value_counts().sort_index()

    summary = {
        "barcodes": int(graph.n_vertices),
        "molecules": int(molecules.sum()),
        "dropped_barcodes": int(np.count_nonzero(molecules == 0)),
        "split_barcodes": int(np.count_nonzero(molecules > 1)),
        "mean_molecules_per_barcode": float(np.mean(separated)) if separated.size else 0.0,
        "max_molecules_per_barcode": int(molecules.max()) if molecules.size else 0,
        "molecule_histogram": {int(k): int(v) for k, v in histogram.items()},
        "input_edges": int(graph.n_edges),
        "kept_edges": int(molecule_graph.n_edges),
        "dropped_edges": int(graph.n_edges - molecule_graph.n_edges),
    }

    logger.info(
        f"Separated {summary['barcodes']} barcodes into {summary['molecules']} molecules "
        f"({summary['split_barcodes']} split, {summary['dropped_barcodes']} dropped)"
    )
    logger.info(
        f"Mean molecules per separated barcode: {summary['mean_molecules_per_barcode']:.2f}, "
        f"max: {summary['max_molecules_per_barcode']}"
    )

    return barcodes, summary


def write_separation_summary(barcodes: pd.DataFrame, output_file: Union[str, Path]) -> None:
    """Save the per-barcode table as TSV."""
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    barcodes.to_csv(output_file, sep='\t', index=False)
    logger.info(f"Saved separation statistics to {output_file}")
