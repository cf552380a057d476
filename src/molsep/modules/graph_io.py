r"""Reading and writing barcode graphs in TSV format.

A graph file holds a vertex block followed by an edge block::

    U\tm
    <barcode>\t<weight>
    ...
    <blank line>
    U\tV\tm
    <barcode1>\t<barcode2>\t<weight>
    ...
"""

import logging
import sys
from pathlib import Path
from typing import Dict, IO, Iterable, List, Optional, Tuple, Union

from molsep.core.graph import Graph
from molsep.core.exceptions import GraphFormatError


logger = logging.getLogger(__name__)

VERTEX_HEADER = "U\tm"
EDGE_HEADER = "U\tV\tm"
STREAM_PATH = "-"


def read_graph(
    paths: Iterable[Union[str, Path]],
    graph: Optional[Graph] = None
) -> Graph:
    """
    Load one graph from one or more TSV files.

    Files are concatenated: edges may name barcodes from earlier files. A
    barcode repeated in a later file is added again and the name then refers
    to the later vertex. Each file is parsed completely before any of its
    vertices are added, so a malformed file leaves nothing behind.

    Args:
        paths: Graph files; "-" reads standard input
        graph: Optional graph to add to

    Returns:
        Loaded graph

    Raises:
        GraphFormatError: Malformed line, missing header or unknown barcode
    """
    if graph is None:
        graph = Graph()
    barcode_to_index: Dict[str, int] = {
        name: vertex_id for vertex_id, name in enumerate(graph.names)
    }

    for path in paths:
        source = str(path)
        if source == STREAM_PATH:
            vertices, edges = parse_graph_lines(sys.stdin, "<stdin>")
        else:
            with open(path, 'r') as f:
                vertices, edges = parse_graph_lines(f, source)

        # resolve names against the vertex ids this file is about to receive
        file_barcode_to_index = dict(barcode_to_index)
        for offset, (name, _) in enumerate(vertices):
            file_barcode_to_index[name] = graph.n_vertices + offset

        resolved_edges = []
        for name1, name2, weight, line_number in edges:
            for name in (name1, name2):
                if name not in file_barcode_to_index:
                    raise GraphFormatError(f"edge references unknown barcode {name!r}",
                                           source, line_number)
            resolved_edges.append(
                (file_barcode_to_index[name1], file_barcode_to_index[name2], weight)
            )

        for name, weight in vertices:
            graph.add_vertex(name, weight)
        for u, v, weight in resolved_edges:
            graph.add_edge(u, v, weight)
        barcode_to_index = file_barcode_to_index

        logger.info(f"Loaded {len(vertices)} vertices and {len(edges)} edges from {source}")

    return graph


def parse_graph_lines(
    lines: Iterable[str],
    source: str = "<input>"
) -> Tuple[List[Tuple[str, int]], List[Tuple[str, str, int, int]]]:
    """
    Parse the vertex and edge blocks of one graph file.

    Args:
        lines: Lines of the file
        source: Name used in error messages

    Returns:
        Tuple of (vertices as (name, weight), edges as (name1, name2, weight, line_number))

    Raises:
        GraphFormatError: If the file does not follow the graph format
    """
    vertices: List[Tuple[str, int]] = []
    edges: List[Tuple[str, str, int, int]] = []
    in_edge_block = False
    expect_header = True

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")

        if expect_header:
            header = EDGE_HEADER if in_edge_block else VERTEX_HEADER
            if line != header:
                raise GraphFormatError(
                    f"unknown graph format: expected header {header!r}, found {line!r}",
                    source, line_number
                )
            expect_header = False
            continue

        if not in_edge_block:
            if not line:
                in_edge_block = True
                expect_header = True
                continue
            fields = line.split()
            if len(fields) != 2:
                raise GraphFormatError(f"unknown graph format: malformed vertex line {line!r}",
                                       source, line_number)
            vertices.append((fields[0], _parse_weight(fields[1], source, line_number)))
        else:
            if not line:
                raise GraphFormatError("unknown graph format: blank line in edge block",
                                       source, line_number)
            fields = line.split()
            if len(fields) != 3:
                raise GraphFormatError(f"unknown graph format: malformed edge line {line!r}",
                                       source, line_number)
            edges.append((fields[0], fields[1], _parse_weight(fields[2], source, line_number),
                          line_number))

    return vertices, edges


def _parse_weight(value: str, source: str, line_number: int) -> int:
    try:
        return int(value)
    except ValueError:
        raise GraphFormatError(f"unknown graph format: weight {value!r} is not an integer",
                               source, line_number) from None


def write_graph(graph: Graph, handle: IO[str]) -> None:
    """Write a graph in TSV format to an open text handle."""
    handle.write(f"{VERTEX_HEADER}\n")
    for name, weight in zip(graph.names, graph.weights):
        handle.write(f"{name}\t{weight}\n")

    handle.write(f"\n{EDGE_HEADER}\n")
    names = graph.names
    for source, target, weight in zip(graph.edge_sources, graph.edge_targets, graph.edge_weights):
        handle.write(f"{names[source]}\t{names[target]}\t{weight}\n")


def save_graph(graph: Graph, output_path: Optional[Union[str, Path]] = None) -> None:
    """
    Save a graph to a file, or to standard output when no path (or "-") is given.

    Args:
        graph: Graph to save
        output_path: Output file path
    """
    if output_path is None or str(output_path) == STREAM_PATH:
        write_graph(graph, sys.stdout)
        sys.stdout.flush()
        return

    output_path = Path(output_path)
    with open(output_path, 'w') as f:
        write_graph(graph, f)
    logger.info(f"Saved graph with {graph.n_vertices} vertices to {output_path}")
