"""Molecule assignment from neighbourhood decompositions."""

from typing import Callable, Dict, List

from molsep.core.graph import Subgraph
from molsep.core.types import BiconnectedComponents, SeparationStrategy
from molsep.core.exceptions import ConfigurationError
from molsep.modules.biconnected import biconnected_components


LocalTable = Dict[int, int]


def assign_molecules(
    subgraph: Subgraph,
    components: BiconnectedComponents
) -> LocalTable:
    """
    Build the local molecule table of an anchor vertex.

    Each biconnected component of the anchor's neighbourhood is a candidate
    molecule. Articulation points are removed from every component they touch,
    components left with at most one barcode are discarded, and the survivors
    are numbered densely from 0 in component-label order.

    Args:
        subgraph: Neighbourhood subgraph of the anchor vertex
        components: Decomposition of that subgraph

    Returns:
        Mapping of neighbour original-index to molecule index. Neighbours that
        are articulation points or sit in discarded components are absent.
    """
    if components.n_components == 0:
        return {}

    articulation_points = components.articulation_points
    index_map = subgraph.index_map
    # dicts keep first-insertion order
    members: List[Dict[int, None]] = [{} for _ in range(components.n_components)]

    for edge_id, (a, b) in enumerate(subgraph.edges):
        component = components.edge_components[edge_id]
        if a not in articulation_points:
            members[component][index_map[a]] = None
        if b not in articulation_points:
            members[component][index_map[b]] = None

    table: LocalTable = {}
    molecule = 0
    for component_members in members:
        if len(component_members) <= 1:
            continue
        for vertex in component_members:
            table[vertex] = molecule
        molecule += 1

    return table


def biconnected_strategy(subgraph: Subgraph) -> LocalTable:
    """Separate molecules by biconnected components of the neighbourhood."""
    return assign_molecules(subgraph, biconnected_components(subgraph))


STRATEGIES: Dict[str, Callable[[Subgraph], LocalTable]] = {
    SeparationStrategy.BICONNECTED_COMPONENTS.value: biconnected_strategy,
}


def get_strategy(name: str) -> Callable[[Subgraph], LocalTable]:
    """
    Look up a molecule separation strategy by name.

    Raises:
        ConfigurationError: If the strategy is not supported
    """
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ConfigurationError(
            f"unsupported molecule separation strategy: {name!r} "
            f"(supported: {', '.join(sorted(STRATEGIES))})"
        ) from None
