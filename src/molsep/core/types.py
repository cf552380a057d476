"""Core data types and structures for the molecule separation pipeline."""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Set
from enum import Enum


class SeparationStrategy(Enum):
    """Molecule separation strategies that can be applied to a neighbourhood."""
    BICONNECTED_COMPONENTS = "bc"


@dataclass
class Vertex:
    """Barcode vertex as stored in a graph."""
    name: str
    weight: int
    index_original: int


@dataclass
class Edge:
    """Undirected weighted edge between two vertex ids."""
    source: int
    target: int
    weight: int


@dataclass
class BiconnectedComponents:
    """Result of a biconnected decomposition of one subgraph."""
    edge_components: List[int] = field(default_factory=list)  # one label per subgraph edge
    articulation_points: Set[int] = field(default_factory=set)  # local vertex ids
    n_components: int = 0


@dataclass
class ValidationResult:
    """Result of validation operation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)
