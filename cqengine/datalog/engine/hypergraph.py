import logging
from typing import Iterable, List, Optional

from ..model.atom import Atom
from ..model.query import Query

logger = logging.getLogger(__name__)


class HyperEdge:
    """
    The variable set of one or more body atoms.

    `vertices` keeps the variables in order of first occurrence (the ear test
    scans them in this order); `vertex_set` is used for membership and equality.
    Atoms with exactly the same variable set share one edge.
    """
    __slots__ = ("vertices", "vertex_set", "atoms")

    def __init__(self, vertices: Iterable[str], atoms: Optional[List[Atom]] = None) -> None:
        self.vertices: tuple[str, ...] = tuple(dict.fromkeys(vertices))
        self.vertex_set: frozenset[str] = frozenset(self.vertices)
        self.atoms: List[Atom] = list(atoms) if atoms else []

    def __contains__(self, vertex: str) -> bool:
        return vertex in self.vertex_set

    def __len__(self) -> int:
        return len(self.vertices)

    def __repr__(self) -> str:
        return f"HyperEdge({{{', '.join(self.vertices)}}}, atoms={self.atoms})"


class Hypergraph:
    """
    Hypergraph of a query body: one deduplicated edge per distinct variable set.
    Ground atoms (no variables) are not edges; they only act as filters.
    """

    def __init__(self, query: Query) -> None:
        self.edges: List[HyperEdge] = []
        by_vertices: dict[frozenset[str], HyperEdge] = {}
        for atom in query.body:
            order = atom.variable_order
            if not order:
                logger.debug(f"[HYPERGRAPH] Skipping ground atom {atom}")
                continue
            key = frozenset(order)
            edge = by_vertices.get(key)
            if edge is not None:
                edge.atoms.append(atom)
            else:
                edge = HyperEdge(order, [atom])
                by_vertices[key] = edge
                self.edges.append(edge)
        logger.debug(f"[HYPERGRAPH] Built {len(self.edges)} edges: {[e.vertices for e in self.edges]}")

    def remove_edge(self, vertices: Iterable[str]) -> None:
        """Delete the edge whose vertex set is exactly `vertices`."""
        target = frozenset(vertices)
        self.edges = [e for e in self.edges if e.vertex_set != target]

    def get_edge(self, vertices: Iterable[str]) -> Optional[HyperEdge]:
        target = frozenset(vertices)
        for e in self.edges:
            if e.vertex_set == target:
                return e
        return None

    def is_empty(self) -> bool:
        return not self.edges

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self):
        return iter(list(self.edges))
