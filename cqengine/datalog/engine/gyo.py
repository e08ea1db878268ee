"""
Graham-Yu-Ozsoyoglu (GYO) ear reduction.

The reduction repeatedly removes ears from the query hypergraph. Every removed
ear becomes a child of its witness in the join forest, so the forest is built
bottom-up as a byproduct. If a full round removes no ear while edges remain,
the query is cyclic and no tree is returned.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from ..model.query import Query
from .hypergraph import HyperEdge, Hypergraph
from .join_tree import JoinTree

logger = logging.getLogger(__name__)


def is_ear(vertices: Sequence[str], other_edges: List[HyperEdge]) -> Tuple[bool, Optional[HyperEdge]]:
    """Decide whether the edge with ordered `vertices` is an ear.

    Every vertex must be exclusive (absent from all `other_edges`) or contained
    in one common witness edge. Vertices are scanned in order; a witness is
    picked at the first shared vertex. When a later shared vertex is not in the
    witness, that witness is dropped from the candidate pool and the scan
    resumes at the vertex where it was picked.

    Args:
        vertices: the candidate ear's variables, in scan order
        other_edges: the remaining edges of the hypergraph, excluding the candidate

    Returns:
        (True, witness) for an ear, where witness is None if every vertex is
        exclusive; (False, None) otherwise.
    """
    candidates = list(other_edges)
    witness: Optional[HyperEdge] = None
    resume = 0
    i = 0
    while i < len(vertices):
        vertex = vertices[i]
        if not any(vertex in edge for edge in other_edges):
            i += 1
            continue
        if witness is not None:
            if vertex in witness:
                i += 1
                continue
            # witness cannot cover this vertex: discard it and rescan
            candidates = [c for c in candidates if c is not witness]
            witness = None
            i = resume
            continue
        for edge in candidates:
            if vertex in edge:
                witness = edge
                break
        if witness is None:
            return False, None
        resume = i
        i += 1
    return True, witness


def gyo_reduce(hypergraph: Hypergraph) -> Optional[JoinTree]:
    """Run ear reduction on `hypergraph`, removing edges in place.

    Returns the join forest, or None when the hypergraph is cyclic. On failure
    the edges that could not be reduced are left in `hypergraph`.
    """
    tree = JoinTree()
    round_no = 0
    while not hypergraph.is_empty():
        round_no += 1
        removed = 0
        for edge in list(hypergraph.edges):
            others = [e for e in hypergraph.edges if e is not edge]
            ear, witness = is_ear(edge.vertices, others)
            if not ear:
                continue
            ear_node = tree.get_or_create(edge.vertices, edge.atoms)
            if witness is not None:
                witness_node = tree.get_or_create(witness.vertices, witness.atoms)
                witness_node.add_child(ear_node)
                logger.debug(f"[GYO][ROUND {round_no}] Ear {edge.vertices} -> witness {witness.vertices}")
            else:
                logger.debug(f"[GYO][ROUND {round_no}] Ear {edge.vertices} has no witness")
            hypergraph.remove_edge(edge.vertex_set)
            removed += 1
        if removed == 0:
            logger.debug(f"[GYO][ROUND {round_no}] No ear found; remaining edges: {[e.vertices for e in hypergraph.edges]}")
            return None
    tree.set_roots()
    logger.debug(f"[GYO] Reduced in {round_no} rounds: {len(tree)} nodes, {len(tree.roots)} root(s)")
    return tree


def gyo(query: Query) -> Optional[JoinTree]:
    """Build the join forest of `query`, or return None if it is cyclic."""
    return gyo_reduce(Hypergraph(query))


def is_acyclic(query: Query) -> bool:
    return gyo(query) is not None
