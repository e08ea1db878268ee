import logging
from typing import Any, Dict, List, Sequence

from ..model.atom import Atom, HeadAtom
from ..model.terms import Variable
from .operators import join, projection
from .result import QueryResult

logger = logging.getLogger(__name__)


def evaluate_atom(atom: Atom, head: Sequence[str]) -> QueryResult:
    """Scan the atom's relation once and return the consistent valuations.

    A row is kept when every constant term equals its column and every
    repeated variable sees the same value in all of its columns. Kept rows are
    projected onto `head`; head variables that do not occur in the atom are
    dropped from the output schema.
    """
    if atom.relation is None:
        raise ValueError(f"Atom {atom} is not bound to a relation.")
    out_vars = [v for v in head if v in atom.variables]
    res: List[tuple] = []
    terms = atom.terms
    scanned = 0
    for row in atom.relation.rows():
        scanned += 1
        valuation: Dict[str, Any] = {}
        for term, value in zip(terms, row):
            if isinstance(term, Variable):
                bound = valuation.setdefault(term.name, value)
                if bound != value:
                    break
            elif term.value != value:
                break
        else:
            res.append(tuple(valuation[v] for v in out_vars))
    logger.debug(f"[LEAF] {atom}: scanned {scanned} rows, kept {len(res)}")
    return QueryResult(HeadAtom.of(out_vars), res)


def evaluate_atoms(atoms: Sequence[Atom], head: Sequence[str]) -> QueryResult:
    """Evaluate the atoms of one join tree node over `head`.

    Several atoms only share a node when they have exactly the same variable
    set, so each is evaluated over the same head and the batches are joined
    pairwise, then projected back onto the head.
    """
    if len(atoms) == 0:
        return QueryResult(HeadAtom.of(head), [])
    result = evaluate_atom(atoms[0], head)
    for atom in atoms[1:]:
        if result.is_empty():
            break
        result = join(result, evaluate_atom(atom, head))
    if len(atoms) > 1:
        result = projection(head, result)
    return result
