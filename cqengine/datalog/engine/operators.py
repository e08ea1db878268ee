"""
Hash-indexed relational operators over QueryResult batches.

Index keys are whole tuples shaped like the probing side: the value of every
variable shared with the indexed side sits at each of the prober's columns for
that variable, and every other position holds UNBOUND. A probe tuple builds
its key the same way from its own values, so one dictionary lookup finds all
consistent partners.
"""
import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..model.atom import HeadAtom
from ..model.terms import UNBOUND
from .result import QueryResult

logger = logging.getLogger(__name__)

Index = Dict[Tuple[Any, ...], List[Tuple[Any, ...]]]


def _shared_variables(q1: QueryResult, q2: QueryResult) -> List[str]:
    return [v for v in q1.ordered_variables() if v in q2.variables]


def probe_key(probe: QueryResult, row: Tuple[Any, ...], shared: Sequence[str]) -> Tuple[Any, ...]:
    """Key of a probing tuple: its own values at shared columns, UNBOUND elsewhere."""
    key = [UNBOUND] * len(probe.head)
    for var in shared:
        for idx in probe.var_map[var]:
            key[idx] = row[idx]
    return tuple(key)


def create_index(probe: QueryResult, build: QueryResult, shared: Optional[Sequence[str]] = None) -> Index:
    """Index the tuples of `build` for lookups by tuples of `probe`.

    For each build tuple, the values of the shared variables are placed at the
    probe's column positions for those variables. A build tuple whose columns
    for one variable disagree (a repeated variable bound twice) is left out.
    """
    if shared is None:
        shared = _shared_variables(probe, build)
    width = len(probe.head)
    placements = [(build.var_map[v], probe.var_map[v]) for v in shared]
    index: Index = {}
    for row in build.tuples:
        key = [UNBOUND] * width
        consistent = True
        for build_cols, probe_cols in placements:
            value = row[build_cols[0]]
            if any(row[c] != value for c in build_cols[1:]):
                consistent = False
                break
            for c in probe_cols:
                key[c] = value
        if consistent:
            index.setdefault(tuple(key), []).append(row)
    return index


def semijoin(q1: QueryResult, q2: QueryResult) -> QueryResult:
    """Tuples of q1 that agree with at least one tuple of q2 on shared variables."""
    if q1.is_empty() or q2.is_empty():
        return QueryResult(q1.head, [])
    shared = _shared_variables(q1, q2)
    index = create_index(q1, q2, shared)
    res = [row for row in q1.tuples if probe_key(q1, row, shared) in index]
    logger.debug(f"[SEMIJOIN] {q1.head} |x {q2.head}: {len(q1)} -> {len(res)} tuples")
    return QueryResult(q1.head, res)


def join(q1: QueryResult, q2: QueryResult) -> QueryResult:
    """Natural join on shared variables; columns of q1 come first, then q2.

    The smaller side is indexed and the larger side probes it. Without shared
    variables every key is all-UNBOUND and the result is the cartesian product.
    """
    head = q1.head + q2.head
    if q1.is_empty() or q2.is_empty():
        return QueryResult(head, [])
    shared = _shared_variables(q1, q2)
    res: List[Tuple[Any, ...]] = []
    if len(q2) <= len(q1):
        index = create_index(q1, q2, shared)
        for row in q1.tuples:
            for match in index.get(probe_key(q1, row, shared), ()):
                res.append(row + match)
    else:
        index = create_index(q2, q1, shared)
        for row in q2.tuples:
            for match in index.get(probe_key(q2, row, shared), ()):
                res.append(match + row)
    logger.debug(f"[JOIN] {q1.head} |><| {q2.head} on {shared}: {len(q1)} x {len(q2)} -> {len(res)} tuples")
    return QueryResult(head, res)


def intersect(batches: Sequence[QueryResult]) -> QueryResult:
    """Positional bag intersection of all batches, smallest first.

    A tuple is kept as many times as it occurs in every batch (the minimum of
    its counts), in the order of the smallest batch.

    The result has the head of the first batch in `batches`; callers only
    intersect batches over the same head.
    """
    if len(batches) == 0:
        return QueryResult()
    if len(batches) == 1:
        return batches[0]
    head = batches[0].head
    ordered = sorted(batches, key=len)
    if ordered[0].is_empty():
        return QueryResult(head, [])
    budget = Counter(ordered[0].tuples)
    for batch in ordered[1:]:
        budget &= Counter(batch.tuples)
        if not budget:
            return QueryResult(head, [])
    res = []
    for row in ordered[0].tuples:
        if budget[row] > 0:
            budget[row] -= 1
            res.append(row)
    return QueryResult(head, res)


def cartesian_product(q1: QueryResult, q2: QueryResult) -> QueryResult:
    return QueryResult(q1.head + q2.head, [r1 + r2 for r1 in q1.tuples for r2 in q2.tuples])


def projection(variables: Iterable[str], q: QueryResult) -> QueryResult:
    """Project q onto `variables`, in that order.

    Each variable is read from its first column in q. Variables that q does not
    contain are dropped from the output.
    """
    kept = [v for v in variables if v in q.var_map]
    cols = [q.var_map[v][0] for v in kept]
    head = HeadAtom.of(kept, q.head.predicate)
    return QueryResult(head, [tuple(row[c] for c in cols) for row in q.tuples])
