import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set, Union

from ..model.atom import HeadAtom
from ..model.query import Query
from .config import config
from .exceptions import CyclicQueryError
from .gyo import gyo_reduce
from .hypergraph import Hypergraph
from .join_tree import JoinTree, JoinTreeNode
from .leaf import evaluate_atom, evaluate_atoms
from .operators import cartesian_product, intersect, join, projection, semijoin
from .result import QueryResult

logger = logging.getLogger(__name__)


class EvaluationState(str, Enum):
    """Phases of one Yannakakis evaluation."""
    BUILD_TREE = "build_tree"
    CYCLIC_REJECTED = "cyclic_rejected"
    PASS1 = "pass1"
    BOOLEAN_DONE = "boolean_done"
    PASS2 = "pass2"
    PASS3 = "pass3"
    COMBINE_DONE = "combine_done"


class YannakakisEvaluator:
    """
    Evaluates one acyclic conjunctive query with the Yannakakis algorithm:
      - BUILD_TREE: GYO reduction builds the join forest (cyclic -> CyclicQueryError)
      - PASS1: bottom-up semijoin reduction; Boolean queries stop here
      - PASS2: top-down semijoin reduction
      - PASS3: bottom-up joins, re-projected at every node
      - COMBINE: cartesian product of the roots, projected onto the query head

    An evaluator is bound to a single query; the hypergraph, forest and every
    intermediate batch are built fresh and dropped with the evaluator.
    """
    def __init__(self, query: Query, distinct: Optional[bool] = None) -> None:
        self.query = query
        self.distinct = config.get("evaluation.distinct", True) if distinct is None else distinct
        self.state = EvaluationState.BUILD_TREE
        self.hypergraph: Optional[Hypergraph] = None
        self.tree: Optional[JoinTree] = None

    def evaluate(self) -> Union[QueryResult, bool]:
        logger.debug(f"[EVAL] Query: {self.query}")
        self._build_tree()

        if not self._ground_atoms_hold():
            logger.debug("[EVAL] A ground atom has no matching row; answer is empty")
            if self.query.is_boolean:
                self.state = EvaluationState.BOOLEAN_DONE
                return False
            self.state = EvaluationState.COMBINE_DONE
            body_vars = set(self.query.body_variables())
            return QueryResult.empty(HeadAtom.of(
                [v for v in self.query.head.variables if v in body_vars], self.query.head.predicate))

        self.state = EvaluationState.PASS1
        self._pass1()

        if self.query.is_boolean:
            answer = all(not root.Qs.is_empty() for root in self.tree.roots)
            self.state = EvaluationState.BOOLEAN_DONE
            logger.debug(f"[EVAL] Boolean answer: {answer}")
            return answer

        self.state = EvaluationState.PASS2
        self._pass2()
        self.state = EvaluationState.PASS3
        self._pass3()
        result = self._combine()
        self.state = EvaluationState.COMBINE_DONE
        logger.debug(f"[EVAL] Result: {result.num_rows()} rows over {result.columns()}")
        return result

    def _build_tree(self) -> None:
        self.hypergraph = Hypergraph(self.query)
        self.tree = gyo_reduce(self.hypergraph)
        if self.tree is None:
            self.state = EvaluationState.CYCLIC_REJECTED
            remaining = [e.vertices for e in self.hypergraph.edges]
            raise CyclicQueryError(f"Given query is cyclic: {self.query}", remaining)
        logger.debug(f"[TREE]\n{self.tree.pretty()}")

    def _ground_atoms_hold(self) -> bool:
        for atom in self.query.body:
            if not atom.variable_order and evaluate_atom(atom, []).is_empty():
                return False
        return True

    def _walk_bottom_up(self, frontier: Iterable[JoinTreeNode], done: Set[str],
                        visit: Callable[[JoinTreeNode], None]) -> None:
        """Visit nodes level by level; a parent is queued once all its children are done."""
        frontier = list(frontier)
        while frontier:
            next_level: Dict[str, JoinTreeNode] = {}
            for node in frontier:
                visit(node)
                done.add(node.key)
                parent = node.parent
                if parent is not None and all(c.key in done for c in parent.children):
                    next_level[parent.key] = parent
            frontier = list(next_level.values())

    def _pass1(self) -> None:
        def reduce_node(node: JoinTreeNode) -> None:
            qs = evaluate_atoms(node.atoms, node.elements)
            if node.children:
                reduced: List[QueryResult] = []
                for child in node.children:
                    reduced.append(semijoin(qs, child.Qs))
                    if reduced[-1].is_empty():
                        # intersection is empty from here on
                        break
                node.Qs = intersect(reduced)
            else:
                node.Qs = qs
            logger.debug(f"[PASS1] {node.key}: qs={qs.num_rows()} Qs={node.Qs.num_rows()}")

        self._walk_bottom_up(self.tree.leaves(), set(), reduce_node)

    def _pass2(self) -> None:
        frontier = list(self.tree.roots)
        while frontier:
            next_level: List[JoinTreeNode] = []
            for node in frontier:
                for child in node.children:
                    child.Qs = semijoin(child.Qs, node.Qs)
                    logger.debug(f"[PASS2] {child.key}: Qs={child.Qs.num_rows()}")
                    next_level.append(child)
            frontier = next_level

    def _pass3(self) -> None:
        head_vars = self.query.head.variables

        def join_children(node: JoinTreeNode) -> None:
            acc = node.Qs
            for child in node.children:
                os_ = join(acc, child.Qs)
                keep = os_.ordered_variables() + [v for v in head_vars if v not in os_.variables]
                acc = projection(keep, os_)
            node.Qs = acc
            logger.debug(f"[PASS3] {node.key}: Qs={node.Qs.num_rows()} over {node.Qs.columns()}")

        leaves = self.tree.leaves()
        done = {leaf.key for leaf in leaves}
        start: Dict[str, JoinTreeNode] = {}
        for leaf in leaves:
            parent = leaf.parent
            if parent is not None and all(c.key in done for c in parent.children):
                start[parent.key] = parent
        self._walk_bottom_up(start.values(), done, join_children)

    def _combine(self) -> QueryResult:
        roots = self.tree.roots
        if not roots:
            combined = QueryResult(HeadAtom(), [()])
        else:
            combined = roots[0].Qs
            for root in roots[1:]:
                combined = cartesian_product(combined, root.Qs)
        projected = projection(self.query.head.variables, combined)
        result = QueryResult(HeadAtom(projected.head.terms, self.query.head.predicate), projected.tuples)
        return result.distinct() if self.distinct else result


def yannakakis(query: Query, distinct: Optional[bool] = None) -> Union[QueryResult, bool]:
    """Evaluate `query`; a bool for Boolean queries, else a QueryResult over the head."""
    return YannakakisEvaluator(query, distinct).evaluate()


def bool_yannakakis(query: Query) -> bool:
    """Whether `query` has at least one answer, using only the first pass."""
    if query.is_boolean:
        return yannakakis(query)
    return yannakakis(Query(HeadAtom((), query.head.predicate), query.body))
