import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union
from tqdm import tqdm

from ..model.atom import Atom, HeadAtom
from ..model.query import Query
from ..model.terms import Constant, Term, Variable
from ..parser.cq_parser import CQParser
from .config import config
from .exceptions import CQError, CyclicQueryError, QueryParseError, UnknownRelationError
from .gyo import is_acyclic
from .relation import Relation
from .result import QueryResult
from .yannakakis import YannakakisEvaluator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QueryOutcome:
    """What happened to one query of a batch.

    `answer` is a bool for Boolean queries, a QueryResult otherwise, and None
    when the query was rejected; `error` then holds the reason.
    """
    query_id: int
    text: str
    query: Optional[Query] = None
    is_acyclic: Optional[bool] = None
    answer: Union[QueryResult, bool, None] = None
    error: Optional[CQError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CQDatabase:
    """
    Holds the base relations (name -> Relation) and evaluates conjunctive
    queries over them with the Yannakakis algorithm.

    Relations are read-only once registered. Each query gets its own
    hypergraph, join forest and intermediate batches; nothing is cached
    between queries.
    """
    def __init__(self) -> None:
        self._relations: Dict[str, Relation] = {}
        self._parser = CQParser()

    # -- relations -------------------------------------------------------

    def add_relation(self, name: str, relation: Relation) -> None:
        if relation.name is None:
            relation.name = name
        self._relations[name] = relation
        logger.debug(f"[DB] Registered relation '{name}': columns={relation.columns()}, rows={relation.num_rows()}")

    def load_csv(self, name: str, path, delimiter: Optional[str] = None) -> Relation:
        """Load a CSV file (header row = column names) as relation `name`."""
        if delimiter is None:
            delimiter = config.get("storage.delimiter", ",")
        relation = Relation.from_csv(path, name=name, delimiter=delimiter)
        self.add_relation(name, relation)
        return relation

    def load_relations_from_config(self) -> List[str]:
        """Load every relation listed under storage.relations in the configuration."""
        loaded = []
        for name, path in config.get_relation_files().items():
            self.load_csv(name, path)
            loaded.append(name)
        logger.info(f"Loaded {len(loaded)} relations from configuration: {loaded}")
        return loaded

    def get_relation(self, name: str) -> Relation:
        """Return the relation registered as `name`. Raises UnknownRelationError if missing."""
        if name not in self._relations:
            raise UnknownRelationError(f"No relation named '{name}'.")
        return self._relations[name]

    def relation_names(self) -> List[str]:
        return list(self._relations)

    # -- parsing ---------------------------------------------------------

    def parse_query(self, text: str) -> Query:
        """Parse and resolve a single query against the registered relations."""
        return self._ast_to_query(self._parser.parse_one(text))

    def parse_queries(self, text: str) -> List[Query]:
        """Parse and resolve every query in `text`."""
        ast = self._parser.parse(text)
        return [self._ast_to_query(q) for q in ast["queries"]]

    def _ast_to_query(self, node) -> Query:
        head_node = node["head"]
        head = HeadAtom(tuple(self._ast_term_to_model(t) for t in head_node["terms"]), head_node["name"])
        body = [self._ast_atom_to_model(a) for a in node["body"]]
        return Query(head, body)

    def _ast_atom_to_model(self, node) -> Atom:
        relation = self.get_relation(node["name"])
        terms = tuple(self._ast_term_to_model(t) for t in node["terms"])
        return Atom(node["name"], terms, relation)

    def _ast_term_to_model(self, term) -> Term:
        # Accepts a term AST node and returns Variable or Constant
        match term.get("type"):
            case "variable":
                return Variable(term["name"])
            case "number" | "string":
                return Constant(term["value"])
            case other:
                raise QueryParseError(f"Unexpected term type in query AST: {other}")

    # -- evaluation ------------------------------------------------------

    def query(self, query: Query) -> Union[QueryResult, bool]:
        """
        Evaluate `query`. Returns a bool for a Boolean query (empty head),
        otherwise a QueryResult over the head variables.
        Raises CyclicQueryError if the query is not acyclic.
        """
        return YannakakisEvaluator(query).evaluate()

    def query_from_string(self, text: str) -> Union[QueryResult, bool]:
        """Parse, resolve and evaluate a single query string."""
        return self.query(self.parse_query(text))

    def is_acyclic(self, query: Union[Query, str]) -> bool:
        if isinstance(query, str):
            query = self.parse_query(query)
        return is_acyclic(query)

    @staticmethod
    def split_query_text(text: str) -> List[str]:
        """
        Split a multi-query text into one string per query.

        A query ends at a '.' outside quotes that is not a decimal point, so
        several queries may share a line and one query may span several.
        `%` and `#` start a comment that runs to the end of the line. Lines of
        one query are joined with a single space.
        """
        queries: List[str] = []
        current = ""

        def extend(buffer: str, piece: str) -> str:
            piece = piece.strip()
            if not piece:
                return buffer
            return f"{buffer} {piece}" if buffer else piece

        for line in text.splitlines():
            quote = None
            escaped = False
            start = 0
            end = len(line)
            for i, ch in enumerate(line):
                if quote is not None:
                    if escaped:
                        escaped = False
                    elif ch == "\\":
                        escaped = True
                    elif ch == quote:
                        quote = None
                elif ch in "'\"":
                    quote = ch
                elif ch in "%#":
                    end = i
                    break
                elif ch == "." and not (line[i - 1:i].isdigit() and line[i + 1:i + 2].isdigit()):
                    queries.append(extend(current, line[start:i + 1]))
                    current = ""
                    start = i + 1
            current = extend(current, line[start:end])
        if current:
            # unterminated trailer; let the parser report it
            queries.append(current)
        return queries

    def evaluate_batch(self, texts: Iterable[str]) -> List[QueryOutcome]:
        """
        Evaluate each query text independently. A query that fails to parse,
        names an unknown relation, has the wrong arity or is cyclic is recorded
        as rejected; the remaining queries are still evaluated.
        """
        texts = list(texts)
        outcomes: List[QueryOutcome] = []
        show_progress = config.get("evaluation.show_progress", False)
        for query_id, text in enumerate(tqdm(texts, desc="queries", disable=not show_progress), start=1):
            outcome = QueryOutcome(query_id=query_id, text=text.strip())
            try:
                outcome.query = self.parse_query(text)
                outcome.answer = self.query(outcome.query)
                outcome.is_acyclic = True
            except CyclicQueryError as e:
                outcome.is_acyclic = False
                outcome.error = e
                logger.warning(f"[BATCH] Query {query_id} rejected as cyclic: {outcome.text}")
            except CQError as e:
                outcome.error = e
                logger.warning(f"[BATCH] Query {query_id} rejected: {e}")
            outcomes.append(outcome)
        return outcomes
