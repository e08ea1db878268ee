"""
Acyclic conjunctive query evaluation (GYO reduction + Yannakakis).
"""
import logging
import os

# Every module logs under "cqengine"; CQ_DEBUG sets the level for all of them
logger = logging.getLogger(__name__)
log_level_str = os.environ.get("CQ_DEBUG", "INFO").upper()
try:
    logger.setLevel(getattr(logging, log_level_str))
except (AttributeError, TypeError):
    logger.setLevel(logging.INFO)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('[%(levelname)s] %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

from .datalog.model.terms import Term, Variable, Constant, UNBOUND
from .datalog.model.atom import Atom, HeadAtom
from .datalog.model.query import Query
from .datalog.engine.exceptions import (
    CQError,
    ArityMismatchError,
    UnknownRelationError,
    InvalidHeadError,
    QueryParseError,
    CyclicQueryError,
)
from .datalog.engine.relation import Relation
from .datalog.engine.result import QueryResult
from .datalog.engine.yannakakis import YannakakisEvaluator, yannakakis
from .datalog.engine.database import CQDatabase, QueryOutcome

__all__ = [
    'Term', 'Variable', 'Constant', 'UNBOUND',
    'Atom', 'HeadAtom', 'Query',
    'CQError', 'ArityMismatchError', 'UnknownRelationError', 'InvalidHeadError',
    'QueryParseError', 'CyclicQueryError',
    'Relation', 'QueryResult',
    'YannakakisEvaluator', 'yannakakis',
    'CQDatabase', 'QueryOutcome',
]
