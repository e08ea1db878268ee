"""
Errors raised while building or evaluating a conjunctive query.

Row-level inconsistencies (a repeated variable bound to two values, a constant
that does not match its column) are not errors: such rows are filtered out.
"""


class CQError(Exception):
    """Base error for the conjunctive query engine."""


class ArityMismatchError(CQError, ValueError):
    """An atom's term count differs from its relation's column count."""


class UnknownRelationError(CQError, KeyError):
    """A relation name could not be resolved."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class InvalidHeadError(CQError, ValueError):
    """A query head contains something other than variables."""


class QueryParseError(CQError):
    """The query text does not match the conjunctive query grammar."""


class CyclicQueryError(CQError):
    """GYO reduction got stuck: the query hypergraph is cyclic."""

    def __init__(self, message: str, remaining_edges=None):
        super().__init__(message)
        self.remaining_edges = remaining_edges or []
