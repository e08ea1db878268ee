from dataclasses import dataclass, field
from typing import Any, Optional

from .terms import Term, Variable, Constant
from ..engine.exceptions import ArityMismatchError, InvalidHeadError


@dataclass(slots=True, eq=False)
class Atom:
    """
    A relation applied to an ordered list of terms, e.g. R(x, 'Westmalle', y).
      - predicate: name of the relation, e.g. "Breweries"
      - terms: tuple of Term (Variable or Constant)
      - relation: the Relation the atom ranges over; None for a purely
        syntactic atom that will never be scanned

    When a relation is attached the term count must equal its column count.
    """
    predicate: str
    terms: tuple[Term, ...]
    relation: Optional[Any] = field(default=None, repr=False)

    def __post_init__(self):
        self.terms = tuple(self.terms)
        if self.relation is not None and len(self.terms) != self.relation.arity:
            raise ArityMismatchError(
                f"Atom {self.predicate} has {len(self.terms)} terms but relation "
                f"'{self.predicate}' has {self.relation.arity} columns."
            )

    def arity(self) -> int:
        return len(self.terms)

    @property
    def variable_order(self) -> tuple[str, ...]:
        """Distinct variable names in order of first occurrence."""
        return tuple(dict.fromkeys(t.name for t in self.terms if isinstance(t, Variable)))

    @property
    def variables(self) -> frozenset[str]:
        return frozenset(self.variable_order)

    def is_ground(self) -> bool:
        return all(isinstance(t, Constant) for t in self.terms)

    def __repr__(self) -> str:
        inner = ", ".join(repr(t) for t in self.terms)
        return f"{self.predicate}({inner})"


@dataclass(frozen=True, slots=True)
class HeadAtom:
    """
    Head of a conjunctive query: an ordered list of variables (no constants).
    An empty head makes the query Boolean. Also used as the schema of a
    QueryResult, where the same variable may occur in several columns.
    """
    terms: tuple[Variable, ...] = ()
    predicate: str = "Answer"

    def __post_init__(self):
        terms = tuple(Variable(t) if isinstance(t, str) else t for t in self.terms)
        for t in terms:
            if not isinstance(t, Variable):
                raise InvalidHeadError(f"Head of {self.predicate} may only contain variables, got {t!r}.")
        object.__setattr__(self, "terms", terms)

    @classmethod
    def of(cls, names, predicate: str = "Answer") -> 'HeadAtom':
        return cls(tuple(Variable(n) for n in names), predicate)

    @property
    def variables(self) -> list[str]:
        return [t.name for t in self.terms]

    def __add__(self, other: 'HeadAtom') -> 'HeadAtom':
        return HeadAtom(self.terms + other.terms, self.predicate)

    def __len__(self) -> int:
        return len(self.terms)

    def __repr__(self) -> str:
        inner = ", ".join(repr(t) for t in self.terms)
        return f"{self.predicate}({inner})"
