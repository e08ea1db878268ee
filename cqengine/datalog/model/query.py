from dataclasses import dataclass, field

from .atom import Atom, HeadAtom


@dataclass(slots=True)
class Query:
    """
    A conjunctive query: a head atom plus a conjunction of body atoms.

    Example:
        Answer(x, y, z) :- Breweries(v, x, a1, a2, 'Westmalle', u1, u2, u3, u4, u5, u6),
                           Locations(v, u9, y, z, u10).
    """
    head: HeadAtom
    body: list[Atom] = field(default_factory=list)

    @property
    def is_boolean(self) -> bool:
        return len(self.head) == 0

    def body_variables(self) -> list[str]:
        """All body variable names in order of first occurrence."""
        names: dict[str, None] = {}
        for atom in self.body:
            for name in atom.variable_order:
                names.setdefault(name, None)
        return list(names)

    def __repr__(self) -> str:
        if self.body:
            body_str = ", ".join(repr(atom) for atom in self.body)
            return f"{repr(self.head)} :- {body_str}."
        return f"{repr(self.head)}."
