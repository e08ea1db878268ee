from dataclasses import dataclass, field
from typing import Any


class _Unbound:
    """
    Placeholder cell for a column that carries no value, e.g. the non-shared
    positions of a hash index key. Compares equal only to itself.
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNBOUND"

    def __reduce__(self):
        return (_Unbound, ())


UNBOUND = _Unbound()


@dataclass(frozen=True, slots=True)
class Term:
    """
    Base class for query terms (either a Constant or a Variable).
    """
    name: str

    def is_variable(self) -> bool:
        return isinstance(self, Variable)

    def is_constant(self) -> bool:
        return isinstance(self, Constant)

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Constant(Term):
    """
    A constant, e.g. 'Westmalle', 42, 3.5.
    The `value` is the actual string or number; `name = str(value)` is kept
    for printing. Equality is on `value`, so Constant("1") != Constant(1).
    """
    value: Any
    name: str = field(init=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.value, (str, int, float)) or isinstance(self.value, bool):
            raise TypeError(f"Constant value must be a string or a number, got {type(self.value).__name__}")
        object.__setattr__(self, "name", str(self.value))

    def __repr__(self) -> str:
        # Render with quotes if string
        if isinstance(self.value, str):
            return f"'{self.value}'"
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Variable(Term):
    """
    A query variable, e.g. x, y, brewid, u10. The `name` is the variable's identifier.
    """
    def __repr__(self) -> str:
        return self.name
