from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd

from ..model.atom import HeadAtom


class QueryResult:
    """A batch of tuples over a head-shaped schema.

    `head` lists one variable per column; the same variable may label several
    columns (e.g. after a join), which is why `var_map` maps each variable name
    to the ordered list of its column indices. Tuples are plain Python tuples,
    so batches can be hashed, intersected and indexed directly.
    """
    __slots__ = ("head", "tuples", "var_map", "variables")

    def __init__(self, head: Optional[HeadAtom] = None, tuples: Optional[Iterable[Tuple[Any, ...]]] = None) -> None:
        self.head = head if head is not None else HeadAtom()
        self.tuples: List[Tuple[Any, ...]] = [tuple(t) for t in tuples] if tuples is not None else []
        self.var_map: Dict[str, List[int]] = {}
        for idx, name in enumerate(self.head.variables):
            self.var_map.setdefault(name, []).append(idx)
        self.variables: Set[str] = set(self.var_map)

    @classmethod
    def empty(cls, head: Optional[HeadAtom] = None) -> 'QueryResult':
        return cls(head, [])

    def is_empty(self) -> bool:
        return len(self.tuples) == 0

    def num_rows(self) -> int:
        return len(self.tuples)

    def __len__(self) -> int:
        return len(self.tuples)

    def __iter__(self):
        return iter(self.tuples)

    def columns(self) -> List[str]:
        return self.head.variables

    def ordered_variables(self) -> List[str]:
        """Distinct variables in column order."""
        return list(dict.fromkeys(self.head.variables))

    def tuple_set(self) -> Set[Tuple[Any, ...]]:
        return set(self.tuples)

    def distinct(self) -> 'QueryResult':
        """Drop duplicate tuples, keeping first occurrences."""
        return QueryResult(self.head, dict.fromkeys(self.tuples))

    def to_records(self) -> List[Dict[str, Any]]:
        # Repeated variables keep their first column
        firsts = [(name, self.var_map[name][0]) for name in self.ordered_variables()]
        return [{name: row[idx] for name, idx in firsts} for row in self.tuples]

    def to_frame(self) -> pd.DataFrame:
        if len(self.head) == 0:
            return pd.DataFrame(index=range(len(self.tuples)))
        return pd.DataFrame(self.tuples, columns=self.head.variables)

    def __repr__(self) -> str:
        return f"QueryResult(head={self.head!r}, rows={len(self.tuples)})"
