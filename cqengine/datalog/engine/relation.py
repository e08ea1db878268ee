import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from ..model.schema import RelationSchema

logger = logging.getLogger(__name__)


class Relation:
    """
    A read-only base relation stored in a pandas.DataFrame.

    Cells are normalised to plain Python values (str, int, float) with missing
    values as None, so that tuples produced by rows() compare and hash the same
    way as query constants.
    """
    __slots__ = ("name", "_df")

    def __init__(self, df: pd.DataFrame, name: Optional[str] = None) -> None:
        self.name = name
        self._df = self._normalise(df)

    @staticmethod
    def _normalise(df: pd.DataFrame) -> pd.DataFrame:
        df = df.reset_index(drop=True)
        df.columns = [str(c) for c in df.columns]
        # object dtype keeps Python scalars; NaN -> None
        obj = df.astype(object)
        return obj.where(pd.notna(obj), None)

    @classmethod
    def from_csv(cls, path, name: Optional[str] = None, delimiter: str = ",") -> 'Relation':
        path = Path(path)
        # round_trip parses floats exactly as float() does for query constants;
        # nullable dtypes keep an int column with blanks as ints instead of float64
        df = pd.read_csv(path, sep=delimiter, skipinitialspace=True,
                         float_precision="round_trip", dtype_backend="numpy_nullable")
        logger.debug(f"[RELATION] Loaded {path} as '{name or path.stem}': columns={list(df.columns)}, rows={len(df)}")
        return cls(df, name or path.stem)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]], columns: List[str], name: Optional[str] = None) -> 'Relation':
        rows = [tuple(r) for r in rows]
        for r in rows:
            if len(r) != len(columns):
                raise ValueError(f"Row length {len(r)} does not match schema length {len(columns)} for relation {name}")
        if not rows:
            df = pd.DataFrame({col: pd.Series(dtype="object") for col in columns})
        else:
            df = pd.DataFrame(rows, columns=columns, dtype=object)
        return cls(df, name)

    @property
    def schema(self) -> RelationSchema:
        columns = tuple((col, str(dtype)) for col, dtype in self._inferred_dtypes().items())
        return RelationSchema(self.name or "", columns)

    def _inferred_dtypes(self) -> Dict[str, Any]:
        # Storage is object dtype; report what pandas would infer for each column
        return self._df.infer_objects().dtypes.to_dict()

    @property
    def arity(self) -> int:
        return len(self._df.columns)

    def columns(self) -> List[str]:
        return list(self._df.columns)

    def num_rows(self) -> int:
        return len(self._df)

    def __len__(self) -> int:
        return len(self._df)

    def rows(self) -> Iterator[Tuple[Any, ...]]:
        """Iterate rows as tuples, in column order."""
        return self._df.itertuples(index=False, name=None)

    def to_records(self) -> List[Dict[str, Any]]:
        return self._df.to_dict(orient="records")

    def to_frame(self) -> pd.DataFrame:
        return self._df.copy()

    def __repr__(self) -> str:
        return f"Relation({self.name!r}, columns={self.columns()}, rows={self.num_rows()})"
