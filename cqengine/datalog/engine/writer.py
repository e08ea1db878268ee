import logging
from typing import Any, Dict, Iterable, List

import pandas as pd

from .database import QueryOutcome

logger = logging.getLogger(__name__)

ANSWER_SLOTS = ("x", "y", "z", "w")
COLUMNS = ["query_id", "is_acyclic", "bool_answer"] + [f"attr_{slot}_answer" for slot in ANSWER_SLOTS]


def outcome_rows(outcome: QueryOutcome) -> List[Dict[str, Any]]:
    """
    Flatten one outcome into CSV rows:
      - rejected query: one row with empty answer cells
      - Boolean query: one row with bool_answer set
      - otherwise one row per answer tuple; head variable i fills slot i
    """
    base = {col: None for col in COLUMNS}
    base["query_id"] = outcome.query_id
    base["is_acyclic"] = outcome.is_acyclic
    answer = outcome.answer
    if answer is None:
        return [base]
    if isinstance(answer, bool):
        return [dict(base, bool_answer=answer)]
    rows = []
    for values in answer.tuples:
        row = dict(base)
        for slot, value in zip(ANSWER_SLOTS, values):
            row[f"attr_{slot}_answer"] = value
        rows.append(row)
    if not rows:
        # keep a trace of queries without answers
        rows.append(base)
    return rows


class ResultWriter:
    """Collects query outcomes and writes them to a CSV file with pandas."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._rows: List[Dict[str, Any]] = []

    def write_result(self, outcome: QueryOutcome) -> None:
        self._rows.extend(outcome_rows(outcome))

    def write_results(self, outcomes: Iterable[QueryOutcome]) -> None:
        for outcome in outcomes:
            self.write_result(outcome)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self._rows, columns=COLUMNS)

    def close(self) -> None:
        self.to_frame().to_csv(self.path, index=False)
        logger.info(f"Wrote {len(self._rows)} rows to {self.path}")

    def __enter__(self) -> 'ResultWriter':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
