import itertools
from pathlib import Path

import pytest

from cqengine.datalog.engine.config import config
from cqengine.datalog.engine.database import CQDatabase
from cqengine.datalog.engine.relation import Relation
from cqengine.datalog.model.atom import Atom, HeadAtom
from cqengine.datalog.model.query import Query
from cqengine.datalog.model.terms import Constant, Variable

TEST_DATA = Path(__file__).resolve().parent.parent / "test_data"


def term(value):
    """A quoted str like "'abc'" is a string constant, any other str a variable."""
    if isinstance(value, str):
        if len(value) >= 2 and value[0] == value[-1] == "'":
            return Constant(value[1:-1])
        return Variable(value)
    return Constant(value)


def atom(relation: Relation, *terms) -> Atom:
    return Atom(relation.name, tuple(term(t) for t in terms), relation)


def make_query(head, *body) -> Query:
    return Query(HeadAtom.of(head), list(body))


def naive_evaluate(query: Query):
    """Cartesian product of the body relations, filtered by every atom."""
    answers = set()
    scans = [list(a.relation.rows()) for a in query.body]
    for combo in itertools.product(*scans):
        valuation = {}
        consistent = True
        for a, row in zip(query.body, combo):
            for t, value in zip(a.terms, row):
                if isinstance(t, Variable):
                    if valuation.setdefault(t.name, value) != value:
                        consistent = False
                        break
                elif t.value != value:
                    consistent = False
                    break
            if not consistent:
                break
        if consistent:
            answers.add(tuple(valuation[v] for v in query.head.variables if v in valuation))
    if query.is_boolean:
        return len(answers) > 0
    return answers


@pytest.fixture(autouse=True)
def reset_config():
    config.reset()
    yield
    config.reset()


@pytest.fixture
def test_data_dir() -> Path:
    return TEST_DATA


@pytest.fixture
def beer_db() -> CQDatabase:
    db = CQDatabase()
    db.load_csv("Beers", TEST_DATA / "beers.csv")
    db.load_csv("Breweries", TEST_DATA / "breweries.csv")
    db.load_csv("Locations", TEST_DATA / "locations.csv")
    return db


@pytest.fixture
def small_db() -> CQDatabase:
    db = CQDatabase()
    db.add_relation("R", Relation.from_rows([(1, 2), (3, 4)], ["a", "b"]))
    db.add_relation("S", Relation.from_rows([(2, "p"), (4, "q"), (5, "r")], ["a", "b"]))
    db.add_relation("T", Relation.from_rows([(1, 1, "a"), (1, 2, "b"), (3, 3, "c")], ["a", "b", "c"]))
    return db
