import math

import pytest

from cqengine.datalog.engine.exceptions import ArityMismatchError, InvalidHeadError
from cqengine.datalog.engine.relation import Relation
from cqengine.datalog.model.atom import Atom, HeadAtom
from cqengine.datalog.model.query import Query
from cqengine.datalog.model.terms import UNBOUND, Constant, Variable

from .conftest import atom


def test_constant_equality_is_on_value():
    assert Constant(1) == Constant(1)
    assert Constant("1") != Constant(1)
    assert Constant("1").name == Constant(1).name == "1"
    assert hash(Constant("a")) == hash(Constant("a"))


def test_constant_rejects_non_scalar_values():
    with pytest.raises(TypeError):
        Constant(None)
    with pytest.raises(TypeError):
        Constant(True)


def test_variable_and_constant_with_same_name_differ():
    assert Variable("x") != Constant("x")
    assert Variable("x").is_variable()
    assert Constant("x").is_constant()


def test_unbound_is_a_singleton():
    assert type(UNBOUND)() is UNBOUND
    assert UNBOUND != None  # noqa: E711
    assert repr(UNBOUND) == "UNBOUND"


def test_atom_arity_must_match_relation():
    r = Relation.from_rows([(1, 2)], ["a", "b"], name="R")
    with pytest.raises(ArityMismatchError):
        Atom("R", (Variable("x"),), r)
    # also a ValueError for callers that only know the builtin
    with pytest.raises(ValueError):
        Atom("R", (Variable("x"), Variable("y"), Variable("z")), r)


def test_atom_variables_keep_first_occurrence_order():
    r = Relation.from_rows([], ["a", "b", "c", "d"], name="R")
    a = atom(r, "y", "x", "y", 3)
    assert a.variable_order == ("y", "x")
    assert a.variables == frozenset({"x", "y"})
    assert not a.is_ground()
    assert atom(r, 1, 2, "'s'", 4).is_ground()
    assert repr(a) == "R(y, x, y, 3)"


def test_head_atom_only_accepts_variables():
    with pytest.raises(InvalidHeadError):
        HeadAtom((Variable("x"), Constant(1)))
    head = HeadAtom.of(["x", "y"])
    assert head.variables == ["x", "y"]
    assert (head + HeadAtom.of(["y"])).variables == ["x", "y", "y"]
    assert len(HeadAtom()) == 0


def test_query_is_boolean_and_repr():
    r = Relation.from_rows([(1, 2)], ["a", "b"], name="R")
    q = Query(HeadAtom.of(["x"]), [atom(r, "x", "y")])
    assert not q.is_boolean
    assert Query(HeadAtom(), [atom(r, "x", "y")]).is_boolean
    assert repr(q) == "Answer(x) :- R(x, y)."
    assert q.body_variables() == ["x", "y"]


def test_relation_from_csv_normalises_cells(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text("id,name,score\n1,alpha,2.5\n2,,\n")
    r = Relation.from_csv(path)
    assert r.name == "t"
    assert r.arity == 3
    assert r.columns() == ["id", "name", "score"]
    rows = list(r.rows())
    assert rows == [(1, "alpha", 2.5), (2, None, None)]
    assert type(rows[0][0]) is int
    assert not any(isinstance(v, float) and math.isnan(v) for row in rows for v in row)


def test_int_column_with_blanks_stays_int(tmp_path):
    path = tmp_path / "refs.csv"
    path.write_text("id,ref\n1,12\n2,\n3,9007199254740993\n")
    rows = list(Relation.from_csv(path).rows())
    assert rows == [(1, 12), (2, None), (3, 9007199254740993)]
    assert type(rows[0][1]) is int
    assert type(rows[2][1]) is int

    r = Relation.from_rows([(1,), (None,)], ["a"])
    assert list(r.rows()) == [(1,), (None,)]
    assert type(next(r.rows())[0]) is int


def test_relation_schema_lists_columns_in_order():
    r = Relation.from_rows([(1, "a")], ["id", "name"], name="R")
    schema = r.schema
    assert schema.name == "R"
    assert schema.colnames == ("id", "name")
    assert schema.arity == 2


def test_relation_from_rows_checks_row_length():
    with pytest.raises(ValueError):
        Relation.from_rows([(1, 2, 3)], ["a", "b"])
