from cqengine.datalog.engine.gyo import gyo, gyo_reduce, is_acyclic, is_ear
from cqengine.datalog.engine.hypergraph import HyperEdge, Hypergraph
from cqengine.datalog.engine.join_tree import canonical_key
from cqengine.datalog.engine.relation import Relation

from .conftest import atom, make_query

R2 = Relation.from_rows([], ["a", "b"], name="R")
S2 = Relation.from_rows([], ["a", "b"], name="S")
T2 = Relation.from_rows([], ["a", "b"], name="T")
U3 = Relation.from_rows([], ["a", "b", "c"], name="U")
G1 = Relation.from_rows([], ["a"], name="G")


def test_atoms_with_same_variable_set_share_an_edge():
    q = make_query(["x"], atom(R2, "x", "y"), atom(S2, "y", "x"), atom(T2, "y", "z"))
    hg = Hypergraph(q)
    assert len(hg) == 2
    merged = hg.get_edge(["y", "x"])
    assert merged.vertices == ("x", "y")
    assert [a.predicate for a in merged.atoms] == ["R", "S"]


def test_ground_atoms_are_not_edges():
    q = make_query(["x"], atom(R2, "x", "y"), atom(G1, 5))
    hg = Hypergraph(q)
    assert len(hg) == 1


def test_remove_edge_matches_vertex_set():
    q = make_query(["x"], atom(R2, "x", "y"), atom(T2, "y", "z"))
    hg = Hypergraph(q)
    hg.remove_edge(["y", "x"])
    assert [e.vertices for e in hg] == [("y", "z")]
    hg.remove_edge(["q"])
    assert len(hg) == 1


def test_ear_with_only_exclusive_vertices_has_no_witness():
    assert is_ear(("a", "b"), [HyperEdge(["c", "d"])]) == (True, None)
    assert is_ear(("a",), []) == (True, None)


def test_ear_picks_covering_witness():
    w = HyperEdge(["a", "b", "c"])
    ok, witness = is_ear(("a", "b", "x"), [w, HyperEdge(["c", "d"])])
    assert ok and witness is w


def test_ear_drops_a_bad_witness_and_rescans():
    # 'a' first lands on w1, 'b' is not in w1, so the scan restarts with w2
    w1 = HyperEdge(["a", "q"])
    w2 = HyperEdge(["a", "b", "c", "r"])
    ok, witness = is_ear(("a", "b", "c"), [w1, w2])
    assert ok and witness is w2


def test_not_an_ear_when_no_edge_covers_shared_vertices():
    ok, witness = is_ear(("x", "y"), [HyperEdge(["x", "z"]), HyperEdge(["y", "z"])])
    assert (ok, witness) == (False, None)


def test_single_edge_is_a_single_root():
    tree = gyo(make_query(["x"], atom(R2, "x", "y")))
    assert len(tree) == 1
    assert len(tree.roots) == 1
    assert tree.roots[0].elements == ("x", "y")
    assert tree.roots[0].is_leaf()


def test_path_query_builds_one_tree():
    q = make_query(["x", "w"], atom(R2, "x", "y"), atom(S2, "y", "z"), atom(T2, "z", "w"))
    tree = gyo(q)
    assert len(tree) == 3
    assert len(tree.roots) == 1
    # every node except the root has a registered parent
    for node in tree.nodes:
        if node.parent is not None:
            assert node in node.parent.children
            assert tree.get_node(node.parent.key) is node.parent


def test_shared_witness_is_a_single_node():
    q = make_query(["x"], atom(U3, "x", "y", "z"), atom(R2, "x", "y"), atom(S2, "y", "z"), atom(T2, "z", "w"))
    tree = gyo(q)
    assert len(tree) == 4
    keys = [n.key for n in tree.nodes]
    assert len(keys) == len(set(keys))
    assert canonical_key(["z", "y", "x"]) in tree


def test_disconnected_query_gives_a_forest():
    q = make_query(["x", "u"], atom(R2, "x", "y"), atom(S2, "u", "v"))
    tree = gyo(q)
    assert len(tree.roots) == 2
    assert all(r.is_leaf() for r in tree.roots)


def test_triangle_is_cyclic():
    q = make_query(["x"], atom(R2, "x", "y"), atom(S2, "y", "z"), atom(T2, "z", "x"))
    hg = Hypergraph(q)
    assert gyo_reduce(hg) is None
    assert len(hg) == 3
    assert not is_acyclic(q)


def test_triangle_with_covering_edge_is_acyclic():
    q = make_query(["x"], atom(R2, "x", "y"), atom(S2, "y", "z"), atom(T2, "z", "x"), atom(U3, "x", "y", "z"))
    assert is_acyclic(q)


def test_ground_only_body_has_empty_forest():
    tree = gyo(make_query([], atom(G1, 1)))
    assert len(tree) == 0
    assert tree.roots == []
