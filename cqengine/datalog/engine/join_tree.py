import json
import weakref
from typing import Dict, Iterable, List, Optional

from ..model.atom import Atom


def canonical_key(elements: Iterable[str]) -> str:
    """Stable serialization of a variable set, independent of its order."""
    return json.dumps(sorted(set(elements)))


class JoinTreeNode:
    """
    A node of the join forest: one hyperedge and the atoms behind it.

    `elements` keeps the edge's variable order, which is also the column order
    of the node's intermediate results. Children are owned by the node; the
    parent is a weak back-reference used for lookups only. `Qs` holds the
    node's result for the current evaluation pass (None until written).
    """
    __slots__ = ("elements", "key", "atoms", "children", "_parent", "Qs", "__weakref__")

    def __init__(self, elements: Iterable[str], atoms: Optional[List[Atom]] = None) -> None:
        self.elements: tuple[str, ...] = tuple(dict.fromkeys(elements))
        self.key = canonical_key(self.elements)
        self.atoms: List[Atom] = list(atoms) if atoms else []
        self.children: List['JoinTreeNode'] = []
        self._parent = None
        self.Qs = None

    @property
    def parent(self) -> Optional['JoinTreeNode']:
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, node: Optional['JoinTreeNode']) -> None:
        self._parent = weakref.ref(node) if node is not None else None

    def add_child(self, node: 'JoinTreeNode') -> None:
        self.children.append(node)
        node.parent = self

    def is_leaf(self) -> bool:
        return not self.children

    def __str__(self) -> str:
        return self.key

    def __repr__(self) -> str:
        return f"JoinTreeNode({self.key}, children={[c.key for c in self.children]})"


class JoinTree:
    """
    Join forest: a node registry keyed by canonical variable-set key plus the
    set of root nodes. Several roots mean the query hypergraph is disconnected.
    Nodes are kept in insertion order so traversals are deterministic.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, JoinTreeNode] = {}
        self.roots: List[JoinTreeNode] = []

    @property
    def nodes(self) -> List[JoinTreeNode]:
        return list(self._nodes.values())

    def add_node(self, node: JoinTreeNode) -> JoinTreeNode:
        """Register `node` unless its key is taken; return the registered node."""
        return self._nodes.setdefault(node.key, node)

    def get_or_create(self, elements: Iterable[str], atoms: Optional[List[Atom]] = None) -> JoinTreeNode:
        elements = tuple(elements)
        existing = self._nodes.get(canonical_key(elements))
        if existing is not None:
            return existing
        return self.add_node(JoinTreeNode(elements, atoms))

    def get_node(self, key: str) -> Optional[JoinTreeNode]:
        return self._nodes.get(key)

    def has(self, node: JoinTreeNode) -> bool:
        return node.key in self._nodes

    def remove_node(self, key: str) -> Optional[JoinTreeNode]:
        node = self._nodes.pop(key, None)
        if node is None:
            return None
        parent = node.parent
        if parent is not None:
            parent.children = [c for c in parent.children if c is not node]
        for child in node.children:
            child.parent = None
        self.roots = [r for r in self.roots if r is not node]
        return node

    def set_roots(self) -> List[JoinTreeNode]:
        """Collect every parentless node as a root."""
        self.roots = [n for n in self._nodes.values() if n.parent is None]
        return self.roots

    def is_root(self, node: JoinTreeNode) -> bool:
        return any(r is node for r in self.roots)

    def leaves(self) -> List[JoinTreeNode]:
        return [n for n in self._nodes.values() if n.is_leaf()]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: str) -> bool:
        return key in self._nodes

    def pretty(self) -> str:
        lines: List[str] = []

        def walk(node: JoinTreeNode, depth: int) -> None:
            lines.append("  " * depth + f"{{{', '.join(node.elements)}}} {node.atoms}")
            for child in node.children:
                walk(child, depth + 1)

        for root in self.roots:
            walk(root, 0)
        return "\n".join(lines)
