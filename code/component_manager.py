"""Cell component tracking backed by a disjoint-set union structure."""

from __future__ import annotations

from typing import Dict, Hashable, Iterable, List, Set


class DisjointSetUnion:
    """Disjoint set union with path compression and canonical minimum roots."""

    def __init__(self) -> None:
        self._parent: Dict[Hashable, Hashable] = {}

    def _ensure(self, item: Hashable) -> None:
        if item not in self._parent:
            self._parent[item] = item

    def __contains__(self, item: Hashable) -> bool:
        return item in self._parent

    def find(self, item: Hashable) -> Hashable:
        self._ensure(item)
        root = item
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[item] != root:
            self._parent[item], item = root, self._parent[item]
        return root

    def union(self, a: Hashable, b: Hashable) -> Hashable:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return root_a
        # Always keep the smaller item as the canonical representative to retain determinism.
        if root_a < root_b:
            self._parent[root_b] = root_a
            return root_a
        self._parent[root_a] = root_b
        return root_b


class ComponentManager:
    """Tracks which cells are already joined by spanning-tree edges."""

    def __init__(self, cells: Iterable[Hashable] = ()) -> None:
        self._dsu = DisjointSetUnion()
        self._members: List[Hashable] = []
        for cell in cells:
            self.add(cell)

    def add(self, cell: Hashable) -> None:
        if cell not in self._dsu:
            self._members.append(cell)
        self._dsu._ensure(cell)

    def same_component(self, a: Hashable, b: Hashable) -> bool:
        return self._dsu.find(a) == self._dsu.find(b)

    def join(self, a: Hashable, b: Hashable) -> bool:
        """Merge the components of ``a`` and ``b``; False if they were already one."""
        if self.same_component(a, b):
            return False
        self._dsu.union(a, b)
        return True

    def components(self) -> Set[Hashable]:
        return {self._dsu.find(cell) for cell in self._members}

    def has_single_component(self) -> bool:
        return len(self.components()) <= 1
