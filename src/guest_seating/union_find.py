"""Disjoint set forest used to group guests linked by must/adjacency edges."""
from __future__ import annotations

from typing import Dict, Hashable, List


class UnionFind:
    """Union by rank with path compression.

    Unknown keys register themselves on first :meth:`find`.
    """

    def __init__(self) -> None:
        self.parent: Dict[Hashable, Hashable] = {}
        self.rank: Dict[Hashable, int] = {}

    def add(self, key: Hashable) -> None:
        if key not in self.parent:
            self.parent[key] = key
            self.rank[key] = 0

    def find(self, key: Hashable) -> Hashable:
        self.add(key)
        root = key
        while self.parent[root] != root:
            root = self.parent[root]
        # compress
        while self.parent[key] != root:
            self.parent[key], key = root, self.parent[key]
        return root

    def union(self, key1: Hashable, key2: Hashable) -> bool:
        """Merge the sets holding both keys. Returns True if they were apart."""
        root1, root2 = self.find(key1), self.find(key2)
        if root1 == root2:
            return False
        rank1, rank2 = self.rank[root1], self.rank[root2]
        if rank1 < rank2:
            self.parent[root1] = root2
        elif rank1 > rank2:
            self.parent[root2] = root1
        else:
            self.parent[root2] = root1
            self.rank[root1] = rank1 + 1
        return True

    def connected(self, key1: Hashable, key2: Hashable) -> bool:
        return self.find(key1) == self.find(key2)

    def groups(self) -> List[List[Hashable]]:
        """Members of every set, in registration order."""
        by_root: Dict[Hashable, List[Hashable]] = {}
        for key in list(self.parent):
            by_root.setdefault(self.find(key), []).append(key)
        return list(by_root.values())

    def __contains__(self, key: Hashable) -> bool:
        return key in self.parent

    def __len__(self) -> int:
        return len(self.parent)
