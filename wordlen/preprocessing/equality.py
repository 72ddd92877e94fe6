"""
Union-find over variable names

Used by variable propagation to pick one canonical representative for each
class of variables equated by bare equations x = y. The choice is
deterministic so repeated runs produce the same normalized formula.
"""

from typing import Dict, List


class UnionFind:
    """Union-Find data structure for variable canonicalization"""

    def __init__(self):
        self.parent: Dict[str, str] = {}
        self.rank: Dict[str, int] = {}

    def find(self, x: str) -> str:
        """Find canonical representative with path compression"""
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0
            return x

        if self.parent[x] != x:
            self.parent[x] = self.find(self.parent[x])  # Path compression
        return self.parent[x]

    def union(self, a: str, b: str) -> str:
        """Union by rank; on equal rank the smaller name becomes the root

        Returns:
            The representative of the merged class
        """
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return ra

        if self.rank[ra] < self.rank[rb] or (self.rank[ra] == self.rank[rb] and rb < ra):
            ra, rb = rb, ra

        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1
        return ra

    def classes(self) -> List[List[str]]:
        """All classes with more than one member, each sorted"""
        groups: Dict[str, List[str]] = {}
        for x in self.parent:
            groups.setdefault(self.find(x), []).append(x)
        return sorted(sorted(g) for g in groups.values() if len(g) > 1)
