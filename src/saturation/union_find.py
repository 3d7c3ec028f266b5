"""
saturation/union_find.py - Array-backed union-find

Each rule application owns one small arena indexed by slot number. A class
may carry a ground value; merging two classes keeps whichever value exists.
"""
from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class UnionFind(Generic[T]):
    """Disjoint sets over 0..size-1 with an optional value per class."""

    def __init__(self, size: int):
        self._parent: List[int] = list(range(size))
        self._rank: List[int] = [0] * size
        self._value: List[Optional[T]] = [None] * size

    def __len__(self) -> int:
        return len(self._parent)

    def find(self, i: int) -> int:
        """Representative of `i`'s class, compressing the path on the way."""
        root = i
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[i] != root:
            self._parent[i], i = root, self._parent[i]
        return root

    def value(self, i: int) -> Optional[T]:
        return self._value[self.find(i)]

    def bind(self, i: int, value: T) -> None:
        """Attach `value` to `i`'s class. The class must be unbound."""
        root = self.find(i)
        if self._value[root] is not None:
            raise ValueError(f"class of {i} is already bound")
        self._value[root] = value

    def union(self, i: int, j: int) -> int:
        """Merge the classes of `i` and `j`; returns the new representative.

        The classes must not carry two different values.
        """
        ri, rj = self.find(i), self.find(j)
        if ri == rj:
            return ri
        vi, vj = self._value[ri], self._value[rj]
        if vi is not None and vj is not None and vi != vj:
            raise ValueError(f"cannot merge classes bound to {vi!r} and {vj!r}")
        if self._rank[ri] < self._rank[rj]:
            ri, rj = rj, ri
        self._parent[rj] = ri
        if self._rank[ri] == self._rank[rj]:
            self._rank[ri] += 1
        self._value[ri] = vi if vi is not None else vj
        return ri
