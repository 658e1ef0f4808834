"""Triangular adjacency tables.

An undirected simple graph on ``V`` vertices has ``V*(V-1)/2`` possible edges.
Each one is addressed by its canonical key::

    lo     = min(src, dst)
    offset = max(src, dst) - lo - 1

Row ``lo`` holds ``V - lo - 1`` cells; laid out back to back the rows form a flat
index space ``[0, V*(V-1)/2)`` with row ``lo`` starting at
``lo*V - lo*(lo+1)/2``.  Decoding ``(lo, offset)`` gives back ``(lo, lo + offset + 1)``.

Two interchangeable tables are provided:

- :class:`DenseAdjacency` packs every cell into one bit of a numpy ``uint8`` arena.
- :class:`SparseAdjacency` keeps the flat indices of present cells in a set, for
  vertex counts where ``O(V^2)`` bits would not fit in memory.

Both start with every cell absent and share the same toggle semantics.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, Set, Tuple

import numpy as np


def n_cells(vertices: int) -> int:
    V = int(vertices)
    return V * (V - 1) // 2 if V > 1 else 0


def row_start(lo, vertices: int):
    """Flat index of the first cell of row ``lo`` (works on ints and integer arrays)."""
    V = int(vertices)
    return lo * V - lo * (lo + 1) // 2


def canonical(src: int, dst: int) -> Tuple[int, int]:
    """Map an unordered pair of distinct vertices to ``(lo, offset)``.

    Examples
    --------
    >>> canonical(3, 1), canonical(1, 3)
    ((1, 1), (1, 1))
    """
    s, d = int(src), int(dst)
    if s == d:
        raise ValueError(f"self-loop ({s},{d}) has no canonical cell")
    lo = min(s, d)
    return lo, max(s, d) - lo - 1


def decode(lo: int, offset: int) -> Tuple[int, int]:
    """Inverse of :func:`canonical`, returning the edge in canonical order."""
    return int(lo), int(lo) + int(offset) + 1


_POPCOUNT = np.array([bin(i).count("1") for i in range(256)], dtype=np.uint8)


def _tri(k: np.ndarray) -> np.ndarray:
    """``k*(k+1)/2`` in int64; the even factor is halved first so it cannot overflow."""
    return np.where(k % 2 == 0, (k // 2) * (k + 1), k * ((k + 1) // 2))


def _set_bits(buf: np.ndarray) -> np.ndarray:
    """Sorted flat indices of the set bits of a little-endian packed buffer.

    Only non-zero bytes are unpacked, so memory follows the number of set bits.
    """
    nz = np.flatnonzero(buf)
    if nz.size == 0:
        return np.empty(0, dtype=np.int64)
    bits = np.unpackbits(buf[nz][:, None], axis=1, bitorder="little")
    r, c = np.nonzero(bits)
    return nz[r].astype(np.int64) * 8 + c


class Adjacency(ABC):
    """Common interface of the triangular tables."""

    def __init__(self, vertices: int):
        if int(vertices) < 0:
            raise ValueError("vertices must be >= 0")
        self.vertices = int(vertices)
        self.n_cells = n_cells(self.vertices)

    def contains(self, src: int, dst: int) -> bool:
        """True if ``(src, dst)`` addresses a cell of this table."""
        s, d = int(src), int(dst)
        return s != d and 0 <= s < self.vertices and 0 <= d < self.vertices

    def flat_index(self, lo: int, offset: int) -> int:
        lo, offset = int(lo), int(offset)
        if not (0 <= lo < self.vertices and 0 <= offset < self.vertices - lo - 1):
            raise IndexError(f"cell ({lo},{offset}) outside table for V={self.vertices}")
        return int(row_start(lo, self.vertices)) + offset

    def row_length(self, lo: int) -> int:
        return max(self.vertices - int(lo) - 1, 0)

    @abstractmethod
    def get(self, lo: int, offset: int) -> bool:
        ...

    @abstractmethod
    def toggle(self, lo: int, offset: int) -> bool:
        """Flip the cell and return its previous value."""

    @abstractmethod
    def set(self, lo: int, offset: int, value: bool = True) -> None:
        ...

    @abstractmethod
    def present_flat(self) -> np.ndarray:
        """Sorted int64 array of flat indices of present cells."""

    def count(self) -> int:
        return int(self.present_flat().size)

    def flat_to_keys(self, flat: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized flat index -> (lo, offset), with no per-row table.

        Rows are counted from the end of the flat space: the ``k`` rows after row
        ``lo = V - 2 - k`` hold ``k*(k+1)/2`` cells, so ``k`` is the triangular root
        of the distance to the end.
        """
        flat = np.asarray(flat, dtype=np.int64)
        g = self.n_cells - 1 - flat
        k = np.floor((np.sqrt(8.0 * g + 1.0) - 1.0) / 2.0).astype(np.int64)
        # float rounding leaves k at most one row off
        k -= (_tri(k) > g).astype(np.int64)
        k += (_tri(k + 1) <= g).astype(np.int64)
        lo = self.vertices - 2 - k
        return lo, flat - (self.n_cells - _tri(k + 1))

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Present edges as ``(lo, hi)`` pairs in row-major order."""
        lo, off = self.flat_to_keys(self.present_flat())
        for s, d in zip(lo.tolist(), off.tolist()):
            yield decode(s, d)

    def mismatches(self, other: "Adjacency") -> List[Tuple[int, int]]:
        """Every ``(s, d)`` key whose value differs between the two tables, row-major."""
        if other.vertices != self.vertices:
            raise ValueError(f"vertex count mismatch: {self.vertices} != {other.vertices}")
        diff = np.setxor1d(self.present_flat(), other.present_flat(), assume_unique=True)
        lo, off = self.flat_to_keys(diff)
        return list(zip(lo.tolist(), off.tolist()))


class DenseAdjacency(Adjacency):
    """Bit-packed arena: cell ``i`` of the flat space is bit ``i & 7`` of byte ``i >> 3``."""

    def __init__(self, vertices: int):
        super().__init__(vertices)
        self._bits = np.zeros((self.n_cells + 7) // 8, dtype=np.uint8)

    def get(self, lo: int, offset: int) -> bool:
        i = self.flat_index(lo, offset)
        return bool((int(self._bits[i >> 3]) >> (i & 7)) & 1)

    def toggle(self, lo: int, offset: int) -> bool:
        i = self.flat_index(lo, offset)
        byte = int(self._bits[i >> 3])
        self._bits[i >> 3] = byte ^ (1 << (i & 7))
        return bool((byte >> (i & 7)) & 1)

    def set(self, lo: int, offset: int, value: bool = True) -> None:
        i = self.flat_index(lo, offset)
        byte = int(self._bits[i >> 3])
        mask = 1 << (i & 7)
        self._bits[i >> 3] = (byte | mask) if value else (byte & ~mask & 0xFF)

    def row(self, lo: int) -> np.ndarray:
        """Boolean copy of row ``lo`` (length ``V - lo - 1``)."""
        start = int(row_start(int(lo), self.vertices))
        n = self.row_length(lo)
        chunk = self._bits[start >> 3 : (start + n + 7) >> 3]
        bits = np.unpackbits(chunk, bitorder="little")
        return bits[(start & 7) : (start & 7) + n].astype(bool)

    def present_flat(self) -> np.ndarray:
        return _set_bits(self._bits)

    def count(self) -> int:
        return int(_POPCOUNT[self._bits].sum(dtype=np.int64))

    def mismatches(self, other: Adjacency) -> List[Tuple[int, int]]:
        if isinstance(other, DenseAdjacency) and other.vertices == self.vertices:
            flat = _set_bits(np.bitwise_xor(self._bits, other._bits))
            lo, off = self.flat_to_keys(flat)
            return list(zip(lo.tolist(), off.tolist()))
        return super().mismatches(other)


class SparseAdjacency(Adjacency):
    """Hash-set of present flat indices; same semantics as DenseAdjacency."""

    def __init__(self, vertices: int):
        super().__init__(vertices)
        self._present: Set[int] = set()

    def get(self, lo: int, offset: int) -> bool:
        return self.flat_index(lo, offset) in self._present

    def toggle(self, lo: int, offset: int) -> bool:
        i = self.flat_index(lo, offset)
        if i in self._present:
            self._present.remove(i)
            return True
        self._present.add(i)
        return False

    def set(self, lo: int, offset: int, value: bool = True) -> None:
        i = self.flat_index(lo, offset)
        if value:
            self._present.add(i)
        else:
            self._present.discard(i)

    def present_flat(self) -> np.ndarray:
        return np.array(sorted(self._present), dtype=np.int64)

    def count(self) -> int:
        return len(self._present)


def make_adjacency(vertices: int, dense_vertex_limit: int = 1 << 16) -> Adjacency:
    """Dense bit table up to ``dense_vertex_limit`` vertices, hash-set table above it."""
    if int(vertices) <= int(dense_vertex_limit):
        return DenseAdjacency(vertices)
    return SparseAdjacency(vertices)
