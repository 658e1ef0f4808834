from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Tuple, Union

import numpy as np


class UpdateKind(IntEnum):
    """On-disk type code of a stream record.

    INSERT and DELETE double as the expected kind for an adjacency cell:
    an absent cell (False == 0) expects INSERT, a present cell (True == 1) expects DELETE.
    """

    INSERT = 0
    DELETE = 1
    BREAKPOINT = 2


# Packed record layout shared by every stream source: uint8 type, uint32 src, uint32 dst.
UPDATE_DTYPE = np.dtype([("type", "u1"), ("src", "<u4"), ("dst", "<u4")])


def kind_name(code: int) -> str:
    """Printable name of a raw type code (``UNKNOWN`` for codes outside UpdateKind)."""
    try:
        return UpdateKind(int(code)).name
    except ValueError:
        return "UNKNOWN"


def expected_kind(present: bool) -> UpdateKind:
    return UpdateKind.DELETE if present else UpdateKind.INSERT


@dataclass(frozen=True)
class Edge:
    src: int
    dst: int


@dataclass(frozen=True)
class UpdateRecord:
    """One stream record. ``kind`` is kept as a raw int so corrupt codes survive."""

    edge: Edge
    kind: int

    @classmethod
    def insert(cls, src: int, dst: int) -> "UpdateRecord":
        return cls(Edge(int(src), int(dst)), int(UpdateKind.INSERT))

    @classmethod
    def delete(cls, src: int, dst: int) -> "UpdateRecord":
        return cls(Edge(int(src), int(dst)), int(UpdateKind.DELETE))

    @classmethod
    def breakpoint(cls) -> "UpdateRecord":
        return cls(Edge(0, 0), int(UpdateKind.BREAKPOINT))


RecordLike = Union[UpdateRecord, Tuple[int, int, int]]


def make_batch(records: Iterable[RecordLike]) -> np.ndarray:
    """Build a batch array of ``UPDATE_DTYPE`` from records or ``(kind, src, dst)`` tuples.

    Examples
    --------
    >>> b = make_batch([(0, 1, 2), UpdateRecord.breakpoint()])
    >>> b["type"].tolist()
    [0, 2]
    """
    rows = []
    for r in records:
        if isinstance(r, UpdateRecord):
            rows.append((int(r.kind), int(r.edge.src), int(r.edge.dst)))
        else:
            kind, src, dst = r
            rows.append((int(kind), int(src), int(dst)))
    return np.array(rows, dtype=UPDATE_DTYPE)


def breakpoint_batch() -> np.ndarray:
    """The single-record batch a source returns once its data is exhausted."""
    return make_batch([UpdateRecord.breakpoint()])
