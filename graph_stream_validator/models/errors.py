"""
Structural (fatal) error types.

Two error tiers exist in this package:
- Validation findings are data: they are collected on StreamReport/ReconcileReport
  (see graph_stream_validator.models.results) and never raised.
- Structural errors are exceptions: the run cannot continue meaningfully and aborts.
  Anything already printed stays printed; no partial report is returned.

Hierarchy
- StreamError: base for everything raised by stream sources and the reconciler.
  - StreamOpenError: source missing, unreadable, or malformed at the header level.
  - StreamReadError: I/O failure or record-level corruption while filling a batch.
  - StructuralError: well-formed input that violates a structural rule.
    - UnknownStreamTypeError: stream-format selector is not 'binary' or 'ascii'.
    - VertexCountMismatchError: snapshot and stream disagree on the vertex count.
    - DuplicateEdgeError: an edge appears twice in a cumulative snapshot.
    - InvalidSnapshotEdgeError: a snapshot edge has no canonical cell.

Notes
- StreamOpenError/StreamReadError also derive from OSError and StructuralError from
  ValueError, so callers catching the builtin families keep working.
"""

from __future__ import annotations

__all__ = [
    "StreamError",
    "StreamOpenError",
    "StreamReadError",
    "StructuralError",
    "UnknownStreamTypeError",
    "VertexCountMismatchError",
    "DuplicateEdgeError",
    "InvalidSnapshotEdgeError",
]


class StreamError(Exception):
    """Base class for fatal stream/snapshot errors."""


class StreamOpenError(StreamError, OSError):
    """Raised when a stream source cannot be opened or its header is malformed."""


class StreamReadError(StreamError, OSError):
    """Raised when filling a batch fails (I/O error, truncated or corrupt records)."""


class StructuralError(StreamError, ValueError):
    """Structural violation in otherwise readable input."""


class UnknownStreamTypeError(StructuralError):
    """Unknown stream-format selector."""


class VertexCountMismatchError(StructuralError):
    """Cumulative snapshot vertex count differs from the validated stream."""


class DuplicateEdgeError(StructuralError):
    """
    Raised when a cumulative snapshot lists the same edge twice.

    Attributes:
        edge: canonical (lo, hi) pair of the repeated edge.
        index: 0-based record index of the second occurrence.
    """

    def __init__(self, edge: tuple, index: int) -> None:
        self.edge = edge
        self.index = index
        super().__init__(
            f"Edges must appear only once in cumul file! edge ({edge[0]},{edge[1]}) repeated at record {index}"
        )


class InvalidSnapshotEdgeError(StructuralError):
    """Snapshot edge is a self-loop or references a vertex outside [0, V)."""
