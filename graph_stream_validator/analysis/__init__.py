"""Analysis package - state kept while a stream is checked.

Design principle:
  - Ingest produces batches of UPDATE_DTYPE records; analysis never touches files.
  - The adjacency tables hold one bit of state per possible edge and are the only
    memory that grows with the vertex count.
"""

from .adjacency import (
    Adjacency,
    DenseAdjacency,
    SparseAdjacency,
    canonical,
    decode,
    make_adjacency,
    n_cells,
)
from .termination import TerminationState, TerminationTracker

__all__ = [
    "Adjacency",
    "DenseAdjacency",
    "SparseAdjacency",
    "canonical",
    "decode",
    "make_adjacency",
    "n_cells",
    "TerminationState",
    "TerminationTracker",
]
