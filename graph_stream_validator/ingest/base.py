from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from graph_stream_validator.models.updates import UPDATE_DTYPE, breakpoint_batch


class GraphStream(ABC):
    """
    Source of graph updates, read in bounded batches.

    Contract:
      - vertices() and edges() are fixed once the source is open.
      - get_update_buffer(capacity) returns a 1-D array of UPDATE_DTYPE holding
        between 0 and ``capacity`` records, in stream order.
      - The batch that reaches the end of the data carries one BREAKPOINT after the
        last record; every further call returns exactly one BREAKPOINT record.
      - I/O failures and corrupt records raise StreamReadError; nothing is swallowed.

    Subclasses only implement ``_read_records``.  One record of lookahead is kept so
    that, for capacities above 1, the end-of-data BREAKPOINT never lands alone in
    its batch when the data happens to end on a capacity boundary.
    """

    def __init__(self, vertices: int, edges: int):
        if int(vertices) < 0:
            raise ValueError("vertices must be >= 0")
        if int(edges) < 0:
            raise ValueError("edges must be >= 0")
        self._vertices = int(vertices)
        self._edges = int(edges)
        self._pending = np.empty(0, dtype=UPDATE_DTYPE)
        self._data_done = False
        self._marker_sent = False

    def vertices(self) -> int:
        return self._vertices

    def edges(self) -> int:
        """Declared number of updates (from the header)."""
        return self._edges

    @abstractmethod
    def _read_records(self, limit: int) -> np.ndarray:
        """Return up to ``limit`` further records; an empty array means end of data."""

    def get_update_buffer(self, capacity: int) -> np.ndarray:
        cap = check_capacity(capacity)
        if self._marker_sent:
            return breakpoint_batch()

        need = cap + 1 if cap > 1 else cap
        while not self._data_done and self._pending.size < need:
            more = self._read_records(need - self._pending.size)
            if more.size == 0:
                self._data_done = True
            else:
                self._pending = np.concatenate([self._pending, more])

        if self._data_done and self._pending.size < cap:
            batch = np.concatenate([self._pending, breakpoint_batch()])
            self._pending = self._pending[:0]
            self._marker_sent = True
            return batch

        n = cap
        if self._data_done and cap > 1 and self._pending.size == cap:
            # hold the last record back so the end marker travels with it
            n = cap - 1
        batch, self._pending = self._pending[:n], self._pending[n:]
        return batch.copy()

    def close(self) -> None:
        pass

    def __enter__(self) -> "GraphStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


def check_capacity(capacity: int) -> int:
    cap = int(capacity)
    if cap <= 0:
        raise ValueError("capacity must be > 0")
    return cap
