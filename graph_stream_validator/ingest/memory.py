from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from graph_stream_validator.ingest.base import GraphStream, check_capacity
from graph_stream_validator.models.updates import UPDATE_DTYPE, RecordLike, make_batch


class MemoryStream(GraphStream):
    """
    In-process stream over a fixed record sequence.

    ``chunk`` caps how many records a single fill returns (on top of the requested
    capacity), which emulates sources that deliver short batches.

    Examples
    --------
    >>> from graph_stream_validator.models.updates import UpdateRecord
    >>> s = MemoryStream(4, 1, [UpdateRecord.insert(0, 1)])
    >>> s.get_update_buffer(8)["type"].tolist(), s.get_update_buffer(8)["type"].tolist()
    ([0, 2], [2])
    """

    def __init__(
        self,
        vertices: int,
        edges: int,
        records: Iterable[RecordLike] | np.ndarray,
        *,
        chunk: Optional[int] = None,
    ):
        super().__init__(vertices, edges)
        if isinstance(records, np.ndarray):
            self._data = np.asarray(records, dtype=UPDATE_DTYPE)
        else:
            self._data = make_batch(records)
        if chunk is not None and int(chunk) <= 0:
            raise ValueError("chunk must be > 0")
        self._chunk = None if chunk is None else int(chunk)
        self._pos = 0

    def get_update_buffer(self, capacity: int) -> np.ndarray:
        cap = check_capacity(capacity)
        if self._chunk is not None:
            cap = min(cap, self._chunk)
        return super().get_update_buffer(cap)

    def _read_records(self, limit: int) -> np.ndarray:
        batch = self._data[self._pos : self._pos + int(limit)].copy()
        self._pos += int(batch.size)
        return batch
