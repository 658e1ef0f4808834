from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Optional

import numpy as np

from graph_stream_validator.ingest.base import GraphStream
from graph_stream_validator.models.errors import StreamOpenError, StreamReadError
from graph_stream_validator.models.updates import UPDATE_DTYPE

# Little-endian header: uint32 vertex count, uint64 declared update count.
HEADER_DTYPE = np.dtype([("vertices", "<u4"), ("edges", "<u8")])


class BinaryFileStream(GraphStream):
    """
    Reader for packed binary update streams.

    Layout:
      - 12-byte header (HEADER_DTYPE)
      - N records of UPDATE_DTYPE (9 bytes each, no padding)

    The reader follows the file to its physical end rather than stopping after the
    declared count, so a header that disagrees with the body stays observable.
    The file holds update records only; the end-of-data BREAKPOINT is added by
    GraphStream.get_update_buffer.
    """

    def __init__(self, file_path: str | Path):
        path = Path(file_path).expanduser().resolve()
        if not path.is_file():
            raise StreamOpenError(f"Stream file not found: {path}")
        try:
            fh = open(path, "rb")
        except OSError as e:
            raise StreamOpenError(f"Cannot open stream file {path}: {e}") from e

        raw = fh.read(HEADER_DTYPE.itemsize)
        if len(raw) != HEADER_DTYPE.itemsize:
            fh.close()
            raise StreamOpenError(
                f"{path.name}: truncated header ({len(raw)} of {HEADER_DTYPE.itemsize} bytes)"
            )
        hdr = np.frombuffer(raw, dtype=HEADER_DTYPE)[0]
        super().__init__(int(hdr["vertices"]), int(hdr["edges"]))

        self.path = path
        self._fh: Optional[BinaryIO] = fh
        self._records_read = 0

    def _read_records(self, limit: int) -> np.ndarray:
        if self._fh is None:
            raise StreamReadError(f"{self.path.name}: stream is closed")

        rec = UPDATE_DTYPE.itemsize
        try:
            raw = self._fh.read(int(limit) * rec)
        except OSError as e:
            raise StreamReadError(f"{self.path.name}: read failed: {e}") from e

        if not raw:
            return np.empty(0, dtype=UPDATE_DTYPE)
        if len(raw) % rec != 0:
            offset = HEADER_DTYPE.itemsize + self._records_read * rec
            raise StreamReadError(
                f"{self.path.name}: truncated record at byte {offset + (len(raw) // rec) * rec} "
                f"({len(raw) % rec} trailing bytes)"
            )

        batch = np.frombuffer(raw, dtype=UPDATE_DTYPE).copy()
        self._records_read += int(batch.size)
        return batch

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
