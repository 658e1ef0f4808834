from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from graph_stream_validator.ingest.base import GraphStream
from graph_stream_validator.models.errors import StreamOpenError, StreamReadError
from graph_stream_validator.models.updates import UPDATE_DTYPE, UpdateKind

_U32_MAX = np.iinfo(np.uint32).max
_U8_MAX = np.iinfo(np.uint8).max
# plain decimal digits; ten is enough for any uint32
_UINT_TOKEN = r"\d{1,10}"


class AsciiFileStream(GraphStream):
    """
    Reader for whitespace-separated text update streams.

    Layout:
      - first line: ``<vertices> <edges>``
      - one record per line: ``<type> <src> <dst>`` (has_type=True)
        or ``<src> <dst>`` (has_type=False, every record is an INSERT;
        this is how cumulative snapshots are stored)

    Records are parsed lazily with pandas in chunks of the requested size.  Tokens
    must be plain decimal integers; anything else raises StreamReadError.
    """

    def __init__(self, file_path: str | Path, has_type: bool = True):
        path = Path(file_path).expanduser().resolve()
        if not path.is_file():
            raise StreamOpenError(f"Stream file not found: {path}")
        try:
            with open(path, "r", encoding="ascii") as fh:
                first = fh.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise StreamOpenError(f"Cannot read header of {path}: {e}") from e

        toks = first.split()
        if len(toks) != 2 or not all(t.isdigit() for t in toks):
            raise StreamOpenError(f"{path.name}: header must be '<vertices> <edges>', got {first.strip()!r}")
        super().__init__(int(toks[0]), int(toks[1]))

        self.path = path
        self.has_type = bool(has_type)
        self._ncols = 3 if self.has_type else 2
        self._line = 2  # 1-based line number of the next record

        try:
            self._reader = pd.read_csv(
                path,
                sep=r"\s+",
                header=None,
                dtype=str,
                skiprows=1,
                chunksize=1024,
                encoding="ascii",
            )
        except pd.errors.EmptyDataError:
            self._reader = None
        except (OSError, ValueError) as e:
            raise StreamOpenError(f"{path.name}: cannot parse records: {e}") from e

    def _read_records(self, limit: int) -> np.ndarray:
        if self._reader is None:
            return np.empty(0, dtype=UPDATE_DTYPE)

        try:
            chunk = self._reader.get_chunk(int(limit))
        except StopIteration:
            self.close()
            return np.empty(0, dtype=UPDATE_DTYPE)
        except (OSError, ValueError) as e:
            raise StreamReadError(f"{self.path.name}: malformed records near line {self._line}: {e}") from e

        batch = self._to_batch(chunk)
        self._line += int(batch.size)
        return batch

    def _to_batch(self, chunk: pd.DataFrame) -> np.ndarray:
        if chunk.shape[1] != self._ncols:
            raise StreamReadError(
                f"{self.path.name}: expected {self._ncols} fields per record, found {chunk.shape[1]} "
                f"(lines {self._line}..{self._line + len(chunk) - 1})"
            )

        cols: List[np.ndarray] = []
        for k in range(self._ncols):
            tokens = chunk.iloc[:, k].astype(str)
            bad = ~tokens.str.fullmatch(_UINT_TOKEN).to_numpy(dtype=bool)
            if np.any(bad):
                first_bad = int(np.argmax(bad))
                raise StreamReadError(
                    f"{self.path.name}: invalid value on line {self._line + first_bad}: "
                    f"{chunk.iloc[first_bad, k]!r}"
                )
            cols.append(pd.to_numeric(tokens).to_numpy(dtype=np.int64))

        if self.has_type:
            types, src, dst = cols
        else:
            src, dst = cols
            types = np.full(src.shape, int(UpdateKind.INSERT), dtype=np.int64)

        if np.any(types > _U8_MAX) or np.any(src > _U32_MAX) or np.any(dst > _U32_MAX):
            raise StreamReadError(f"{self.path.name}: value out of range near line {self._line}")

        batch = np.empty(len(src), dtype=UPDATE_DTYPE)
        batch["type"] = types
        batch["src"] = src
        batch["dst"] = dst
        return batch

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
