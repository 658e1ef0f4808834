"""Ingest package - stream sources and format selection.

This package handles:
- The GraphStream collaborator contract (vertex count, declared update count, batch fill)
- Reading packed binary update streams (*.bin, *.data)
- Reading whitespace-separated ASCII update streams and cumulative snapshots
- In-memory streams for tests and programmatic checks

Design principle:
- Sources only decode records; they never judge them (that is the validator's job)
- Once the data is exhausted a source keeps returning a lone BREAKPOINT record
- Open and read failures surface as StreamOpenError / StreamReadError
"""

from __future__ import annotations

from pathlib import Path

from graph_stream_validator.ingest.base import GraphStream
from graph_stream_validator.ingest.memory import MemoryStream
from graph_stream_validator.ingest.readers_ascii import AsciiFileStream
from graph_stream_validator.ingest.readers_binary import BinaryFileStream
from graph_stream_validator.models.errors import UnknownStreamTypeError

STREAM_TYPES = ("binary", "ascii")


def open_stream(stream_type: str, file_path: str | Path, *, has_type: bool = True) -> GraphStream:
    """Open ``file_path`` with the reader selected by ``stream_type`` ('binary' or 'ascii')."""
    st = str(stream_type).strip().lower()
    if st == "binary":
        return BinaryFileStream(file_path)
    if st == "ascii":
        return AsciiFileStream(file_path, has_type=has_type)
    raise UnknownStreamTypeError(f"Unknown stream_type {stream_type!r}. Should be 'binary' or 'ascii'")


__all__ = [
    "STREAM_TYPES",
    "GraphStream",
    "MemoryStream",
    "AsciiFileStream",
    "BinaryFileStream",
    "open_stream",
]
