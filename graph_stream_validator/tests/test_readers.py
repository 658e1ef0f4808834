import unittest
import tempfile
from pathlib import Path

import numpy as np

from graph_stream_validator.ingest import open_stream
from graph_stream_validator.ingest.readers_ascii import AsciiFileStream
from graph_stream_validator.ingest.readers_binary import HEADER_DTYPE, BinaryFileStream
from graph_stream_validator.models.errors import StreamOpenError, StreamReadError, UnknownStreamTypeError
from graph_stream_validator.models.updates import UPDATE_DTYPE, UpdateKind, make_batch


def _write_bin(path: Path, vertices: int, edges: int, records, tail: bytes = b"") -> None:
    hdr = np.array([(vertices, edges)], dtype=HEADER_DTYPE)
    path.write_bytes(hdr.tobytes() + make_batch(records).tobytes() + tail)


class TestBinaryFileStream(unittest.TestCase):
    def test_layout_sizes(self):
        self.assertEqual(HEADER_DTYPE.itemsize, 12)
        self.assertEqual(UPDATE_DTYPE.itemsize, 9)

    def test_reads_records_then_end_marker(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "s.bin"
            _write_bin(p, 10, 3, [(0, 1, 2), (1, 2, 1), (0, 9, 3)])
            with BinaryFileStream(p) as s:
                self.assertEqual(s.vertices(), 10)
                self.assertEqual(s.edges(), 3)

                b1 = s.get_update_buffer(8)
                self.assertEqual(b1["type"].tolist(), [0, 1, 0, int(UpdateKind.BREAKPOINT)])
                self.assertEqual(b1["src"].tolist()[:3], [1, 2, 9])
                self.assertEqual(b1["dst"].tolist()[:3], [2, 1, 3])

                for _ in range(2):
                    b2 = s.get_update_buffer(8)
                    self.assertEqual(b2.size, 1)
                    self.assertEqual(int(b2["type"][0]), int(UpdateKind.BREAKPOINT))

    def test_end_marker_never_alone_on_capacity_boundary(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "s.bin"
            _write_bin(p, 10, 3, [(0, 1, 2), (1, 2, 1), (0, 9, 3)])
            with BinaryFileStream(p) as s:
                self.assertEqual(s.get_update_buffer(3)["type"].tolist(), [0, 1])
                self.assertEqual(s.get_update_buffer(3)["type"].tolist(), [0, 2])
                self.assertEqual(s.get_update_buffer(3)["type"].tolist(), [2])

    def test_truncated_record(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "s.bin"
            _write_bin(p, 4, 1, [(0, 0, 1)], tail=b"\x00\x01\x00")
            with BinaryFileStream(p) as s:
                with self.assertRaises(StreamReadError):
                    s.get_update_buffer(16)

    def test_truncated_header(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "s.bin"
            p.write_bytes(b"\x04\x00\x00\x00\x01")
            with self.assertRaises(StreamOpenError):
                BinaryFileStream(p)

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(StreamOpenError):
                BinaryFileStream(Path(d) / "nope.bin")

    def test_closed_stream(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "s.bin"
            _write_bin(p, 4, 0, [])
            s = BinaryFileStream(p)
            s.close()
            with self.assertRaises(StreamReadError):
                s.get_update_buffer(1)


class TestAsciiFileStream(unittest.TestCase):
    def _write(self, d: str, text: str) -> Path:
        p = Path(d) / "s.txt"
        p.write_text(text, encoding="ascii")
        return p

    def test_typed_records(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, "4 3\n0 0 1\n1 1 0\n0 2 3\n")
            with AsciiFileStream(p) as s:
                self.assertEqual((s.vertices(), s.edges()), (4, 3))
                b1 = s.get_update_buffer(8)
                self.assertEqual(b1["type"].tolist(), [0, 1, 0, 2])
                self.assertEqual(b1["src"].tolist()[:3], [0, 1, 2])
                self.assertEqual(b1["dst"].tolist()[:3], [1, 0, 3])
                b2 = s.get_update_buffer(8)
                self.assertEqual(b2["type"].tolist(), [2])

    def test_untyped_snapshot_records_are_inserts(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, "4 2\n0 1\n3 2\n")
            with AsciiFileStream(p, has_type=False) as s:
                b = s.get_update_buffer(1)
                self.assertEqual(b.size, 1)
                self.assertEqual(int(b["type"][0]), int(UpdateKind.INSERT))
                b = s.get_update_buffer(1)
                self.assertEqual((int(b["src"][0]), int(b["dst"][0])), (3, 2))

    def test_header_only(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, "5 0\n")
            with AsciiFileStream(p) as s:
                b = s.get_update_buffer(8)
                self.assertEqual(b["type"].tolist(), [2])

    def test_bad_header(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, "four 3\n0 0 1\n")
            with self.assertRaises(StreamOpenError):
                AsciiFileStream(p)

    def test_non_numeric_value(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, "4 1\n0 x 1\n")
            with AsciiFileStream(p) as s:
                with self.assertRaises(StreamReadError):
                    s.get_update_buffer(8)

    def test_negative_value(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, "4 1\n0 -1 2\n")
            with AsciiFileStream(p) as s:
                with self.assertRaises(StreamReadError):
                    s.get_update_buffer(8)

    def test_wrong_field_count(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, "4 1\n0 1\n")
            with AsciiFileStream(p, has_type=True) as s:
                with self.assertRaises(StreamReadError):
                    s.get_update_buffer(8)

    def test_float_like_tokens_are_rejected(self):
        for body in ("0 1e3 2\n", "0 2.0 1\n", "0 +1 2\n"):
            with tempfile.TemporaryDirectory() as d:
                p = self._write(d, "4 1\n" + body)
                with AsciiFileStream(p) as s:
                    with self.assertRaises(StreamReadError):
                        s.get_update_buffer(8)

    def test_missing_field_is_rejected(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, "4 2\n0 0 1\n0 2\n")
            with AsciiFileStream(p) as s:
                with self.assertRaises(StreamReadError):
                    s.get_update_buffer(8)


class TestOpenStream(unittest.TestCase):
    def test_selector(self):
        with tempfile.TemporaryDirectory() as d:
            pb = Path(d) / "s.bin"
            _write_bin(pb, 3, 0, [])
            pa = Path(d) / "s.txt"
            pa.write_text("3 0\n", encoding="ascii")
            with open_stream("binary", pb) as s:
                self.assertIsInstance(s, BinaryFileStream)
            with open_stream("ascii", pa) as s:
                self.assertIsInstance(s, AsciiFileStream)

    def test_unknown_selector(self):
        with self.assertRaises(UnknownStreamTypeError):
            open_stream("parquet", "whatever")


if __name__ == "__main__":
    unittest.main()
