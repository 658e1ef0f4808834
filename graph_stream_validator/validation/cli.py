from __future__ import annotations

import argparse
import dataclasses
import textwrap
from typing import Optional, Sequence

from graph_stream_validator.ingest import STREAM_TYPES, AsciiFileStream, open_stream
from graph_stream_validator.models.config import ValidatorConfig
from graph_stream_validator.models.errors import StreamError
from graph_stream_validator.validation.console_log import ConsoleLog
from graph_stream_validator.validation.reconcile import CumulativeReconciler
from graph_stream_validator.validation.stream_validator import StreamValidator

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_STRUCTURAL = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="python -m graph_stream_validator.validation.cli",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Check that a graph update stream is well formed.

            Every INSERT/DELETE must toggle its edge, vertex ids must be in range,
            and the number of records must match the header.  If a cumulative file
            (ASCII, '<src> <dst>' per line) is given, the final graph of the stream
            is also compared against it edge by edge.

            Exit status: 0 valid, 1 validation failure, 2 unreadable or structurally
            broken input.
            """
        ),
    )
    p.add_argument("stream_type", help="Stream encoding: 'binary' or 'ascii'")
    p.add_argument("stream_file", help="Stream to validate")
    p.add_argument("cumulative_file", nargs="?", default=None, help="Optional cumulative snapshot file")
    p.add_argument("--config", default=None, help="JSON file with ValidatorConfig fields")
    p.add_argument("--batch-capacity", type=int, default=None, help="Records per batch fill (default 1024)")
    p.add_argument(
        "--max-overrun",
        type=int,
        default=None,
        help="Stop after this many records beyond the declared count if no terminal breakpoint was seen",
    )
    p.add_argument(
        "--dense-vertex-limit",
        type=int,
        default=None,
        help="Largest vertex count using the dense bit table (sparse table above it)",
    )
    p.add_argument("--quiet", action="store_true", help="Only print errors and warnings")
    return p


def _load_config(ns: argparse.Namespace) -> ValidatorConfig:
    cfg = ValidatorConfig.from_json(ns.config) if ns.config else ValidatorConfig()
    overrides = {}
    if ns.batch_capacity is not None:
        overrides["batch_capacity"] = ns.batch_capacity
    if ns.max_overrun is not None:
        overrides["max_overrun"] = ns.max_overrun
    if ns.dense_vertex_limit is not None:
        overrides["dense_vertex_limit"] = ns.dense_vertex_limit
    return dataclasses.replace(cfg, **overrides) if overrides else cfg


def run(
    stream_type: str,
    stream_file: str,
    cumulative_file: Optional[str] = None,
    *,
    config: Optional[ValidatorConfig] = None,
    log: Optional[ConsoleLog] = None,
) -> int:
    """Validate (and optionally reconcile) one stream file. Returns the process exit status."""
    cfg = config or ValidatorConfig()
    log = log or ConsoleLog()

    try:
        with open_stream(stream_type, stream_file) as stream:
            log.info(f"Attempting to validate stream {stream_file}")
            log.info(f"Number of nodes   = {stream.vertices()}")
            log.info(f"Number of updates = {stream.edges()}")

            report = StreamValidator(cfg, log).validate(stream)

        if not report.ok:
            log.error("ERROR: Stream invalid!")
            return EXIT_INVALID
        log.info("Stream validated!")

        if cumulative_file is None:
            return EXIT_OK

        with AsciiFileStream(cumulative_file, has_type=False) as snapshot:
            result = CumulativeReconciler(cfg, log).reconcile(report, snapshot)
    except StreamError as e:
        log.error(f"ERROR: {e}")
        return EXIT_STRUCTURAL

    if not result.ok:
        log.error("ERROR: Resulting graph does not match cumulative file!")
        return EXIT_INVALID
    log.info("Resulting graph matches cumulative file!")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    ns = p.parse_args(list(argv) if argv is not None else None)

    if ns.stream_type not in STREAM_TYPES:
        print(f"ERROR: Unknown stream_type {ns.stream_type!r}. Should be 'binary' or 'ascii'")
        return EXIT_STRUCTURAL

    try:
        cfg = _load_config(ns)
    except (OSError, ValueError) as e:
        print(f"ERROR: invalid configuration: {e}")
        return EXIT_STRUCTURAL

    return run(ns.stream_type, ns.stream_file, ns.cumulative_file, config=cfg, log=ConsoleLog(quiet=ns.quiet))


if __name__ == "__main__":
    raise SystemExit(main())
