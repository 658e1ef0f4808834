"""Graph Stream Validator -- consistency checking for graph edge-update streams.

A stream is a sequence of INSERT/DELETE updates on the edges of a graph with a
fixed vertex count, interleaved with BREAKPOINT markers and terminated by a
doubled breakpoint.

This package provides tools for:
- Reading update streams (binary and ASCII files, in-memory sequences) in bounded batches
- Checking every update against the INSERT/DELETE toggle protocol of its edge
- Checking vertex ids, self-loops and the declared update count
- Reconciling the final edge set against a cumulative snapshot file

Key principles:
- Single pass, single thread: every record is checked once, in stream order
- Collect findings, do not stop at the first one
- Structural problems (unreadable streams, bad snapshots) abort immediately

Main subpackages:
- analysis: Triangular adjacency tables and the end-of-stream state machine
- ingest: Stream sources and the format selector
- models: Update records, findings, reports, errors and configuration
- validation: Stream validator, cumulative reconciler, console log and CLI
"""

__all__ = []
