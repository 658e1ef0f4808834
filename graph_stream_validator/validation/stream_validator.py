"""Stream validator -- single pass over a primary update stream.

Every record is checked in stream order:

1. BREAKPOINT records are separators: no edge checks, but they are counted.
2. ``src == dst`` is flagged and leaves the adjacency table untouched.
3. For in-range endpoints the record kind must match the cell: INSERT on an absent
   edge, DELETE on a present one.  The cell is toggled whether or not the check
   passed, so one bad record does not cascade into errors on every later update
   of the same edge.
4. ``src >= V`` or ``dst >= V`` is flagged as out of bounds.  Such a record has no
   cell; only a kind code that is neither INSERT nor DELETE is still reported.

Batches are read at a fixed capacity until a fill returns a lone BREAKPOINT.  At
that point ``total_checked`` includes both terminal breakpoints, so a well-formed
stream satisfies ``total_checked - 2 == declared_updates``.

Findings are collected, never raised.  Errors raised by the stream source abort the
pass and propagate to the caller.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from graph_stream_validator.analysis.adjacency import Adjacency, canonical, make_adjacency
from graph_stream_validator.analysis.termination import TerminationTracker
from graph_stream_validator.ingest.base import GraphStream
from graph_stream_validator.models.config import ValidatorConfig
from graph_stream_validator.models.results import Finding, FindingReason, StreamReport
from graph_stream_validator.models.updates import UpdateKind, expected_kind
from graph_stream_validator.validation.console_log import ConsoleLog

_INSERT = int(UpdateKind.INSERT)
_DELETE = int(UpdateKind.DELETE)
_BREAKPOINT = int(UpdateKind.BREAKPOINT)


class StreamValidator:
    """Checks one stream against the toggle protocol and its declared update count."""

    def __init__(self, config: Optional[ValidatorConfig] = None, log: Optional[ConsoleLog] = None):
        self.config = config or ValidatorConfig()
        self.log = log or ConsoleLog()

    def validate(self, stream: GraphStream) -> StreamReport:
        cfg = self.config
        V = int(stream.vertices())
        E = int(stream.edges())

        adj = make_adjacency(V, cfg.dense_vertex_limit)
        report = StreamReport(vertices=V, declared_updates=E, adjacency=adj)
        tracker = TerminationTracker()

        cap = int(cfg.batch_capacity)
        interval = cfg.progress_interval
        total_checked = 0
        empty_run = 0

        while True:
            batch = self._fill(stream, cap)
            n = int(batch.size)

            types = batch["type"].tolist()
            srcs = batch["src"].tolist()
            dsts = batch["dst"].tolist()
            for e in range(n):
                self.check_record(report, adj, types[e], srcs[e], dsts[e], total_checked + e)

            total_checked += n
            report.total_checked = total_checked
            if n and total_checked % interval == 0:
                self.log.progress(total_checked)

            tracker.observe_batch(batch)
            if tracker.terminated:
                # end of stream breakpoint appears twice
                if total_checked - 2 != E:
                    self._flag(
                        report,
                        Finding(FindingReason.COUNT_MISMATCH, observed=total_checked, expected=E),
                    )
                break

            empty_run = empty_run + 1 if n == 0 else 0
            if self._past_cutoff(total_checked, E, empty_run):
                self._flag(
                    report,
                    Finding(FindingReason.UNTERMINATED, observed=total_checked, expected=E),
                )
                break

        self.log.end_progress()
        report.termination = tracker.state
        if tracker.terminated and not tracker.doubled:
            msg = "WARNING: terminal breakpoint was not preceded by another breakpoint"
            report.warnings.append(msg)
            self.log.warning(msg)
        return report

    def check_record(
        self,
        report: StreamReport,
        adj: Adjacency,
        kind: int,
        src: int,
        dst: int,
        index: int,
    ) -> None:
        """Apply the per-record checks of one update (mutates ``adj`` and ``report``)."""
        # we allow breakpoints in the stream; if they shouldn't be there
        # this is reflected in the edge count
        if kind == _BREAKPOINT:
            return

        if src == dst:
            self._flag(report, Finding(FindingReason.SELF_LOOP, index=index, src=src, dst=dst, kind=kind))
            return

        V = report.vertices
        in_range = src < V and dst < V
        if in_range:
            lo, offset = canonical(src, dst)
            expect = int(expected_kind(adj.toggle(lo, offset)))
            if kind != expect:
                self._flag(
                    report,
                    Finding(FindingReason.WRONG_TYPE, index=index, src=src, dst=dst, kind=kind, expected=expect),
                )
        elif kind not in (_INSERT, _DELETE):
            self._flag(report, Finding(FindingReason.WRONG_TYPE, index=index, src=src, dst=dst, kind=kind))

        if not in_range:
            self._flag(report, Finding(FindingReason.OUT_OF_BOUNDS, index=index, src=src, dst=dst, kind=kind))

    # -------------------------
    # Internals
    # -------------------------
    def _fill(self, stream: GraphStream, cap: int) -> np.ndarray:
        try:
            return stream.get_update_buffer(cap)
        except Exception:
            self.log.error("ERROR: Could not get buffer!")
            raise

    def _past_cutoff(self, total_checked: int, declared: int, empty_run: int) -> bool:
        cfg = self.config
        if cfg.max_overrun is not None and total_checked > declared + 2 + int(cfg.max_overrun):
            return True
        if cfg.max_empty_batches is not None and empty_run > int(cfg.max_empty_batches):
            return True
        return False

    def _flag(self, report: StreamReport, finding: Finding) -> None:
        report.n_findings += 1
        cap = self.config.max_findings
        if cap is None or len(report.findings) < int(cap):
            report.findings.append(finding)
        for line in finding.lines():
            self.log.error(line)


def validate_stream(
    stream: GraphStream,
    config: Optional[ValidatorConfig] = None,
    log: Optional[ConsoleLog] = None,
) -> StreamReport:
    """Convenience wrapper: ``StreamValidator(config, log).validate(stream)``."""
    return StreamValidator(config, log).validate(stream)
