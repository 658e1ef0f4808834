"""Cumulative reconciliation -- compare the validated graph with a snapshot file.

A cumulative snapshot lists the final edge set of a stream, one edge per record,
each edge exactly once.  After a successful validation pass the adjacency table
left by the validator must match the snapshot cell for cell.

Structural problems in the snapshot (vertex count, repeated or impossible edges,
early end of data) are fatal and raised.  Cell mismatches are findings: all of
them are collected before the report is returned.
"""

from __future__ import annotations

from typing import List, Optional

from graph_stream_validator.analysis.adjacency import Adjacency, canonical, decode, make_adjacency
from graph_stream_validator.ingest.base import GraphStream
from graph_stream_validator.models.config import ValidatorConfig
from graph_stream_validator.models.errors import (
    DuplicateEdgeError,
    InvalidSnapshotEdgeError,
    StreamReadError,
    VertexCountMismatchError,
)
from graph_stream_validator.models.results import Finding, FindingReason, ReconcileReport, StreamReport
from graph_stream_validator.models.updates import UpdateKind
from graph_stream_validator.validation.console_log import ConsoleLog


class CumulativeReconciler:
    def __init__(self, config: Optional[ValidatorConfig] = None, log: Optional[ConsoleLog] = None):
        self.config = config or ValidatorConfig()
        self.log = log or ConsoleLog()

    def build_snapshot_table(self, snapshot: GraphStream, vertices: int) -> Adjacency:
        """Read exactly ``snapshot.edges()`` records, one per fill, into a fresh table."""
        cumul = make_adjacency(vertices, self.config.dense_vertex_limit)
        n_edges = int(snapshot.edges())

        for e in range(n_edges):
            batch = snapshot.get_update_buffer(1)
            if batch.size != 1 or int(batch["type"][0]) == int(UpdateKind.BREAKPOINT):
                raise StreamReadError(f"cumulative snapshot ended after {e} of {n_edges} edges")

            src = int(batch["src"][0])
            dst = int(batch["dst"][0])
            if not cumul.contains(src, dst):
                raise InvalidSnapshotEdgeError(
                    f"cumulative edge ({src},{dst}) at record {e} is not a valid edge for V={vertices}"
                )

            lo, offset = canonical(src, dst)
            if cumul.get(lo, offset):
                raise DuplicateEdgeError(decode(lo, offset), e)
            cumul.set(lo, offset)

        return cumul

    def reconcile(self, report: StreamReport, snapshot: GraphStream) -> ReconcileReport:
        if not report.ok:
            raise ValueError("Stream failed validation; cumulative reconciliation is skipped.")
        if report.adjacency is None:
            raise ValueError("StreamReport carries no adjacency table.")

        V = int(report.vertices)
        cumul_nodes = int(snapshot.vertices())
        if cumul_nodes != V:
            raise VertexCountMismatchError(
                f"Number of nodes do not match stream and cumul (stream={V}, cumul={cumul_nodes})"
            )

        cumul = self.build_snapshot_table(snapshot, V)

        findings: List[Finding] = []
        for s, d in report.adjacency.mismatches(cumul):
            a, b = decode(s, d)
            f = Finding(FindingReason.CUMULATIVE_MISMATCH, src=a, dst=b)
            findings.append(f)
            for line in f.lines():
                self.log.error(line)

        return ReconcileReport(vertices=V, n_snapshot_edges=int(snapshot.edges()), findings=tuple(findings))


def reconcile_cumulative(
    report: StreamReport,
    snapshot: GraphStream,
    config: Optional[ValidatorConfig] = None,
    log: Optional[ConsoleLog] = None,
) -> ReconcileReport:
    """Convenience wrapper: ``CumulativeReconciler(config, log).reconcile(report, snapshot)``."""
    return CumulativeReconciler(config, log).reconcile(report, snapshot)
