from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from graph_stream_validator.models.updates import kind_name

if TYPE_CHECKING:
    from graph_stream_validator.analysis.adjacency import Adjacency
    from graph_stream_validator.analysis.termination import TerminationState


class FindingReason(str, Enum):
    SELF_LOOP = "self_loop"
    WRONG_TYPE = "wrong_type"
    OUT_OF_BOUNDS = "out_of_bounds"
    COUNT_MISMATCH = "count_mismatch"
    UNTERMINATED = "unterminated"
    CUMULATIVE_MISMATCH = "cumulative_mismatch"


@dataclass(frozen=True)
class Finding:
    """One validation finding (never raised, always collected).

    Attributes
    ----------
    reason:
        What was violated.
    index:
        0-based record index in the stream, or None for stream-level findings.
    src, dst:
        Edge endpoints as read from the record (or the reconstructed edge for
        cumulative mismatches).
    kind:
        Raw type code observed on the record.
    expected:
        Expected type code (WRONG_TYPE) or expected total (COUNT_MISMATCH).
    observed:
        Observed total (COUNT_MISMATCH / UNTERMINATED).
    """

    reason: FindingReason
    index: Optional[int] = None
    src: Optional[int] = None
    dst: Optional[int] = None
    kind: Optional[int] = None
    expected: Optional[int] = None
    observed: Optional[int] = None

    def lines(self) -> List[str]:
        """Console diagnostic lines, one header plus one indented reason line where applicable."""
        r = self.reason
        if r is FindingReason.COUNT_MISMATCH:
            return [
                "ERROR: Total number of edges found in stream does not match expected!",
                f"got: {self.observed} expected: {self.expected}",
            ]
        if r is FindingReason.UNTERMINATED:
            return [
                "ERROR: Stream did not reach its terminal breakpoint!",
                f"read: {self.observed} declared: {self.expected}",
            ]
        if r is FindingReason.CUMULATIVE_MISMATCH:
            return [f"ERROR: Cumul mismatch on edge ({self.src},{self.dst})"]

        head = f"ERROR: edge idx: {self.index}=({self.src},{self.dst}), {kind_name(self.kind)}"
        if r is FindingReason.SELF_LOOP:
            return [head, "       Cannot have equal src and dst"]
        if r is FindingReason.WRONG_TYPE:
            exp = kind_name(self.expected) if self.expected is not None else "INSERT or DELETE"
            return [head, f"       Incorrect type! Expect: {exp}"]
        return [head, "       src or dst out of bounds."]

    def describe(self) -> str:
        return "\n".join(self.lines())


@dataclass
class StreamReport:
    """Outcome of one validation pass over a primary stream.

    The adjacency table is whatever the pass left behind (also on failure). It lives
    only as long as this report and is the input of the cumulative reconciler.
    """

    vertices: int
    declared_updates: int
    total_checked: int = 0
    findings: List[Finding] = field(default_factory=list)
    n_findings: int = 0
    warnings: List[str] = field(default_factory=list)
    termination: Optional["TerminationState"] = None
    adjacency: Optional["Adjacency"] = None

    @property
    def ok(self) -> bool:
        return self.n_findings == 0

    def raise_if_errors(self) -> None:
        """Raise ValueError listing every stored finding, if any were raised."""
        if not self.ok:
            msg = "Stream invalid:\n" + "\n".join(f"- {f.describe()}" for f in self.findings)
            raise ValueError(msg)


@dataclass(frozen=True)
class ReconcileReport:
    """Outcome of comparing the validated graph with a cumulative snapshot."""

    vertices: int
    n_snapshot_edges: int
    findings: Tuple[Finding, ...] = ()

    @property
    def ok(self) -> bool:
        return len(self.findings) == 0

    @property
    def mismatched_edges(self) -> List[Tuple[int, int]]:
        return [(int(f.src), int(f.dst)) for f in self.findings]

    def raise_if_errors(self) -> None:
        if self.findings:
            msg = "Resulting graph does not match cumulative file:\n" + "\n".join(
                f"- ({f.src},{f.dst})" for f in self.findings
            )
            raise ValueError(msg)
