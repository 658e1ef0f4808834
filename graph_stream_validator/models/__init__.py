from .config import ValidatorConfig
from .results import Finding, FindingReason, ReconcileReport, StreamReport
from .updates import UPDATE_DTYPE, Edge, UpdateKind, UpdateRecord, kind_name, make_batch

__all__ = [
    "ValidatorConfig",
    "Finding",
    "FindingReason",
    "ReconcileReport",
    "StreamReport",
    "UPDATE_DTYPE",
    "Edge",
    "UpdateKind",
    "UpdateRecord",
    "kind_name",
    "make_batch",
]
