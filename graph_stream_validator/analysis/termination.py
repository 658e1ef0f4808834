from __future__ import annotations

from enum import Enum

import numpy as np

from graph_stream_validator.models.updates import UpdateKind


class TerminationState(str, Enum):
    STREAMING = "streaming"
    SAW_ONE_BREAKPOINT = "saw_one_breakpoint"
    TERMINATED = "terminated"


class TerminationTracker:
    """End-of-stream detection for the doubled terminal breakpoint.

    The stream is over when a fill returns exactly one record and that record is a
    BREAKPOINT.  Breakpoints inside larger batches are ordinary separators.

    Transitions, per batch:
      - lone BREAKPOINT batch          -> TERMINATED
      - batch ending with a BREAKPOINT -> SAW_ONE_BREAKPOINT
      - any other non-empty batch      -> STREAMING
      - empty batch                    -> unchanged

    ``doubled`` tells whether the terminal breakpoint followed another breakpoint,
    i.e. whether the stream really ended with the two-marker convention.
    """

    def __init__(self) -> None:
        self.state = TerminationState.STREAMING
        self.doubled = False

    @property
    def terminated(self) -> bool:
        return self.state is TerminationState.TERMINATED

    def observe_batch(self, batch: np.ndarray) -> TerminationState:
        if self.terminated:
            raise RuntimeError("stream already terminated")
        n = int(batch.size)
        if n == 0:
            return self.state

        last_is_bp = int(batch["type"][-1]) == int(UpdateKind.BREAKPOINT)
        if n == 1 and last_is_bp:
            self.doubled = self.state is TerminationState.SAW_ONE_BREAKPOINT
            self.state = TerminationState.TERMINATED
        elif last_is_bp:
            self.state = TerminationState.SAW_ONE_BREAKPOINT
        else:
            self.state = TerminationState.STREAMING
        return self.state
