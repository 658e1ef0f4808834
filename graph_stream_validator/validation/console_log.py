from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Literal, Optional, TextIO


Level = Literal["info", "warning", "error"]


@dataclass
class _Entry:
    level: Level
    message: str
    count: int = 1


class ConsoleLog:
    """
    Leveled console log used by the validator, the reconciler and the CLI.

    Features:
      - info goes to ``out`` (stdout), warnings and errors to ``err`` (stderr)
      - coalescing of consecutive identical messages in the history (shows xN)
      - bounded history (drops oldest entries beyond max_entries)
      - single-line ``\\r`` progress counter, cosmetic only
      - quiet mode: info and progress are kept in history but not printed
    """

    def __init__(
        self,
        *,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        quiet: bool = False,
        max_entries: int = 2000,
    ) -> None:
        self._out = out
        self._err = err
        self.quiet = bool(quiet)
        self._max_entries = int(max_entries)
        self._entries: List[_Entry] = []

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def info(self, message: str) -> None:
        self._add("info", message)

    def warning(self, message: str) -> None:
        self._add("warning", message)

    def error(self, message: str) -> None:
        self._add("error", message)

    def progress(self, n: int) -> None:
        if self.quiet:
            return
        self.out.write(f"{n}\r")
        self.out.flush()

    def end_progress(self) -> None:
        """Terminate the progress line."""
        if not self.quiet:
            self.out.write("\n")
            self.out.flush()

    @property
    def entries(self) -> List[str]:
        """History as printable lines, coalesced duplicates suffixed with (xN)."""
        return [e.message + (f" (x{e.count})" if e.count > 1 else "") for e in self._entries]

    def messages(self, level: Optional[Level] = None) -> List[str]:
        return [e.message for e in self._entries if level is None or e.level == level]

    @property
    def n_errors(self) -> int:
        return sum(e.count for e in self._entries if e.level == "error")

    # -------------------------
    # Internals
    # -------------------------
    def _add(self, level: Level, message: str) -> None:
        msg = "" if message is None else str(message)
        self._emit(level, msg)

        # Coalesce consecutive duplicates
        if self._entries and self._entries[-1].level == level and self._entries[-1].message == msg:
            self._entries[-1].count += 1
            return

        self._entries.append(_Entry(level=level, message=msg, count=1))
        if len(self._entries) > self._max_entries:
            self._entries = self._entries[-self._max_entries :]

    def _emit(self, level: Level, msg: str) -> None:
        if level == "info" and self.quiet:
            return
        stream = self.out if level == "info" else self.err
        stream.write(msg + "\n")
        stream.flush()
