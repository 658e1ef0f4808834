from __future__ import annotations

import io

from graph_stream_validator.validation.console_log import ConsoleLog


def _log(**kw) -> ConsoleLog:
    return ConsoleLog(out=io.StringIO(), err=io.StringIO(), **kw)


def test_levels_go_to_their_streams() -> None:
    log = _log()
    log.info("Stream validated!")
    log.warning("WARNING: odd")
    log.error("ERROR: bad")
    assert log.out.getvalue() == "Stream validated!\n"
    assert log.err.getvalue() == "WARNING: odd\nERROR: bad\n"


def test_consecutive_duplicates_coalesce() -> None:
    log = _log()
    for _ in range(3):
        log.error("ERROR: same")
    log.info("other")
    assert log.entries == ["ERROR: same (x3)", "other"]
    assert log.n_errors == 3
    # every occurrence is still printed
    assert log.err.getvalue().count("ERROR: same") == 3


def test_history_is_bounded() -> None:
    log = _log(max_entries=3)
    for i in range(5):
        log.info(f"line {i}")
    assert log.entries == ["line 2", "line 3", "line 4"]


def test_quiet_suppresses_info_and_progress() -> None:
    log = _log(quiet=True)
    log.info("chatty")
    log.progress(1024)
    log.end_progress()
    log.error("ERROR: still shown")
    assert log.out.getvalue() == ""
    assert log.err.getvalue() == "ERROR: still shown\n"
    assert log.messages("info") == ["chatty"]


def test_progress_line() -> None:
    log = _log()
    log.progress(2048)
    log.end_progress()
    assert log.out.getvalue() == "2048\r\n"
    assert log.entries == []
