from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from dupsweep.logging import EventLogger


def test_event_lines_have_stable_schema(tmp_path: Path) -> None:
    stream = io.StringIO()
    logger = EventLogger(stream=stream)

    logger.info("walk.file", "a/x.txt", sha256="abc", size=3)

    event = json.loads(stream.getvalue().splitlines()[-1])
    assert set(event.keys()) == {"details", "event", "level", "path", "timestamp"}
    assert event["level"] == "info"
    assert event["event"] == "walk.file"
    assert event["path"] == "a/x.txt"
    assert event["details"] == {"sha256": "abc", "size": 3}
    assert event["timestamp"].endswith("Z")


def test_level_threshold_drops_lower_events() -> None:
    stream = io.StringIO()
    logger = EventLogger(stream=stream, level="warning")

    assert logger.info("walk.skip_empty", "a.txt") is None
    logger.warning("action.remove", "b.txt")
    logger.error("run.failed", None, code="read_failure")

    levels = [json.loads(line)["level"] for line in stream.getvalue().splitlines()]
    assert levels == ["warning", "error"]


def test_unknown_level_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        EventLogger(stream=io.StringIO(), level="debug")


def test_file_sink_appends_jsonl(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "run.jsonl"
    log_path.parent.mkdir()
    log_path.write_text('{"event": "earlier"}\n', encoding="utf-8")
    logger = EventLogger(stream=io.StringIO(), path=log_path)

    for index in range(2):
        logger.info("walk.file", f"f{index}.txt", target=tmp_path / "out", parts=(1, "x"))

    lines = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [event.get("path") for event in lines] == [None, "f0.txt", "f1.txt"]
    assert lines[1]["details"] == {"parts": [1, "x"], "target": str(tmp_path / "out")}
