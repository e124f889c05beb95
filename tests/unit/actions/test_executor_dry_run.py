from __future__ import annotations

import io
import json
from pathlib import Path

from dupsweep.actions import ActionExecutor
from dupsweep.index import FileRecord
from dupsweep.logging import EventLogger


def _snapshot(root: Path) -> dict[str, bytes | None]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes() if path.is_file() else None
        for path in sorted(root.rglob("*"))
    }


def _record(path: str) -> FileRecord:
    return FileRecord(path=path, mtime_ns=0, size=1)


def test_dry_run_performs_no_mutations(tmp_path: Path) -> None:
    root = tmp_path / "input"
    (root / "a").mkdir(parents=True)
    (root / "b").mkdir()
    (root / "a" / "x.txt").write_bytes(b"A")
    (root / "b" / "x.txt").write_bytes(b"A")
    before = _snapshot(tmp_path)
    stream = io.StringIO()
    executor = ActionExecutor(EventLogger(stream=stream), dry_run=True)
    records = [_record("a/x.txt"), _record("b/x.txt")]

    executor.copy_aside(records, root, tmp_path / "dump")
    executor.move_aside(records, root, tmp_path / "moved")
    executor.flatten(records, root, tmp_path / "flat", move=True)
    executor.remove_in_place(records, root)

    assert _snapshot(tmp_path) == before
    events = [json.loads(line) for line in stream.getvalue().splitlines()]
    kinds = {event["event"] for event in events}
    assert {"action.copy", "action.move", "action.remove", "action.mkdir"} <= kinds
    assert all(event["details"]["dry_run"] is True for event in events)


def test_copy_aside_mirrors_relative_paths_and_merges(tmp_path: Path) -> None:
    root = tmp_path / "input"
    (root / "b").mkdir(parents=True)
    (root / "b" / "x.txt").write_bytes(b"A")
    dump = tmp_path / "dump"
    (dump / "existing").mkdir(parents=True)
    (dump / "existing" / "keep.txt").write_bytes(b"keep")
    executor = ActionExecutor(EventLogger(stream=io.StringIO()))

    copied = executor.copy_aside([_record("b/x.txt")], root, dump)

    assert copied == 1
    assert (dump / "b" / "x.txt").read_bytes() == b"A"
    assert (root / "b" / "x.txt").read_bytes() == b"A"
    assert (dump / "existing" / "keep.txt").read_bytes() == b"keep"


def test_move_aside_and_remove_in_place(tmp_path: Path) -> None:
    root = tmp_path / "input"
    (root / "b").mkdir(parents=True)
    (root / "b" / "x.txt").write_bytes(b"A")
    (root / "c.txt").write_bytes(b"C")
    executor = ActionExecutor(EventLogger(stream=io.StringIO()))

    moved = executor.move_aside([_record("b/x.txt")], root, tmp_path / "dump")
    removed = executor.remove_in_place([_record("c.txt")], root)

    assert (moved, removed) == (1, 1)
    assert not (root / "b" / "x.txt").exists()
    assert (tmp_path / "dump" / "b" / "x.txt").read_bytes() == b"A"
    assert not (root / "c.txt").exists()


def test_flatten_copies_into_single_directory(tmp_path: Path) -> None:
    root = tmp_path / "input"
    for name, content in (("a/x.txt", b"1"), ("b/x.txt", b"2"), ("b/c/y.txt", b"3")):
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    flat = tmp_path / "flat"
    executor = ActionExecutor(EventLogger(stream=io.StringIO()))

    mapping = executor.flatten(
        [_record("a/x.txt"), _record("b/x.txt"), _record("b/c/y.txt")], root, flat
    )

    assert mapping == {"a/x.txt": "x.txt", "b/c/y.txt": "y.txt", "b/x.txt": "x_1.txt"}
    assert sorted(path.name for path in flat.iterdir()) == ["x.txt", "x_1.txt", "y.txt"]
    assert (flat / "x_1.txt").read_bytes() == b"2"
    assert (root / "a" / "x.txt").exists()
