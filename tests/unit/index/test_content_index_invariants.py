from __future__ import annotations

import itertools

from dupsweep.index import ContentIndex, FileRecord


def _record(path: str, mtime_ns: int, size: int = 1) -> FileRecord:
    return FileRecord(path=path, mtime_ns=mtime_ns, size=size)


def _assert_exactly_one_canonical(
    index: ContentIndex, observed: dict[str, list[FileRecord]]
) -> None:
    canonical = set(index.canonical_records())
    duplicates = set(index.duplicate_records())
    assert len(canonical) == len(observed)
    assert not canonical & duplicates
    for records in observed.values():
        winners = [record for record in records if record in canonical]
        assert len(winners) == 1
        assert set(records) - set(winners) <= duplicates


def test_first_observation_installs_canonical() -> None:
    index = ContentIndex()
    record = _record("a/x.txt", 100)

    assert index.observe("f1", record) == record
    assert index.canonical_records() == (record,)
    assert index.duplicate_records() == ()


def test_displaced_canonical_moves_to_duplicates() -> None:
    index = ContentIndex()
    newer = _record("b/x.txt", 200)
    older = _record("a/x.txt", 100)

    index.observe("f1", newer)
    assert index.observe("f1", older) == older

    assert index.canonical_records() == (older,)
    assert index.duplicate_records() == (newer,)


def test_duplicates_are_flat_across_fingerprints() -> None:
    index = ContentIndex()
    index.observe("f1", _record("a/one.txt", 1))
    index.observe("f1", _record("b/one.txt", 2))
    index.observe("f2", _record("a/two.txt", 1))
    index.observe("f2", _record("b/two.txt", 2))
    index.observe("f3", _record("solo.txt", 1))

    assert [record.path for record in index.duplicate_records()] == ["b/one.txt", "b/two.txt"]
    assert [record.path for record in index.canonical_records()] == [
        "a/one.txt",
        "a/two.txt",
        "solo.txt",
    ]


def test_exactly_one_canonical_for_every_observation_order() -> None:
    records = [
        ("f1", _record("a/x.txt", 100)),
        ("f1", _record("b/x.txt", 200)),
        ("f1", _record("c/x.txt", 300)),
        ("f2", _record("a/y.txt", 100)),
        ("f2", _record("b/y.txt", 100)),
    ]
    observed: dict[str, list[FileRecord]] = {}
    for fingerprint, record in records:
        observed.setdefault(fingerprint, []).append(record)

    for ordering in itertools.permutations(records):
        index = ContentIndex()
        for fingerprint, record in ordering:
            index.observe(fingerprint, record)
        _assert_exactly_one_canonical(index, observed)
        assert _record("a/x.txt", 100) in index.canonical_records()


def test_duplicate_groups_and_reclaimable_bytes() -> None:
    index = ContentIndex()
    index.observe("f1", _record("a/x.txt", 1, size=10))
    index.observe("f1", _record("b/x.txt", 2, size=10))
    index.observe("f1", _record("c/x.txt", 3, size=10))
    index.observe("f2", _record("z.txt", 1, size=7))

    groups = index.duplicate_groups()

    assert list(groups) == ["f1"]
    assert [record.path for record in groups["f1"]] == ["a/x.txt", "b/x.txt", "c/x.txt"]
    assert index.reclaimable_bytes() == 20
