from __future__ import annotations

import json
from pathlib import Path

from relindex.logging import JsonlRunLogger, RunEvent, new_run_id, utc_timestamp


def _event(timestamp: str, ok: bool = True) -> RunEvent:
    return RunEvent(
        timestamp=timestamp,
        run_id=new_run_id(),
        operation="index",
        ok=ok,
        error_code=None if ok else "FILE_UNREADABLE",
        metadata={"added": 1},
    )


def test_run_log_lines_have_stable_schema(tmp_path: Path) -> None:
    logger = JsonlRunLogger(tmp_path / "nested" / "runs.jsonl")

    logger.append(_event(utc_timestamp()))

    lines = logger.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert sorted(record) == ["error_code", "metadata", "ok", "operation", "run_id", "timestamp"]
    assert record["run_id"].startswith("run-")
    assert record["timestamp"].endswith("Z")


def test_read_filters_by_timestamp_and_limits_to_most_recent(tmp_path: Path) -> None:
    logger = JsonlRunLogger(tmp_path / "runs.jsonl")
    stamps = ("2026-01-01T00:00:00.000Z", "2026-01-02T00:00:00.000Z", "2026-01-03T00:00:00.000Z")
    for stamp in stamps:
        logger.append(_event(stamp))
    with logger.path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n\n")

    recent = logger.read(since="2026-01-02T00:00:00.000Z")
    last = logger.read(limit=1)

    assert [item["timestamp"] for item in recent] == [
        "2026-01-02T00:00:00.000Z",
        "2026-01-03T00:00:00.000Z",
    ]
    assert [item["timestamp"] for item in last] == ["2026-01-03T00:00:00.000Z"]
    assert logger.read(limit=0) == []


def test_read_missing_log_is_empty(tmp_path: Path) -> None:
    assert JsonlRunLogger(tmp_path / "absent.jsonl").read() == []
