from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

from tasklist.observability.logging import LOG_FILE, JsonFormatter, setup_logging


def test_json_formatter_includes_extras() -> None:
    record = logging.LogRecord("tasklist.tasks", logging.INFO, __file__, 1, "task.add", None, None)
    record.category = "tasks"
    record.task_id = 5

    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "task.add"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "tasklist.tasks"
    assert payload["category"] == "tasks"
    assert payload["task_id"] == 5
    assert "lineno" not in payload
    assert payload["ts"].endswith("Z")


def test_json_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: boom" in payload["exc"]


def test_setup_logging_writes_jsonl(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    try:
        path = setup_logging("info", str(tmp_path / "logs"))
        logging.getLogger("tasklist.test").info("hello", extra={"category": "test"})
        for h in root.handlers:
            h.flush()

        assert path == tmp_path / "logs" / LOG_FILE
        line = path.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["category"] == "test"
    finally:
        for h in root.handlers:
            h.close()
        root.handlers[:] = saved[1]
        root.setLevel(saved[0])


@pytest.mark.asyncio
async def test_store_failure_is_logged(caplog: pytest.LogCaptureFixture, store, repo) -> None:
    repo.fail_on.add("insert")
    with caplog.at_level(logging.ERROR, logger="tasklist.tasks"):
        await store.add("doomed")

    failed = [r for r in caplog.records if r.getMessage() == "task.add.failed"]
    assert failed and failed[0].exc_info is not None
