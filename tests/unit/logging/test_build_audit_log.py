from __future__ import annotations

import json
from pathlib import Path

from header_bundle.logging import BuildEvent, JsonlAuditLogger, utc_timestamp


def _event(module: str, ok: bool = True) -> BuildEvent:
    return BuildEvent(
        timestamp=utc_timestamp(),
        module=module,
        ok=ok,
        error_code=None if ok else "READ_ERROR",
        output_path=f"/tmp/{module}.h" if ok else None,
        metadata={"public_count": 1},
    )


def test_append_writes_one_sorted_json_object_per_line(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path / "logs" / "audit.jsonl")

    logger.append(_event("cpu"))
    logger.append(_event("pic", ok=False))

    lines = logger.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert list(first.keys()) == sorted(first.keys())
    assert set(first.keys()) == {
        "error_code",
        "metadata",
        "module",
        "ok",
        "output_path",
        "timestamp",
    }
    assert first["timestamp"].endswith("Z")
