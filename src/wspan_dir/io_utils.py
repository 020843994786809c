"""JSON and JSONL helpers built on orjson."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def dumps_json(obj: Any, *, pretty: bool = True) -> bytes:
    """Serialize ``obj`` to JSON bytes (keys sorted, 2-space indent if pretty)."""
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, option=opts)


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_json(obj, pretty=pretty))


def dumps_jsonl(records: list[dict[str, Any]]) -> bytes:
    """One compact JSON object per line, newline-terminated."""
    if not records:
        return b""
    return b"\n".join(dumps_json(r, pretty=False) for r in records) + b"\n"
