"""Flat-file persistence helpers with all-or-nothing replacement."""

from __future__ import annotations

import json
from pathlib import Path

from relindex.errors import StorageWriteError


def read_json_object(path: Path) -> dict[str, object] | None:
    """Return the JSON object stored at path, or None when absent or unusable."""
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    return payload


def dump_json(payload: dict[str, object]) -> str:
    """Serialize payload deterministically."""
    return json.dumps(payload, sort_keys=True, indent=2, ensure_ascii=False) + "\n"


def atomic_write_texts(outputs: list[tuple[Path, str]]) -> None:
    """Write every output to a temp file first, then swap them all into place."""
    staged: list[tuple[Path, Path]] = []
    current: Path | None = None
    try:
        for path, text in outputs:
            current = path
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            staged.append((tmp, path))
            tmp.write_text(text, encoding="utf-8", newline="\n")
        for tmp, path in staged:
            current = path
            tmp.replace(path)
    except OSError as exc:
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)
        raise StorageWriteError(str(current), exc.strerror or type(exc).__name__) from exc
