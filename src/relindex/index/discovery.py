"""Tracked-file discovery, source reads and change detection."""

from __future__ import annotations

import hashlib
import subprocess
from pathlib import Path, PurePosixPath

from relindex.errors import ControlSystemUnavailableError, FileUnreadableError
from relindex.index.models import FileRecord, IndexDelta


def list_tracked_files(repo_root: Path) -> list[str]:
    """Return version-controlled paths relative to repo_root, in sorted order."""
    try:
        result = subprocess.run(
            ["git", "ls-files", "-z"],
            cwd=str(repo_root),
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as exc:
        raise ControlSystemUnavailableError(f"Cannot run git: {exc}") from exc
    if result.returncode != 0:
        detail = result.stderr.decode("utf-8", errors="replace").strip()
        raise ControlSystemUnavailableError(
            f"git ls-files failed with exit code {result.returncode}: {detail or 'no output'}"
        )
    output = result.stdout.decode("utf-8", errors="replace")
    return sorted({item for item in output.split("\0") if item})


def filter_source_files(
    paths: list[str],
    source_extensions: tuple[str, ...],
    excluded_prefixes: tuple[str, ...] = (),
) -> list[str]:
    """Keep paths with a recognized source extension outside excluded directories."""
    output: list[str] = []
    for path in paths:
        if PurePosixPath(path).suffix not in source_extensions:
            continue
        if any(path == prefix or path.startswith(f"{prefix}/") for prefix in excluded_prefixes):
            continue
        output.append(path)
    return sorted(output)


def read_source(repo_root: Path, relative_path: str) -> str:
    """Read one tracked file as UTF-8 text; invalid bytes are replaced."""
    full_path = repo_root / relative_path
    try:
        data = full_path.read_bytes()
    except OSError as exc:
        raise FileUnreadableError(relative_path, exc.strerror or type(exc).__name__) from exc
    return data.decode("utf-8", errors="replace")


def sha256_text(text: str) -> str:
    """Content hash of decoded source text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def detect_index_delta(
    previous: dict[str, FileRecord],
    current: dict[str, FileRecord],
) -> IndexDelta:
    """Compute deterministic added/updated/unchanged/removed sets."""
    previous_paths = set(previous.keys())
    current_paths = set(current.keys())

    added = sorted(current_paths - previous_paths)
    removed = sorted(previous_paths - current_paths)

    updated: list[str] = []
    unchanged: list[str] = []
    for path in sorted(previous_paths & current_paths):
        if previous[path].content_hash == current[path].content_hash:
            unchanged.append(path)
            continue
        updated.append(path)

    return IndexDelta(
        added=tuple(added),
        updated=tuple(updated),
        unchanged=tuple(unchanged),
        removed=tuple(removed),
    )
