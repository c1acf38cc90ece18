"""Content-hash and schema-version gated reuse of prior index records."""

from __future__ import annotations

from relindex.index.models import FileRecord, PreviousIndex

INDEX_SCHEMA_VERSION = 1


def load_previous_index(payload: dict[str, object] | None) -> PreviousIndex:
    """Build the reusable view of a stored snapshot; unusable rows are dropped."""
    if payload is None:
        return PreviousIndex(schema_version=None, generated_at=None, files={})
    schema = payload.get("schemaVersion")
    generated_at = payload.get("generatedAt")
    raw_files = payload.get("files")
    files: dict[str, FileRecord] = {}
    if isinstance(raw_files, dict):
        for path, raw in raw_files.items():
            record = FileRecord.from_dict(raw)
            if record is None or record.path != path:
                continue
            files[path] = record
    return PreviousIndex(
        schema_version=schema if isinstance(schema, int) and not isinstance(schema, bool) else None,
        generated_at=generated_at if isinstance(generated_at, str) else None,
        files=files,
    )


def reusable_record(
    previous: PreviousIndex,
    path: str,
    content_hash: str,
    schema_version: int = INDEX_SCHEMA_VERSION,
) -> FileRecord | None:
    """Return the prior record when its hash and the snapshot schema both still match."""
    if previous.schema_version != schema_version:
        return None
    record = previous.files.get(path)
    if record is None or record.content_hash != content_hash:
        return None
    return record
