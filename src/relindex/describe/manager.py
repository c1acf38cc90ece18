"""Description refresh: carry unchanged entries, synthesize the rest."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

from relindex.config import ToolConfig
from relindex.describe.models import DescriptionRecord, DescriptionSet
from relindex.describe.synthesizer import describe_file
from relindex.errors import IndexNotBuiltError, RelIndexError
from relindex.index.cache import INDEX_SCHEMA_VERSION, load_previous_index
from relindex.index.manager import INDEX_JSON_NAME
from relindex.index.models import DependencySet, FileRecord, IndexSnapshot
from relindex.logging import JsonlRunLogger, RunEvent, new_run_id, utc_timestamp
from relindex.storage import atomic_write_texts, dump_json, read_json_object

DESCRIPTION_SCHEMA_VERSION = 1
DESCRIPTIONS_JSON_NAME = "descriptions.json"
DESCRIPTIONS_MD_NAME = "descriptions.md"


@dataclass(slots=True, frozen=True)
class IndexView:
    """The parts of an index snapshot descriptions are built from."""

    files: dict[str, FileRecord]
    deps: dict[str, DependencySet]

    @classmethod
    def from_snapshot(cls, snapshot: IndexSnapshot) -> IndexView:
        return cls(files=dict(snapshot.files), deps=dict(snapshot.graph.deps))

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> IndexView:
        files = load_previous_index(payload).files
        graph = payload.get("graph")
        raw_deps = graph.get("deps") if isinstance(graph, dict) else None
        deps: dict[str, DependencySet] = {}
        if isinstance(raw_deps, dict):
            for path, raw in raw_deps.items():
                deps[path] = DependencySet.from_dict(raw)
        return cls(files=files, deps=deps)


@dataclass(slots=True, frozen=True)
class DescribeResult:
    """Outcome of one describe run."""

    descriptions: DescriptionSet
    updated: int
    carried: int
    duration_ms: int

    def summary(self) -> dict[str, object]:
        return {
            "files": len(self.descriptions.files),
            "updated": self.updated,
            "carried": self.carried,
            "duration_ms": self.duration_ms,
            "timestamp": self.descriptions.generated_at,
        }


class DescriptionManager:
    """Maintains descriptions.json and descriptions.md next to the index."""

    def __init__(self, config: ToolConfig, *, run_logger: JsonlRunLogger | None = None) -> None:
        self._config = config
        self._metadata_dir = config.metadata_path
        self._index_path = self._metadata_dir / INDEX_JSON_NAME
        self._json_path = self._metadata_dir / DESCRIPTIONS_JSON_NAME
        self._md_path = self._metadata_dir / DESCRIPTIONS_MD_NAME
        self._run_logger = run_logger

    @property
    def json_path(self) -> Path:
        return self._json_path

    @property
    def markdown_path(self) -> Path:
        return self._md_path

    def load_index(self) -> IndexView:
        """Read the stored index snapshot; absent or outdated snapshots are an error."""
        payload = read_json_object(self._index_path)
        if payload is None:
            raise IndexNotBuiltError(
                f"No index snapshot at '{self._index_path}'. Run the index command first."
            )
        schema = payload.get("schemaVersion")
        if schema != INDEX_SCHEMA_VERSION:
            raise IndexNotBuiltError(
                f"Index snapshot schema {schema!r} does not match {INDEX_SCHEMA_VERSION}. "
                "Rebuild the index first."
            )
        return IndexView.from_payload(payload)

    def load_previous(self) -> DescriptionSet:
        """Read stored descriptions; unusable files count as absent."""
        payload = read_json_object(self._json_path)
        if payload is None:
            return DescriptionSet(schema_version=None, generated_at=None, files={})
        schema = payload.get("schemaVersion")
        generated_at = payload.get("generatedAt")
        raw_files = payload.get("files")
        files: dict[str, DescriptionRecord] = {}
        if isinstance(raw_files, dict):
            for path, raw in raw_files.items():
                record = DescriptionRecord.from_dict(raw)
                if record is not None:
                    files[path] = record
        return DescriptionSet(
            schema_version=(
                schema if isinstance(schema, int) and not isinstance(schema, bool) else None
            ),
            generated_at=generated_at if isinstance(generated_at, str) else None,
            files=files,
        )

    def refresh(self, snapshot: IndexSnapshot | None = None) -> DescribeResult:
        """Describe every indexed file and atomically replace the stored descriptions."""
        run_id = new_run_id()
        try:
            index = IndexView.from_snapshot(snapshot) if snapshot is not None else self.load_index()
            result = self.build(index, self.load_previous())
            atomic_write_texts(
                [
                    (self._json_path, dump_json(result.descriptions.to_dict())),
                    (self._md_path, render_descriptions(result)),
                ]
            )
        except RelIndexError as exc:
            self._log(run_id, ok=False, error_code=exc.code, metadata={"message": exc.message})
            raise
        self._log(run_id, ok=True, error_code=None, metadata=result.summary())
        return result

    def build(self, index: IndexView, previous: DescriptionSet) -> DescribeResult:
        """Compute the next description set without writing anything."""
        started = time.perf_counter()
        files: dict[str, DescriptionRecord] = {}
        updated = 0
        carried = 0
        for path in sorted(index.files):
            record = index.files[path]
            prior = previous.files.get(path)
            if _can_carry(previous, prior, record.content_hash):
                files[path] = prior.carry(previous.generated_at)
                carried += 1
                continue
            files[path] = DescriptionRecord(
                path=path,
                content_hash=record.content_hash or None,
                feature=record.semantic.feature,
                description=describe_file(path, record, index.deps.get(path)),
                needs_review=True,
            )
            updated += 1
        return DescribeResult(
            descriptions=DescriptionSet(
                schema_version=DESCRIPTION_SCHEMA_VERSION,
                generated_at=utc_timestamp(),
                files=files,
            ),
            updated=updated,
            carried=carried,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )

    def _log(
        self, run_id: str, *, ok: bool, error_code: str | None, metadata: dict[str, object]
    ) -> None:
        if self._run_logger is None:
            return
        self._run_logger.append(
            RunEvent(
                timestamp=utc_timestamp(),
                run_id=run_id,
                operation="describe",
                ok=ok,
                error_code=error_code,
                metadata=metadata,
            )
        )


def _can_carry(
    previous: DescriptionSet, prior: DescriptionRecord | None, content_hash: str
) -> bool:
    if previous.schema_version != DESCRIPTION_SCHEMA_VERSION or prior is None:
        return False
    if not content_hash or not prior.content_hash:
        return False
    return prior.content_hash == content_hash


def render_descriptions(result: DescribeResult) -> str:
    """Render the human-readable description table."""
    descriptions = result.descriptions
    lines = ["# AI File Descriptions", ""]
    lines.append(f"- Generated: {descriptions.generated_at}")
    lines.append(f"- Files: {len(descriptions.files)}")
    lines.append(f"- Updated (new/changed): {result.updated}")
    lines.append(f"- Carried (unchanged): {result.carried}")
    lines.append("")
    lines.append("| file | feature | needsReview | description |")
    lines.append("|---|---:|---:|---|")
    for path in sorted(descriptions.files):
        record = descriptions.files[path]
        review = "yes" if record.needs_review else ""
        description = _table_cell(record.description)
        lines.append(f"| `{record.path}` | `{record.feature}` | {review} | {description} |")
    return "\n".join(lines) + "\n"


def _table_cell(text: str) -> str:
    return text.replace("\n", " ").replace("|", "\\|")
