"""Index refresh orchestration and snapshot persistence."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from relindex.adapters import ModuleFacts, TypeScriptJavaScriptExtractor
from relindex.config import ToolConfig
from relindex.errors import RelIndexError, SourceParseError
from relindex.index.aliases import load_alias_rules
from relindex.index.cache import INDEX_SCHEMA_VERSION, load_previous_index, reusable_record
from relindex.index.digest import render_index_digest
from relindex.index.discovery import (
    detect_index_delta,
    filter_source_files,
    list_tracked_files,
    read_source,
    sha256_text,
)
from relindex.index.graph import build_graph
from relindex.index.models import FileRecord, IndexDelta, IndexSnapshot, PreviousIndex
from relindex.index.resolver import ImportResolver, external_packages
from relindex.index.semantic import extract_semantic
from relindex.logging import JsonlRunLogger, RunEvent, new_run_id, utc_timestamp
from relindex.storage import atomic_write_texts, dump_json, read_json_object

INDEX_JSON_NAME = "index.json"
INDEX_MD_NAME = "index.md"


@dataclass(slots=True, frozen=True)
class IndexStatus:
    """Current index status snapshot."""

    index_status: str
    last_refresh_timestamp: str | None
    indexed_file_count: int
    schema_version: int | None


@dataclass(slots=True, frozen=True)
class RefreshResult:
    """Outcome of one index run."""

    snapshot: IndexSnapshot
    delta: IndexDelta
    reused: int
    parsed: int
    degraded: tuple[str, ...]
    warnings: tuple[str, ...]
    duration_ms: int

    def summary(self) -> dict[str, object]:
        return {
            "added": len(self.delta.added),
            "updated": len(self.delta.updated),
            "removed": len(self.delta.removed),
            "unchanged": len(self.delta.unchanged),
            "reused": self.reused,
            "parsed": self.parsed,
            "degraded": list(self.degraded),
            "source_files": len(self.snapshot.files),
            "tracked_files": self.snapshot.tracked_files,
            "warnings": list(self.warnings),
            "duration_ms": self.duration_ms,
            "timestamp": self.snapshot.generated_at,
        }


class IndexManager:
    """Builds index snapshots and persists them under the metadata directory."""

    def __init__(
        self,
        config: ToolConfig,
        *,
        run_logger: JsonlRunLogger | None = None,
        list_files: Callable[[Path], list[str]] = list_tracked_files,
    ) -> None:
        self._config = config
        self._repo_root = config.repo_root
        self._metadata_dir = config.metadata_path
        self._json_path = self._metadata_dir / INDEX_JSON_NAME
        self._md_path = self._metadata_dir / INDEX_MD_NAME
        self._run_logger = run_logger
        self._list_files = list_files
        self._extractor = TypeScriptJavaScriptExtractor()

    @property
    def json_path(self) -> Path:
        return self._json_path

    @property
    def markdown_path(self) -> Path:
        return self._md_path

    def status(self) -> IndexStatus:
        """Return status derived from the stored snapshot, if present."""
        payload = read_json_object(self._json_path)
        if payload is None:
            return IndexStatus(
                index_status="not_indexed",
                last_refresh_timestamp=None,
                indexed_file_count=0,
                schema_version=None,
            )
        previous = load_previous_index(payload)
        if previous.schema_version != INDEX_SCHEMA_VERSION:
            return IndexStatus(
                index_status="schema_mismatch",
                last_refresh_timestamp=previous.generated_at,
                indexed_file_count=0,
                schema_version=previous.schema_version,
            )
        return IndexStatus(
            index_status="ready",
            last_refresh_timestamp=previous.generated_at,
            indexed_file_count=len(previous.files),
            schema_version=previous.schema_version,
        )

    def load_previous(self) -> PreviousIndex:
        """Read the stored snapshot as the reuse baseline; unusable files count as absent."""
        return load_previous_index(read_json_object(self._json_path))

    def refresh(self, force: bool = False, previous: PreviousIndex | None = None) -> RefreshResult:
        """Build a fresh snapshot and atomically replace the stored one."""
        run_id = new_run_id()
        try:
            result = self.build(force=force, previous=previous)
            digest = render_index_digest(
                result.snapshot,
                metadata_dir=self._config.index.metadata_dir,
                limits=self._config.digest,
            )
            atomic_write_texts(
                [
                    (self._json_path, dump_json(result.snapshot.to_dict())),
                    (self._md_path, digest),
                ]
            )
        except RelIndexError as exc:
            self._log(run_id, ok=False, error_code=exc.code, metadata={"message": exc.message})
            raise
        self._log(run_id, ok=True, error_code=None, metadata=result.summary())
        return result

    def build(self, force: bool = False, previous: PreviousIndex | None = None) -> RefreshResult:
        """Compute the next snapshot without writing anything."""
        started = time.perf_counter()
        baseline = previous if previous is not None else self.load_previous()
        warnings: list[str] = []

        tracked = self._list_files(self._repo_root)
        source_paths = filter_source_files(
            tracked,
            self._config.index.source_extensions,
            excluded_prefixes=self._internal_prefixes(),
        )

        alias_result = load_alias_rules(self._repo_root, self._config.index.alias_config)
        if alias_result.warning is not None:
            warnings.append(alias_result.warning)
        rules = alias_result.rules

        files: dict[str, FileRecord] = {}
        reused = 0
        degraded: list[str] = []
        for path in source_paths:
            text = read_source(self._repo_root, path)
            content_hash = sha256_text(text)
            carried = None if force else reusable_record(baseline, path, content_hash)
            if carried is not None:
                files[path] = carried
                reused += 1
                continue
            try:
                facts = self._extractor.extract(path, text)
                parse_error = None
            except SourceParseError as exc:
                facts = ModuleFacts()
                parse_error = exc.message
                degraded.append(path)
                warnings.append(f"Parse failed, recorded without facts: {exc.message}")
            files[path] = FileRecord(
                path=path,
                kind=PurePosixPath(path).suffix[1:],
                size=len(text.encode("utf-8")),
                content_hash=content_hash,
                facts=facts,
                semantic=extract_semantic(
                    path, text, external_packages(facts.all_specifiers, rules)
                ),
                parse_error=parse_error,
            )

        resolver = ImportResolver(self._repo_root, rules, self._config.index.resolve_extensions)
        graph = build_graph(files, resolver)
        snapshot = IndexSnapshot(
            schema_version=INDEX_SCHEMA_VERSION,
            generated_at=utc_timestamp(),
            project_name=self._repo_root.name,
            alias_rules=rules,
            tracked_files=len(tracked),
            files=files,
            graph=graph,
        )
        return RefreshResult(
            snapshot=snapshot,
            delta=detect_index_delta(baseline.files, files),
            reused=reused,
            parsed=len(files) - reused,
            degraded=tuple(degraded),
            warnings=tuple(warnings),
            duration_ms=int((time.perf_counter() - started) * 1000),
        )

    def _internal_prefixes(self) -> tuple[str, ...]:
        prefixes = [self._config.index.metadata_dir]
        data_dir = self._config.data_dir
        if data_dir.is_relative_to(self._repo_root) and data_dir != self._repo_root:
            prefixes.append(data_dir.relative_to(self._repo_root).as_posix())
        return tuple(prefixes)

    def _log(
        self, run_id: str, *, ok: bool, error_code: str | None, metadata: dict[str, object]
    ) -> None:
        if self._run_logger is None:
            return
        self._run_logger.append(
            RunEvent(
                timestamp=utc_timestamp(),
                run_id=run_id,
                operation="index",
                ok=ok,
                error_code=error_code,
                metadata=metadata,
            )
        )
