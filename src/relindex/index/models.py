"""Typed models for index snapshot state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from relindex.adapters.base import ExportFacts, ModuleFacts


class EdgeKind(str, Enum):
    """Classification of one dependency edge."""

    LOCAL = "local"
    LOCAL_UNRESOLVED = "localUnresolved"
    EXTERNAL = "external"


@dataclass(slots=True, frozen=True)
class AliasRule:
    """Wildcard alias pattern bound to ordered candidate targets."""

    pattern: str
    targets: tuple[object, ...]

    def to_dict(self) -> dict[str, object]:
        return {"pattern": self.pattern, "targets": list(self.targets)}


@dataclass(slots=True, frozen=True)
class SemanticFacts:
    """Heuristic per-file signals."""

    feature: str
    routes: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    api_endpoints: tuple[str, ...] = ()
    storage_keys: tuple[str, ...] = ()
    env_vars: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "feature": self.feature,
            "routes": list(self.routes),
            "tags": list(self.tags),
            "apiEndpoints": list(self.api_endpoints),
            "storageKeys": list(self.storage_keys),
            "envVars": list(self.env_vars),
        }

    @classmethod
    def from_dict(cls, payload: object) -> SemanticFacts | None:
        if not isinstance(payload, dict):
            return None
        feature = payload.get("feature")
        if not isinstance(feature, str):
            return None
        lists: dict[str, tuple[str, ...]] = {}
        for key in ("routes", "tags", "apiEndpoints", "storageKeys", "envVars"):
            value = _string_tuple(payload.get(key))
            if value is None:
                return None
            lists[key] = value
        return cls(
            feature=feature,
            routes=lists["routes"],
            tags=lists["tags"],
            api_endpoints=lists["apiEndpoints"],
            storage_keys=lists["storageKeys"],
            env_vars=lists["envVars"],
        )


@dataclass(slots=True, frozen=True)
class FileRecord:
    """Per-file facts persisted in the index snapshot."""

    path: str
    kind: str
    size: int
    content_hash: str
    facts: ModuleFacts
    semantic: SemanticFacts
    parse_error: str | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "path": self.path,
            "kind": self.kind,
            "bytes": self.size,
            "sha256": self.content_hash,
            "importSpecifiers": list(self.facts.import_specifiers),
            "dynamicImportSpecifiers": list(self.facts.dynamic_import_specifiers),
            "exports": self.facts.exports.to_dict(),
            "semantic": self.semantic.to_dict(),
        }
        if self.parse_error is not None:
            payload["parseError"] = self.parse_error
        return payload

    @classmethod
    def from_dict(cls, payload: object) -> FileRecord | None:
        """Rebuild a stored record; structurally invalid payloads yield None."""
        if not isinstance(payload, dict):
            return None
        path = payload.get("path")
        kind = payload.get("kind")
        size = payload.get("bytes")
        content_hash = payload.get("sha256")
        if not isinstance(path, str):
            return None
        if not isinstance(kind, str):
            return None
        if isinstance(size, bool) or not isinstance(size, int):
            return None
        if not isinstance(content_hash, str):
            return None
        imports = _string_tuple(payload.get("importSpecifiers"))
        dynamic = _string_tuple(payload.get("dynamicImportSpecifiers"))
        exports = ExportFacts.from_dict(payload.get("exports"))
        semantic = SemanticFacts.from_dict(payload.get("semantic"))
        if imports is None or dynamic is None or exports is None or semantic is None:
            return None
        parse_error = payload.get("parseError")
        return cls(
            path=path,
            kind=kind,
            size=size,
            content_hash=content_hash,
            facts=ModuleFacts(
                import_specifiers=imports,
                dynamic_import_specifiers=dynamic,
                exports=exports,
            ),
            semantic=semantic,
            parse_error=parse_error if isinstance(parse_error, str) else None,
        )


@dataclass(slots=True, frozen=True)
class DependencySet:
    """Resolved outgoing edges of one file, each list sorted and deduplicated."""

    local: tuple[str, ...] = ()
    local_unresolved: tuple[str, ...] = ()
    external: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "local": list(self.local),
            "localUnresolved": list(self.local_unresolved),
            "external": list(self.external),
        }

    @classmethod
    def from_dict(cls, payload: object) -> DependencySet:
        """Lenient read; missing or malformed lists become empty."""
        if not isinstance(payload, dict):
            return cls()
        return cls(
            local=_string_tuple(payload.get("local")) or (),
            local_unresolved=_string_tuple(payload.get("localUnresolved")) or (),
            external=_string_tuple(payload.get("external")) or (),
        )


@dataclass(slots=True, frozen=True)
class Graph:
    """Forward and reverse dependency adjacency."""

    deps: dict[str, DependencySet] = field(default_factory=dict)
    reverse_deps: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "deps": {path: self.deps[path].to_dict() for path in sorted(self.deps)},
            "reverseDeps": {
                path: list(self.reverse_deps[path]) for path in sorted(self.reverse_deps)
            },
        }


@dataclass(slots=True, frozen=True)
class IndexDelta:
    """Deterministic change classification between two snapshots."""

    added: tuple[str, ...]
    updated: tuple[str, ...]
    unchanged: tuple[str, ...]
    removed: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class IndexSnapshot:
    """Complete persisted index state of one run."""

    schema_version: int
    generated_at: str
    project_name: str
    alias_rules: tuple[AliasRule, ...]
    tracked_files: int
    files: dict[str, FileRecord]
    graph: Graph
    language: str = "typescript"

    def to_dict(self) -> dict[str, object]:
        return {
            "schemaVersion": self.schema_version,
            "generatedAt": self.generated_at,
            "project": {
                "root": ".",
                "name": self.project_name,
                "language": self.language,
                "aliasPaths": [rule.to_dict() for rule in self.alias_rules],
            },
            "counts": {
                "trackedFiles": self.tracked_files,
                "sourceFiles": len(self.files),
            },
            "files": {path: self.files[path].to_dict() for path in sorted(self.files)},
            "graph": self.graph.to_dict(),
        }


@dataclass(slots=True, frozen=True)
class PreviousIndex:
    """Reusable view of a previously persisted snapshot."""

    schema_version: int | None
    generated_at: str | None
    files: dict[str, FileRecord]


def _string_tuple(value: object) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return tuple(value)
