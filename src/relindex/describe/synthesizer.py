"""Deterministic one-paragraph file descriptions built from index facts."""

from __future__ import annotations

from relindex.index.models import DependencySet, FileRecord
from relindex.index.semantic import base_name, routes_for_path

MAX_NAMED_EXPORTS = 6
MAX_EXTERNAL_DEPS = 6
MAX_LOCAL_DEPS = 4
MAX_ROUTES = 3
MAX_TAGS = 8
MAX_API_ENDPOINTS = 2
MAX_STORAGE_KEYS = 2
MAX_ENV_VARS = 4

_FEATURE_LABELS: dict[str, str] = {
    "ui/component": "UI component",
    "utility": "Utility module",
    "worker/backend": "Worker module",
    "app/entry": "App entry",
}
_DEFAULT_LABEL = "Module"


def describe_file(path: str, record: FileRecord, deps: DependencySet | None = None) -> str:
    """Render the description of one indexed file."""
    feature = record.semantic.feature
    parts = [
        _headline(path, feature),
        _export_hint(record),
        _dependency_hint(deps or DependencySet()),
    ]
    semantic = _semantic_hint(record)
    if semantic:
        parts.append(semantic)
    return " ".join(parts)


def _headline(path: str, feature: str) -> str:
    if feature == "route/page":
        routes = routes_for_path(path)
        route = routes[0] if routes else f"/{base_name(path)}"
        return f"Page for route `{route}` ({feature})."
    label = _FEATURE_LABELS.get(feature, _DEFAULT_LABEL)
    return f"{label} `{base_name(path)}` ({feature})."


def _export_hint(record: FileRecord) -> str:
    exports = record.facts.exports
    names = list(exports.named[:MAX_NAMED_EXPORTS])
    if exports.default:
        names.insert(0, "default")
    if not names:
        return "Exports: (none detected)."
    return f"Exports: {', '.join(names)}."


def _dependency_hint(deps: DependencySet) -> str:
    parts = []
    if deps.external:
        parts.append(f"Ext deps: {', '.join(deps.external[:MAX_EXTERNAL_DEPS])}")
    if deps.local:
        parts.append(f"Local deps: {', '.join(deps.local[:MAX_LOCAL_DEPS])}")
    if not parts:
        return "Deps: (none detected)."
    return " | ".join(parts)


def _semantic_hint(record: FileRecord) -> str:
    semantic = record.semantic
    sections = (
        ("Routes", semantic.routes, MAX_ROUTES),
        ("Tags", semantic.tags, MAX_TAGS),
        ("API", semantic.api_endpoints, MAX_API_ENDPOINTS),
        ("Storage", semantic.storage_keys, MAX_STORAGE_KEYS),
        ("Env", semantic.env_vars, MAX_ENV_VARS),
    )
    return " | ".join(
        f"{label}: {', '.join(values[:limit])}" for label, values, limit in sections if values
    )
