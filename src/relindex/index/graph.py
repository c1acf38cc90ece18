"""Dependency graph construction."""

from __future__ import annotations

from relindex.index.models import DependencySet, FileRecord, Graph
from relindex.index.resolver import ImportResolver


def build_graph(files: dict[str, FileRecord], resolver: ImportResolver) -> Graph:
    """Resolve every file's specifiers and derive reverse edges.

    Every indexed file gets a reverse entry, possibly empty. Local targets that
    are not indexed themselves (stylesheets, JSON) get one as well.
    """
    deps: dict[str, DependencySet] = {}
    reverse: dict[str, set[str]] = {path: set() for path in files}
    for path in sorted(files):
        dependency_set = resolver.resolve_file(path, files[path].facts.all_specifiers)
        deps[path] = dependency_set
        for target in dependency_set.local:
            reverse.setdefault(target, set()).add(path)
    return Graph(
        deps=deps,
        reverse_deps={
            path: tuple(sorted(importers)) for path, importers in sorted(reverse.items())
        },
    )
