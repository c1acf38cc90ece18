"""Module specifier resolution against the working tree."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path

from relindex.index.aliases import apply_alias
from relindex.index.models import AliasRule, DependencySet, EdgeKind


@dataclass(slots=True, frozen=True)
class ResolvedImport:
    """Classification of one specifier seen from one importer."""

    kind: EdgeKind
    value: str


def is_relative_specifier(spec: str) -> bool:
    return spec.startswith("./") or spec.startswith("../")


def external_package_name(spec: str) -> str:
    """Reduce a bare specifier to its package identity."""
    if spec.startswith("@"):
        parts = spec.split("/")
        return f"{parts[0]}/{parts[1]}" if len(parts) >= 2 else spec
    return spec.split("/")[0]


def local_candidate(
    importer: str, spec: str, rules: tuple[AliasRule, ...]
) -> str | None:
    """Return the repository-relative candidate for a local-looking spec, else None."""
    if is_relative_specifier(spec):
        return posixpath.normpath(posixpath.join(posixpath.dirname(importer), spec))
    if spec.startswith("/"):
        return posixpath.normpath(spec[1:]) if spec[1:] else ""
    aliased = apply_alias(spec, rules)
    if aliased:
        return aliased
    return None


def external_packages(specs: tuple[str, ...], rules: tuple[AliasRule, ...]) -> tuple[str, ...]:
    """Package identities of specifiers that are not local-looking; no disk access."""
    packages: set[str] = set()
    for spec in specs:
        if is_relative_specifier(spec) or spec.startswith("/"):
            continue
        if apply_alias(spec, rules):
            continue
        packages.add(external_package_name(spec))
    return tuple(sorted(packages))


class ImportResolver:
    """Resolves specifiers with a fixed extension probing order."""

    def __init__(
        self,
        repo_root: Path,
        rules: tuple[AliasRule, ...],
        extensions: tuple[str, ...],
    ) -> None:
        self._repo_root = repo_root.resolve()
        self._rules = rules
        self._extensions = extensions

    def resolve(self, importer: str, spec: str) -> ResolvedImport:
        """Classify one specifier as local, local-unresolved or external."""
        candidate = local_candidate(importer, spec, self._rules)
        if candidate is None:
            return ResolvedImport(kind=EdgeKind.EXTERNAL, value=external_package_name(spec))
        resolved = self._first_existing(candidate)
        if resolved is None:
            return ResolvedImport(kind=EdgeKind.LOCAL_UNRESOLVED, value=spec)
        return ResolvedImport(kind=EdgeKind.LOCAL, value=resolved)

    def resolve_file(self, importer: str, specs: tuple[str, ...]) -> DependencySet:
        """Resolve every specifier of one file into three sorted sets."""
        buckets: dict[EdgeKind, set[str]] = {kind: set() for kind in EdgeKind}
        for spec in specs:
            resolved = self.resolve(importer, spec)
            buckets[resolved.kind].add(resolved.value)
        return DependencySet(
            local=tuple(sorted(buckets[EdgeKind.LOCAL])),
            local_unresolved=tuple(sorted(buckets[EdgeKind.LOCAL_UNRESOLVED])),
            external=tuple(sorted(buckets[EdgeKind.EXTERNAL])),
        )

    def candidate_order(self, candidate: str) -> list[str]:
        """Paths tried for a candidate, in order."""
        if posixpath.splitext(candidate)[1]:
            return [candidate]
        direct = [candidate + ext for ext in self._extensions]
        index = [posixpath.join(candidate, "index" + ext) for ext in self._extensions]
        return direct + index

    def _first_existing(self, candidate: str) -> str | None:
        if not candidate or candidate == ".." or candidate.startswith("../"):
            return None
        for relative in self.candidate_order(candidate):
            full_path = self._repo_root / relative
            if full_path.is_file():
                return posixpath.normpath(relative)
        return None
