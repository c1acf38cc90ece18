"""Heuristic per-file semantic signals.

Everything here is a pure function of a file's path, text and declared
external packages. Matching is plain substring and regex work over raw text,
so results are approximate by nature: a keyword inside a comment still counts.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import PurePosixPath

from relindex.index.models import SemanticFacts

MAX_API_ENDPOINTS = 25
MAX_STORAGE_KEYS = 25
MAX_ENV_VARS = 40

_SOURCE_SUFFIX_RE = re.compile(r"\.(tsx|ts|jsx|js|mjs|cjs)$")
_API_RE = re.compile(
    r"(['\"`])((?:https?://)[^'\"`\s]+|/api/[a-zA-Z0-9._~!$&'()*+,;=:@/-]+)\1"
)
_STORAGE_RE = re.compile(
    r"(?:localStorage|sessionStorage)\.(?:getItem|setItem|removeItem)\(\s*(['\"`])([^'\"`]+)\1"
)
_ENV_RE = re.compile(r"\b(?:process\.env|import\.meta\.env)\.([A-Z0-9_]+)")


@dataclass(slots=True, frozen=True)
class KeywordRule:
    """Tag contributed when keyword occurs in the path or text."""

    keyword: str
    tag: str


@dataclass(slots=True, frozen=True)
class PackageRule:
    """Tag contributed when an external package identity contains a substring."""

    substring: str
    tag: str


@dataclass(slots=True, frozen=True)
class FeatureRule:
    """Feature assigned to paths under a directory prefix or with an exact name."""

    feature: str
    prefix: str | None = None
    exact: tuple[str, ...] = ()

    def matches(self, path: str) -> bool:
        if self.prefix is not None and path.startswith(self.prefix):
            return True
        return path in self.exact


KEYWORD_RULES: tuple[KeywordRule, ...] = tuple(
    KeywordRule(keyword=word, tag=word)
    for word in (
        "canvas",
        "artboard",
        "flow",
        "reactflow",
        "xyflow",
        "storyboard",
        "publish",
        "profile",
        "subscription",
        "settings",
        "http",
        "auth",
        "token",
        "kling",
        "yunwu",
        "gemini",
        "grs",
        "qrcode",
        "zip",
        "worker",
    )
)

PACKAGE_RULES: tuple[PackageRule, ...] = (
    PackageRule(substring="reactflow", tag="flow"),
    PackageRule(substring="xyflow", tag="flow"),
    PackageRule(substring="qrcode", tag="qrcode"),
    PackageRule(substring="jszip", tag="zip"),
)

PAGES_DIR = "pages/"

FEATURE_RULES: tuple[FeatureRule, ...] = (
    FeatureRule(feature="route/page", prefix=PAGES_DIR),
    FeatureRule(feature="ui/component", prefix="components/"),
    FeatureRule(feature="utility", prefix="utils/"),
    FeatureRule(feature="worker/backend", prefix="worker/"),
    FeatureRule(feature="app/entry", exact=("App.tsx", "AppShell.tsx", "index.tsx")),
)
DEFAULT_FEATURE = "module"


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


def base_name(path: str) -> str:
    """File name without its source suffix."""
    return _SOURCE_SUFFIX_RE.sub("", PurePosixPath(normalize_path(path)).name)


def feature_for_path(path: str) -> str:
    """Coarse architectural role of a file, first matching rule wins."""
    normalized = normalize_path(path)
    for rule in FEATURE_RULES:
        if rule.matches(normalized):
            return rule.feature
    return DEFAULT_FEATURE


def routes_for_path(path: str) -> tuple[str, ...]:
    """Route served by a page file: the base name under pages/, index maps to /."""
    normalized = normalize_path(path)
    if not normalized.startswith(PAGES_DIR):
        return ()
    name = base_name(normalized)
    if name == "index":
        return ("/",)
    return (f"/{name}",)


def tags_for(
    path: str,
    text: str,
    external_deps: tuple[str, ...] = (),
    *,
    keyword_rules: tuple[KeywordRule, ...] = KEYWORD_RULES,
    package_rules: tuple[PackageRule, ...] = PACKAGE_RULES,
) -> tuple[str, ...]:
    """Evaluate the keyword and package rule tables."""
    tags: set[str] = set()
    if routes_for_path(path):
        tags.add("route")
    lowered_path = path.lower()
    lowered_text = text.lower()
    for rule in keyword_rules:
        if rule.keyword in lowered_path or rule.keyword in lowered_text:
            tags.add(rule.tag)
    for dep in external_deps:
        lowered_dep = dep.lower()
        for package_rule in package_rules:
            if package_rule.substring in lowered_dep:
                tags.add(package_rule.tag)
    return tuple(sorted(tags))


def api_endpoints(text: str, cap: int = MAX_API_ENDPOINTS) -> tuple[str, ...]:
    return _bounded(
        (match.group(2) for match in _API_RE.finditer(text)),
        cap,
    )


def storage_keys(text: str, cap: int = MAX_STORAGE_KEYS) -> tuple[str, ...]:
    return _bounded((match.group(2) for match in _STORAGE_RE.finditer(text)), cap)


def env_vars(text: str, cap: int = MAX_ENV_VARS) -> tuple[str, ...]:
    return _bounded((match.group(1) for match in _ENV_RE.finditer(text)), cap)


def extract_semantic(
    path: str,
    text: str,
    external_deps: tuple[str, ...] = (),
) -> SemanticFacts:
    """Derive all semantic facts of one file."""
    return SemanticFacts(
        feature=feature_for_path(path),
        routes=routes_for_path(path),
        tags=tags_for(path, text, external_deps),
        api_endpoints=api_endpoints(text),
        storage_keys=storage_keys(text),
        env_vars=env_vars(text),
    )


def _bounded(values: Iterator[str], cap: int) -> tuple[str, ...]:
    """Collect distinct non-empty values in text order until cap is reached."""
    seen: set[str] = set()
    for value in values:
        if not value:
            continue
        seen.add(value)
        if len(seen) >= cap:
            break
    return tuple(sorted(seen))
