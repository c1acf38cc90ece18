"""Path-alias rules read from the project's compiler configuration."""

from __future__ import annotations

import json
import posixpath
import re
from dataclasses import dataclass
from pathlib import Path

from relindex.adapters.lexical import LexicalRules, mask_source
from relindex.index.models import AliasRule

_JSONC_RULES = LexicalRules(
    line_comment_prefixes=("//",),
    block_comment_pairs=(("/*", "*/"),),
    string_delimiters=('"',),
    multiline_string_delimiters=(),
    interpolation_open="",
    regex_literals=False,
)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


@dataclass(slots=True, frozen=True)
class AliasLoadResult:
    """Alias rules plus a warning when the configuration could not be used."""

    rules: tuple[AliasRule, ...]
    warning: str | None = None


def load_alias_rules(repo_root: Path, config_name: str = "tsconfig.json") -> AliasLoadResult:
    """Load compilerOptions.paths once; problems yield an empty rule set."""
    config_path = repo_root / config_name
    if not config_path.exists():
        return AliasLoadResult(rules=())
    try:
        raw = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return AliasLoadResult(rules=(), warning=f"Cannot read {config_name}: {exc}")
    try:
        payload = json.loads(strip_jsonc(raw))
    except json.JSONDecodeError as exc:
        return AliasLoadResult(rules=(), warning=f"Cannot parse {config_name}: {exc}")
    return AliasLoadResult(rules=parse_alias_rules(payload))


def parse_alias_rules(payload: object) -> tuple[AliasRule, ...]:
    """Extract pattern -> target-list entries in declaration order."""
    if not isinstance(payload, dict):
        return ()
    compiler = payload.get("compilerOptions")
    if not isinstance(compiler, dict):
        return ()
    paths = compiler.get("paths")
    if not isinstance(paths, dict):
        return ()
    rules: list[AliasRule] = []
    for pattern, targets in paths.items():
        if not isinstance(pattern, str) or not isinstance(targets, list):
            continue
        rules.append(AliasRule(pattern=pattern, targets=tuple(targets)))
    return tuple(rules)


def strip_jsonc(text: str) -> str:
    """Drop comments and trailing commas so JSON-with-comments parses as JSON."""
    masked = mask_source(text, _JSONC_RULES)
    return _TRAILING_COMMA_RE.sub(r"\1", masked.literals)


def apply_alias(spec: str, rules: tuple[AliasRule, ...]) -> str | None:
    """Rewrite spec through the first matching wildcard rule's first target."""
    for rule in rules:
        if not rule.pattern.endswith("/*"):
            continue
        prefix = rule.pattern[:-2]
        if not spec.startswith(prefix + "/"):
            continue
        rest = spec[len(prefix) + 1 :]
        first_target = rule.targets[0] if rule.targets else None
        if not isinstance(first_target, str):
            continue
        if first_target == "./*":
            return rest
        if first_target.endswith("/*"):
            return posixpath.normpath(first_target[:-2] + "/" + rest)
    return None
