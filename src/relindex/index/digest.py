"""Condensed Markdown digest of an index snapshot."""

from __future__ import annotations

import posixpath
from collections import Counter

from relindex.config import DigestConfig
from relindex.index.models import IndexSnapshot


def render_index_digest(
    snapshot: IndexSnapshot,
    metadata_dir: str,
    limits: DigestConfig | None = None,
) -> str:
    """Render top tags, alias rules, directory counts and most referenced files."""
    active = limits or DigestConfig()
    paths = sorted(snapshot.files)

    tag_counts: Counter[str] = Counter()
    for path in paths:
        tag_counts.update(snapshot.files[path].semantic.tags)
    top_tags = sorted(tag_counts.items(), key=lambda item: (-item[1], item[0]))[: active.top_tags]

    dir_counts: Counter[str] = Counter(posixpath.dirname(path) or "." for path in paths)
    top_dirs = sorted(dir_counts.items(), key=lambda item: (-item[1], item[0]))[
        : active.top_directories
    ]

    referenced = sorted(
        ((path, len(snapshot.graph.reverse_deps.get(path, ()))) for path in paths),
        key=lambda item: (-item[1], item[0]),
    )[: active.top_referenced]

    lines = ["# AI Metadata Index", ""]
    lines.append(f"- Generated: {snapshot.generated_at}")
    lines.append(f"- Source files indexed: {len(snapshot.files)}")
    lines.append(f"- Schema version: {snapshot.schema_version}")
    lines.append("")
    lines.append("## Top tags")
    if not top_tags:
        lines.append("- (none)")
    for tag, count in top_tags:
        lines.append(f"- `{tag}`: {count}")
    lines.append("")
    lines.append("## Alias paths")
    if not snapshot.alias_rules:
        lines.append("- (none detected)")
    for rule in snapshot.alias_rules:
        targets = ", ".join(str(target) for target in rule.targets)
        lines.append(f"- `{rule.pattern}` -> `{targets}`")
    lines.append("")
    lines.append("## Directory overview")
    for directory, count in top_dirs:
        lines.append(f"- `{directory}`: {count}")
    lines.append("")
    lines.append("## Most referenced files")
    for path, count in referenced:
        lines.append(f"- `{path}` (referenced by {count})")
    lines.append("")
    lines.append("## How to use")
    lines.append(f"- Open `{metadata_dir}/index.md` for a human-readable overview.")
    lines.append(f"- Use `{metadata_dir}/index.json` for dependency graph + semantic tags/routes.")
    return "\n".join(lines) + "\n"
