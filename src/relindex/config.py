"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "relindex.toml"

TOP_TAGS_CAP = 200
TOP_DIRECTORIES_CAP = 500
TOP_REFERENCED_CAP = 500

DEFAULT_SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
DEFAULT_RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".json", ".css")
DEFAULT_METADATA_DIR = "ai-metadata"
DEFAULT_DATA_DIR = ".relindex"
DEFAULT_ALIAS_CONFIG = "tsconfig.json"


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """Indexing inputs and output location."""

    metadata_dir: str
    alias_config: str
    source_extensions: tuple[str, ...]
    resolve_extensions: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class DigestConfig:
    """Row limits for the human-readable index digest."""

    top_tags: int = 20
    top_directories: int = 30
    top_referenced: int = 25


@dataclass(slots=True, frozen=True)
class ToolConfig:
    """Fully merged tool configuration."""

    repo_root: Path
    data_dir: Path
    index: IndexConfig
    digest: DigestConfig

    @property
    def metadata_path(self) -> Path:
        """Return absolute metadata directory."""
        return self.repo_root / self.index.metadata_dir

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for status output."""
        return {
            "repo_root": str(self.repo_root),
            "data_dir": str(self.data_dir),
            "index": {
                "metadata_dir": self.index.metadata_dir,
                "alias_config": self.index.alias_config,
                "source_extensions": list(self.index.source_extensions),
                "resolve_extensions": list(self.index.resolve_extensions),
            },
            "digest": {
                "top_tags": self.digest.top_tags,
                "top_directories": self.digest.top_directories,
                "top_referenced": self.digest.top_referenced,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    metadata_dir: str | None = None
    alias_config: str | None = None


def default_config(repo_root: Path) -> ToolConfig:
    """Build default config for a given repository root."""
    resolved_root = repo_root.resolve()
    return ToolConfig(
        repo_root=resolved_root,
        data_dir=resolved_root / DEFAULT_DATA_DIR,
        index=IndexConfig(
            metadata_dir=DEFAULT_METADATA_DIR,
            alias_config=DEFAULT_ALIAS_CONFIG,
            source_extensions=DEFAULT_SOURCE_EXTENSIONS,
            resolve_extensions=DEFAULT_RESOLVE_EXTENSIONS,
        ),
        digest=DigestConfig(),
    )


def load_repo_config_file(repo_root: Path) -> dict[str, object]:
    """Load optional relindex.toml from repo root."""
    config_path = repo_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _extensions(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise ValueError(f"Config field '{section}.{field}' must be a non-empty list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.startswith(".") or len(item) < 2:
            raise ValueError(
                f"Config field '{section}.{field}' must contain extensions such as '.ts'."
            )
        if item not in output:
            output.append(item)
    return tuple(output)


def _relative_name(value: object, section: str, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{section}.{field}' must be a non-empty string.")
    normalized = value.replace("\\", "/").strip().strip("/")
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if not parts or any(part == ".." for part in parts) or Path(value).is_absolute():
        raise ValueError(f"Config field '{section}.{field}' must be a repository-relative path.")
    return "/".join(parts)


def merge_config(
    base: ToolConfig, repo_payload: dict[str, object], overrides: CliOverrides
) -> ToolConfig:
    """Merge defaults, repo config, then CLI overrides."""
    index_payload = _get_table(repo_payload, "index")
    digest_payload = _get_table(repo_payload, "digest")

    metadata_dir = base.index.metadata_dir
    if "metadata_dir" in index_payload:
        metadata_dir = _relative_name(index_payload["metadata_dir"], "index", "metadata_dir")
    alias_config = base.index.alias_config
    if "alias_config" in index_payload:
        alias_config = _relative_name(index_payload["alias_config"], "index", "alias_config")
    source_extensions = base.index.source_extensions
    if "source_extensions" in index_payload:
        source_extensions = _extensions(
            index_payload["source_extensions"], "index", "source_extensions"
        )
    resolve_extensions = base.index.resolve_extensions
    if "resolve_extensions" in index_payload:
        resolve_extensions = _extensions(
            index_payload["resolve_extensions"], "index", "resolve_extensions"
        )

    digest = DigestConfig(
        top_tags=_optional_positive_int_with_cap(
            digest_payload.get("top_tags"), "digest.top_tags", base.digest.top_tags, TOP_TAGS_CAP
        ),
        top_directories=_optional_positive_int_with_cap(
            digest_payload.get("top_directories"),
            "digest.top_directories",
            base.digest.top_directories,
            TOP_DIRECTORIES_CAP,
        ),
        top_referenced=_optional_positive_int_with_cap(
            digest_payload.get("top_referenced"),
            "digest.top_referenced",
            base.digest.top_referenced,
            TOP_REFERENCED_CAP,
        ),
    )

    merged = ToolConfig(
        repo_root=base.repo_root,
        data_dir=base.data_dir,
        index=IndexConfig(
            metadata_dir=metadata_dir,
            alias_config=alias_config,
            source_extensions=source_extensions,
            resolve_extensions=resolve_extensions,
        ),
        digest=digest,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ToolConfig, overrides: CliOverrides) -> ToolConfig:
    """Apply startup overrides at highest precedence."""
    metadata_dir = config.index.metadata_dir
    if overrides.metadata_dir is not None:
        metadata_dir = _relative_name(overrides.metadata_dir, "overrides", "metadata_dir")
    alias_config = config.index.alias_config
    if overrides.alias_config is not None:
        alias_config = _relative_name(overrides.alias_config, "overrides", "alias_config")
    data_dir = overrides.data_dir or config.data_dir
    return ToolConfig(
        repo_root=config.repo_root,
        data_dir=data_dir.resolve(),
        index=IndexConfig(
            metadata_dir=metadata_dir,
            alias_config=alias_config,
            source_extensions=config.index.source_extensions,
            resolve_extensions=config.index.resolve_extensions,
        ),
        digest=config.digest,
    )


def load_effective_config(repo_root: Path, overrides: CliOverrides | None = None) -> ToolConfig:
    """Load effective config using merge order defaults -> repo config -> overrides."""
    resolved_root = repo_root.resolve()
    base = default_config(resolved_root)
    payload = load_repo_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
