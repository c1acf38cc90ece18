from __future__ import annotations

from pathlib import Path

from relindex.config import (
    DEFAULT_METADATA_DIR,
    DEFAULT_RESOLVE_EXTENSIONS,
    CliOverrides,
    default_config,
    load_effective_config,
)


def test_defaults_without_repo_config(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config.repo_root == tmp_path.resolve()
    assert config.data_dir == tmp_path.resolve() / ".relindex"
    assert config.index.metadata_dir == DEFAULT_METADATA_DIR
    assert config.index.alias_config == "tsconfig.json"
    assert config.index.resolve_extensions == DEFAULT_RESOLVE_EXTENSIONS
    assert config.digest.top_tags == 20
    assert config.digest.top_directories == 30
    assert config.digest.top_referenced == 25
    assert config.metadata_path == tmp_path.resolve() / "ai-metadata"


def test_repo_config_overrides_defaults_and_cli_overrides_repo_config(tmp_path: Path) -> None:
    (tmp_path / "relindex.toml").write_text(
        "\n".join(
            [
                "[index]",
                'metadata_dir = "docs/meta"',
                'alias_config = "tsconfig.base.json"',
                'source_extensions = [".ts", ".ts", ".vue"]',
                "",
                "[digest]",
                "top_tags = 5",
            ]
        ),
        encoding="utf-8",
    )

    from_repo = load_effective_config(tmp_path)
    from_cli = load_effective_config(
        tmp_path,
        CliOverrides(data_dir=tmp_path / "state", metadata_dir="out"),
    )

    assert from_repo.index.metadata_dir == "docs/meta"
    assert from_repo.index.alias_config == "tsconfig.base.json"
    assert from_repo.index.source_extensions == (".ts", ".vue")
    assert from_repo.digest.top_tags == 5
    assert from_repo.digest.top_referenced == 25
    assert from_cli.index.metadata_dir == "out"
    assert from_cli.index.alias_config == "tsconfig.base.json"
    assert from_cli.data_dir == (tmp_path / "state").resolve()
    assert from_cli.digest.top_tags == 5


def test_public_dict_is_serializable_snapshot(tmp_path: Path) -> None:
    payload = default_config(tmp_path).to_public_dict()

    assert payload["index"]["metadata_dir"] == "ai-metadata"
    assert payload["digest"] == {"top_tags": 20, "top_directories": 30, "top_referenced": 25}
    assert isinstance(payload["repo_root"], str)
