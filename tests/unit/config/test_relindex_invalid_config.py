from __future__ import annotations

from pathlib import Path

import pytest

from relindex.config import CliOverrides, load_effective_config


def _write_config(root: Path, *lines: str) -> None:
    (root / "relindex.toml").write_text("\n".join(lines), encoding="utf-8")


def test_non_integer_digest_limit_names_the_field(tmp_path: Path) -> None:
    _write_config(tmp_path, "[digest]", 'top_tags = "many"')

    with pytest.raises(ValueError, match="digest.top_tags"):
        load_effective_config(tmp_path)


def test_digest_limit_above_cap_is_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[digest]", "top_referenced = 100000")

    with pytest.raises(ValueError, match="digest.top_referenced"):
        load_effective_config(tmp_path)


def test_section_must_be_a_table(tmp_path: Path) -> None:
    _write_config(tmp_path, 'index = "flat"')

    with pytest.raises(ValueError, match="section 'index'"):
        load_effective_config(tmp_path)


def test_extensions_must_start_with_a_dot(tmp_path: Path) -> None:
    _write_config(tmp_path, "[index]", 'resolve_extensions = ["ts"]')

    with pytest.raises(ValueError, match="index.resolve_extensions"):
        load_effective_config(tmp_path)


def test_metadata_dir_must_stay_inside_the_repository(tmp_path: Path) -> None:
    _write_config(tmp_path, "[index]", 'metadata_dir = "../elsewhere"')

    with pytest.raises(ValueError, match="index.metadata_dir"):
        load_effective_config(tmp_path)


def test_cli_metadata_dir_is_validated(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="overrides.metadata_dir"):
        load_effective_config(tmp_path, CliOverrides(metadata_dir="   "))


def test_malformed_toml_raises_value_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "[digest", "top_tags = 1")

    with pytest.raises(ValueError):
        load_effective_config(tmp_path)
