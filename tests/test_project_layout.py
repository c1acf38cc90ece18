from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/relindex/cli.py",
        "src/relindex/config.py",
        "src/relindex/index/__init__.py",
        "src/relindex/adapters/__init__.py",
        "src/relindex/describe/__init__.py",
        "src/relindex/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
