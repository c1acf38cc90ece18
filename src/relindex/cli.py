"""Command line entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from relindex.config import CliOverrides, ToolConfig, load_effective_config
from relindex.describe import DescriptionManager
from relindex.errors import RelIndexError
from relindex.index import IndexManager
from relindex.logging import JsonlRunLogger

RUN_LOG_NAME = "runs.jsonl"


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the index, describe, sync and status commands."""
    parser = argparse.ArgumentParser(prog="relindex")
    parser.add_argument("--repo-root", required=False, default=".")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--metadata-dir", required=False, default=None)
    parser.add_argument("--alias-config", required=False, default=None)
    commands = parser.add_subparsers(dest="command", required=True)
    index = commands.add_parser("index", help="Rebuild the relationship index.")
    index.add_argument("--force", action="store_true")
    commands.add_parser("describe", help="Refresh per-file descriptions from the index.")
    sync = commands.add_parser("sync", help="Run index, then describe.")
    sync.add_argument("--force", action="store_true")
    commands.add_parser("status", help="Show stored index state and configuration.")
    return parser


def main(
    argv: list[str] | None = None,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run one command; exit code 0 on success and 1 on any failure."""
    out = stdout or sys.stdout
    err = stderr or sys.stderr
    args = build_arg_parser().parse_args(argv)
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        metadata_dir=args.metadata_dir,
        alias_config=args.alias_config,
    )
    try:
        config = load_effective_config(Path(args.repo_root), overrides)
    except ValueError as exc:
        err.write(f"error: invalid configuration: {exc}\n")
        return 1
    run_logger = JsonlRunLogger(config.data_dir / RUN_LOG_NAME)
    try:
        payload = _dispatch(args, config, run_logger, err)
    except RelIndexError as exc:
        err.write(f"error [{exc.code}]: {exc.message}\n")
        return 1
    out.write(json.dumps(payload, sort_keys=True, indent=2))
    out.write("\n")
    return 0


def _dispatch(
    args: argparse.Namespace,
    config: ToolConfig,
    run_logger: JsonlRunLogger,
    err: TextIO,
) -> dict[str, object]:
    index_manager = IndexManager(config, run_logger=run_logger)
    describe_manager = DescriptionManager(config, run_logger=run_logger)
    if args.command == "index":
        result = index_manager.refresh(force=args.force)
        _emit_warnings(result.warnings, err)
        return {"index": result.summary(), "outputs": _outputs(index_manager)}
    if args.command == "describe":
        described = describe_manager.refresh()
        return {"describe": described.summary(), "outputs": _outputs(describe_manager)}
    if args.command == "sync":
        result = index_manager.refresh(force=args.force)
        _emit_warnings(result.warnings, err)
        described = describe_manager.refresh(snapshot=result.snapshot)
        return {
            "index": result.summary(),
            "describe": described.summary(),
            "outputs": _outputs(index_manager) + _outputs(describe_manager),
        }
    return {
        "index": asdict(index_manager.status()),
        "descriptions_present": describe_manager.json_path.exists(),
        "config": config.to_public_dict(),
        "recent_runs": run_logger.read(limit=5),
    }


def _outputs(manager: IndexManager | DescriptionManager) -> list[str]:
    return [str(manager.json_path), str(manager.markdown_path)]


def _emit_warnings(warnings: tuple[str, ...], err: TextIO) -> None:
    for warning in warnings:
        err.write(f"warning: {warning}\n")


if __name__ == "__main__":
    raise SystemExit(main())
