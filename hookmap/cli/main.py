"""
CLI entry point for hookmap.

Usage
─────
  # Resolve a model with the standard mapper set, write report + hooks
  python -m hookmap resolve --model ./gamepack.json --output ./out/

  # Custom mapper set: any importable "module:function" returning a registry
  python -m hookmap resolve --model ./gamepack.json \\
      --mappers mypkg.mappers:build_registry

  # List stored runs
  python -m hookmap list
  python -m hookmap list --revision 181

  # Export a stored run by record id
  python -m hookmap export --id 3 --format hooks

Subcommands are implemented as standalone functions (cmd_resolve, cmd_list,
cmd_export) so they can be unit-tested without invoking argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Optional

from hookmap.config import EngineConfig
from hookmap.engine import ResolutionEngine
from hookmap.exceptions import ConfigurationError, HookmapError
from hookmap.mapper import MapperRegistry
from hookmap.model import artifact_hash, load_model
from hookmap.store.db import RunStore
from hookmap.store.models import RunRecord
from hookmap.table import ResolutionReport, build_hooks, hooks_to_json

__all__ = ["build_parser", "load_registry", "cmd_resolve", "cmd_list", "cmd_export", "main"]

logger = logging.getLogger(__name__)

DEFAULT_MAPPERS = "hookmap.mappers.std:build_registry"


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: resolve | list | export
    """
    parser = argparse.ArgumentParser(
        prog="hookmap",
        description="Re-identify obfuscated classes, fields and methods across releases",
    )
    parser.add_argument(
        "--db",
        default="~/.hookmap/runs.db",
        metavar="PATH",
        help="SQLite database path (default: ~/.hookmap/runs.db)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── resolve ───────────────────────────────────────────────────────────
    res = sub.add_parser("resolve", help="Resolve all mappers against an entity model")
    res.add_argument(
        "--model",
        required=True,
        metavar="PATH",
        help="Entity model JSON file",
    )
    res.add_argument(
        "--mappers",
        default=DEFAULT_MAPPERS,
        metavar="MODULE:FUNC",
        help=f"Callable returning a MapperRegistry (default: {DEFAULT_MAPPERS})",
    )
    res.add_argument(
        "--output",
        default=None,
        metavar="DIR",
        help="Write report.json and hooks.json into DIR",
    )
    res.add_argument(
        "--workers",
        type=int,
        default=None,
        metavar="N",
        help="Max mappers evaluated at once (default: HOOKMAP_MAX_WORKERS or 4)",
    )
    res.add_argument(
        "--no-store",
        action="store_true",
        default=False,
        help="Do not persist the run to the database",
    )

    # ── list ──────────────────────────────────────────────────────────────
    lst = sub.add_parser("list", help="List stored runs")
    lst.add_argument(
        "--revision",
        default=None,
        metavar="REV",
        help="Filter by revision substring",
    )

    # ── export ────────────────────────────────────────────────────────────
    exp = sub.add_parser("export", help="Export a stored run")
    exp.add_argument(
        "--id",
        required=True,
        type=int,
        metavar="ID",
        help="Run record id to export",
    )
    exp.add_argument(
        "--format",
        choices=["hooks", "report"],
        default="hooks",
        help="Export format: hooks (accessor generator input) or report",
    )
    exp.add_argument(
        "--output",
        default=None,
        metavar="DIR",
        help="Output directory (default: current directory)",
    )

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def load_registry(target: str) -> MapperRegistry:
    """
    Import ``module:function`` and call it to obtain the mapper registry.

    Raises:
        ConfigurationError: malformed target, import failure, or the callable
                            does not return a MapperRegistry.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Mapper set must be 'module:function', got {target!r}")
    try:
        factory = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(f"Cannot load mapper set {target!r}: {exc}") from exc
    registry = factory()
    if not isinstance(registry, MapperRegistry):
        raise ConfigurationError(
            f"{target} returned {type(registry).__name__}, expected MapperRegistry"
        )
    return registry


def _write_outputs(report_json: str, hooks_json: str, output_dir: str) -> Path:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "report.json").write_text(report_json, encoding="utf-8")
    (out_dir / "hooks.json").write_text(hooks_json, encoding="utf-8")
    return out_dir


# ── Command implementations ───────────────────────────────────────────────────


def cmd_resolve(
    model_path: str,
    mappers: str,
    output_dir: Optional[str],
    store: Optional[RunStore],
    workers: Optional[int] = None,
) -> ResolutionReport:
    """
    Full pipeline: load model → load mappers → resolve → report → store → write.

    Args:
        model_path: Entity model JSON file.
        mappers:    "module:function" returning the MapperRegistry.
        output_dir: Directory for report.json / hooks.json; None skips writing.
        store:      RunStore to persist the run; None skips persistence.
        workers:    max_workers override; None uses EngineConfig.from_env().

    Returns:
        The ResolutionReport of the pass.

    Raises:
        HookmapError subclasses from loader / registry / engine propagate.
    """
    model = load_model(model_path)
    registry = load_registry(mappers)
    config = EngineConfig.from_env()
    if workers is not None:
        config = EngineConfig(max_workers=workers, parallel=config.parallel)

    table = ResolutionEngine(model, registry, config).run()
    report = table.report()
    hooks_json = hooks_to_json(build_hooks(table, registry))
    report_json = report.to_json()

    print(report.format_text())

    if store is not None:
        summary = report.summary()
        record = RunRecord(
            artifact_hash=artifact_hash(model_path),
            revision=model.revision,
            report_json=report_json,
            hooks_json=hooks_json,
            resolved_count=summary["resolved"],
            failed_count=summary["failed"] + summary["skipped"],
        )
        row_id = store.save(record)
        logger.info("Stored run %d", row_id)

    if output_dir:
        out_dir = _write_outputs(report_json, hooks_json, output_dir)
        logger.info("Report and hooks written to %s", out_dir)
    return report


def cmd_list(store: RunStore, revision: Optional[str]) -> None:
    """Print stored run records to stdout."""
    records = store.search(revision=revision or "")
    if not records:
        print("0 stored runs found.")
        return
    for rec in records:
        tag = f"[{rec.id:>4}]"
        status = f"resolved={rec.resolved_count} failed={rec.failed_count}"
        created = rec.created_at.strftime("%Y-%m-%d %H:%M") if rec.created_at else "-"
        print(f"{tag}  {rec.revision or '-':<12} {rec.artifact_hash:<18} {created}  {status}")


def cmd_export(
    store: RunStore,
    record_id: int,
    fmt: str,
    output_dir: Optional[str],
) -> Path:
    """Export a stored run's hooks or report to a JSON file."""
    record = store.get_by_id(record_id)
    if record is None:
        raise ValueError(f"No run record with id={record_id}")

    out_dir = Path(output_dir) if output_dir else Path.cwd()
    out_dir.mkdir(parents=True, exist_ok=True)

    content = record.hooks_json if fmt == "hooks" else record.report_json
    label = record.revision or record.artifact_hash
    out_path = out_dir / f"{label}_{fmt}_{record_id}.json"
    out_path.write_text(content, encoding="utf-8")

    logger.info("Exported record %d to %s", record_id, out_path)
    print(f"Exported → {out_path}")
    return out_path


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    try:
        if ns.subcommand == "resolve":
            store = None if ns.no_store else RunStore(db_path=ns.db)
            report = cmd_resolve(
                model_path=ns.model,
                mappers=ns.mappers,
                output_dir=ns.output,
                store=store,
                workers=ns.workers,
            )
            return 0 if report.complete else 2

        store = RunStore(db_path=ns.db)

        if ns.subcommand == "list":
            cmd_list(store=store, revision=ns.revision)
            return 0

        if ns.subcommand == "export":
            cmd_export(
                store=store,
                record_id=ns.id,
                fmt=ns.format,
                output_dir=ns.output,
            )
            return 0
    except (HookmapError, ValueError) as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
