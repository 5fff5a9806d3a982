from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from scorecard_import.config.loader import ConfigError, ImportConfig, load_config, resolve_config_path
from scorecard_import.logging.init import get_logger, log_summary, set_debug, setup_logging
from scorecard_import.models.scorecard import ParseOptions
from scorecard_import.services.orchestrator import (
    ProcessingError,
    parse_scorecard,
    process_directory,
    scan_workbook_files,
)
from scorecard_import.services.summary import render_summary_line
from scorecard_import.writer.template import build_template_workbook, default_template_data

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config ($SCORECARD_IMPORT_CONFIG or --config)
- Parse and validate every workbook in source_directory
- Print one line per invalid file and a SUMMARY line

Exit codes: 0 every file valid, 2 at least one file invalid or unreadable,
1 fatal (bad config, missing directory).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv; a broken file only produces a warning."""
    if not path.exists():
        return
    try:
        load_dotenv(dotenv_path=path, override=override)
    except (OSError, UnicodeDecodeError) as e:
        get_logger().warning("failed to load %s: %s", path, e)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="scorecard-import",
        description="Clinical audit scorecard importer (SNF / KEV workbooks)",
    )
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: $SCORECARD_IMPORT_CONFIG)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print detected format, facility, period and section totals per file then exit",
    )
    p.add_argument("--template", type=Path, metavar="PATH", help="Write the blank import template to PATH then exit")
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    try:
        files = scan_workbook_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no workbooks")
        return EXIT_SUCCESS_ALL
    options = ParseOptions(default_year=cfg.default_year)
    for f in files:
        print(f"FILE: {f.name}")
        try:
            parsed = parse_scorecard(f.read_bytes(), f.name, options, mismatch_threshold=cfg.mismatch_threshold)
        except Exception as e:
            print(f"  error: {e}")
            continue
        print(
            f"  format={parsed.format.value} facility={parsed.facility_name!r} "
            f"month={parsed.month} year={parsed.year} source={parsed.date_source}"
        )
        for s in parsed.sections:
            print(f"  SECTION {s.number}: {s.name} items={len(s.items)} points={s.points_earned}/{s.max_points}")
        print(
            f"  total={parsed.total_score}/{parsed.total_max_points} "
            f"pct={parsed.score_percentage} source={parsed.total_source}"
        )
        if parsed.score_mismatch is not None:
            print(f"  mismatch={parsed.score_mismatch.to_dict()}")
        if parsed.item_mismatch is not None:
            print(f"  item_mismatch={parsed.item_mismatch.to_dict()}")
    return EXIT_SUCCESS_ALL


def _write_template(path: Path, config_path: Path | None) -> int:
    logger = get_logger()
    facilities = None
    resolved = resolve_config_path(config_path)
    if resolved.exists():
        try:
            facilities = load_config(resolved).facilities
        except ConfigError as e:
            logger.error(f"config: {e}")
            return EXIT_FATAL
    data = build_template_workbook(default_template_data(facilities))
    try:
        path.write_bytes(data)
    except OSError as e:
        logger.error(f"template: cannot write {path}: {e}")
        return EXIT_FATAL
    logger.info(f"template written: {path}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when argv is None; main([]) must not pick up pytest's arguments.
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    if args.template is not None:
        return _write_template(args.template, args.config)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    logger.info(f"Processing files from: {directory}")

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        summary = process_directory(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for v in summary.validations:
        if not v.is_valid:
            logger.error(f"file={v.filename} invalid: {'; '.join(v.errors)}")
        for w in v.warnings:
            logger.warning(f"file={v.filename} {w}")

    summary_line = render_summary_line(summary)
    log_summary(summary_line[len("SUMMARY "):])

    return EXIT_SUCCESS_ALL if summary.all_valid else EXIT_PARTIAL_FAILURE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
