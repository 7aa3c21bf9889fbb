"""CLI entry-point for the peak cache updater.

Usage examples
--------------
# Incremental update from the stored watermark (minus overlap) to now:
python -m floodpeaks.updater

# Backfill one calendar year (UTC):
python -m floodpeaks.updater --backfill-year 2000

# Offline run against a local series file, creating the cache if needed:
python -m floodpeaks.updater --source file --input data/series.csv --create
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from floodpeaks.contracts.errors import ConfigError, SourceError
from floodpeaks.shared.logger import setup_logging
from floodpeaks.shared.settings import DEFAULT_CONFIG_PATH, SOURCE_KINDS, load_settings
from floodpeaks.sources.factory import build_source
from floodpeaks.store.event_store import EventStore
from floodpeaks.updater.orchestrator import UpdateOrchestrator
from floodpeaks.updater.reporter import format_summary, write_events_csv

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SOURCE_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="floodpeaks-update",
        description="Extract flood peaks from a water-level feed into an append-only cache",
    )
    p.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Settings YAML. Default: {DEFAULT_CONFIG_PATH}",
    )
    p.add_argument(
        "--store",
        default=None,
        help="Cache JSON path. Overrides store_path from the settings file.",
    )
    p.add_argument(
        "--backfill-year",
        type=int,
        default=None,
        help="Backfill exactly that calendar year (UTC) instead of an incremental pass.",
    )
    p.add_argument(
        "--source",
        choices=list(SOURCE_KINDS),
        default=None,
        help="Series source. Default: source.kind from the settings file.",
    )
    p.add_argument(
        "--input",
        default=None,
        help="Series file (CSV or JSONL) for --source file.",
    )
    p.add_argument(
        "--create",
        action="store_true",
        default=False,
        help="Start an empty cache if the store file does not exist yet.",
    )
    p.add_argument(
        "--export-csv",
        default=None,
        help="After the pass, export all cached events to this CSV path.",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = load_settings(args.config)
        store_path = Path(args.store or settings.store_path)
        source = build_source(settings, kind=args.source, input_path=args.input)
        orchestrator = UpdateOrchestrator(
            source=source,
            store_path=store_path,
            settings=settings,
            create=args.create,
        )
        if args.backfill_year is not None:
            result = orchestrator.run_backfill(args.backfill_year)
        else:
            result = orchestrator.run_incremental()
    except ConfigError as exc:
        log.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR
    except SourceError as exc:
        log.error("Source error (cache left untouched): %s", exc)
        return EXIT_SOURCE_ERROR

    print(format_summary(result))

    if args.export_csv:
        if store_path.exists():
            write_events_csv(EventStore.load(store_path), args.export_csv)
        else:
            log.warning("No cache at %s yet; nothing to export", store_path)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
