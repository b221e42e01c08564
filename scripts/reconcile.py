#!/usr/bin/env python3
"""Run one reconciliation pass against the SQLite stores."""

import argparse
import json
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from notisync.config.loader import ConfigLoader
from notisync.config.presentation import (
    PresentationConfig,
    PresentationMethod,
    StdoutPresenterConfig,
    create_file_presentation,
    get_default_presentation_config,
)
from notisync.config.validation import ConfigValidator
from notisync.delivery.factory import create_presenter
from notisync.engine import ReconciliationEngine
from notisync.logging.config import configure_logging
from notisync.persistence.live_store import SQLiteLiveStore
from notisync.persistence.tracking_store import SQLiteTrackingStore


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile tracked notifications with the live store")
    parser.add_argument("trigger", nargs="?", default="change",
                        help="Trigger tag, e.g. change, boot_completed, package_replaced")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory containing notisync.yaml")
    parser.add_argument("--output", type=Path, default=None,
                        help="Write presenter events to this JSONL file instead of stdout")
    parser.add_argument("--pretty", action="store_true",
                        help="Human-readable stdout presenter output")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print planned actions without applying them")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    loader = ConfigLoader.create(args.config_dir)
    errors = ConfigValidator.validate_config(loader.merge_config())
    if errors:
        print(f"❌ Found {len(errors)} configuration errors:", file=sys.stderr)
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})", file=sys.stderr)
        return 2

    config = loader.load()
    configure_logging(level=config.logging.level, format_json=config.logging.format_json)

    if args.output:
        presentation = create_file_presentation("file", str(args.output))
    elif args.pretty:
        presentation = PresentationConfig(
            name="stdout",
            method=PresentationMethod.STDOUT,
            config=StdoutPresenterConfig(format="pretty")
        )
    else:
        presentation = get_default_presentation_config()

    live_store = SQLiteLiveStore(config.storage.live_db_path, config.storage.connect_timeout_seconds)
    engine = ReconciliationEngine(
        tracking_store=SQLiteTrackingStore(
            config.storage.tracking_db_path, config.storage.connect_timeout_seconds
        ),
        live_store=live_store,
        presenter=create_presenter(presentation),
        renderer=live_store.content_for,
        config=config,
    )

    if args.dry_run:
        for action in engine.plan(args.trigger):
            print(json.dumps({
                "action": action.kind.value,
                "identity": action.identity,
                "reason": action.reason,
            }, default=str))
        return 0

    report = engine.handle(args.trigger)
    print(json.dumps(report.summary()))
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
