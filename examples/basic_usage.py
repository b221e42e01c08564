#!/usr/bin/env python3
"""
Basic Usage Example - notisync reconciliation engine

This script walks a small task list through a few reconciliation passes
using the in-memory stores. It shows how to:
- Initialize the engine
- Add, update, deactivate and delete live entities
- Run change passes and a bulk resync
- Inspect the report of each pass

Run: python examples/basic_usage.py
"""

import json

from notisync.config.presentation import StdoutPresenterConfig
from notisync.delivery.stdout_delivery import StdoutPresenter
from notisync.engine import ReconciliationEngine
from notisync.logging import configure_logging
from notisync.persistence.live_store import InMemoryLiveStore
from notisync.persistence.tracking_store import InMemoryTrackingStore
from notisync.state.models import StateRecord


def print_report(step: str, report) -> None:
    print(f"--- {step}: {json.dumps(report.summary())}")


def main() -> None:
    configure_logging(level="WARNING")

    live_store = InMemoryLiveStore()
    engine = ReconciliationEngine(
        tracking_store=InMemoryTrackingStore(),
        live_store=live_store,
        presenter=StdoutPresenter("stdout", StdoutPresenterConfig(format="pretty")),
        renderer=live_store.content_for,
    )

    print("🔔 notisync basic usage\n")

    live_store.upsert(StateRecord(1, 1, True), title="Water the plants")
    live_store.upsert(StateRecord(2, 1, True), title="Pay rent")
    live_store.upsert(StateRecord("groceries", "r1", True), title="Buy milk")
    print_report("initial pass", engine.handle("change"))

    print_report("nothing changed", engine.handle("change"))

    live_store.upsert(StateRecord(1, 2, True), title="Water the plants (balcony)")
    print_report("task 1 edited", engine.handle("change"))

    live_store.upsert(StateRecord(2, 2, False))
    print_report("task 2 completed", engine.handle("change"))

    live_store.delete("groceries")
    print_report("groceries deleted", engine.handle("change"))

    print_report("device rebooted", engine.handle("boot_completed"))

    print("\n📊 Runtime stats:")
    print(json.dumps(engine.get_runtime_stats(), indent=2, default=str))


if __name__ == "__main__":
    main()
