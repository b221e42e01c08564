"""File-based notification presenter writing a JSONL event log."""

import fcntl
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config.presentation import FilePresenterConfig
from ..state.models import Identity, identity_key
from .base import BaseNotificationPresenter, DeliveryResult, DeliveryStatus


class FilePresenter(BaseNotificationPresenter):
    """
    Appends post/cancel events to a JSONL file.

    The set of displayed notifications is rebuilt from the log on start, so
    re-posting identical content after a restart writes nothing.
    """

    def __init__(self, name: str, config: FilePresenterConfig):
        super().__init__(name, config)
        self.config: FilePresenterConfig = config
        self.output_path = Path(config.output_path)

        if config.create_dirs:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

        self._displayed: dict[str, dict[str, Any]] = self._replay()

    def _replay(self) -> dict[str, dict[str, Any]]:
        """Rebuild displayed notifications from an existing log."""
        displayed: dict[str, dict[str, Any]] = {}
        if not self.output_path.exists():
            return displayed

        with open(self.output_path) as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    event = json.loads(line)
                except json.JSONDecodeError:
                    self.logger.warning(
                        "Skipping unreadable presenter log line",
                        presenter=self.name,
                        line=line_number
                    )
                    continue
                key = identity_key(event.get("identity"))
                if event.get("operation") == "post":
                    displayed[key] = event.get("content", {})
                elif event.get("operation") == "cancel":
                    displayed.pop(key, None)

        return displayed

    @property
    def displayed(self) -> dict[str, dict[str, Any]]:
        return dict(self._displayed)

    def post(self, identity: Identity, content: dict[str, Any]) -> DeliveryResult:
        """Append a post event unless identical content is already displayed."""
        key = identity_key(identity)
        if self._displayed.get(key) == content:
            return DeliveryResult(status=DeliveryStatus.SUCCESS, message="Already displayed")

        result = self._append({"operation": "post", "identity": identity, "content": content})
        if result.ok:
            self._displayed[key] = content
        return result

    def cancel(self, identity: Identity) -> DeliveryResult:
        """Append a cancel event if the identity is displayed."""
        key = identity_key(identity)
        if key not in self._displayed:
            return DeliveryResult(status=DeliveryStatus.SUCCESS, message="Nothing to cancel")

        result = self._append({"operation": "cancel", "identity": identity})
        if result.ok:
            self._displayed.pop(key, None)
        return result

    def _append(self, event: dict[str, Any]) -> DeliveryResult:
        event["timestamp"] = datetime.now(timezone.utc).isoformat()
        try:
            with open(self.output_path, "a") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                json.dump(event, f, default=str)
                f.write("\n")

        except OSError as e:
            self.logger.warning(
                "Presenter file error",
                presenter=self.name,
                output_path=str(self.output_path),
                error=str(e)
            )
            return DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"File system error: {str(e)}",
                error=e
            )

        self.logger.info(
            "Presenter event written",
            presenter=self.name,
            operation=event["operation"],
            identity=event["identity"]
        )
        return DeliveryResult(status=DeliveryStatus.SUCCESS, message=f"Written to {self.output_path}")

    def health_check(self) -> bool:
        """Check if the output directory is writable."""
        try:
            test_file = self.output_path.parent / ".health_check_test"
            test_file.write_text("test")
            test_file.unlink()
            return True

        except Exception as e:
            self.logger.warning(
                "Health check failed",
                presenter=self.name,
                error=str(e)
            )
            return False
