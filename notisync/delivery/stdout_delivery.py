"""Standard output notification presenter."""

import json
import sys
from datetime import datetime, timezone
from typing import Any

from ..config.presentation import StdoutPresenterConfig
from ..state.models import Identity
from .base import BaseNotificationPresenter, DeliveryResult, DeliveryStatus


class StdoutPresenter(BaseNotificationPresenter):
    """Prints notification posts and cancellations to stdout."""

    def __init__(self, name: str, config: StdoutPresenterConfig):
        super().__init__(name, config)
        self.config: StdoutPresenterConfig = config
        self._displayed: dict[Identity, dict[str, Any]] = {}

    @property
    def displayed(self) -> dict[Identity, dict[str, Any]]:
        return dict(self._displayed)

    def post(self, identity: Identity, content: dict[str, Any]) -> DeliveryResult:
        """Print the notification unless identical content is already shown."""
        if self._displayed.get(identity) == content:
            return DeliveryResult(status=DeliveryStatus.SUCCESS, message="Already displayed")

        try:
            print(self._format("post", identity, content), file=sys.stdout, flush=True)
        except Exception as e:
            self.logger.error(
                "Failed to print notification",
                presenter=self.name,
                identity=identity,
                error=str(e)
            )
            return DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"Stdout error: {str(e)}",
                error=e
            )

        self._displayed[identity] = content
        self.logger.info("Notification printed", presenter=self.name, identity=identity)
        return DeliveryResult(status=DeliveryStatus.SUCCESS, message="Printed to stdout")

    def cancel(self, identity: Identity) -> DeliveryResult:
        """Print the cancellation; cancelling an unknown identity is allowed."""
        try:
            print(self._format("cancel", identity, None), file=sys.stdout, flush=True)
        except Exception as e:
            self.logger.error(
                "Failed to print cancellation",
                presenter=self.name,
                identity=identity,
                error=str(e)
            )
            return DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"Stdout error: {str(e)}",
                error=e
            )

        self._displayed.pop(identity, None)
        return DeliveryResult(status=DeliveryStatus.SUCCESS, message="Cancelled on stdout")

    def _format(self, operation: str, identity: Identity, content: Any) -> str:
        """Format one presenter event for stdout."""
        if self.config.format == "pretty":
            output = f"[{datetime.now(timezone.utc).isoformat()}] {operation.upper()}: {identity}"
            if content and content.get("title"):
                output += f" ({content['title']})"
            return output

        event = {"operation": operation, "identity": identity}
        if content is not None:
            event["content"] = content
        if self.config.include_timestamp:
            event["stdout_timestamp"] = datetime.now(timezone.utc).isoformat()
        return json.dumps(event, default=str)

    def health_check(self) -> bool:
        """Check if stdout is available."""
        try:
            return sys.stdout.writable()
        except Exception:
            return False
