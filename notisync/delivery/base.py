"""Base classes for notification presenters."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import structlog

from ..state.models import Identity


class DeliveryStatus(Enum):
    """Presenter call status."""
    SUCCESS = "success"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"


@dataclass
class DeliveryResult:
    """Result of a post or cancel attempt."""
    status: DeliveryStatus
    message: Optional[str] = None
    attempt_count: int = 1
    delivery_time_ms: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == DeliveryStatus.SUCCESS


class PresenterError(Exception):
    """Base exception for presenter errors."""
    pass


class PresenterRetryableError(PresenterError):
    """Retryable presenter error."""
    pass


class PresenterPermanentError(PresenterError):
    """Permanent presenter error that should not be retried."""
    pass


class BaseNotificationPresenter(ABC):
    """
    Base class for notification presenters.

    Presenters must be idempotent: posting the same content for an identity
    twice leaves a single, unchanged notification, and cancelling an
    identity with no notification is a no-op.
    """

    def __init__(self, name: str, config: Any):
        self.name = name
        self.config = config
        self.logger = structlog.get_logger(f"notisync.presenter.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def post(self, identity: Identity, content: dict[str, Any]) -> DeliveryResult:
        """
        Display or update the notification for an identity.

        Args:
            identity: Entity the notification belongs to
            content: Rendered notification content

        Returns:
            Delivery result for the call
        """
        pass

    @abstractmethod
    def cancel(self, identity: Identity) -> DeliveryResult:
        """Remove any displayed notification for an identity."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the presenter is usable."""
        pass

    def post_with_retry(
        self,
        identity: Identity,
        content: dict[str, Any],
        max_retries: int = 2,
        retry_delay: float = 0.5
    ) -> DeliveryResult:
        """Post with retry logic; see ``_with_retry``."""
        return self._with_retry(lambda: self.post(identity, content), "post", identity,
                                max_retries, retry_delay)

    def cancel_with_retry(
        self,
        identity: Identity,
        max_retries: int = 2,
        retry_delay: float = 0.5
    ) -> DeliveryResult:
        """Cancel with retry logic; see ``_with_retry``."""
        return self._with_retry(lambda: self.cancel(identity), "cancel", identity,
                                max_retries, retry_delay)

    def _with_retry(
        self,
        call: Callable[[], DeliveryResult],
        operation: str,
        identity: Identity,
        max_retries: int,
        retry_delay: float
    ) -> DeliveryResult:
        """
        Run a presenter call, retrying failures.

        Permanent errors stop immediately. Anything else is retried up to
        ``max_retries`` times, after which the result is DEAD_LETTER.
        """
        attempt = 0
        last_error: Optional[Exception] = None

        while attempt <= max_retries:
            try:
                start_time = time.time()
                result = call()
                delivery_time = int((time.time() - start_time) * 1000)

                if result.ok:
                    result.delivery_time_ms = delivery_time
                    result.attempt_count = attempt + 1
                    self._delivery_count += 1
                    return result

                last_error = result.error

            except PresenterPermanentError as e:
                self._error_count += 1
                return DeliveryResult(
                    status=DeliveryStatus.FAILED,
                    message=f"Permanent error: {str(e)}",
                    attempt_count=attempt + 1,
                    error=e
                )

            except Exception as e:
                # Unknown and retryable errors are both retried
                last_error = e

            attempt += 1

            if attempt <= max_retries:
                self.logger.warning(
                    "Presenter call failed, retrying",
                    presenter=self.name,
                    operation=operation,
                    identity=identity,
                    attempt=attempt,
                    retry_delay=retry_delay,
                    error=str(last_error)
                )
                time.sleep(retry_delay)

        self._error_count += 1
        return DeliveryResult(
            status=DeliveryStatus.DEAD_LETTER,
            message=f"Max retries exceeded: {str(last_error)}",
            attempt_count=attempt,
            error=last_error
        )

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }
