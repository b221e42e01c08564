"""Presenter construction from presentation config."""

from ..config.presentation import PresentationConfig, PresentationMethod
from .base import BaseNotificationPresenter, PresenterPermanentError
from .file_delivery import FilePresenter
from .stdout_delivery import StdoutPresenter


def create_presenter(config: PresentationConfig) -> BaseNotificationPresenter:
    """Build the presenter selected by the configuration."""
    if config.method == PresentationMethod.STDOUT:
        return StdoutPresenter(config.name, config.config)
    if config.method == PresentationMethod.FILE_OUTPUT:
        return FilePresenter(config.name, config.config)
    raise PresenterPermanentError(f"Unsupported presentation method: {config.method}")
