"""Configuration for notification presenters."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PresentationMethod(Enum):
    """Supported notification presentation methods."""
    STDOUT = "stdout"
    FILE_OUTPUT = "file_output"


@dataclass(frozen=True)
class StdoutPresenterConfig:
    """Configuration for stdout presentation."""
    format: str = "json"  # json, pretty
    include_timestamp: bool = True


@dataclass(frozen=True)
class FilePresenterConfig:
    """Configuration for the JSONL presentation log."""
    output_path: str
    create_dirs: bool = True


@dataclass(frozen=True)
class PresentationConfig:
    """Selected presenter and its settings."""
    name: str
    method: PresentationMethod
    config: Any  # StdoutPresenterConfig | FilePresenterConfig


def get_default_presentation_config() -> PresentationConfig:
    """Get default presentation configuration."""
    return PresentationConfig(
        name="stdout",
        method=PresentationMethod.STDOUT,
        config=StdoutPresenterConfig(
            format="json",
            include_timestamp=True
        )
    )


def create_file_presentation(name: str, output_path: str, **kwargs) -> PresentationConfig:
    """Create file presentation configuration."""
    return PresentationConfig(
        name=name,
        method=PresentationMethod.FILE_OUTPUT,
        config=FilePresenterConfig(
            output_path=output_path,
            **kwargs
        )
    )
