"""Default configuration parameters for the reconciliation engine."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TriggerParams:
    """Trigger tag mapping."""
    # Tags that bypass the diff and re-notify everything tracked
    bulk_resync_tags: tuple[str, ...] = ("boot_completed", "package_replaced")


@dataclass(frozen=True)
class SnapshotParams:
    """Snapshot boundary parameters."""
    strict_validation: bool = True     # Reject duplicates instead of keeping the first


@dataclass(frozen=True)
class StorageParams:
    """SQLite adapter locations."""
    tracking_db_path: str = "notisync_tracking.db"
    live_db_path: str = "notisync_live.db"
    connect_timeout_seconds: float = 30.0


@dataclass(frozen=True)
class DeliveryParams:
    """Presenter retry parameters."""
    retry_attempts: int = 2
    retry_delay_seconds: float = 0.5


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters passed to configure_logging."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    trigger: TriggerParams = field(default_factory=TriggerParams)
    snapshot: SnapshotParams = field(default_factory=SnapshotParams)
    storage: StorageParams = field(default_factory=StorageParams)
    delivery: DeliveryParams = field(default_factory=DeliveryParams)
    logging: LoggingParams = field(default_factory=LoggingParams)


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        trigger=TriggerParams(),
        snapshot=SnapshotParams(),
        storage=StorageParams(),
        delivery=DeliveryParams(),
        logging=LoggingParams(),
    )
