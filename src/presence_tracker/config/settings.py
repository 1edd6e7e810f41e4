"""Application configuration helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple

from presence_tracker.domain.models.server import ServerIdentity

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Holds configuration values for the application."""

    data_dir: Path = Path("data")
    cache_filename: str = "cache.json"
    tracked_servers: Tuple[ServerIdentity, ...] = (ServerIdentity("mc.marc.tv", 25565),)
    poll_interval_seconds: int = 60
    query_timeout_seconds: float = 5.0
    presence_retention_seconds: Optional[int] = None
    scheduler_enabled: bool = True
    log_level: str = "INFO"
    app_version: str = "0.1.0"
    api_version: str = "v1"

    @property
    def cache_path(self) -> Path:
        """Return the full path of the JSON cache document."""

        return self.data_dir / self.cache_filename

    @property
    def api_prefix(self) -> str:
        """Return the URL prefix used for versioned API routes."""

        return f"/api/{self.api_version}"


def get_settings() -> Settings:
    """Provide application settings from the environment."""

    settings = Settings()
    overrides: dict[str, object] = {}

    data_dir = os.getenv("DATA_DIR")
    if data_dir:
        overrides["data_dir"] = Path(data_dir).expanduser()
    elif os.getenv("WEBSITE_INSTANCE_ID"):
        overrides["data_dir"] = Path(
            os.getenv("APP_DATA_DIR", "/home/site/data")
        ).expanduser()

    tracked_servers = os.getenv("TRACKED_SERVERS")
    if tracked_servers:
        overrides["tracked_servers"] = parse_tracked_servers(tracked_servers)

    poll_interval = os.getenv("POLL_INTERVAL_SECONDS")
    if poll_interval:
        overrides["poll_interval_seconds"] = _positive_int("POLL_INTERVAL_SECONDS", poll_interval)

    query_timeout = os.getenv("QUERY_TIMEOUT_SECONDS")
    if query_timeout:
        try:
            timeout = float(query_timeout)
        except ValueError:
            raise ValueError("QUERY_TIMEOUT_SECONDS must be a number.") from None
        if timeout <= 0:
            raise ValueError("QUERY_TIMEOUT_SECONDS must be positive.")
        overrides["query_timeout_seconds"] = timeout

    retention = os.getenv("PRESENCE_RETENTION_SECONDS")
    if retention:
        overrides["presence_retention_seconds"] = _positive_int(
            "PRESENCE_RETENTION_SECONDS", retention
        )

    scheduler_enabled = os.getenv("SCHEDULER_ENABLED")
    if scheduler_enabled:
        overrides["scheduler_enabled"] = _parse_bool("SCHEDULER_ENABLED", scheduler_enabled)

    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        overrides["log_level"] = log_level.upper()

    return replace(settings, **overrides) if overrides else settings


def parse_tracked_servers(raw: str) -> Tuple[ServerIdentity, ...]:
    """Parse a comma separated list of ``host[:port]`` entries."""

    servers = tuple(
        ServerIdentity.parse(entry) for entry in raw.split(",") if entry.strip()
    )
    if not servers:
        raise ValueError("TRACKED_SERVERS must list at least one server.")
    return servers


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer.") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive.")
    return value


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag.")
