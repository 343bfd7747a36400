"""Client configuration for quotesync."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from quotesync._constants import BASE_URL, COLLECTION_PATH, STORAGE_KEY
from quotesync.exceptions import QuoteSyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_number(env_key: str, raw: str, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(raw)
    except ValueError as exc:
        raise QuoteSyncConfigError(f"{env_key} must be a {kind.__name__}, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Synchronization engine configuration.

    Parameters
    ----------
    base_url : str
        Remote service base URL.
    collection_path : str
        Path of the quote collection endpoint (used for both GET and POST).
    storage_path : Path
        File used by the default JSON file backend.
    storage_key : str
        Key the collection is persisted under.
    poll_interval : float
        Seconds between periodic sync cycles.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.  A timeout
        surfaces as a remote failure, never as an orchestrator error.
    user_id : int
        Value sent as ``userId`` when pushing a quote.
    fetch_limit : int or None
        Optional cap on how many remote records are mapped per fetch.
    periodic_enabled : bool
        Whether :class:`quotesync.client.QuoteSyncClient` starts the
        periodic trigger on entry.
    """

    base_url: str = BASE_URL
    collection_path: str = COLLECTION_PATH
    storage_path: Path = Path("quotes.json")
    storage_key: str = STORAGE_KEY
    poll_interval: float = 60.0
    request_timeout: float = 10.0
    user_id: int = 1
    fetch_limit: int | None = None
    periodic_enabled: bool = True

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise QuoteSyncConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.request_timeout <= 0:
            raise QuoteSyncConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.fetch_limit is not None and self.fetch_limit < 0:
            raise QuoteSyncConfigError(f"fetch_limit must be >= 0, got {self.fetch_limit}")
        if not self.storage_key:
            raise QuoteSyncConfigError("storage_key must be non-empty")

    @property
    def collection_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.collection_path}"

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from ``QUOTESYNC_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "QUOTESYNC_BASE_URL": "base_url",
            "QUOTESYNC_COLLECTION_PATH": "collection_path",
            "QUOTESYNC_STORAGE_KEY": "storage_key",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        storage_env = env.get("QUOTESYNC_STORAGE_PATH")
        if storage_env is not None:
            config_kwargs["storage_path"] = Path(storage_env)

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "QUOTESYNC_POLL_INTERVAL": ("poll_interval", float),
            "QUOTESYNC_REQUEST_TIMEOUT": ("request_timeout", float),
            "QUOTESYNC_USER_ID": ("user_id", int),
            "QUOTESYNC_FETCH_LIMIT": ("fetch_limit", int),
        }
        for env_key, (field_name, kind) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _parse_number(env_key, val, kind)

        if "periodic_enabled" not in overrides:
            config_kwargs["periodic_enabled"] = _env_bool(env.get("QUOTESYNC_PERIODIC_ENABLED"), True)

        config_kwargs.update(overrides)
        if isinstance(config_kwargs.get("storage_path"), str):
            config_kwargs["storage_path"] = Path(config_kwargs["storage_path"])

        return cls(**config_kwargs)
