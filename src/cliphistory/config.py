from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv
from platformdirs import user_data_dir

from cliphistory.exceptions import ConfigurationError

DEFAULT_DB_PATH = Path(user_data_dir("cliphistory", appauthor=False)) / "history.db"
DEFAULT_LIST_LIMIT = 1000


def _to_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", exc)
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _to_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", exc)
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class RedisConfig:
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    channel: str = "cliphistory:clips_updated"

    @classmethod
    def from_uri(cls, uri: str, channel: Optional[str] = None) -> "RedisConfig":
        parsed = urlparse(uri)
        if parsed.scheme not in {"redis", "rediss"}:
            raise ConfigurationError(
                f"Unsupported Redis URI scheme: {parsed.scheme!r}")

        db_fragment = parsed.path.lstrip("/")
        try:
            db = int(db_fragment) if db_fragment else cls.db
        except ValueError as exc:
            raise ConfigurationError(f"Invalid Redis database in URI: {db_fragment!r}", exc)

        return cls(
            host=parsed.hostname or cls.host,
            port=parsed.port or cls.port,
            db=db,
            password=parsed.password or None,
            channel=channel or cls.channel,
        )


@dataclass(frozen=True)
class HistoryConfig:
    db_path: Path = DEFAULT_DB_PATH
    poll_interval: float = 0.5
    list_limit: int = DEFAULT_LIST_LIMIT
    resolver_timeout: float = 0.5
    api_host: str = "127.0.0.1"
    api_port: int = 3001
    redis: Optional[RedisConfig] = None

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "HistoryConfig":
        """Build the configuration from a ``.env`` file and the environment.

        Variables already present in the environment win over the file.
        """
        load_dotenv(dotenv_path=env_path, override=False)

        db_raw = os.getenv("CLIPHISTORY_DB_PATH")
        db_path = Path(db_raw).expanduser() if db_raw else cls.db_path

        redis_uri = os.getenv("REDIS_URI")
        redis_config = None
        if redis_uri:
            redis_config = RedisConfig.from_uri(
                redis_uri, channel=os.getenv("CLIPHISTORY_REDIS_CHANNEL"))

        return cls(
            db_path=db_path,
            poll_interval=_to_float("CLIPHISTORY_POLL_INTERVAL", cls.poll_interval),
            list_limit=_to_int("CLIPHISTORY_LIST_LIMIT", cls.list_limit),
            resolver_timeout=_to_float("CLIPHISTORY_RESOLVER_TIMEOUT", cls.resolver_timeout),
            api_host=os.getenv("CLIPHISTORY_API_HOST", cls.api_host),
            api_port=_to_int("CLIPHISTORY_API_PORT", cls.api_port),
            redis=redis_config,
        )

    def with_overrides(self, **changes) -> "HistoryConfig":
        """Return a copy with every non-``None`` keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
