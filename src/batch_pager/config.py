"""
Runtime configuration for batch-pager.

Configuration can be built directly, read from ``BATCH_PAGER_*`` environment
variables, or loaded from a YAML file:

    base_url: https://twitter.com
    concurrency_limit: 20
    backoff:
      unit_secs: 1.0
      max_retries: 8
"""

from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from batch_pager.errors import ConfigError
from batch_pager.resilience import DEFAULT_CONCURRENCY_LIMIT, BackoffPolicy

ENV_PREFIX = "BATCH_PAGER_"


def _package_version() -> str:
    try:
        return version("batch-pager")
    except PackageNotFoundError:
        return "0.1.0"


class PagerConfig(BaseModel):
    """Settings for the client, transport and batch executor."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(default="https://twitter.com", description="API base URL")
    concurrency_limit: int = Field(
        default=DEFAULT_CONCURRENCY_LIMIT, ge=1, description="Maximum requests in flight"
    )
    timeout_secs: float = Field(default=30.0, gt=0, description="Request timeout")
    connect_timeout_secs: float = Field(default=10.0, gt=0, description="Connect timeout")
    proxy: str | None = Field(default=None, description="Proxy URL")
    user_agent: str = Field(
        default_factory=lambda: f"batch-pager/{_package_version()}",
        description="User-Agent header",
    )
    backoff_unit_secs: float = Field(default=1.0, ge=0, description="Length of one backoff unit")
    max_retries: int | None = Field(
        default=None, ge=0, description="Retry ceiling per request (None = unbounded)"
    )
    max_backoff_secs: float | None = Field(
        default=None, ge=0, description="Cap on a single backoff sleep"
    )
    timeline_page_size: int = Field(
        default=200, ge=1, description="Items requested per timeline page"
    )

    def backoff_policy(self) -> BackoffPolicy:
        """Build the retry backoff policy."""
        return BackoffPolicy(
            unit_secs=self.backoff_unit_secs,
            max_retries=self.max_retries,
            max_delay_secs=self.max_backoff_secs,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> PagerConfig:
        """Create configuration from environment variables.

        Every field maps to ``BATCH_PAGER_<FIELD>`` (e.g.
        ``BATCH_PAGER_CONCURRENCY_LIMIT``). Explicit keyword overrides win.
        """
        data: dict[str, Any] = {}
        for name in cls.model_fields:
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value is not None and value != "":
                data[name] = value
        data.update(overrides)
        return cls._validate(data, source="environment")

    @classmethod
    def from_yaml(cls, path: str | Path) -> PagerConfig:
        """Load configuration from a YAML file.

        A nested ``backoff`` mapping (``unit_secs``, ``max_retries``,
        ``max_delay_secs``) is accepted as an alternative to the flat fields.

        Raises:
            ConfigError: If the file is unreadable or invalid
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", path=str(path), cause=e) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", path=str(path), cause=e) from e

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping", path=str(path))

        backoff = data.pop("backoff", None)
        if isinstance(backoff, dict):
            try:
                policy = BackoffPolicy.from_dict(backoff)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid backoff section: {e}", path=str(path), cause=e) from e
            data.setdefault("backoff_unit_secs", policy.unit_secs)
            data.setdefault("max_retries", policy.max_retries)
            data.setdefault("max_backoff_secs", policy.max_delay_secs)

        return cls._validate(data, source=str(path))

    @classmethod
    def _validate(cls, data: dict[str, Any], *, source: str) -> PagerConfig:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration from {source}: {e}", cause=e) from e
