"""Application configuration.

AppConfig is a frozen dataclass -- immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from wren.errors import ConfigurationError

# Environment variable -> AppConfig field
_ENV_FIELDS: dict[str, str] = {
    "HOST": "host",
    "PORT": "port",
    "WREN_DEBUG": "debug",
    "WREN_ROUTES_DIR": "routes_dir",
    "WREN_MODULES_DIR": "modules_dir",
    "LOG_LEVEL": "log_level",
    "LOG_FORMAT": "log_format",
}

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=8080, routes_dir="api/routes")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    # Route discovery
    routes_dir: str | Path = "routes"
    modules_dir: str | Path = "modules"
    module_mount_prefix: str = "/api"
    route_extension: str = ".py"

    # Logging
    log_level: str = "info"
    log_format: str = "text"  # "text" or "json"

    # Limits
    max_content_length: int = 1024 * 1024  # 1 MB

    def __post_init__(self) -> None:
        if self.log_format not in ("text", "json"):
            msg = f"log_format must be 'text' or 'json', got {self.log_format!r}"
            raise ConfigurationError(msg)
        if not self.route_extension.startswith("."):
            msg = f"route_extension must start with '.', got {self.route_extension!r}"
            raise ConfigurationError(msg)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> AppConfig:
        """Build a config from environment variables.

        Reads ``PORT``, ``HOST``, ``WREN_DEBUG``, ``WREN_ROUTES_DIR``,
        ``WREN_MODULES_DIR``, ``LOG_LEVEL`` and ``LOG_FORMAT``. Keyword
        overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for var, field_name in _ENV_FIELDS.items():
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            values[field_name] = _coerce(field_name, raw)
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            msg = f"Unknown AppConfig fields: {', '.join(sorted(unknown))}"
            raise ConfigurationError(msg)
        values.update(overrides)
        return cls(**values)


def _coerce(field_name: str, raw: str) -> Any:
    if field_name == "port":
        try:
            return int(raw)
        except ValueError as exc:
            msg = f"PORT must be an integer, got {raw!r}"
            raise ConfigurationError(msg) from exc
    if field_name == "debug":
        return raw.strip().lower() in _TRUTHY
    return raw
