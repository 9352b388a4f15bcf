"""Relay configuration, loaded once from the environment at startup."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from dispatch_relay.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"

# Environment variable -> RelayConfig field.
_REQUIRED_ENV: dict[str, str] = {
    "TRIGGER_SECRET": "trigger_secret",
    "GH_OWNER": "gh_owner",
    "GH_REPO": "gh_repo",
    "GH_TOKEN": "gh_token",
}

_OPTIONAL_ENV: dict[str, str] = {
    "GH_API_BASE": "api_base",
    "RELAY_HOST": "host",
    "RELAY_PORT": "port",
    "RELAY_MAX_BODY_BYTES": "max_body_bytes",
    "RELAY_LOG_LEVEL": "log_level",
    "RELAY_LOG_DIR": "log_dir",
}


class RelayConfig(BaseModel):
    """Process-wide settings. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    trigger_secret: str
    gh_owner: str
    gh_repo: str
    gh_token: str
    api_base: str = DEFAULT_API_BASE
    host: str = "127.0.0.1"
    port: int = 3000
    max_body_bytes: int = 262144
    log_level: str = "INFO"
    log_dir: Path | None = None

    @property
    def dispatch_url(self) -> str:
        """Full URL of the repository dispatch endpoint."""
        return f"{self.api_base.rstrip('/')}/repos/{self.gh_owner}/{self.gh_repo}/dispatches"

    @property
    def repository(self) -> str:
        return f"{self.gh_owner}/{self.gh_repo}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelayConfig:
        """Build the config from *environ* (defaults to ``os.environ``).

        Raises:
            ConfigError: A required variable is unset/empty, or a value fails validation.
        """
        env = os.environ if environ is None else environ

        missing = [name for name in _REQUIRED_ENV if not env.get(name, "").strip()]
        if missing:
            msg = f"Missing required environment variables: {', '.join(missing)}"
            raise ConfigError(msg)

        values: dict[str, object] = {
            field: env[name].strip() for name, field in _REQUIRED_ENV.items()
        }
        for name, field in _OPTIONAL_ENV.items():
            raw = env.get(name, "").strip()
            if raw:
                values[field] = raw

        try:
            config = cls.model_validate(values)
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
            msg = f"Invalid relay configuration: {fields or exc}"
            raise ConfigError(msg) from exc

        logger.debug("Loaded relay config for repository %s", config.repository)
        return config
