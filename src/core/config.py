"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets every adapter (platform, GitHub, integration) read the same base URLs and timeouts.
"""

from __future__ import annotations

import netrc
import os
from pathlib import Path
from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (`$XDG_CONFIG_HOME/pipeline-setup`)."""

    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "pipeline-setup"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def set_user_env_var(key: str, value: str) -> Path:
    """Set one KEY=value in the user .env, keeping every other line as is."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    lines = env_path.read_text(encoding="utf-8").splitlines() if env_path.exists() else []
    kept = [line for line in lines if line.split("=", 1)[0].strip() != key]
    kept.append(f"{key}={value}")
    env_path.write_text("\n".join(kept) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed, validated at the edge (env vars) so the orchestrator never touches os.environ.
    - One configuration contract shared by the CLI and every API client.
    """

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_SETUP_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="Platform API token. Falls back to ~/.netrc when unset.",
    )
    platform_api_url: str = Field(
        default="https://api.heroku.com",
        min_length=8,
        description="Base URL of the platform API (pipelines, apps, features).",
    )
    integration_api_url: str = Field(
        default="https://kolkrabbi.heroku.com",
        min_length=8,
        description="Base URL of the GitHub integration API (linked accounts, repo links).",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        min_length=8,
        description="Base URL of the source-hosting API.",
    )
    dashboard_url: str = Field(
        default="https://dashboard.heroku.com",
        min_length=8,
        description="Dashboard opened in the browser once the pipeline exists.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="pipeline-setup/0.1",
        min_length=1,
        description="User-Agent sent to every API.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )


def read_netrc_token(api_url: str, netrc_path: Path | None = None) -> str | None:
    """Look up the password stored for the API host in a netrc file."""

    host = urlparse(api_url).hostname
    if not host:
        return None
    path = netrc_path or Path.home() / ".netrc"
    if not path.exists():
        return None
    try:
        auth = netrc.netrc(str(path)).authenticators(host)
    except (netrc.NetrcParseError, OSError):
        return None
    if not auth:
        return None
    return auth[2] or None


def resolve_identity_token(settings: AppSettings, netrc_path: Path | None = None) -> str | None:
    """Identity token for the platform: explicit setting first, then netrc."""

    if settings.api_key:
        return settings.api_key
    return read_netrc_token(settings.platform_api_url, netrc_path)
