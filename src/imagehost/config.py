"""Persisted image host configuration."""

import json
import logging
import os
from pathlib import Path

from .models import HostConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "IMAGEHOST_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/imagehost/github.json")


def default_config_path() -> Path:
    """Config file location, overridable via IMAGEHOST_CONFIG."""
    return Path(os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH).expanduser()


def resolve_token(token: str | None = None) -> str | None:
    """
    Get GitHub token from various sources.

    Priority:
    1. Explicitly provided token
    2. Environment variable GH_TOKEN / GITHUB_TOKEN
    """
    if token:
        logger.debug("Using explicitly provided token")
        return token

    env_token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if env_token:
        logger.info("Using token from environment variable")
        return env_token

    return None


def load_config(path: Path) -> HostConfig:
    """
    Load host config; a missing file yields an empty config.

    Raises:
        ValueError: The file is not valid JSON or has invalid values
    """
    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            return HostConfig.model_validate(json.load(f))
    logger.debug("No config file at %s", path)
    return HostConfig()


def save_config(path: Path, config: HostConfig) -> None:
    """Save host config under the persisted key names."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(config.to_persisted(), f, ensure_ascii=False, indent=2)
    logger.info("Saved config to %s", path)


def merge_config(
    config: HostConfig,
    token: str | None = None,
    owner: str | None = None,
    repo: str | None = None,
    from_env: bool = True,
) -> HostConfig:
    """Overlay explicit values, and optionally an environment token, onto a loaded config."""
    resolved_token = resolve_token(token) if from_env else token
    return HostConfig(
        access_token=resolved_token or config.access_token,
        owner_name=owner or config.owner_name,
        repo_name=repo or config.repo_name,
    )
