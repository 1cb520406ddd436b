"""GitHub image host."""

from .client import GitHubImageHost
from .config import load_config, resolve_token, save_config
from .models import HostConfig, ImageHostType
from .transport import HttpxTransport, Reply, ReplyError, Transport

__all__ = [
    "GitHubImageHost",
    "HostConfig",
    "ImageHostType",
    "HttpxTransport",
    "Reply",
    "ReplyError",
    "Transport",
    "load_config",
    "resolve_token",
    "save_config",
]
