"""
Configuration

Environment-driven settings shared by the CLI and both servers.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.cache import DEFAULT_TTL_SECONDS

DEFAULT_PORT = 5002
DEFAULT_CACHE_DIR = str(Path.home() / ".cache" / "seraphim")
DEFAULT_REPO = "KHwang9883/MobileModels"
DEFAULT_BRANCH = "master"
DEFAULT_BRANDS_DIR = "brands"
DEFAULT_USER_AGENT = "SERAPHIM-Phone-Search"


def _get_int(name: str, default: int) -> int:
    value = os.environ.get(name, str(default))
    try:
        return int(value)
    except ValueError:
        msg = f"Invalid {name} value: {value}"
        raise ValueError(msg) from None


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_port() -> int:
    """Get server port from environment or use default"""
    return _get_int("PORT", DEFAULT_PORT)


def get_cache_dir() -> Path:
    """Get cache directory from environment or use default"""
    return Path(os.environ.get("SERAPHIM_CACHE_DIR", DEFAULT_CACHE_DIR))


@dataclass
class Settings:
    """Runtime settings (see Settings.from_env for the variables)"""
    cache_dir: Path
    github_token: Optional[str] = None
    repo: str = DEFAULT_REPO
    branch: str = DEFAULT_BRANCH
    brands_dir: str = DEFAULT_BRANDS_DIR
    default_ttl: int = DEFAULT_TTL_SECONDS
    http_timeout: float = 30.0
    max_workers: int = 8
    require_token: bool = False
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, cache_dir: str | Path | None = None) -> "Settings":
        """Build settings from environment variables.

        SERAPHIM_CACHE_DIR, GITHUB_TOKEN, SERAPHIM_REPO, SERAPHIM_BRANCH,
        SERAPHIM_BRANDS_DIR, SERAPHIM_DEFAULT_TTL (seconds),
        SERAPHIM_HTTP_TIMEOUT (seconds), SERAPHIM_MAX_WORKERS,
        SERAPHIM_REQUIRE_TOKEN, USER_AGENT
        """
        return cls(
            cache_dir=Path(cache_dir) if cache_dir else get_cache_dir(),
            github_token=os.environ.get("GITHUB_TOKEN") or None,
            repo=os.environ.get("SERAPHIM_REPO", DEFAULT_REPO),
            branch=os.environ.get("SERAPHIM_BRANCH", DEFAULT_BRANCH),
            brands_dir=os.environ.get("SERAPHIM_BRANDS_DIR", DEFAULT_BRANDS_DIR),
            default_ttl=_get_int("SERAPHIM_DEFAULT_TTL", DEFAULT_TTL_SECONDS),
            http_timeout=float(_get_int("SERAPHIM_HTTP_TIMEOUT", 30)),
            max_workers=_get_int("SERAPHIM_MAX_WORKERS", 8),
            require_token=_get_bool("SERAPHIM_REQUIRE_TOKEN"),
            user_agent=os.environ.get("USER_AGENT", DEFAULT_USER_AGENT),
        )
