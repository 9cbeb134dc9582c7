"""
Remote store configuration.

Values come from the environment (a local .env file is loaded first) and
optionally from a YAML file, with the environment taking precedence:

    GITHUB_OWNER     github_owner
    GITHUB_REPO      github_repo
    GITHUB_TOKEN     github_token
    GITHUB_BRANCH    branch        (default: gh-pages)
    GITHUB_API_URL   api_url       (default: https://api.github.com)
                     timeout       (seconds, default: 10)
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_BRANCH = "gh-pages"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10.0


class ConfigurationError(Exception):
    """Raised when required remote identity or credential values are absent."""
    pass


@dataclass
class StoreConfig:
    owner: str
    repo: str
    token: str
    branch: str = DEFAULT_BRANCH
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> None:
        missing = [name for name in ("owner", "repo", "token") if not getattr(self, name)]
        if missing:
            raise ConfigurationError(f"Missing required GitHub configuration: {', '.join(missing)}")


def _read_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Optional[str] = None) -> StoreConfig:
    """
    Build a validated StoreConfig.

    Args:
        path: Optional YAML config file

    Raises:
        ConfigurationError: if owner, repo or token is missing
    """
    load_dotenv()
    file_values = _read_config_file(path) if path else {}

    def pick(env_key: str, file_key: str, default: Any = "") -> Any:
        value = os.environ.get(env_key)
        if value:
            return value
        value = file_values.get(file_key)
        return default if value in (None, "") else value

    config = StoreConfig(
        owner=pick("GITHUB_OWNER", "github_owner"),
        repo=pick("GITHUB_REPO", "github_repo"),
        token=pick("GITHUB_TOKEN", "github_token"),
        branch=pick("GITHUB_BRANCH", "branch", DEFAULT_BRANCH),
        api_url=str(pick("GITHUB_API_URL", "api_url", DEFAULT_API_URL)).rstrip("/"),
        timeout=float(file_values.get("timeout") or DEFAULT_TIMEOUT),
    )
    config.validate()
    return config
