"""
Service Configuration Module

Centralized settings for the game backend's external collaborators: the
leaderboard service, the coaching-hint service and the time-attack clock.

Environment Variables:
    TSUMEBALL_RANKINGS_URL: Remote leaderboard endpoint (optional; local file only if unset)
    TSUMEBALL_RANKINGS_PATH: Local leaderboard cache file (default: ~/.tsumeball/rankings.json)
    TSUMEBALL_HINT_URL: Coaching-hint endpoint (optional; canned hint if unset)
    TSUMEBALL_HTTP_TIMEOUT: Timeout in seconds for remote calls (default: 5)
    TSUMEBALL_TIME_ATTACK_SECONDS: Time-attack countdown length (default: 60)

.env File Support:
    If a .env file exists in the project root, it is loaded first. Variables
    already present in the environment are never overridden.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _load_env_file(env_path: Optional[Path] = None) -> None:
    """
    Load environment variables from .env file if it exists.

    Args:
        env_path: Path to .env file. If None, looks for .env in project root.
    """
    if env_path is None:
        # app/backend/config.py -> project root
        env_path = Path(__file__).resolve().parent.parent.parent / ".env"

    if not env_path.exists() or not env_path.is_file():
        return

    with open(env_path, "r") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]
            if key not in os.environ:
                os.environ[key] = value


@dataclass
class ServiceConfig:
    """Backend settings resolved from the environment."""

    rankings_url: Optional[str]
    rankings_path: Path
    hint_url: Optional[str]
    http_timeout: float
    time_attack_seconds: int


def get_service_config(load_env: bool = True) -> ServiceConfig:
    if load_env:
        _load_env_file()

    default_path = Path.home() / ".tsumeball" / "rankings.json"
    return ServiceConfig(
        rankings_url=os.environ.get("TSUMEBALL_RANKINGS_URL") or None,
        rankings_path=Path(os.environ.get("TSUMEBALL_RANKINGS_PATH", str(default_path))),
        hint_url=os.environ.get("TSUMEBALL_HINT_URL") or None,
        http_timeout=float(os.environ.get("TSUMEBALL_HTTP_TIMEOUT", "5")),
        time_attack_seconds=int(os.environ.get("TSUMEBALL_TIME_ATTACK_SECONDS", "60")),
    )
