"""Configuration loading for the todo service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

WORKSPACE_KEY = "PRO_TODO_WORKSPACE"
WEBHOOK_URL_KEY = "PRO_TODO_WEBHOOK_URL"
LEGACY_WEBHOOK_URL_KEY = "WEBHOOK_URL"
WEBHOOK_TIMEOUT_KEY = "PRO_TODO_WEBHOOK_TIMEOUT"
SERVICE_TOKEN_KEY = "PRO_TODO_SERVICE_TOKEN"
GIT_HISTORY_KEY = "PRO_TODO_GIT_HISTORY"

DEFAULT_WEBHOOK_TIMEOUT = 5.0


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class AppConfig:
    workspace_path: Path
    webhook_url: str | None = None
    webhook_timeout: float = DEFAULT_WEBHOOK_TIMEOUT
    service_token: str | None = None
    git_history: bool = False


def _read_dotenv_value(dotenv_path: Path, key: str) -> str | None:
    """Read a single key from a .env file without mutating the environment."""
    if not dotenv_path.is_file():
        return None
    try:
        content = dotenv_path.read_text(encoding="utf-8")
    except OSError:
        return None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].strip()
        if "=" not in stripped:
            continue
        name, value = stripped.split("=", 1)
        name = name.strip()
        if name != key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        return value or None
    return None


def _read_setting(dotenv_path: Path, key: str) -> str | None:
    value = os.environ.get(key)
    if value is None:
        value = _read_dotenv_value(dotenv_path, key)
    if value is None:
        return None
    return value.strip() or None


def _read_bool(raw_value: str | None, *, default: bool, key: str) -> bool:
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if not normalized:
        return default
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{key} must be a boolean value.")


def _read_positive_float(raw_value: str | None, *, default: float, key: str) -> float:
    if raw_value is None:
        return default
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number.") from exc
    if value <= 0:
        raise ConfigError(f"{key} must be greater than zero.")
    return value


def load_config(workspace: str | Path | None = None) -> AppConfig:
    """Load configuration from the environment.

    ``workspace`` overrides ``PRO_TODO_WORKSPACE`` when given, e.g. from the
    command line.
    """
    dotenv_path = Path.cwd() / ".env"

    raw_path = str(workspace).strip() if workspace is not None else ""
    if not raw_path:
        raw_path = _read_setting(dotenv_path, WORKSPACE_KEY) or ""
    if not raw_path:
        raise ConfigError(
            f"{WORKSPACE_KEY} is required; set it to the directory holding the lists."
        )
    workspace_path = Path(raw_path).expanduser().resolve()
    if workspace_path.exists() and not workspace_path.is_dir():
        raise ConfigError(f"{WORKSPACE_KEY} must point to a directory.")

    webhook_url = _read_setting(dotenv_path, WEBHOOK_URL_KEY) or _read_setting(
        dotenv_path, LEGACY_WEBHOOK_URL_KEY
    )

    return AppConfig(
        workspace_path=workspace_path,
        webhook_url=webhook_url,
        webhook_timeout=_read_positive_float(
            _read_setting(dotenv_path, WEBHOOK_TIMEOUT_KEY),
            default=DEFAULT_WEBHOOK_TIMEOUT,
            key=WEBHOOK_TIMEOUT_KEY,
        ),
        service_token=_read_setting(dotenv_path, SERVICE_TOKEN_KEY),
        git_history=_read_bool(
            _read_setting(dotenv_path, GIT_HISTORY_KEY),
            default=False,
            key=GIT_HISTORY_KEY,
        ),
    )
