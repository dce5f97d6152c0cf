"""Shared configuration loader for the block-explorer connection."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlparse

import yaml


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG_PATH = Path.home() / ".digital-artifacts.yaml"
DEFAULT_API_URL = "https://mempool.space/api"
DEFAULT_TIMEOUT = 30.0
_CONFIG_PATH_OVERRIDE: Path | None = None


@dataclass
class ExplorerConfig:
    """Connection details for an Esplora-compatible REST API."""

    base_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT


def set_default_config_path(path: str | Path | None) -> None:
    """Remember a user-supplied config path for future loads."""

    global _CONFIG_PATH_OVERRIDE
    _CONFIG_PATH_OVERRIDE = Path(path).expanduser() if path else None


def _load_config_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}

    try:
        loaded = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - delegated to PyYAML
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected {path} to contain a YAML object with an 'explorer' section")
    return loaded


def _coerce_timeout(raw: Any, *, source: str) -> float | None:
    if raw is None:
        return None
    try:
        timeout = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid timeout in {source}: {raw}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"Timeout in {source} must be positive: {raw}")
    return timeout


def _validate_url(raw: str) -> str:
    parsed = urlparse(raw)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise ConfigurationError(f"Invalid explorer API URL: {raw}")
    return raw.rstrip("/")


def _first_value(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def load_explorer_config(
    *,
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ExplorerConfig:
    """Load explorer configuration from overrides, environment and optional YAML."""

    env_map = os.environ if env is None else env
    explicit_path = config_path is not None or _CONFIG_PATH_OVERRIDE is not None
    path = (
        Path(config_path).expanduser()
        if config_path is not None
        else _CONFIG_PATH_OVERRIDE or DEFAULT_CONFIG_PATH
    )

    file_config = _load_config_file(path, required=explicit_path)
    explorer_section = file_config.get("explorer", {})
    if explorer_section is None:
        explorer_section = {}
    if not isinstance(explorer_section, dict):
        raise ConfigurationError(f"Expected 'explorer' to be a mapping in {path}")

    override_map = dict(overrides or {})

    resolved_url = _first_value(
        override_map.get("base_url"),
        env_map.get("DIGITAL_ARTIFACTS_API_URL"),
        explorer_section.get("base_url"),
        default=DEFAULT_API_URL,
    )
    resolved_timeout = _first_value(
        _coerce_timeout(override_map.get("timeout"), source="overrides"),
        _coerce_timeout(env_map.get("DIGITAL_ARTIFACTS_TIMEOUT"), source="environment"),
        _coerce_timeout(explorer_section.get("timeout"), source=f"{path} explorer.timeout"),
        default=DEFAULT_TIMEOUT,
    )

    return ExplorerConfig(base_url=_validate_url(str(resolved_url)), timeout=resolved_timeout)
