"""Configuration loading and validation.

``config/config.yaml`` holds the defaults; ``config/config.local.yaml`` (not
committed) overlays it with a deep merge. API keys may be written as
``${ENV_VAR}`` placeholders.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .domain.layout import LayoutFormat
from .providers import PROVIDER_DEFAULTS

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = "config/config.local.yaml"


@dataclass
class AppConfig:
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    api_key: str = ""
    api_base: str = ""
    temperature: float = 0.7
    max_tokens: int = 4000
    layout_format: str = "standard"
    export_dir: str = "exports"
    max_upload_bytes: int = 5 * 1024 * 1024
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ConfigError:
    """A single configuration issue."""

    field: str
    message: str
    severity: Severity


def _resolve(candidate: str) -> Path:
    path = Path(candidate)
    if path.exists():
        return path
    alt = REPO_ROOT / candidate
    if alt.exists():
        return alt
    return path


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must be a mapping: {path}")
        return data


def _deep_merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        base_value = merged.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(base_value, value)
        else:
            merged[key] = value
    return merged


def load_raw_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Load the raw configuration mapping.

    Priority order:
    1. config.local.yaml (user's local config with secrets)
    2. config.yaml (template/defaults)

    An explicit path other than ``config.local.yaml`` is loaded as-is.
    """
    target = _resolve(config_path)

    if Path(config_path).name == "config.local.yaml":
        base = _load_yaml(_resolve("config/config.yaml"))
        local = _load_yaml(target)
        merged = _deep_merge(base, local)
        if not merged:
            raise FileNotFoundError(f"Config file not found: {config_path} (also missing fallback config/config.yaml)")
        return merged

    data = _load_yaml(target)
    if not data:
        raise FileNotFoundError(f"Config file not found: {config_path}")
    return data


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load :class:`AppConfig`; without an explicit path, missing files fall back to defaults."""
    if config_path is None:
        try:
            return AppConfig.from_dict(load_raw_config(DEFAULT_CONFIG_PATH))
        except FileNotFoundError:
            return AppConfig()
    return AppConfig.from_dict(load_raw_config(config_path))


def validate_config(raw_config: Dict[str, Any]) -> List[ConfigError]:
    """Validate raw configuration and return a list of issues (empty = valid)."""
    errors: List[ConfigError] = []

    # --- Provider ---
    provider = str(raw_config.get("provider", "openai") or "").lower()
    if provider not in PROVIDER_DEFAULTS:
        errors.append(
            ConfigError(
                field="provider",
                message=f"Unknown provider {provider!r}; expected one of: {', '.join(PROVIDER_DEFAULTS)}",
                severity=Severity.ERROR,
            )
        )

    # --- API Key ---
    if not resolve_api_key_value(provider, raw_config.get("api_key", "")):
        env_key = PROVIDER_DEFAULTS.get(provider, {}).get("env_key", "API key")
        errors.append(
            ConfigError(
                field="api_key",
                message=f"{env_key} not set. Optimization and import are disabled until it is configured.",
                severity=Severity.WARNING,
            )
        )

    # --- Model ---
    model = raw_config.get("model", "gpt-4o-mini")
    if not model or not isinstance(model, str):
        errors.append(ConfigError(field="model", message="model must be a non-empty string", severity=Severity.ERROR))

    # --- Temperature ---
    temperature = raw_config.get("temperature", 0.7)
    if isinstance(temperature, bool) or not isinstance(temperature, (int, float)) or not 0 <= temperature <= 2:
        errors.append(
            ConfigError(
                field="temperature",
                message=f"temperature must be a number between 0 and 2, got {temperature}",
                severity=Severity.ERROR,
            )
        )

    # --- Max tokens ---
    for key, default in (("max_tokens", 4000), ("max_upload_bytes", 5 * 1024 * 1024)):
        value = raw_config.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            errors.append(
                ConfigError(field=key, message=f"{key} must be a positive integer, got {value}", severity=Severity.ERROR)
            )

    # --- Layout format ---
    layout_format = raw_config.get("layout_format", "standard")
    try:
        LayoutFormat.parse(layout_format)
    except ValueError as e:
        errors.append(ConfigError(field="layout_format", message=str(e), severity=Severity.ERROR))

    # --- Log level ---
    log_level = str(raw_config.get("log_level", "INFO")).upper()
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        errors.append(
            ConfigError(field="log_level", message=f"Unknown log level {log_level!r}", severity=Severity.WARNING)
        )

    return errors


def resolve_api_key_value(provider: str, config_api_key: str) -> str:
    """Resolve an API key from env or config without raising.

    Returns the resolved key string, or empty string if unresolvable.
    """
    env_key = PROVIDER_DEFAULTS.get(provider, {}).get("env_key", "")
    if env_key and os.environ.get(env_key, ""):
        return os.environ[env_key]

    config_api_key = config_api_key or ""
    if not config_api_key:
        return ""

    if not config_api_key.startswith("${"):
        return config_api_key

    if config_api_key.endswith("}"):
        return os.environ.get(config_api_key[2:-1], "")

    return ""


def has_errors(issues: List[ConfigError]) -> bool:
    """Check if any issues are errors (not just warnings)."""
    return any(e.severity == Severity.ERROR for e in issues)
