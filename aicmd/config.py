"""Configuration loading for aicmd.

Settings are read once at process start from a YAML file
(``~/.aicmd/config.yaml`` unless ``AICMD_CONFIG`` points elsewhere)
and then overlaid with environment variables.  The environment
variable names are the ones the shell version of this tool used, so
an existing ``ai_bash_config.sh`` keeps working when it is sourced
before running ``aicmd``.

The result is an immutable :class:`Settings` object that is passed
explicitly to the dispatcher.  Nothing in the pipeline reads ambient
globals.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

PROVIDER_NAMES = ("openrouter", "openai", "anthropic", "local")

# Environment variable -> (provider section, field)
ENV_PROVIDER_KEYS = {
    "OPENROUTER_API_KEY": ("openrouter", "api_key"),
    "OPENROUTER_MODEL": ("openrouter", "model"),
    "OPENAI_API_KEY": ("openai", "api_key"),
    "OPENAI_MODEL": ("openai", "model"),
    "ANTHROPIC_API_KEY": ("anthropic", "api_key"),
    "ANTHROPIC_MODEL": ("anthropic", "model"),
    "LOCAL_MODEL_API_BASE": ("local", "base_url"),
    "LOCAL_MODEL_API_KEY": ("local", "api_key"),
    "LOCAL_MODEL_NAME": ("local", "model"),
}

TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ProviderSettings:
    """Per-provider credentials and overrides."""

    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class Settings:
    """Read-only configuration shared by every dispatcher call."""

    openrouter: ProviderSettings = field(default_factory=ProviderSettings)
    openai: ProviderSettings = field(default_factory=ProviderSettings)
    anthropic: ProviderSettings = field(default_factory=ProviderSettings)
    local: ProviderSettings = field(default_factory=ProviderSettings)
    default_provider: str = "openai"
    enable_clipboard: bool = True
    http_client: Optional[str] = None
    timeout: Optional[float] = None

    def for_provider(self, name: str) -> ProviderSettings:
        """Return the settings block for ``name`` (one of :data:`PROVIDER_NAMES`)."""
        if name not in PROVIDER_NAMES:
            raise KeyError(name)
        return getattr(self, name)


def _config_dir() -> Path:
    """Return the path to the user's configuration directory (``~/.aicmd``)."""
    return Path.home() / ".aicmd"


def config_file(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the path to the YAML configuration file."""
    env = os.environ if environ is None else environ
    override = env.get("AICMD_CONFIG")
    if override:
        return Path(override).expanduser()
    return _config_dir() / "config.yaml"


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return default
    return text in TRUE_VALUES


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer max_tokens value %r", value)
        return None


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric timeout value %r", value)
        return None


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the raw YAML configuration.

    Missing files yield an empty mapping.  A malformed file is reported
    with a warning and also yields an empty mapping, so a broken config
    degrades to environment variables and defaults instead of aborting.
    """
    cfg_path = path or config_file()
    if not cfg_path.exists():
        return {}
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Could not read configuration file %s: %s", cfg_path, exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Configuration file %s does not contain a mapping; ignoring it", cfg_path)
        return {}
    return data


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> Path:
    """Persist raw configuration to disk and return the path written."""
    cfg_path = path or config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    with cfg_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=True)
    return cfg_path


def build_settings(
    data: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge raw file data with environment overrides into :class:`Settings`.

    Precedence is environment, then file, then built-in defaults.  Empty
    strings count as unset at every level.
    """
    data = data or {}
    env = os.environ if environ is None else environ

    raw_providers = data.get("providers") or {}
    if not isinstance(raw_providers, dict):
        logger.warning("'providers' in configuration is not a mapping; ignoring it")
        raw_providers = {}

    sections: Dict[str, Dict[str, Any]] = {}
    for name in PROVIDER_NAMES:
        section = raw_providers.get(name) or {}
        sections[name] = dict(section) if isinstance(section, dict) else {}

    for env_name, (provider, key) in ENV_PROVIDER_KEYS.items():
        value = _clean(env.get(env_name))
        if value is not None:
            sections[provider][key] = value

    providers = {
        name: ProviderSettings(
            api_key=_clean(section.get("api_key")),
            model=_clean(section.get("model")),
            base_url=_clean(section.get("base_url")),
            max_tokens=_as_int(section.get("max_tokens")),
        )
        for name, section in sections.items()
    }

    enable_clipboard = _as_bool(data.get("clipboard"), True)
    enable_clipboard = _as_bool(env.get("ENABLE_CLIPBOARD"), enable_clipboard)

    http_client = _clean(env.get("PREFERRED_HTTP_CLIENT")) or _clean(data.get("http_client"))
    default_provider = (_clean(data.get("default_provider")) or "openai").lower()

    return Settings(
        default_provider=default_provider,
        enable_clipboard=enable_clipboard,
        http_client=http_client.lower() if http_client else None,
        timeout=_as_float(data.get("timeout")),
        **providers,
    )


def load_settings(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load the YAML file and environment into an immutable :class:`Settings`."""
    cfg_path = path or config_file(environ)
    return build_settings(load_config(cfg_path), environ)
