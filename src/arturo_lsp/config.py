"""
Server Configuration

Loads settings from, in increasing precedence:
    built-in defaults, a YAML file, environment variables,
    LSP initializationOptions and workspace/didChangeConfiguration.

Bad values never stop the server; they are logged and the previous
settings are kept.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from arturo_lsp.errors import ConfigError

logger = logging.getLogger(__name__)


# Default configuration file locations (checked in order)
CONFIG_SEARCH_PATHS = [
    Path.home() / ".arturo-lsp" / "config.yaml",
    Path(".arturo-lsp.yaml"),
]

ENV_MAPPINGS = {
    "ARTURO_LSP_LOG_LEVEL": ("logging", "level"),
    "ARTURO_LSP_LOG_FILE": ("logging", "file"),
    "ARTURO_LSP_INDENT_SIZE": ("formatting", "indent_size"),
}


class DiagnosticsSettings(BaseModel):
    enabled: bool = True
    undefined_identifiers: bool = True
    type_checks: bool = True
    bracket_balance: bool = True
    max_problems: int = Field(default=1000, ge=0)


class FormattingSettings(BaseModel):
    indent_size: int = Field(default=4, ge=1, le=16)


class InlayHintSettings(BaseModel):
    parameter_names: bool = True
    types: bool = True


class LoggingSettings(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None


class ServerSettings(BaseModel):
    """All user-tunable settings."""
    diagnostics: DiagnosticsSettings = Field(default_factory=DiagnosticsSettings)
    formatting: FormattingSettings = Field(default_factory=FormattingSettings)
    inlay_hints: InlayHintSettings = Field(default_factory=InlayHintSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def merged(self, overrides: Optional[Dict[str, Any]]) -> "ServerSettings":
        """
        Return a copy with ``overrides`` applied on top.

        Raises:
            ConfigError: If the merged values do not validate.
        """
        if not overrides:
            return self
        if not isinstance(overrides, dict):
            raise ConfigError(f"Settings must be a mapping, got {type(overrides).__name__}")
        data = _deep_merge(self.model_dump(), _normalise_keys(overrides))
        try:
            return ServerSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e


def _normalise_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Accept camelCase keys from editor clients (``maxProblems``)."""
    result: Dict[str, Any] = {}
    for key, value in data.items():
        snake = "".join("_" + c.lower() if c.isupper() else c for c in str(key))
        result[snake] = _normalise_keys(value) if isinstance(value, dict) else value
    return result


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_yaml_settings(path: Path) -> Dict[str, Any]:
    """
    Read one YAML settings file.

    Raises:
        ConfigError: If the file cannot be read or is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(str(e), path=str(path)) from e
    if not isinstance(data, dict):
        raise ConfigError("expected a mapping at top level", path=str(path))
    return data


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect settings from ARTURO_LSP_* environment variables."""
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for env_var, (section, key) in ENV_MAPPINGS.items():
        if env_var in environ:
            overrides.setdefault(section, {})[key] = environ[env_var]
    return overrides


def apply_overrides(settings: ServerSettings, overrides: Optional[Dict[str, Any]],
                    source: str) -> ServerSettings:
    """Apply overrides, keeping ``settings`` unchanged if they are invalid."""
    try:
        return settings.merged(overrides)
    except ConfigError as e:
        logger.warning("Ignoring invalid settings from %s: %s", source, e)
        return settings


def load_settings(config_path: Optional[Path] = None,
                  environ: Optional[Dict[str, str]] = None,
                  search_paths: Optional[List[Path]] = None) -> ServerSettings:
    """Defaults, then the first YAML file found, then environment variables."""
    settings = ServerSettings()

    candidates = [config_path] if config_path else (search_paths or CONFIG_SEARCH_PATHS)
    for path in candidates:
        if path and path.exists():
            try:
                data = load_yaml_settings(path)
            except ConfigError as e:
                logger.warning("Failed to load config: %s", e)
                continue
            settings = apply_overrides(settings, data, str(path))
            logger.info("Loaded settings from %s", path)
            break
    else:
        if config_path:
            logger.warning("Config file not found: %s", config_path)

    return apply_overrides(settings, env_overrides(environ), "environment")


def client_settings(payload: Any) -> Optional[Dict[str, Any]]:
    """
    Extract the arturo section from an initializationOptions or
    didChangeConfiguration payload.
    """
    if not isinstance(payload, dict):
        return None
    if "settings" in payload and isinstance(payload["settings"], dict):
        payload = payload["settings"]
    if "arturo" in payload and isinstance(payload["arturo"], dict):
        payload = payload["arturo"]
    return payload or None
