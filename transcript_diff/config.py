"""Comparison settings from defaults, a YAML file, the environment and CLI flags."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .diarization import DEFAULT_TAIL_SECONDS
from .markup import DEFAULT_DELETE_STYLE, DEFAULT_INSERT_STYLE
from .tokenize import DIFF_MODES, MODE_WORD

ENV_CONFIG_PATH = "TRANSCRIPT_DIFF_CONFIG"
ENV_WORD_MAP_PATH = "TRANSCRIPT_DIFF_WORD_MAP"
ENV_TAIL_SECONDS = "TRANSCRIPT_DIFF_TAIL_SECONDS"

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for configuration values that cannot be used."""


@dataclass(frozen=True)
class CompareConfig:
    diff_mode: str = MODE_WORD
    normalized: bool = False
    tail_seconds: float = DEFAULT_TAIL_SECONDS
    delete_style: str = DEFAULT_DELETE_STYLE
    insert_style: str = DEFAULT_INSERT_STYLE
    word_map_path: Optional[Path] = None

    def validated(self) -> "CompareConfig":
        if self.diff_mode not in DIFF_MODES:
            raise ConfigError(f"diff_mode must be one of: {', '.join(DIFF_MODES)} (got {self.diff_mode!r})")
        try:
            tail = float(self.tail_seconds)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"tail_seconds must be a number (got {self.tail_seconds!r})") from exc
        if tail < 0:
            raise ConfigError(f"tail_seconds must be non-negative (got {tail})")
        word_map_path = Path(self.word_map_path).expanduser() if self.word_map_path else None
        return replace(self, tail_seconds=tail, normalized=bool(self.normalized), word_map_path=word_map_path)


CONFIG_KEYS = {field.name for field in fields(CompareConfig)}


def _norm_key(key: str) -> str:
    return (key or "").strip().replace("-", "_")


def read_yaml_settings(path: Path) -> Dict[str, Any]:
    """
    Load known settings from a YAML file, warning about keys that are not settings.
    """

    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")

    settings: Dict[str, Any] = {}
    for key, value in raw.items():
        name = _norm_key(str(key))
        if name not in CONFIG_KEYS:
            logger.warning("Ignoring unknown config key %r in %s", key, path)
            continue
        settings[name] = value
    return settings


def read_env_settings(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    settings: Dict[str, Any] = {}
    if env.get(ENV_WORD_MAP_PATH):
        settings["word_map_path"] = env[ENV_WORD_MAP_PATH]
    if env.get(ENV_TAIL_SECONDS):
        settings["tail_seconds"] = env[ENV_TAIL_SECONDS]
    return settings


def load_config(
    path: Optional[Path] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> CompareConfig:
    """
    Build a ``CompareConfig``: defaults, then YAML, then environment, then ``overrides``.

    ``path`` falls back to ``$TRANSCRIPT_DIFF_CONFIG``. Overrides whose value is
    None are ignored so unset CLI flags do not mask file settings.
    """

    env = os.environ if environ is None else environ
    config_path = path or (Path(env[ENV_CONFIG_PATH]) if env.get(ENV_CONFIG_PATH) else None)

    settings: Dict[str, Any] = {}
    if config_path is not None:
        settings.update(read_yaml_settings(Path(config_path).expanduser()))
    settings.update(read_env_settings(env))
    for key, value in (overrides or {}).items():
        if value is not None and key in CONFIG_KEYS:
            settings[key] = value
    return CompareConfig(**settings).validated()


def load_environment(dotenv_path: Optional[Path] = None) -> None:
    """Load ``.env`` (or ``dotenv_path``) into ``os.environ`` without overriding it."""

    load_dotenv(dotenv_path, override=False)


__all__ = [
    "CONFIG_KEYS",
    "CompareConfig",
    "ConfigError",
    "ENV_CONFIG_PATH",
    "ENV_TAIL_SECONDS",
    "ENV_WORD_MAP_PATH",
    "load_config",
    "load_environment",
    "read_env_settings",
    "read_yaml_settings",
]
