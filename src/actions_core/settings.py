# SPDX-License-Identifier: GPL-3.0-or-later
# src/actions_core/settings.py
"""
Impostazioni di processo per actions-core.

Sorgenti (in ordine di precedenza crescente):
- default del dataclass `ActionsSettings`;
- file YAML opzionale indicato da ACTIONS_CORE_CONFIG;
- override da ENV: ACTIONS_CORE_LOG_LEVEL, RUNNER_DEBUG / ACTIONS_STEP_DEBUG (forzano DEBUG).

Campi gestiti:
- input_prefix: prefisso delle chiavi ENV degli input (default "INPUT_")
- log_level: verbosity dei logger strutturati (DEBUG, INFO, WARNING, ERROR)
- redact_logs: se abilitare la redazione dei valori sensibili nei log

Le impostazioni sono lette una volta per processo (`get_settings`); non sono una cache
dei valori degli input, che vengono sempre riletti dall'ambiente.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from actions_core.exceptions import ConfigError

__all__ = [
    "CONFIG_PATH_ENV",
    "DEFAULT_INPUT_PREFIX",
    "ActionsSettings",
    "get_config_path",
    "load_settings",
    "get_settings",
    "reset_settings_cache",
]

CONFIG_PATH_ENV = "ACTIONS_CORE_CONFIG"
LOG_LEVEL_ENV = "ACTIONS_CORE_LOG_LEVEL"
DEFAULT_INPUT_PREFIX = "INPUT_"

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ActionsSettings:
    input_prefix: str = DEFAULT_INPUT_PREFIX
    log_level: str = "INFO"
    redact_logs: bool = True


def _normalize_level(level: Any) -> str:
    level_upper = ("" if level is None else str(level)).strip().upper()
    if level_upper not in _LEVELS:
        return "INFO"
    return level_upper


def _is_debug_run(source: Mapping[str, str]) -> bool:
    if str(source.get("RUNNER_DEBUG") or "").strip() == "1":
        return True
    return str(source.get("ACTIONS_STEP_DEBUG") or "").strip().lower() in _TRUTHY


def get_config_path(env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Percorso del file YAML di impostazioni, se configurato."""
    source = env if env is not None else os.environ
    custom = (source.get(CONFIG_PATH_ENV) or "").strip()
    if not custom:
        return None
    return Path(custom).expanduser()


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Impostazioni non leggibili: {path} error_type={type(exc).__name__}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Impostazioni YAML non valide: {path} error_type={type(exc).__name__}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Impostazioni YAML non valide: {path} (atteso un mapping)")
    return raw


def load_settings(env: Optional[Mapping[str, str]] = None) -> ActionsSettings:
    """
    Costruisce le impostazioni da file YAML (se presente) e override ENV.

    Un path configurato ma inesistente equivale a "nessun file" (default);
    un file presente ma illeggibile o non valido solleva `ConfigError`.
    """
    source = env if env is not None else os.environ
    raw: Dict[str, Any] = {}
    path = get_config_path(source)
    if path is not None and path.exists():
        raw = _read_yaml(path)

    prefix = raw.get("input_prefix", DEFAULT_INPUT_PREFIX)
    if not isinstance(prefix, str) or not prefix.strip():
        raise ConfigError("input_prefix deve essere una stringa non vuota")

    level = _normalize_level(raw.get("log_level", "INFO"))
    env_level = source.get(LOG_LEVEL_ENV)
    if env_level:
        level = _normalize_level(env_level)
    if _is_debug_run(source):
        level = "DEBUG"

    return ActionsSettings(
        input_prefix=prefix.strip(),
        log_level=level,
        redact_logs=bool(raw.get("redact_logs", True)),
    )


@lru_cache(maxsize=1)
def get_settings() -> ActionsSettings:
    """
    Cached helper that reads the settings once per process.
    """
    return load_settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
