# SPDX-License-Identifier: GPL-3.0-or-later
# src/actions_core/logging_utils.py
"""Logging strutturato per actions-core.

Obiettivi:
- Logger **idempotente**, con filtri di **contesto** (action, run_id) e **redazione**.
- Niente `print` per la diagnostica: lo stdout è il canale dei risultati
  (`::set-output`), quindi l'handler console scrive su **stderr**.
- Utility di **masking** coerenti per token e valori sensibili.

Formato di output:
    %(asctime)s %(levelname)s %(name)s: %(message)s |
    action=<a> run_id=<run> [event=<evt> input=<n> env_key=<k> kind=<t> required=<r> output=<o>]

Indice funzioni principali (ruolo):
- `get_structured_logger(name, *, level=None, redact_logs=None, env=None)`:
    logger con handler console e filtri contesto/redazione/evento.
- `redact_secrets(msg)`: redige pattern comuni di segreti in testo libero.
- `mask_partial(value, keep=3)`: maschera parziale di un valore.
- `is_sensitive_name(name)`: euristica sui nomi di input/variabili sensibili.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from actions_core.exceptions import ConfigError

__all__ = [
    "get_structured_logger",
    "redact_secrets",
    "mask_partial",
    "is_sensitive_name",
]

_SENSITIVE_MARKERS = ("token", "secret", "password", "passwd", "key", "authorization")
_KV_FIELDS = ("action", "run_id", "event", "input", "env_key", "kind", "required", "output", "value")


def _settings_or_defaults():
    """Legge le impostazioni di processo; un file non valido non deve bloccare i logger."""
    from actions_core.settings import ActionsSettings, get_settings

    try:
        return get_settings()
    except ConfigError:
        # l'errore riemerge al primo get_input/get_settings esplicito
        return ActionsSettings()


def redact_secrets(msg: str) -> str:
    """Redige token/credenziali se accidentalmente presenti in un testo libero."""
    if not msg:
        return msg
    out = msg
    replacements = (
        (re.compile(r"x-access-token\s*:\s*\S+", re.IGNORECASE), "x-access-token:***"),
        (re.compile(r"Authorization\s*:\s*Basic\s+\S+", re.IGNORECASE), "Authorization: Basic ***"),
        (re.compile(r"Authorization\s*:\s*Bearer\s+\S+", re.IGNORECASE), "Authorization: Bearer ***"),
        (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"), "gh*_***"),
    )
    for pattern, replacement in replacements:
        out = pattern.sub(replacement, out)
    return out


def mask_partial(value: Optional[str], keep: int = 3) -> str:
    """Maschera parzialmente un valore: 'abcdef' -> 'abc...'."""
    if not value:
        return ""
    return value[:keep] + "..." if len(value) > keep else value


def is_sensitive_name(name: Optional[str]) -> bool:
    if not name:
        return False
    lowered = name.lower()
    return any(marker in lowered for marker in _SENSITIVE_MARKERS)


# ---------------------------------------------
# Structured logging
# ---------------------------------------------
@dataclass
class _CtxView:
    action: Optional[str] = None
    run_id: Optional[str] = None


def _ctx_view_from(env: Optional[Mapping[str, str]] = None) -> _CtxView:
    """Estrae il contesto minimo dell'esecuzione dall'ambiente dell'host."""
    source = env if env is not None else os.environ
    return _CtxView(action=source.get("GITHUB_ACTION") or None, run_id=source.get("GITHUB_RUN_ID") or None)


class _ContextFilter(logging.Filter):
    """Arricchisce ogni record con campi standardizzati."""

    def __init__(self, ctx: _CtxView):
        super().__init__()
        self.ctx = ctx

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "action"):
            record.action = self.ctx.action or "-"
        if not hasattr(record, "run_id"):
            record.run_id = self.ctx.run_id or "-"
        return True


class _RedactFilter(logging.Filter):
    """Applica redazione a messaggio e valori di input sensibili quando attiva."""

    def __init__(self, enabled: bool):
        super().__init__()
        self.enabled = enabled

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.enabled:
            return True
        if isinstance(record.msg, str):
            record.msg = redact_secrets(record.msg)
        if hasattr(record, "value"):
            label = (
                getattr(record, "input", None) or getattr(record, "output", None) or getattr(record, "env_key", None)
            )
            if is_sensitive_name(label):
                record.value = "***"
            elif isinstance(record.value, str):
                record.value = redact_secrets(record.value)
        return True


class _EventDefaultFilter(logging.Filter):
    """Garantisce che 'event' sia sempre presente; se manca usa il messaggio come codice evento."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "event"):
            msg = record.getMessage()
            record.event = msg.strip() or "log"
        return True


class _KVFormatter(logging.Formatter):
    """Formatter semplice e leggibile, con campi chiave-valore stabili."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        kv = []
        for k in _KV_FIELDS:
            v = getattr(record, k, None)
            if v is None or v == "" or v == "-":
                continue
            kv.append(f"{k}={v}")
        if kv:
            return f"{base} | " + " ".join(kv)
        return base


def _make_console_handler(level: int, fmt: str) -> logging.Handler:
    ch = logging.StreamHandler(stream=sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(_KVFormatter(fmt))
    return ch


def _ensure_no_duplicate_handlers(lg: logging.Logger, key: str) -> None:
    """Evita handler duplicati (idempotenza)."""
    to_remove = [h for h in lg.handlers if getattr(h, "_logging_utils_key", None) == key]
    for h in to_remove:
        lg.removeHandler(h)


def _set_logger_filter(lg: logging.Logger, flt: logging.Filter, key: str) -> None:
    """Sostituisce (se presente) un filtro identificato dal key e lo rimpiazza."""
    to_remove = [f for f in lg.filters if getattr(f, "_logging_utils_key", None) == key]
    for f in to_remove:
        lg.removeFilter(f)
    flt._logging_utils_key = key  # type: ignore[attr-defined]
    lg.addFilter(flt)


def get_structured_logger(
    name: str,
    *,
    level: int | str | None = None,
    redact_logs: Optional[bool] = None,
    env: Optional[Mapping[str, str]] = None,
    propagate: Optional[bool] = None,
) -> logging.Logger:
    """Restituisce un logger configurato e idempotente.

    Parametri:
        name:        nome del logger (es. 'actions_core.env_utils').
        level:       livello logging (default: dalle impostazioni, fallback INFO).
        redact_logs: abilita/disabilita redazione (default: dalle impostazioni).
        env:         mapping da cui leggere il contesto (GITHUB_ACTION, GITHUB_RUN_ID).
        propagate:   propagazione verso il root logger (default: ACTIONS_CORE_LOG_PROPAGATE).

    Comportamento:
      - handler console su stderr, sostituito (non duplicato) a ogni chiamata;
      - filtri: contesto + redazione + evento di default;
      - sotto pytest la propagazione è riabilitata per `caplog`.
    """
    settings = None
    if level is None or redact_logs is None:
        settings = _settings_or_defaults()

    if level is None:
        level = getattr(logging, settings.log_level, logging.INFO)
    elif isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if redact_logs is None:
        redact_logs = settings.redact_logs

    lg = logging.getLogger(name)
    lg.setLevel(level)
    if propagate is None:
        env_override = os.getenv("ACTIONS_CORE_LOG_PROPAGATE", "").strip().lower()
        propagate = env_override in {"1", "true", "yes", "on"}
    # Nei test intercettiamo i log via caplog (attaccato al root).
    if not propagate and (os.getenv("PYTEST_CURRENT_TEST") or "pytest" in sys.modules):
        propagate = True
    lg.propagate = propagate

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    ctx_filter = _ContextFilter(_ctx_view_from(env))
    redact_filter = _RedactFilter(bool(redact_logs))
    event_filter = _EventDefaultFilter()
    _set_logger_filter(lg, ctx_filter, f"{name}::ctx_filter")
    _set_logger_filter(lg, redact_filter, f"{name}::redact_filter")
    _set_logger_filter(lg, event_filter, f"{name}::event_filter")

    key_console = f"{name}::console"
    _ensure_no_duplicate_handlers(lg, key_console)
    ch = _make_console_handler(level, fmt)
    ch._logging_utils_key = key_console  # type: ignore[attr-defined]
    lg.addHandler(ch)
    return lg
