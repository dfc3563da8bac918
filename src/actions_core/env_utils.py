# SPDX-License-Identifier: GPL-3.0-or-later
# src/actions_core/env_utils.py
"""Risoluzione degli input della action dall'ambiente, senza side-effects.

Espone:
- ``input_env_key(name, prefix=None)``: nome logico -> chiave ENV (``INPUT_PULL_NUMBER``).
- ``get_input(name, kind, required=True, env=None)``: lettura tipizzata con policy
  required/optional centralizzata.
- ``get_optional_input(name, kind)``: scorciatoia per ``required=False``.
- ``require_env_var(name, env=None)``: variabili globali dell'host (non prefissate).
- ``load_env_file(path)``: legge un .env in un mapping da passare come ``env=``,
  senza toccare ``os.environ``.

Policy di presenza (unico punto di decisione):
- chiave assente o valore vuoto dopo il trim -> ``MissingRequiredInput`` se required,
  ``None`` se optional; mai un errore di parsing;
- valore non testuale valido (byte non UTF-8) -> ``InputParseError`` in entrambi i casi;
- altrimenti il valore (non trimmato) passa al codec del tipo richiesto.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from actions_core.exceptions import ConfigError, EnvVarError, InputParseError, MissingRequiredInput
from actions_core.logging_utils import get_structured_logger, is_sensitive_name
from actions_core.scalars import ScalarKind, ScalarValue, get_codec, optional
from actions_core.settings import get_settings

__all__ = [
    "input_env_key",
    "get_input",
    "get_optional_input",
    "require_env_var",
    "load_env_file",
]

_LOGGER = get_structured_logger("actions_core.env_utils")

EnvSource = Mapping[str, Union[str, bytes]]


def input_env_key(name: str, prefix: Optional[str] = None) -> str:
    """Deriva la chiave ENV di un input: prefisso + nome in maiuscolo, '-' -> '_'."""
    if prefix is None:
        prefix = get_settings().input_prefix
    return f"{prefix}{name.upper().replace('-', '_')}"


def _as_text(raw: Union[str, bytes]) -> Optional[str]:
    """Ritorna il valore come testo valido, oppure None se non decodificabile.

    ``os.environ`` rappresenta i byte non UTF-8 come surrogati (surrogateescape):
    un ``str`` che non si ricodifica in UTF-8 è quindi un valore non testuale.
    """
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        raw.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return raw


def _absent(name: str, key: str, kind: ScalarKind, required: bool) -> None:
    if required:
        raise MissingRequiredInput(name, env_key=key)
    _LOGGER.debug(
        "input.absent",
        extra={"event": "input.absent", "input": name, "env_key": key, "kind": kind.value, "required": False},
    )
    return None


def get_input(
    name: str,
    kind: ScalarKind | str = ScalarKind.TEXT,
    *,
    required: bool = True,
    env: Optional[EnvSource] = None,
    prefix: Optional[str] = None,
) -> Optional[ScalarValue]:
    """Legge l'input ``name`` e lo converte nel tipo ``kind``.

    - ``required=True``: ritorna sempre un valore o solleva ``MissingRequiredInput``.
    - ``required=False``: ritorna ``None`` se l'input è assente o vuoto.
    - Errori di conversione: ``InputParseError`` con nome input e chiave ENV nel contesto.

    ``env`` permette di usare un mapping diverso da ``os.environ`` (test, dry run locali).
    """
    scalar_kind = ScalarKind.coerce(kind)
    codec = get_codec(scalar_kind)
    parse = codec.parse if required else optional(codec).parse
    key = input_env_key(name, prefix)
    source: EnvSource = env if env is not None else os.environ

    raw = source.get(key)
    if raw is None:
        return _absent(name, key, scalar_kind, required)

    text = _as_text(raw)
    if text is None:
        raise InputParseError(f"input '{name}' is not valid unicode", input_name=name, env_key=key)

    if text.strip() == "":
        return _absent(name, key, scalar_kind, required)

    try:
        value = parse(text)
    except InputParseError as exc:
        if is_sensitive_name(name):
            # il messaggio del parser può contenere il valore grezzo: né messaggio né causa
            raise InputParseError(
                f"input non valido per {scalar_kind.value} (valore redatto)", input_name=name, env_key=key
            ) from None
        raise InputParseError(str(exc), input_name=name, env_key=key) from exc

    _LOGGER.debug(
        "input.resolved",
        extra={
            "event": "input.resolved",
            "input": name,
            "env_key": key,
            "kind": scalar_kind.value,
            "required": required,
            "value": text,
        },
    )
    return value


def get_optional_input(
    name: str,
    kind: ScalarKind | str = ScalarKind.TEXT,
    *,
    env: Optional[EnvSource] = None,
    prefix: Optional[str] = None,
) -> Optional[ScalarValue]:
    return get_input(name, kind, required=False, env=env, prefix=prefix)


def require_env_var(name: str, env: Optional[EnvSource] = None) -> str:
    """Ritorna una variabile globale dell'host così com'è (nessun trim, nessuno split).

    Solleva ``EnvVarError`` se assente o non testuale: errori di ambiente, distinti
    dagli errori per-input.
    """
    source: EnvSource = env if env is not None else os.environ
    raw = source.get(name)
    if raw is None:
        raise EnvVarError("environment variable not found", env_key=name)
    text = _as_text(raw)
    if text is None:
        raise EnvVarError("environment variable was not valid unicode", env_key=name)
    return text


def load_env_file(path: Union[str, Path]) -> dict[str, str]:
    """Legge un file .env (python-dotenv) in un dict, senza modificare ``os.environ``.

    Le chiavi dichiarate senza valore (``KEY`` senza ``=``) sono trattate come assenti.
    """
    env_path = Path(path)
    if not env_path.is_file():
        raise ConfigError(f"File .env non trovato: {env_path}")
    values = dotenv_values(env_path, encoding="utf-8")
    loaded = {key: value for key, value in values.items() if value is not None}
    _LOGGER.debug("env.file_loaded: %d chiavi", len(loaded), extra={"event": "env.file_loaded"})
    return loaded
