# SPDX-License-Identifier: GPL-3.0-or-later
# src/actions_core/exceptions.py
from __future__ import annotations

from typing import Any, Optional

"""
Eccezioni SSoT per actions-core.

Ruoli principali:
- `ActionsError`: base per tutti gli errori del layer input/output.
- `InputError`: base per errori legati a un singolo input logico
  (`MissingRequiredInput`, `InputParseError`).
- `EnvVarError`: variabili d'ambiente globali dell'host (es. GITHUB_REPOSITORY),
  separate dagli errori per-input.
- `ConfigError`: file di impostazioni non valido.
- `EXIT_CODES` + `exit_code_for`: tabella centralizzata per il runner.

Linee guida:
- Nessuna eccezione fa I/O o termina il processo.
- Nessun retry, nessun default di ripiego: ogni errore è terminale per il chiamante.
- I messaggi includono contesto "safe" in __str__ (nome input, chiave env), mai il valore grezzo.
"""

# ---------------------------------------------------------------------------
# Basi
# ---------------------------------------------------------------------------


class ActionsError(Exception):
    """Eccezione base del layer di coercizione input/output.

    Accetta un messaggio e un payload contestuale opzionale (nome input, chiave env)
    utile per logging strutturato e diagnosi.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        input_name: Optional[str] = None,
        env_key: Optional[str] = None,
        **_: Any,
    ) -> None:
        super().__init__(message or "")
        self.input_name: Optional[str] = input_name
        self.env_key: Optional[str] = env_key

    def __str__(self) -> str:
        base_msg = super().__str__() or self.__class__.__name__
        context_parts: list[str] = []
        if self.input_name:
            context_parts.append(f"input={self.input_name}")
        if self.env_key:
            context_parts.append(f"env={self.env_key}")
        context_info = f" [{' | '.join(context_parts)}]" if context_parts else ""
        return f"{base_msg}{context_info}"


# ---------------------------------------------------------------------------
# Errori per-input
# ---------------------------------------------------------------------------


class InputError(ActionsError):
    """Errore relativo a un input logico specifico."""

    pass


class MissingRequiredInput(InputError):
    """Input obbligatorio assente o vuoto dopo il trim."""

    def __init__(self, name: str, *, env_key: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(f"required input '{name}' is missing", input_name=name, env_key=env_key, **kwargs)


class InputParseError(InputError, ValueError):
    """Valore presente ma non convertibile nel tipo richiesto (o non testo valido)."""

    pass


# ---------------------------------------------------------------------------
# Errori d'ambiente e configurazione
# ---------------------------------------------------------------------------


class EnvVarError(ActionsError):
    """Variabile d'ambiente globale dell'host mancante o non leggibile."""

    pass


class ConfigError(ActionsError):
    """Errore di caricamento o validazione delle impostazioni."""

    pass


# ---------------------------------------------------------------------------
# Exit codes centralizzati (nessun side-effect)
# ---------------------------------------------------------------------------

EXIT_CODES = {
    "ActionsError": 1,
    "ConfigError": 2,
    "InputError": 10,
    "MissingRequiredInput": 11,
    "InputParseError": 12,
    "EnvVarError": 20,
}

# scrittura sul canale dei risultati fallita (EX_IOERR)
EXIT_OUTPUT_WRITE = 74


def exit_code_for(exc: BaseException) -> int:
    """Restituisce il codice di uscita per un'eccezione (fallback ad ActionsError=1)."""
    return EXIT_CODES.get(type(exc).__name__, EXIT_CODES["ActionsError"])


__all__ = [
    "ActionsError",
    "InputError",
    "MissingRequiredInput",
    "InputParseError",
    "EnvVarError",
    "ConfigError",
    "EXIT_CODES",
    "EXIT_OUTPUT_WRITE",
    "exit_code_for",
]
