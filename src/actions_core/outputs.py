# SPDX-License-Identifier: GPL-3.0-or-later
# src/actions_core/outputs.py
"""Report dei risultati verso l'host tramite il protocollo a righe ``::set-output``."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from actions_core.exceptions import EXIT_OUTPUT_WRITE
from actions_core.logging_utils import get_structured_logger
from actions_core.scalars import ScalarKind, ScalarValue, format_scalar, infer_kind

__all__ = ["format_output_value", "format_output_line", "set_output"]

_LOGGER = get_structured_logger("actions_core.outputs")


def format_output_value(value: Optional[ScalarValue], kind: ScalarKind | str | None = None) -> str:
    """Formatta il valore; se ``kind`` non è indicato viene dedotto, ``None`` diventa vuoto.

    Un valore che contiene ``\\r`` o ``\\n`` spezzerebbe la riga di protocollo:
    solleva ``ValueError`` (errore di programmazione del chiamante).
    """
    resolved = ScalarKind.coerce(kind) if kind is not None else infer_kind(value)
    if resolved is None:
        return ""
    formatted = format_scalar(resolved, value)
    if "\n" in formatted or "\r" in formatted:
        raise ValueError("Il valore di output deve stare su una sola riga")
    return formatted


def format_output_line(name: str, value: Optional[ScalarValue], kind: ScalarKind | str | None = None) -> str:
    """Riga di protocollo (senza newline) per l'output ``name``."""
    return f"::set-output name={name}::{format_output_value(value, kind)}"


def set_output(
    name: str,
    value: Optional[ScalarValue],
    kind: ScalarKind | str | None = None,
    *,
    stream: Optional[TextIO] = None,
) -> None:
    """Scrive una riga di output sul canale dei risultati (default: stdout).

    Una scrittura fallita è fatale: il processo termina con ``EXIT_OUTPUT_WRITE``,
    l'host non deve mai perdere un risultato in silenzio.
    """
    formatted = format_output_value(value, kind)
    out = stream if stream is not None else sys.stdout
    try:
        out.write(f"::set-output name={name}::{formatted}\n")
        out.flush()
    except (OSError, ValueError) as exc:
        _LOGGER.critical(
            "output.write_failed",
            extra={"event": "output.write_failed", "output": name},
            exc_info=exc,
        )
        raise SystemExit(EXIT_OUTPUT_WRITE) from exc
    _LOGGER.debug("output.set", extra={"event": "output.set", "output": name, "value": formatted})
