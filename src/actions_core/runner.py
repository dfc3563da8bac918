# SPDX-License-Identifier: GPL-3.0-or-later
# src/actions_core/runner.py
from __future__ import annotations

import sys
from typing import Callable, NoReturn

from actions_core.exceptions import ActionsError, exit_code_for
from actions_core.logging_utils import get_structured_logger

ActionMainFn = Callable[[], int | None]

_LOGGER = get_structured_logger("actions_core.runner")


def run_action(entry_name: str, main_fn: ActionMainFn) -> NoReturn:
    """Wrapper condiviso per l'entrypoint di una action one-shot.

    - Esegue `main_fn` senza argomenti (gli input arrivano dall'ambiente).
    - Accetta un return value opzionale `int` da `main_fn` per exit code custom.
    - Converte gli `ActionsError` in exit code coerenti tramite `exit_code_for` (fail-fast).
    - Gestisce `KeyboardInterrupt` restituendo 130 (Ctrl+C).
    """

    try:
        result = main_fn()
    except KeyboardInterrupt:
        sys.exit(130)
    except ActionsError as exc:
        _LOGGER.error(
            "action.failed: %s",
            exc,
            extra={"event": "action.failed", "action": entry_name, "input": exc.input_name, "env_key": exc.env_key},
        )
        sys.exit(exit_code_for(exc))

    if isinstance(result, int):
        sys.exit(result)

    sys.exit(0)


__all__ = ["run_action", "ActionMainFn"]
