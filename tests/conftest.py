from __future__ import annotations

# SPDX-License-Identifier: GPL-3.0-or-later
# tests/conftest.py
import os
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
for candidate in (REPO_ROOT, SRC_ROOT):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from actions_core.settings import reset_settings_cache

# variabili che alterano impostazioni/log: i test partono sempre da un ambiente neutro
_CONFIG_ENV_VARS = (
    "ACTIONS_CORE_CONFIG",
    "ACTIONS_CORE_LOG_LEVEL",
    "RUNNER_DEBUG",
    "ACTIONS_STEP_DEBUG",
)


@pytest.fixture(autouse=True)
def _isolated_action_env(monkeypatch: pytest.MonkeyPatch):
    """Rimuove INPUT_* e la configurazione del runner, e azzera la cache delle impostazioni."""
    for key in list(os.environ):
        if key.startswith("INPUT_"):
            monkeypatch.delenv(key, raising=False)
    for key in _CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()
