# SPDX-License-Identifier: GPL-3.0-or-later

from actions_core.env_utils import get_input, get_optional_input, input_env_key, load_env_file, require_env_var
from actions_core.exceptions import (
    ActionsError,
    ConfigError,
    EnvVarError,
    InputError,
    InputParseError,
    MissingRequiredInput,
)
from actions_core.outputs import set_output
from actions_core.runner import run_action
from actions_core.scalars import ScalarKind

__all__ = [
    "get_input",
    "get_optional_input",
    "input_env_key",
    "load_env_file",
    "require_env_var",
    "set_output",
    "run_action",
    "ScalarKind",
    "ActionsError",
    "InputError",
    "MissingRequiredInput",
    "InputParseError",
    "EnvVarError",
    "ConfigError",
]
