# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import os
from pathlib import Path

import pytest

from actions_core.env_utils import get_input, get_optional_input, load_env_file, require_env_var
from actions_core.exceptions import ConfigError, EnvVarError, InputError


def test_require_env_var_returns_raw_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo-org/octo-repo")
    assert require_env_var("GITHUB_REPOSITORY") == "octo-org/octo-repo"
    assert require_env_var("GITHUB_SHA", env={"GITHUB_SHA": " abc "}) == " abc "


def test_require_env_var_missing_is_env_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
    with pytest.raises(EnvVarError) as exc:
        require_env_var("GITHUB_REPOSITORY")
    assert exc.value.env_key == "GITHUB_REPOSITORY"
    assert not isinstance(exc.value, InputError)


def test_require_env_var_invalid_text_is_env_error() -> None:
    with pytest.raises(EnvVarError, match="not valid unicode"):
        require_env_var("GITHUB_REPOSITORY", env={"GITHUB_REPOSITORY": b"\xc3\x28"})


def test_load_env_file_feeds_inputs_without_touching_environ(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "\n".join(
            [
                "# dry run locale",
                "INPUT_NUMBER=42",
                'INPUT_BODY="Hello from a dry run"',
                "INPUT_NOTIFY=yes",
                "INPUT_LABEL",
                "GITHUB_REPOSITORY=octo-org/octo-repo",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    before = dict(os.environ)

    env = load_env_file(env_file)

    assert dict(os.environ) == before
    assert "INPUT_LABEL" not in env
    assert get_input("number", "u64", env=env) == 42
    assert get_input("body", env=env) == "Hello from a dry run"
    assert get_input("notify", "bool", env=env) is True
    assert get_optional_input("label", env=env) is None
    assert require_env_var("GITHUB_REPOSITORY", env=env) == "octo-org/octo-repo"


def test_load_env_file_missing_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="non trovato"):
        load_env_file(tmp_path / "missing.env")
