# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import pytest

hypothesis = pytest.importorskip("hypothesis")
strategies = pytest.importorskip("hypothesis.strategies")
given = hypothesis.given
settings = hypothesis.settings
HealthCheck = hypothesis.HealthCheck
st = strategies

from actions_core.env_utils import get_input, input_env_key
from actions_core.exceptions import MissingRequiredInput
from actions_core.scalars import ScalarKind, format_scalar, parse_scalar

# il conftest autouse è function-scoped ma non tocca lo stato usato qui (env e prefix espliciti)
_SETTINGS = settings(suppress_health_check=[HealthCheck.function_scoped_fixture])

_BOUNDS = {
    ScalarKind.I32: (-(2**31), 2**31 - 1),
    ScalarKind.U32: (0, 2**32 - 1),
    ScalarKind.I64: (-(2**63), 2**63 - 1),
    ScalarKind.U64: (0, 2**64 - 1),
}

_int_values = st.sampled_from(sorted(_BOUNDS, key=lambda k: k.value)).flatmap(
    lambda kind: st.tuples(st.just(kind), st.integers(min_value=_BOUNDS[kind][0], max_value=_BOUNDS[kind][1]))
)
_bool_spellings = st.sampled_from(["true", "1", "yes", "false", "0", "no", ""]).flatmap(
    lambda s: st.sampled_from([s, s.upper(), s.capitalize()])
)
_names = st.from_regex(r"[A-Za-z0-9][A-Za-z0-9-]{0,24}", fullmatch=True)
_blanks = st.text(alphabet=" \t\r\n", max_size=5)


@_SETTINGS
@given(_int_values)
def test_integer_round_trip(kind_and_value: tuple[ScalarKind, int]) -> None:
    kind, value = kind_and_value
    assert parse_scalar(kind, format_scalar(kind, value)) == value


@_SETTINGS
@given(st.booleans())
def test_bool_round_trip(value: bool) -> None:
    assert parse_scalar(ScalarKind.BOOL, format_scalar(ScalarKind.BOOL, value)) is value


@_SETTINGS
@given(_bool_spellings)
def test_bool_idempotent_after_one_normalization(raw: str) -> None:
    parsed = parse_scalar(ScalarKind.BOOL, raw)
    assert parse_scalar(ScalarKind.BOOL, format_scalar(ScalarKind.BOOL, parsed)) == parsed


@_SETTINGS
@given(st.text())
def test_text_round_trip(value: str) -> None:
    assert parse_scalar(ScalarKind.TEXT, format_scalar(ScalarKind.TEXT, value)) == value


@_SETTINGS
@given(_names)
def test_env_key_derivation(name: str) -> None:
    key = input_env_key(name, prefix="INPUT_")
    assert key == "INPUT_" + name.upper().replace("-", "_")
    assert "-" not in key


@_SETTINGS
@given(_names, st.sampled_from(list(ScalarKind)), st.one_of(st.none(), _blanks))
def test_absent_or_blank_for_any_name(name: str, kind: ScalarKind, raw: str | None) -> None:
    key = input_env_key(name, prefix="INPUT_")
    env = {} if raw is None else {key: raw}
    with pytest.raises(MissingRequiredInput) as exc:
        get_input(name, kind, env=env, prefix="INPUT_")
    assert exc.value.input_name == name
    assert get_input(name, kind, required=False, env=env, prefix="INPUT_") is None


@_SETTINGS
@given(_names, _int_values)
def test_present_integer_resolves_for_any_name(name: str, kind_and_value: tuple[ScalarKind, int]) -> None:
    kind, value = kind_and_value
    env = {input_env_key(name, prefix="INPUT_"): str(value)}
    assert get_input(name, kind, env=env, prefix="INPUT_") == value
    assert get_input(name, kind, required=False, env=env, prefix="INPUT_") == value
