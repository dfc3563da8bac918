# SPDX-License-Identifier: GPL-3.0-or-later
# src/actions_core/scalars.py
"""Codec scalari per input/output delle action.

L'host espone gli input solo come stringhe: qui vive la conversione stringa <-> tipo
per l'insieme chiuso di tipi scalari supportati.

Indice (ruolo):
- `ScalarKind`: enumerazione esplicita dei tipi supportati
  (text, bool, i32, u32, i64, u64). Non è estendibile dai chiamanti.
- `ScalarCodec`: coppia parse/format per un tipo; `CODECS` è il registry read-only.
- `optional(codec)`: unico adattatore che deriva "T opzionale" da "T".
- `parse_scalar`, `format_scalar`, `infer_kind`: scorciatoie sul registry.

Note:
- Il parse booleano non fa trim e mappa `""` a False: la policy di assenza
  (required/optional) è applicata a monte dal resolver su input diversi.
- Il format booleano normalizza sempre a `"true"`/`"false"` (anche per input
  `"1"`, `"yes"`, `"no"`): normalizzazione one-way, mantenuta identica.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar, Union

from actions_core.exceptions import InputParseError

__all__ = [
    "ScalarKind",
    "ScalarValue",
    "ScalarCodec",
    "OptionalCodec",
    "CODECS",
    "get_codec",
    "optional",
    "parse_scalar",
    "format_scalar",
    "infer_kind",
]

ScalarValue = Union[str, bool, int]
T = TypeVar("T")

_TRUE_SPELLINGS = frozenset({"true", "1", "yes"})
_FALSE_SPELLINGS = frozenset({"false", "0", "no", ""})
_INT_RE = re.compile(r"[+-]?[0-9]+")


class ScalarKind(str, Enum):
    TEXT = "text"
    BOOL = "bool"
    I32 = "i32"
    U32 = "u32"
    I64 = "i64"
    U64 = "u64"

    @classmethod
    def coerce(cls, kind: "ScalarKind | str") -> "ScalarKind":
        """Accetta un membro o il suo valore stringa (case-insensitive)."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).strip().lower())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Tipo scalare non supportato: {kind!r} (ammessi: {allowed})") from None

    @property
    def is_integer(self) -> bool:
        return self in _INT_BOUNDS


# range inclusivi, come gli interi a larghezza fissa dell'host
_INT_BOUNDS: dict[ScalarKind, tuple[int, int]] = {
    ScalarKind.I32: (-(2**31), 2**31 - 1),
    ScalarKind.U32: (0, 2**32 - 1),
    ScalarKind.I64: (-(2**63), 2**63 - 1),
    ScalarKind.U64: (0, 2**64 - 1),
}


@dataclass(frozen=True)
class ScalarCodec(Generic[T]):
    """Coppia parse/format per un singolo tipo scalare."""

    kind: ScalarKind
    parse: Callable[[str], T]
    format: Callable[[T], str]


@dataclass(frozen=True)
class OptionalCodec(Generic[T]):
    """Versione "opzionale" di un codec: stringa vuota <-> assente (`None`)."""

    inner: ScalarCodec[T]

    @property
    def kind(self) -> ScalarKind:
        return self.inner.kind

    def parse(self, raw: str) -> Optional[T]:
        if raw == "":
            return None
        return self.inner.parse(raw)

    def format(self, value: Optional[T]) -> str:
        if value is None:
            return ""
        return self.inner.format(value)


def optional(codec: ScalarCodec[T]) -> OptionalCodec[T]:
    """Deriva il codec opzionale da quello del tipo base (unico punto di derivazione)."""
    return OptionalCodec(codec)


# ---------------------------------------------
# Parser / formatter per tipo
# ---------------------------------------------
def _parse_text(raw: str) -> str:
    return raw


def _format_text(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Valore non testuale per text: {type(value).__name__}")
    return value


def _parse_bool(raw: str) -> bool:
    normalized = raw.lower()
    if normalized in _TRUE_SPELLINGS:
        return True
    if normalized in _FALSE_SPELLINGS:
        return False
    raise InputParseError(f"Cannot parse '{raw}' as bool")


def _format_bool(value: bool) -> str:
    if not isinstance(value, bool):
        raise TypeError(f"Valore non booleano per bool: {type(value).__name__}")
    return "true" if value else "false"


def _int_parser(kind: ScalarKind) -> Callable[[str], int]:
    lower, upper = _INT_BOUNDS[kind]

    def _parse(raw: str) -> int:
        if raw == "":
            raise InputParseError("cannot parse integer from empty string")
        # solo cifre ASCII con segno opzionale: niente spazi, '_' o cifre Unicode
        if _INT_RE.fullmatch(raw) is None:
            raise InputParseError("invalid digit found in string")
        value = int(raw, 10)
        if value > upper:
            raise InputParseError(f"number too large to fit in target type ({kind.value})")
        if value < lower:
            raise InputParseError(f"number too small to fit in target type ({kind.value})")
        return value

    _parse.__name__ = f"_parse_{kind.value}"
    return _parse


def _int_formatter(kind: ScalarKind) -> Callable[[int], str]:
    lower, upper = _INT_BOUNDS[kind]

    def _format(value: int) -> str:
        # bool è sottoclasse di int ma non è un intero valido qui
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Valore non intero per {kind.value}: {type(value).__name__}")
        if not lower <= value <= upper:
            raise ValueError(f"Intero fuori intervallo per {kind.value}: {value}")
        return str(value)

    _format.__name__ = f"_format_{kind.value}"
    return _format


def _build_registry() -> Mapping[ScalarKind, ScalarCodec[Any]]:
    codecs: dict[ScalarKind, ScalarCodec[Any]] = {
        ScalarKind.TEXT: ScalarCodec(ScalarKind.TEXT, _parse_text, _format_text),
        ScalarKind.BOOL: ScalarCodec(ScalarKind.BOOL, _parse_bool, _format_bool),
    }
    for kind in _INT_BOUNDS:
        codecs[kind] = ScalarCodec(kind, _int_parser(kind), _int_formatter(kind))
    return MappingProxyType(codecs)


CODECS: Mapping[ScalarKind, ScalarCodec[Any]] = _build_registry()


def get_codec(kind: ScalarKind | str) -> ScalarCodec[Any]:
    return CODECS[ScalarKind.coerce(kind)]


def parse_scalar(kind: ScalarKind | str, raw: str) -> ScalarValue:
    """Converte `raw` nel tipo `kind`; solleva `InputParseError` se non valido."""
    return get_codec(kind).parse(raw)


def format_scalar(kind: ScalarKind | str, value: Optional[ScalarValue]) -> str:
    """Formatta un valore tipizzato; `None` (opzionale assente) diventa stringa vuota."""
    return optional(get_codec(kind)).format(value)


def infer_kind(value: Any) -> Optional[ScalarKind]:
    """Deduce il tipo scalare di un valore Python (None = opzionale assente).

    Solleva `TypeError` per tipi non scalari e `ValueError` per interi che non
    rientrano in nessun tipo supportato: sono errori di programmazione, non di input.
    """
    if value is None:
        return None
    # bool prima di int: bool è sottoclasse di int
    if isinstance(value, bool):
        return ScalarKind.BOOL
    if isinstance(value, int):
        for kind in (ScalarKind.I64, ScalarKind.U64):
            lower, upper = _INT_BOUNDS[kind]
            if lower <= value <= upper:
                return kind
        raise ValueError(f"Intero fuori dai tipi supportati: {value}")
    if isinstance(value, str):
        return ScalarKind.TEXT
    raise TypeError(f"Tipo non scalare non supportato: {type(value).__name__}")
