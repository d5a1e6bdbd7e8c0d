# src/backend/schemas/menu_ids.py
"""
Submitted menu identifiers.

The menu editor sends either the real id of a persisted row (number or
numeric string) or a temporary token such as "menu-1712345" for rows it
created locally. The raw value is classified once, when the request body
is parsed.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class ExistingId:
    value: int
    token: str


@dataclass(frozen=True)
class NewPlaceholder:
    token: str


@dataclass(frozen=True)
class MissingId:
    pass


MenuIdent = Union[ExistingId, NewPlaceholder, MissingId]

MISSING = MissingId()


def _from_int(value: int, token: str) -> MenuIdent:
    if _INT64_MIN <= value <= _INT64_MAX:
        return ExistingId(value=value, token=token)
    return NewPlaceholder(token=token)


def parse_menu_ident(raw: Any) -> MenuIdent:
    """
    Classify a submitted id.

    - None, "" and booleans -> MissingId
    - ints, integral floats and strings of ASCII digits (optionally signed)
      within signed 64-bit range -> ExistingId
    - any other string or number -> NewPlaceholder
    """
    if raw is None or isinstance(raw, bool):
        return MISSING
    if isinstance(raw, int):
        return _from_int(raw, str(raw))
    if isinstance(raw, float):
        if raw.is_integer():
            as_int = int(raw)
            return _from_int(as_int, str(as_int))
        return NewPlaceholder(token=repr(raw))
    if isinstance(raw, str):
        if raw == "":
            return MISSING
        if _INT_RE.fullmatch(raw):
            return _from_int(int(raw), raw)
        return NewPlaceholder(token=raw)
    raise TypeError(f"unsupported menu id type: {type(raw).__name__}")
