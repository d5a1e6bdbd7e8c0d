# src/backend/schemas/menu.py
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from src.backend.schemas.menu_ids import MISSING, MenuIdent, parse_menu_ident


def _coerce_roles(v: Any) -> Any:
    """Roles arrive as a JSON array or as a string holding a JSON array."""
    if v is None:
        return []
    if isinstance(v, str):
        try:
            v = json.loads(v)
        except ValueError:
            raise ValueError("roles must be a JSON array of strings")
    return v


class _CamelModel(BaseModel):
    # UI sends camelCase (isActive, parentId); snake_case is accepted too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class MenuInput(_CamelModel):
    """One node of a submitted menu tree."""

    id: Any = None
    label: str = ""
    slug: str = ""
    to: str = ""
    icon: str = ""
    parent_id: Any = None            # client-side bookkeeping only; the tree shape wins
    position: Optional[str] = None
    order: int = 0
    is_active: bool = True
    is_fixed: bool = False
    is_dynamic: bool = False
    roles: List[str] = []
    children: List["MenuInput"] = []

    _ident: MenuIdent = PrivateAttr(default=MISSING)

    @field_validator("id", mode="before")
    @classmethod
    def check_id_type(cls, v: Any):
        if v is not None and not isinstance(v, (bool, int, float, str)):
            raise ValueError("id must be a number, a string or null")
        return v

    @field_validator("roles", mode="before")
    @classmethod
    def flexible_roles(cls, v: Any):
        return _coerce_roles(v)

    @field_validator("children", mode="before")
    @classmethod
    def none_children(cls, v: Any):
        return [] if v is None else v

    @field_validator("label", "slug", "to", "icon", "order", "is_active", "is_fixed", "is_dynamic", mode="before")
    @classmethod
    def none_to_default(cls, v: Any, info: ValidationInfo):
        # editors send null for empty fields; treat it as "not given"
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    def model_post_init(self, __context: Any) -> None:
        self._ident = parse_menu_ident(self.id)

    @property
    def ident(self) -> MenuIdent:
        return self._ident


class SaveMenusRequest(BaseModel):
    position: str
    menus: List[MenuInput]


class MenuUpdate(_CamelModel):
    """Non-structural fields of a single menu; unset fields are left alone."""

    label: Optional[str] = None
    slug: Optional[str] = None
    to: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None
    roles: Optional[List[str]] = None

    @field_validator("roles", mode="before")
    @classmethod
    def flexible_roles(cls, v: Any):
        return None if v is None else _coerce_roles(v)


class MenuOut(BaseModel):
    id: int
    label: str
    slug: Optional[str] = None
    to: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[int] = None
    position: str
    order: int = 0
    is_active: bool = True
    is_fixed: bool = False
    roles: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    children: List["MenuOut"] = []

    model_config = ConfigDict(from_attributes=True)
