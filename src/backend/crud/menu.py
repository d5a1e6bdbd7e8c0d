# src/backend/crud/menu.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.backend.models.menu import Menu
from src.backend.schemas.menu import MenuInput, MenuUpdate
from src.backend.schemas.menu_ids import ExistingId, NewPlaceholder
from src.backend.utils.errors import (
    FixedMenuError,
    MenuNotFoundError,
    MenuStoreError,
    MenuValidationError,
)
from src.backend.utils.position_locks import get_position_lock
from src.backend.utils.slug import normalize_slug

logger = logging.getLogger(__name__)

VALID_POSITIONS = ("header", "sidebar", "footer")


def validate_position(position: Optional[str]) -> str:
    if position not in VALID_POSITIONS:
        raise MenuValidationError(
            "Invalid position. Must be: header, sidebar, or footer",
            error="invalid_position",
        )
    return position


def decode_roles(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        roles = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed roles value %r", raw)
        return []
    return [str(r) for r in roles] if isinstance(roles, list) else []


def menu_row_to_dict(m: Menu) -> Dict[str, Any]:
    return {
        "id": m.id,
        "label": m.label,
        "slug": m.slug,
        "to": m.to,
        "icon": m.icon,
        "parent_id": m.parent_id,
        "position": m.position,
        "order": int(m.order or 0),
        "is_active": bool(m.is_active),
        "is_fixed": bool(m.is_fixed),
        "roles": decode_roles(m.roles),
        "created_at": m.created_at,
        "updated_at": m.updated_at,
        "children": [],
    }


# ---------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------
async def get_menu_by_id(db: AsyncSession, menu_id: int) -> Optional[Menu]:
    res = await db.execute(select(Menu).where(Menu.id == menu_id))
    return res.scalar_one_or_none()


async def list_menus_by_position(db: AsyncSession, position: str) -> List[Menu]:
    stmt = (
        select(Menu)
        .where(Menu.position == position)
        .order_by(Menu.order.asc(), Menu.id.asc())
    )
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def list_active_menus(db: AsyncSession) -> List[Menu]:
    stmt = (
        select(Menu)
        .where(Menu.is_active.is_(True))
        .order_by(Menu.position.asc(), Menu.order.asc(), Menu.id.asc())
    )
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def count_menus(db: AsyncSession) -> int:
    res = await db.execute(select(func.count()).select_from(Menu))
    return int(res.scalar() or 0)


def build_menu_tree(menus: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Nest a flat list of menus (one position) under their parents.

    Sibling order follows input order. A node whose parent_id is not in
    the input is dropped: it is neither a root nor anyone's child.
    """
    by_id: Dict[Any, Dict[str, Any]] = {}
    for m in menus:
        m["children"] = []
        by_id[m["id"]] = m

    for m in menus:
        pid = m.get("parent_id")
        if pid is None:
            continue
        parent = by_id.get(pid)
        if parent is not None:
            parent["children"].append(m)

    # collected after distribution so every root already carries its subtree
    return [m for m in menus if m.get("parent_id") is None]


async def get_menu_tree(db: AsyncSession, position: str) -> List[Dict[str, Any]]:
    rows = await list_menus_by_position(db, position)
    return build_menu_tree([menu_row_to_dict(m) for m in rows])


async def get_active_menu_trees(db: AsyncSession) -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = {p: [] for p in VALID_POSITIONS}
    for m in await list_active_menus(db):
        if m.position in grouped:
            grouped[m.position].append(menu_row_to_dict(m))
    return {p: build_menu_tree(flat) for p, flat in grouped.items()}


# ---------------------------------------------------------------------
# Tree submission
# ---------------------------------------------------------------------
@dataclass
class SaveResult:
    position: str
    id_map: Dict[str, int] = field(default_factory=dict)  # submitted token -> persisted id
    inserted: List[int] = field(default_factory=list)
    skipped: int = 0


async def _insert_menu(db: AsyncSession, node: MenuInput, parent_id: Optional[int], position: str) -> int:
    row = Menu(
        label=node.label,
        slug=node.slug or normalize_slug(node.label),
        to=node.to,
        icon=node.icon,
        parent_id=parent_id,
        position=position,
        order=node.order,
        is_active=node.is_active,
        is_fixed=False,
        roles=json.dumps(list(node.roles)),
    )
    db.add(row)
    await db.flush()
    logger.debug("Inserted menu id=%s label=%r parent_id=%s position=%s", row.id, row.label, parent_id, position)
    return int(row.id)


async def _save_menus_recursive(
    db: AsyncSession,
    nodes: Sequence[MenuInput],
    parent_id: Optional[int],
    result: SaveResult,
) -> None:
    for node in nodes:
        ident = node.ident

        # Fixed menus are anchors: never written, only their children are.
        if node.is_fixed:
            child_parent: Optional[int] = None
            if isinstance(ident, ExistingId):
                result.id_map[ident.token] = ident.value
                child_parent = ident.value
            result.skipped += 1
            await _save_menus_recursive(db, node.children, child_parent, result)
            continue

        if isinstance(ident, ExistingId):
            result.id_map[ident.token] = ident.value
            result.skipped += 1
            await _save_menus_recursive(db, node.children, ident.value, result)
            continue

        # parent comes from the walk, not from the node's own parentId claim
        new_id = await _insert_menu(db, node, parent_id, result.position)
        result.inserted.append(new_id)
        if isinstance(ident, NewPlaceholder):
            result.id_map[ident.token] = new_id
        await _save_menus_recursive(db, node.children, new_id, result)


async def save_menu_tree(db: AsyncSession, position: str, menus: Sequence[MenuInput]) -> SaveResult:
    """
    Persist the new nodes of a submitted tree for one position.

    Existing (numeric id) and fixed nodes are left untouched; nothing absent
    from the submission is removed. All inserts share one transaction.
    """
    position = validate_position(position)
    result = SaveResult(position=position)

    lock = await get_position_lock(position)
    async with lock:
        try:
            await _save_menus_recursive(db, menus, None, result)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("Menu save rolled back for position=%s: %s", position, exc)
            raise MenuStoreError("Failed to save menus", details=str(exc)) from exc
        except Exception:
            await db.rollback()
            raise

    logger.info(
        "Saved menus for position=%s: inserted=%d skipped=%d",
        position,
        len(result.inserted),
        result.skipped,
    )
    return result


# ---------------------------------------------------------------------
# Single-menu update (non-structural fields)
# ---------------------------------------------------------------------
async def update_menu(db: AsyncSession, menu_id: int, data: MenuUpdate) -> Menu:
    row = await get_menu_by_id(db, menu_id)
    if not row:
        raise MenuNotFoundError("Menu not found")
    if row.is_fixed:
        raise FixedMenuError("Cannot modify fixed menu")

    changes = data.model_dump(exclude_unset=True)
    for key, value in changes.items():
        if value is None:
            continue
        if key == "roles":
            value = json.dumps(list(value))
        setattr(row, key, value)

    try:
        await db.commit()
        await db.refresh(row)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise MenuStoreError("Failed to update menu", details=str(exc)) from exc
    return row


# ---------------------------------------------------------------------
# Recursive delete
# ---------------------------------------------------------------------
async def _child_rows(db: AsyncSession, menu_id: int, position: str) -> List[Any]:
    res = await db.execute(
        select(Menu.id, Menu.is_fixed).where(Menu.parent_id == menu_id, Menu.position == position)
    )
    return list(res.all())


async def _find_fixed_descendant(db: AsyncSession, menu_id: int, position: str) -> Optional[int]:
    seen = {menu_id}
    pending = [menu_id]
    while pending:
        current = pending.pop()
        for child_id, is_fixed in await _child_rows(db, current, position):
            if is_fixed:
                return int(child_id)
            if child_id not in seen:
                seen.add(child_id)
                pending.append(child_id)
    return None


async def _delete_menu_and_children(
    db: AsyncSession, menu_id: int, position: str, seen: Optional[set] = None
) -> int:
    seen = set() if seen is None else seen
    seen.add(menu_id)
    removed = 0
    for child_id, _ in await _child_rows(db, menu_id, position):
        if child_id in seen:
            continue
        removed += await _delete_menu_and_children(db, child_id, position, seen)
    await db.execute(delete(Menu).where(Menu.id == menu_id))
    return removed + 1


async def delete_menu_tree(db: AsyncSession, menu_id: int) -> int:
    """
    Delete a menu and its whole subtree (children first). Returns the
    number of rows removed. Fixed menus, and subtrees holding one, are
    refused before anything is deleted.
    """
    row = await get_menu_by_id(db, menu_id)
    if not row:
        raise MenuNotFoundError("Menu not found")
    if row.is_fixed:
        raise FixedMenuError("Cannot delete fixed menu")

    position = row.position
    lock = await get_position_lock(position)
    async with lock:
        try:
            fixed_id = await _find_fixed_descendant(db, menu_id, position)
            if fixed_id is not None:
                raise FixedMenuError(
                    "Cannot delete menu: its subtree contains a fixed menu",
                    details={"fixed_menu_id": fixed_id},
                )
            removed = await _delete_menu_and_children(db, menu_id, position)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise MenuStoreError("Failed to delete menu", details=str(exc)) from exc

    logger.info("Deleted menu id=%s position=%s rows_removed=%d", menu_id, position, removed)
    return removed
