# src/backend/routes/menus_api.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.backend.crud.menu import (
    delete_menu_tree,
    get_active_menu_trees,
    get_menu_by_id,
    get_menu_tree,
    menu_row_to_dict,
    save_menu_tree,
    update_menu,
    validate_position,
)
from src.backend.schemas.menu import MenuOut, MenuUpdate, SaveMenusRequest
from src.backend.schemas.menu_ids import ExistingId, parse_menu_ident
from src.backend.utils.auth import require_menu_admin
from src.backend.utils.database import get_db
from src.backend.utils.errors import MenuNotFoundError, MenuValidationError
from src.backend.utils.menu_cache import get_cached_menu_tree, invalidate_position_cache
from src.backend.utils.response import success

router = APIRouter(prefix="/menus", tags=["Menus"])


def _parse_menu_id(raw: str) -> int:
    ident = parse_menu_ident(raw)
    if not isinstance(ident, ExistingId):
        raise MenuValidationError("Invalid menu ID", error="invalid_id")
    return ident.value


def _tree_out(tree):
    return [MenuOut.model_validate(node) for node in tree]


# -----------------------
# Reads (public)
# -----------------------
@router.get("")
async def get_menus_by_position(
    position: str = Query("header"),
    db: AsyncSession = Depends(get_db),
):
    position = validate_position(position)
    tree = await get_cached_menu_tree(db, position)
    return success("Menus retrieved successfully", _tree_out(tree))


@router.get("/all")
async def get_all_active_menus(db: AsyncSession = Depends(get_db)):
    trees = await get_active_menu_trees(db)
    return success(
        "Menus retrieved successfully",
        {position: _tree_out(tree) for position, tree in trees.items()},
    )


@router.get("/{menu_id}")
async def get_menu(menu_id: str, db: AsyncSession = Depends(get_db)):
    row = await get_menu_by_id(db, _parse_menu_id(menu_id))
    if not row:
        raise MenuNotFoundError("Menu not found")
    return success("Menu retrieved successfully", MenuOut.model_validate(menu_row_to_dict(row)))


# -----------------------
# Writes (admin token)
# -----------------------
@router.post("", dependencies=[Depends(require_menu_admin)])
async def save_menus(payload: SaveMenusRequest, db: AsyncSession = Depends(get_db)):
    result = await save_menu_tree(db, payload.position, payload.menus)
    invalidate_position_cache(result.position)

    # read back from the table, not the cache: the response must show this save
    tree = await get_menu_tree(db, result.position)
    return success("Menus saved successfully", _tree_out(tree))


@router.put("/{menu_id}", dependencies=[Depends(require_menu_admin)])
async def update_single_menu(menu_id: str, payload: MenuUpdate, db: AsyncSession = Depends(get_db)):
    row = await update_menu(db, _parse_menu_id(menu_id), payload)
    invalidate_position_cache(row.position)
    return success("Menu updated successfully", MenuOut.model_validate(menu_row_to_dict(row)))


@router.delete("/{menu_id}", dependencies=[Depends(require_menu_admin)])
async def delete_menu(menu_id: str, db: AsyncSession = Depends(get_db)):
    mid = _parse_menu_id(menu_id)
    row = await get_menu_by_id(db, mid)
    position = row.position if row else None

    removed = await delete_menu_tree(db, mid)
    if position:
        invalidate_position_cache(position)
    return success("Menu deleted successfully", {"id": mid, "deleted": removed})
