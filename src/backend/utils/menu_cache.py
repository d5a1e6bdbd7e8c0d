# src/backend/utils/menu_cache.py
from __future__ import annotations

import asyncio
import copy
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from src.backend.config import settings
from src.backend.crud.menu import get_menu_tree

logger = logging.getLogger(__name__)

# position -> {"epoch": (global, position), "expires": float, "tree": List[dict]}
_CACHE: Dict[str, Dict[str, Any]] = {}

# position -> asyncio.Lock
_FILL_LOCKS: Dict[str, asyncio.Lock] = {}
_LOCKS_GUARD: Optional[asyncio.Lock] = None

# Global "epoch": bump it to force all cache entries stale immediately
_CACHE_EPOCH: int = 1
# position -> epoch; bumped on every write to that position
_POSITION_EPOCHS: Dict[str, int] = {}


def _epoch(position: str) -> Tuple[int, int]:
    return _CACHE_EPOCH, _POSITION_EPOCHS.get(position, 0)


async def _get_fill_lock(position: str) -> asyncio.Lock:
    global _LOCKS_GUARD
    if _LOCKS_GUARD is None:
        _LOCKS_GUARD = asyncio.Lock()
    async with _LOCKS_GUARD:
        lock = _FILL_LOCKS.get(position)
        if lock is None:
            lock = asyncio.Lock()
            _FILL_LOCKS[position] = lock
        return lock


def _cache_get(position: str, now: float) -> Optional[List[Dict[str, Any]]]:
    cached = _CACHE.get(position)
    if not cached:
        return None

    # epoch mismatch => treat as miss
    if cached.get("epoch") != _epoch(position):
        return None

    if float(cached.get("expires", 0)) <= now:
        return None

    return copy.deepcopy(cached["tree"])


def _cache_set(position: str, tree: List[Dict[str, Any]], epoch: Tuple[int, int]) -> None:
    # a write landed while this tree was being read; don't publish it
    if epoch != _epoch(position):
        logger.debug("MENU CACHE DISCARD stale fill position=%s", position)
        return
    ttl = max(1.0, float(settings.MENU_CACHE_TTL_SECONDS))
    _CACHE[position] = {
        "epoch": epoch,
        "expires": time.time() + ttl,
        "tree": tree,
    }


def invalidate_position_cache(position: str) -> None:
    """Drop the cached tree for one position (after a write to that position)."""
    _POSITION_EPOCHS[position] = _POSITION_EPOCHS.get(position, 0) + 1
    _CACHE.pop(position, None)
    logger.debug("MENU CACHE INVALIDATE position=%s epoch=%s", position, _POSITION_EPOCHS[position])


def invalidate_all_menu_cache() -> None:
    """
    Invalidate every position and forget the fill locks.
    Uses epoch bump so entries being filled concurrently are also discarded.
    """
    global _CACHE_EPOCH, _LOCKS_GUARD
    _CACHE_EPOCH += 1
    _CACHE.clear()
    _FILL_LOCKS.clear()
    _LOCKS_GUARD = None
    logger.debug("MENU CACHE INVALIDATE ALL (epoch=%s)", _CACHE_EPOCH)


async def get_cached_menu_tree(db: AsyncSession, position: str) -> List[Dict[str, Any]]:
    """
    Returns the nested menu tree for a position.

    - Cache by position with TTL
    - Stampede-safe per-position lock
    - Fills started before an invalidation are never published
    - Deep-copies returned structures (callers can't mutate shared cache)
    """
    if not settings.MENU_CACHE_ENABLED:
        return await get_menu_tree(db, position)

    cached = _cache_get(position, time.time())
    if cached is not None:
        logger.debug("MENU CACHE HIT position=%s", position)
        return cached

    lock = await _get_fill_lock(position)
    async with lock:
        cached = _cache_get(position, time.time())
        if cached is not None:
            logger.debug("MENU CACHE HIT(after lock) position=%s", position)
            return cached

        logger.debug("MENU CACHE MISS -> DB HIT position=%s", position)
        epoch = _epoch(position)
        tree = await get_menu_tree(db, position)
        _cache_set(position, tree, epoch)
        return copy.deepcopy(tree)
