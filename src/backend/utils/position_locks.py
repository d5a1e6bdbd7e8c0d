# src/backend/utils/position_locks.py
from __future__ import annotations

import asyncio
from typing import Dict, Optional

# position -> asyncio.Lock
_POSITION_LOCKS: Dict[str, asyncio.Lock] = {}
_LOCKS_GUARD: Optional[asyncio.Lock] = None


async def get_position_lock(position: str) -> asyncio.Lock:
    """One lock per menu position; serializes writers of the same forest in this process."""
    global _LOCKS_GUARD
    if _LOCKS_GUARD is None:
        _LOCKS_GUARD = asyncio.Lock()
    async with _LOCKS_GUARD:
        lock = _POSITION_LOCKS.get(position)
        if lock is None:
            lock = asyncio.Lock()
            _POSITION_LOCKS[position] = lock
        return lock


def reset_position_locks() -> None:
    """Forget every lock, the guard included (locks bind to the loop that first waits on them)."""
    global _LOCKS_GUARD
    _POSITION_LOCKS.clear()
    _LOCKS_GUARD = None
