# src/backend/seeders/menu_seeder.py
from __future__ import annotations

import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.backend.crud.menu import count_menus
from src.backend.models.menu import Menu

logger = logging.getLogger(__name__)

ALL_ROLES = ["public", "member", "admin_cabang", "admin_wilayah", "admin_pusat"]

# Fixed header anchors every deployment starts with
DEFAULT_MENUS = [
    {"label": "Beranda", "slug": "beranda", "to": "/", "icon": "i-lucide-home", "order": 1},
    {"label": "Berita", "slug": "berita", "to": "/berita", "icon": "i-lucide-newspaper", "order": 3},
    {"label": "Agenda", "slug": "agenda", "to": "/agenda", "icon": "i-lucide-calendar", "order": 4},
    {"label": "Direktori", "slug": "direktori", "to": "/direktori", "icon": "i-lucide-map-pin", "order": 5},
]


async def seed_menus(db: AsyncSession) -> int:
    """Insert the default fixed menus when the table is empty. Returns rows created."""
    if await count_menus(db) > 0:
        logger.info("Menus already exist, skipping seed")
        return 0

    roles = json.dumps(ALL_ROLES)
    for item in DEFAULT_MENUS:
        db.add(
            Menu(
                position="header",
                parent_id=None,
                is_active=True,
                is_fixed=True,
                roles=roles,
                **item,
            )
        )
        logger.info("Created menu: %s (order: %d, position: header)", item["label"], item["order"])

    await db.commit()
    return len(DEFAULT_MENUS)
