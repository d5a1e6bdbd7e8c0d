"""Tests for the default menu seeder."""

import json

from sqlalchemy import select

from src.backend.models.menu import Menu
from src.backend.seeders.menu_seeder import ALL_ROLES, seed_menus


class TestSeedMenus:
    async def test_seeds_fixed_header_anchors(self, db):
        created = await seed_menus(db)

        rows = (await db.execute(select(Menu).order_by(Menu.order))).scalars().all()
        assert created == 4
        assert [r.label for r in rows] == ["Beranda", "Berita", "Agenda", "Direktori"]
        assert all(r.is_fixed and r.position == "header" and r.parent_id is None for r in rows)
        assert json.loads(rows[0].roles) == ALL_ROLES

    async def test_skips_non_empty_table(self, db, add_menu):
        await add_menu("Existing")
        assert await seed_menus(db) == 0
