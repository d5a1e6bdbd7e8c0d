"""Tests for the /api/v1/menus HTTP surface."""

import pytest

from src.backend.config import settings

BASE = f"{settings.API_PREFIX}/menus"


def _labels(nodes):
    return [n["label"] for n in nodes]


@pytest.mark.usefixtures("auth_disabled")
class TestMenusApi:
    async def test_get_empty_position(self, client):
        resp = await client.get(BASE, params={"position": "footer"})
        body = resp.json()

        assert resp.status_code == 200
        assert body == {"success": True, "message": "Menus retrieved successfully", "data": []}

    async def test_get_defaults_to_header(self, client, add_menu):
        await add_menu("Beranda", position="header")
        await add_menu("Bantuan", position="footer")

        resp = await client.get(BASE)

        assert _labels(resp.json()["data"]) == ["Beranda"]

    async def test_get_invalid_position(self, client):
        resp = await client.get(BASE, params={"position": "topbar"})
        body = resp.json()

        assert resp.status_code == 400
        assert body["success"] is False
        assert body["error"] == "invalid_position"
        assert "message" in body and "details" in body

    async def test_save_then_read_back_tree(self, client, add_menu):
        anchor = await add_menu("Beranda", is_fixed=True, order=1)
        payload = {
            "position": "header",
            "menus": [
                {"id": anchor.id, "label": "Beranda", "isFixed": True, "children": [
                    {"id": "menu-1", "label": "Sambutan", "order": 1},
                ]},
                {"id": "menu-2", "label": "Profil", "order": 2, "roles": ["public"], "children": [
                    {"id": "menu-3", "label": "Sejarah", "order": 1},
                ]},
            ],
        }

        resp = await client.post(BASE, json=payload)
        body = resp.json()

        assert resp.status_code == 200
        assert body["message"] == "Menus saved successfully"
        roots = body["data"]
        assert _labels(roots) == ["Beranda", "Profil"]
        assert _labels(roots[0]["children"]) == ["Sambutan"]
        assert roots[0]["children"][0]["parent_id"] == anchor.id
        profil = roots[1]
        assert profil["roles"] == ["public"]
        assert profil["children"][0]["parent_id"] == profil["id"]
        assert profil["is_fixed"] is False

    async def test_save_accepts_null_optional_fields(self, client):
        payload = {
            "position": "header",
            "menus": [{
                "id": "menu-1", "label": "Kontak", "slug": None, "to": None, "icon": None,
                "order": None, "isActive": None, "parentId": None, "roles": None, "children": None,
            }],
        }

        resp = await client.post(BASE, json=payload)
        body = resp.json()

        assert resp.status_code == 200
        node = body["data"][0]
        assert node["label"] == "Kontak"
        assert node["slug"] == "kontak"
        assert node["to"] == ""
        assert node["order"] == 0
        assert node["is_active"] is True
        assert node["roles"] == []

    async def test_save_invalid_position_writes_nothing(self, client):
        resp = await client.post(BASE, json={"position": "nav", "menus": [{"label": "X"}]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_position"

        for position in ("header", "sidebar", "footer"):
            listed = await client.get(BASE, params={"position": position})
            assert listed.json()["data"] == []

    async def test_save_malformed_body(self, client):
        resp = await client.post(BASE, json={"menus": "nope"})
        body = resp.json()

        assert resp.status_code == 422
        assert body["success"] is False
        assert body["error"] == "validation_failed"
        assert isinstance(body["details"], list)

    async def test_post_refreshes_cached_tree(self, client):
        first = await client.get(BASE, params={"position": "sidebar"})
        assert first.json()["data"] == []

        await client.post(BASE, json={"position": "sidebar", "menus": [{"id": "menu-1", "label": "Unduhan"}]})
        second = await client.get(BASE, params={"position": "sidebar"})

        assert _labels(second.json()["data"]) == ["Unduhan"]

    async def test_get_single_menu(self, client, add_menu):
        row = await add_menu("Agenda", roles=["public"])

        resp = await client.get(f"{BASE}/{row.id}")
        data = resp.json()["data"]

        assert resp.status_code == 200
        assert data["id"] == row.id
        assert data["label"] == "Agenda"
        assert data["roles"] == ["public"]
        assert data["children"] == []

    async def test_get_single_menu_not_found(self, client):
        resp = await client.get(f"{BASE}/999")
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    async def test_get_single_menu_invalid_id(self, client):
        resp = await client.get(f"{BASE}/abc")
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_id"

    async def test_get_all_active(self, client, add_menu):
        top = await add_menu("Top", position="header")
        await add_menu("Child", position="header", parent_id=top.id)
        await add_menu("Hidden", position="header", is_active=False)
        await add_menu("Foot", position="footer")

        resp = await client.get(f"{BASE}/all")
        data = resp.json()["data"]

        assert set(data) == {"header", "sidebar", "footer"}
        assert _labels(data["header"]) == ["Top"]
        assert _labels(data["header"][0]["children"]) == ["Child"]
        assert data["sidebar"] == []
        assert _labels(data["footer"]) == ["Foot"]

    async def test_update_menu_fields(self, client, add_menu):
        row = await add_menu("Galeri")

        resp = await client.put(f"{BASE}/{row.id}", json={"label": "Galeri Foto", "isActive": False, "order": 4})
        data = resp.json()["data"]

        assert resp.status_code == 200
        assert data["label"] == "Galeri Foto"
        assert data["is_active"] is False
        assert data["order"] == 4
        assert data["to"] == "/galeri"

    async def test_update_fixed_menu_refused(self, client, add_menu):
        row = await add_menu("Beranda", is_fixed=True)

        resp = await client.put(f"{BASE}/{row.id}", json={"label": "Home"})

        assert resp.status_code == 403
        assert resp.json()["error"] == "forbidden"

    async def test_delete_cascades(self, client, add_menu):
        root = await add_menu("Root", position="sidebar")
        child = await add_menu("Child", position="sidebar", parent_id=root.id)
        await add_menu("Grandchild", position="sidebar", parent_id=child.id)

        resp = await client.delete(f"{BASE}/{root.id}")

        assert resp.status_code == 200
        assert resp.json()["data"] == {"id": root.id, "deleted": 3}
        listed = await client.get(BASE, params={"position": "sidebar"})
        assert listed.json()["data"] == []

    async def test_delete_fixed_refused(self, client, add_menu):
        row = await add_menu("Beranda", is_fixed=True)

        resp = await client.delete(f"{BASE}/{row.id}")
        body = resp.json()

        assert resp.status_code == 403
        assert body["success"] is False
        assert body["message"] == "Cannot delete fixed menu"
        still = await client.get(f"{BASE}/{row.id}")
        assert still.status_code == 200

    async def test_delete_not_found(self, client):
        resp = await client.delete(f"{BASE}/12345")
        assert resp.status_code == 404

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.json()["success"] is True
        assert resp.headers["x-content-type-options"] == "nosniff"
