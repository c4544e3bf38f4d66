"""Tests for system settings, system logs and the service endpoints."""

from datetime import datetime

from fastapi import status

from wms.models.system import SystemLog, SystemSetting


class TestService:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True

    async def test_unknown_route_uses_envelope(self, client):
        response = await client.get("/api/does-not-exist")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["success"] is False


class TestSettings:
    """Test the /api/system-settings endpoints."""

    async def test_public_settings_need_no_auth(self, client, db):
        db.add_all([
            SystemSetting(key="app_name", value="WMS", type="string", is_public=True),
            SystemSetting(key="smtp_password", value="hunter2", type="string", is_public=False),
        ])
        await db.commit()

        response = await client.get("/api/system-settings/public")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == [{"key": "app_name", "value": "WMS", "type": "string"}]

    async def test_crud_by_key(self, client, admin_headers):
        created = await client.post("/api/system-settings/", headers=admin_headers, json={
            "key": "default_bin_priority", "value": "5", "type": "number", "group": "inventory",
        })
        assert created.status_code == status.HTTP_201_CREATED

        duplicate = await client.post("/api/system-settings/", headers=admin_headers, json={
            "key": "default_bin_priority", "value": "6",
        })
        assert duplicate.status_code == status.HTTP_409_CONFLICT

        updated = await client.put(
            "/api/system-settings/default_bin_priority", headers=admin_headers, json={"value": "3"}
        )
        assert updated.json()["data"]["value"] == "3"

        groups = await client.get("/api/system-settings/groups/list", headers=admin_headers)
        assert {"group": "inventory", "count": 1} in groups.json()["data"]

        deleted = await client.delete("/api/system-settings/default_bin_priority", headers=admin_headers)
        assert deleted.status_code == status.HTTP_200_OK
        missing = await client.get("/api/system-settings/default_bin_priority", headers=admin_headers)
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    async def test_non_editable_setting(self, client, admin_headers, db):
        db.add(SystemSetting(key="schema_version", value="1", type="number", is_editable=False))
        await db.commit()

        update = await client.put("/api/system-settings/schema_version", headers=admin_headers, json={"value": "2"})
        assert update.status_code == status.HTTP_403_FORBIDDEN
        delete = await client.delete("/api/system-settings/schema_version", headers=admin_headers)
        assert delete.status_code == status.HTTP_403_FORBIDDEN

    async def test_writes_require_admin(self, client, viewer_headers):
        response = await client.post("/api/system-settings/", headers=viewer_headers, json={"key": "x"})
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_invalid_key(self, client, admin_headers):
        response = await client.post("/api/system-settings/", headers=admin_headers, json={"key": "has spaces"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestSystemLogs:
    """Test the /api/system-logs endpoints."""

    async def test_actions_are_logged(self, client, admin_headers):
        """Creating a user through the API leaves an audit entry."""
        await client.post("/api/users/", headers=admin_headers, json={
            "username": "audited", "email": "audited@example.com", "password": "longenough",
        })
        response = await client.get("/api/system-logs/?action=user.create", headers=admin_headers)
        logs = response.json()["data"]["logs"]
        assert len(logs) == 1
        assert logs[0]["module"] == "users"

    async def test_create_and_stats(self, client, admin_headers):
        for level in ("info", "info", "error"):
            created = await client.post("/api/system-logs/", headers=admin_headers, json={
                "level": level, "action": "import", "message": "stock import", "module": "inventory",
            })
            assert created.status_code == status.HTTP_201_CREATED

        stats = (await client.get("/api/system-logs/stats/summary", headers=admin_headers)).json()["data"]
        assert stats["total"] == 3
        assert stats["by_level"] == {"info": 2, "error": 1}
        assert stats["by_module"] == {"inventory": 3}

    async def test_date_filter_is_inclusive(self, client, admin_headers, db):
        db.add_all([
            SystemLog(level="info", action="old", message="m", created_at=datetime(2024, 1, 1, 12)),
            SystemLog(level="info", action="edge", message="m", created_at=datetime(2024, 1, 31, 23, 59)),
            SystemLog(level="info", action="new", message="m", created_at=datetime(2024, 2, 1, 0, 1)),
        ])
        await db.commit()

        response = await client.get(
            "/api/system-logs/?start_date=2024-01-15&end_date=2024-01-31", headers=admin_headers
        )
        assert [log["action"] for log in response.json()["data"]["logs"]] == ["edge"]

    async def test_bad_date_format(self, client, admin_headers):
        response = await client.get("/api/system-logs/?start_date=01/02/2024", headers=admin_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "start_date must be in YYYY-MM-DD format"

    async def test_invalid_level(self, client, admin_headers):
        response = await client.post("/api/system-logs/", headers=admin_headers, json={
            "level": "fatal", "action": "x", "message": "y",
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST
