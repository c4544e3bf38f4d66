"""Tests for per-user notifications."""

from fastapi import status

from tests.conftest import headers_for


class TestNotifications:
    """Test the /api/notifications endpoints."""

    async def test_create_defaults_to_caller(self, client, viewer_headers):
        response = await client.post("/api/notifications/", headers=viewer_headers, json={
            "type": "info", "title": "Hello", "message": "World", "metadata": {"source": "test"},
        })
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["user_id"] is not None
        assert data["status"] == "pending"
        assert data["priority"] == "normal"
        assert data["metadata"] == {"source": "test"}

    async def test_invalid_priority(self, client, viewer_headers):
        response = await client.post("/api/notifications/", headers=viewer_headers, json={
            "type": "info", "title": "Hello", "message": "World", "priority": "critical",
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_users_only_see_their_own(self, client, make_user):
        """Notifications addressed to another user are invisible and answer 404."""
        alice = await make_user("alice", email="alice@example.com")
        bob = await make_user("bob", email="bob@example.com")
        alice_headers, bob_headers = headers_for(alice), headers_for(bob)

        by_id = await client.post("/api/notifications/", headers=bob_headers, json={
            "type": "info", "title": "For Alice", "message": "by id", "user_id": alice.id,
        })
        by_email = await client.post("/api/notifications/", headers=bob_headers, json={
            "type": "info", "title": "For Alice too", "message": "by email", "email": "alice@example.com",
        })

        alice_list = (await client.get("/api/notifications/", headers=alice_headers)).json()["data"]
        assert alice_list["total"] == 2
        assert alice_list["unread"] == 2

        bob_list = (await client.get("/api/notifications/", headers=bob_headers)).json()["data"]
        assert bob_list["total"] == 0

        foreign = await client.get(f"/api/notifications/{by_id.json()['data']['id']}", headers=bob_headers)
        assert foreign.status_code == status.HTTP_404_NOT_FOUND
        own = await client.get(f"/api/notifications/{by_email.json()['data']['id']}", headers=alice_headers)
        assert own.status_code == status.HTTP_200_OK

    async def test_mark_read(self, client, viewer_headers):
        created = await client.post("/api/notifications/", headers=viewer_headers, json={
            "type": "alert", "title": "Low stock", "message": "Reorder wrap",
        })
        notification_id = created.json()["data"]["id"]

        read = await client.put(f"/api/notifications/{notification_id}/read", headers=viewer_headers)
        assert read.status_code == status.HTTP_200_OK
        assert read.json()["data"]["status"] == "read"
        assert read.json()["data"]["read_at"] is not None

        listed = (await client.get("/api/notifications/?unread_only=true", headers=viewer_headers)).json()["data"]
        assert listed["total"] == 0
        assert listed["unread"] == 0

    async def test_delete(self, client, viewer_headers):
        created = await client.post("/api/notifications/", headers=viewer_headers, json={
            "type": "info", "title": "Bye", "message": "soon gone",
        })
        notification_id = created.json()["data"]["id"]
        deleted = await client.delete(f"/api/notifications/{notification_id}", headers=viewer_headers)
        assert deleted.status_code == status.HTTP_200_OK
        missing = await client.get(f"/api/notifications/{notification_id}", headers=viewer_headers)
        assert missing.status_code == status.HTTP_404_NOT_FOUND
