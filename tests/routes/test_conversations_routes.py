from fastapi.testclient import TestClient


class TestListConversationsEndpoint:
    def test_list_empty(self, client: TestClient):
        response = client.get("/conversations")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_newest_first(self, populated_client: TestClient):
        data = populated_client.get("/conversations").json()

        assert [c["id"] for c in data] == [3, 2, 1]
        assert data[0]["user_message"] == "Write a mission statement for a bike shop"

    def test_list_record_structure(self, populated_client: TestClient):
        record = populated_client.get("/conversations").json()[0]

        assert set(record) == {
            "id",
            "user_message",
            "ai_response",
            "user_email",
            "timestamp",
        }

    def test_latest_chat_is_listed_first(self, populated_client: TestClient):
        populated_client.post(
            "/chat", json={"message": "Write a mission statement for a bakery"}
        )

        first = populated_client.get("/conversations").json()[0]
        assert first["user_message"] == "Write a mission statement for a bakery"
        assert first["id"] == 4

    def test_list_storage_failure(self, client: TestClient, services):
        services.store.fail_with("connection refused")

        response = client.get("/conversations")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error_type"] == "StorageError"


class TestDeleteConversationEndpoint:
    def test_delete_existing(self, populated_client: TestClient):
        response = populated_client.delete("/conversations/2")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["deleted"] is True
        assert data["id"] == 2
        assert "message" in data

    def test_deleted_record_not_listed(self, populated_client: TestClient):
        populated_client.delete("/conversations/2")

        ids = [c["id"] for c in populated_client.get("/conversations").json()]
        assert ids == [3, 1]

    def test_delete_is_idempotent(self, populated_client: TestClient):
        first = populated_client.delete("/conversations/1")
        second = populated_client.delete("/conversations/1")

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["success"] is True
        assert second.json()["deleted"] is False

    def test_delete_unknown_id(self, client: TestClient):
        response = client.delete("/conversations/999")

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_delete_id_beyond_column_range(self, client: TestClient):
        response = client.delete("/conversations/2147483648")

        assert response.status_code == 200
        assert response.json()["deleted"] is False

    def test_ids_are_not_reused(self, populated_client: TestClient):
        populated_client.delete("/conversations/3")
        populated_client.post("/chat", json={"message": "again"})

        ids = [c["id"] for c in populated_client.get("/conversations").json()]
        assert ids == [4, 2, 1]

    def test_delete_non_integer_id(self, client: TestClient):
        response = client.delete("/conversations/abc")
        assert response.status_code == 422

    def test_delete_storage_failure(self, populated_client: TestClient, services):
        services.store.fail_with("connection refused")

        response = populated_client.delete("/conversations/1")

        assert response.status_code == 500
        assert response.json()["error_type"] == "StorageError"
