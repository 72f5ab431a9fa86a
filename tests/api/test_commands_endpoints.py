import json
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from src.core.storage.durable_writer import CommitResult, DurableCollectionWriter


class TestCommandLifecycle:
    """Create, edit and delete a command through the API"""

    def test_full_lifecycle(self, client: TestClient, tmp_path) -> None:
        response = client.post(
            "/api/commands", json={"command": "ls -la", "description": "list files"}
        )
        assert response.status_code == 201
        created = response.json()
        assert created["command"] == "ls -la"
        assert created["description"] == "list files"
        assert created["id"]
        assert created["createdAt"].endswith("Z")
        assert "updatedAt" not in created

        listed = client.get("/api/commands").json()
        assert len(listed) == 1
        assert listed[0]["id"] == created["id"]

        response = client.put(
            f"/api/commands/{created['id']}",
            json={"command": "ls -lah", "description": "list files, human sizes"},
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["command"] == "ls -lah"
        assert updated["createdAt"] == created["createdAt"]
        assert updated["updatedAt"]

        fetched = client.get(f"/api/commands/{created['id']}").json()
        assert fetched == updated

        response = client.delete(f"/api/commands/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True}

        assert client.get("/api/commands").json() == []
        on_disk = json.loads((tmp_path / "data" / "commands.json").read_text())
        assert on_disk == []
        assert not (tmp_path / "data" / "commands.json.backup").exists()

    def test_ids_are_unique(self, client: TestClient) -> None:
        ids = {
            client.post(
                "/api/commands", json={"command": f"echo {i}", "description": "echo"}
            ).json()["id"]
            for i in range(5)
        }

        assert len(ids) == 5


class TestCommandErrors:
    def test_create_requires_both_fields(self, client: TestClient) -> None:
        response = client.post("/api/commands", json={"command": "ls"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Command and description are required"
        assert client.get("/api/commands").json() == []

    def test_update_requires_both_fields(self, client: TestClient) -> None:
        created = client.post(
            "/api/commands", json={"command": "ls", "description": "list"}
        ).json()

        response = client.put(f"/api/commands/{created['id']}", json={"command": ""})

        assert response.status_code == 400

    def test_unknown_id(self, client: TestClient) -> None:
        body = {"command": "ls", "description": "list"}

        assert client.get("/api/commands/nope").status_code == 404
        assert client.put("/api/commands/nope", json=body).status_code == 404
        response = client.delete("/api/commands/nope")
        assert response.status_code == 404
        assert response.json()["detail"] == "Command not found"

    def test_failed_commit_returns_500(self, client: TestClient) -> None:
        failed = CommitResult.rolled_back("commands.json", 1, "disk full")

        with patch.object(DurableCollectionWriter, "commit", AsyncMock(return_value=failed)):
            response = client.post(
                "/api/commands", json={"command": "ls", "description": "list"}
            )

        assert response.status_code == 500
        assert response.json()["detail"] == "Error saving command"

    def test_unreadable_file_lists_empty(self, client: TestClient, tmp_path) -> None:
        (tmp_path / "data" / "commands.json").write_text("{broken")

        response = client.get("/api/commands")

        assert response.status_code == 200
        assert response.json() == []


class TestCommandQuery:
    def _seed(self, tmp_path) -> None:
        commands = [
            {"id": "1", "command": "df -h", "description": "disk usage", "createdAt": "2024-01-01T00:00:00.000Z"},
            {"id": "2", "command": "uptime", "description": "load average", "createdAt": "2024-03-01T00:00:00.000Z"},
            {"id": "3", "command": "du -sh *", "description": "Disk usage per entry", "createdAt": "2024-02-01T00:00:00.000Z"},
        ]
        (tmp_path / "data" / "commands.json").write_text(json.dumps(commands))

    def test_search(self, client: TestClient, tmp_path) -> None:
        self._seed(tmp_path)

        response = client.get("/api/commands", params={"search": "DISK"})

        assert [cmd["id"] for cmd in response.json()] == ["1", "3"]

    def test_sort(self, client: TestClient, tmp_path) -> None:
        self._seed(tmp_path)

        newest = client.get("/api/commands", params={"sort": "newest"}).json()
        az = client.get("/api/commands", params={"sort": "az"}).json()

        assert [cmd["id"] for cmd in newest] == ["2", "3", "1"]
        assert [cmd["id"] for cmd in az] == ["1", "3", "2"]

    def test_unknown_sort_is_rejected(self, client: TestClient) -> None:
        response = client.get("/api/commands", params={"sort": "random"})

        assert response.status_code == 422


class TestLegacyRecords:
    """Records written before createdAt was stamped on every command"""

    def _seed(self, tmp_path) -> None:
        legacy = [{"id": "1", "command": "ls", "description": "list"}]
        (tmp_path / "data" / "commands.json").write_text(json.dumps(legacy))

    def test_get_record_without_created_at(self, client: TestClient, tmp_path) -> None:
        self._seed(tmp_path)

        response = client.get("/api/commands/1")

        assert response.status_code == 200
        assert response.json() == {"id": "1", "command": "ls", "description": "list"}

    def test_update_record_without_created_at(self, client: TestClient, tmp_path) -> None:
        self._seed(tmp_path)

        response = client.put(
            "/api/commands/1", json={"command": "ls -l", "description": "long list"}
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["command"] == "ls -l"
        assert updated["updatedAt"]
        assert "createdAt" not in updated
        on_disk = json.loads((tmp_path / "data" / "commands.json").read_text())
        assert on_disk == [updated]
