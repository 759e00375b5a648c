"""Tests for the MongoDB bootstrap."""

import database


class TestCreateClient:
    def test_server_selection_is_bounded(self) -> None:
        # MongoClient does not connect on construction
        client = database.create_client("mongodb://localhost:1", timeout_ms=1500)
        try:
            assert client.options.server_selection_timeout == 1.5
        finally:
            client.close()

    def test_default_timeout_comes_from_config(self) -> None:
        client = database.create_client("mongodb://localhost:1")
        try:
            assert client.options.server_selection_timeout == database.DATABASE_TIMEOUT_MS / 1000
        finally:
            client.close()

    def test_unconfigured_database_has_no_collections(self, monkeypatch) -> None:
        monkeypatch.setattr(database, "db", None)
        assert database.get_collection("expense") is None
