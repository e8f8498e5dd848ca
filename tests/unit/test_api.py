"""
Tests for the HTTP API.

The shared app state is pointed at an in-memory workspace so no file or
network access happens.
"""
import json

import pytest
from fastapi.testclient import TestClient

from api.dependencies import app_state
from api.main import app
from tests.conftest import CAFE_CORNER, MUSTANG, UCS_FALCON


@pytest.fixture
def client(workspace, monkeypatch):
    monkeypatch.setattr(app_state, "workspace", workspace)
    with TestClient(app) as c:
        yield c


class TestCollections:

    def test_initial_state(self, client):
        body = client.get("/api/v1/collections").json()
        assert body["active_index"] == 0
        assert [c["name"] for c in body["collections"]] == ["My Collection"]

    def test_create_rename_and_activate(self, client):
        body = client.post("/api/v1/collections", json={"name": "Star Wars"}).json()
        assert body["active_index"] == 1

        body = client.patch("/api/v1/collections/1", json={"name": "   "}).json()
        assert body["collections"][1]["name"] == "Star Wars"

        body = client.put("/api/v1/collections/active", json={"index": 42}).json()
        assert body["active_index"] == 1

    def test_delete_requires_confirmation(self, client):
        client.post("/api/v1/collections", json={"name": "Second"})

        resp = client.delete("/api/v1/collections/0")
        assert resp.status_code == 409
        assert resp.json()["error"] == "ConfirmationDeclined"

        body = client.delete("/api/v1/collections/0", params={"confirm": "true"}).json()
        assert [c["name"] for c in body["collections"]] == ["Second"]
        assert body["active_index"] == 0

    def test_last_collection_cannot_be_deleted(self, client):
        resp = client.delete("/api/v1/collections/0", params={"confirm": "true"})
        assert resp.status_code == 409
        assert resp.json()["error"] == "LastCollectionError"

    def test_unknown_collection_is_404(self, client):
        assert client.get("/api/v1/collections/5/sets").status_code == 404


class TestSets:

    def test_add_list_and_duplicate(self, client, workspace):
        resp = client.post("/api/v1/collections/0/sets", json=MUSTANG)
        assert resp.status_code == 201
        assert resp.json()["total_parts"] == 1471

        resp = client.post("/api/v1/collections/0/sets", json=MUSTANG)
        assert resp.status_code == 409
        assert len(workspace.collections.active_sets) == 1

    def test_remove_set(self, client, workspace):
        client.post("/api/v1/collections/0/sets", json=MUSTANG)

        assert client.delete("/api/v1/collections/0/sets/10265-1").status_code == 409
        resp = client.delete("/api/v1/collections/0/sets/10265-1", params={"confirm": "true"})
        assert resp.json() == {"removed": True}

        resp = client.delete("/api/v1/collections/0/sets/10265-1", params={"confirm": "true"})
        assert resp.json() == {"removed": False}

    def test_theme_labels_are_filled_in_background(self, client, workspace):
        client.post("/api/v1/collections/0/sets", json=UCS_FALCON)
        client.post("/api/v1/themes/refresh")

        # lookups finish on the app's loop; refresh never duplicates in-flight work
        labels = {item["theme_label"] for item in client.get("/api/v1/collections/0/sets").json()["items"]}
        assert labels <= {"Ultimate Collector Series", "Theme 171"}

    def test_summary(self, client):
        client.post("/api/v1/collections/0/sets", json=MUSTANG)
        client.post("/api/v1/collections/0/sets", json=CAFE_CORNER)
        body = client.get("/api/v1/collections/0/summary").json()
        assert body["set_count"] == 2
        assert body["total_parts"] == 1471 + 2056


class TestSearch:

    def test_results_flag_owned_sets(self, client):
        client.post("/api/v1/collections/0/sets", json=MUSTANG)

        body = client.get("/api/v1/search", params={"q": "10"}).json()

        assert body["applied"] is True
        owned = {r["set_num"]: r["in_collection"] for r in body["results"]}
        assert owned == {"10265-1": True, "10182-1": False}

    def test_search_failure_is_502(self, client, workspace):
        from brick_collector.exceptions import SearchError

        def broken(query):
            raise SearchError("offline")

        workspace.search._search = broken
        assert client.get("/api/v1/search", params={"q": "x"}).status_code == 502

    def test_superseded_search_returns_no_results(self, client, workspace):
        async def superseded(query):
            workspace.search.results = [MUSTANG]
            return False

        workspace.search.run = superseded
        body = client.get("/api/v1/search", params={"q": "10"}).json()

        assert body["applied"] is False
        assert body["results"] == []


class TestTransfer:

    def test_export_download(self, client):
        client.post("/api/v1/collections/0/sets", json=MUSTANG)

        resp = client.get("/api/v1/collections/active/export")

        assert resp.status_code == 200
        assert resp.json() == [MUSTANG]
        assert 'filename="my-collection-' in resp.headers["content-disposition"]

    def test_import_replace_needs_confirmation(self, client, workspace):
        body = json.dumps([CAFE_CORNER])
        resp = client.post("/api/v1/collections/active/import", content=body)
        assert resp.status_code == 409
        assert workspace.collections.active_sets == []

        resp = client.post("/api/v1/collections/active/import", content=body, params={"confirm": "true"})
        assert resp.json() == {"index": 0, "name": "My Collection", "set_count": 1}

    def test_import_new_collection(self, client, workspace):
        resp = client.post(
            "/api/v1/collections/active/import",
            content=json.dumps([CAFE_CORNER, MUSTANG]),
            params={"mode": "new", "filename": "city.json"},
        )
        assert resp.json() == {"index": 1, "name": "city", "set_count": 2}

    def test_import_rejects_non_array(self, client, workspace):
        resp = client.post("/api/v1/collections/active/import", content='{"a": 1}', params={"confirm": "true"})
        assert resp.status_code == 400
        assert workspace.collections.active_sets == []

    def test_import_rejects_undecodable_body(self, client, workspace):
        client.post("/api/v1/collections/0/sets", json=MUSTANG)

        resp = client.post(
            "/api/v1/collections/active/import",
            content=b'[{"set_num": "\xff\xfe"}]',
            params={"confirm": "true"},
        )

        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidImportError"
        assert workspace.collections.active_sets == [MUSTANG]


def test_health(client):
    body = client.get("/api/v1/health/ready").json()
    assert body["ready"] is True
    assert body["details"]["collections"] == 1


def test_collection_addressed_by_id(client):
    created = client.post("/api/v1/collections", json={"name": "Second"}).json()
    second_id = created["collections"][1]["id"]
    client.post("/api/v1/collections/1/sets", json=MUSTANG)
    client.delete("/api/v1/collections/0", params={"confirm": "true"})

    body = client.get(f"/api/v1/collections/by-id/{second_id}/sets").json()

    assert body["index"] == 0
    assert body["name"] == "Second"
    assert client.get("/api/v1/collections/by-id/nope/sets").status_code == 404
