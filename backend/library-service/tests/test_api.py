"""Tests for the library-service HTTP endpoints."""

from unittest.mock import AsyncMock

import pytest
from domain.services.search_service import SearchService
from main import app
from sqlalchemy.exc import OperationalError
from utils.dependencies import get_search_service, get_tag_service


class TestHealthCheck:
    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "library-service"}


class TestSearchEndpoint:
    def test_no_criteria_returns_empty_list(self, client):
        response = client.get("/search")

        assert response.status_code == 200
        assert response.json() == []

    def test_blank_criteria_returns_empty_list(self, client):
        response = client.get("/search", params={"query": "", "tags": ""})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize("param", ["tags", "tag"])
    def test_tag_search_returns_model_folder(self, client, param):
        response = client.get("/search", params={param: "32mm"})

        assert response.status_code == 200
        assert response.json() == [
            {
                "name": "Dragon",
                "path": "Pub/Coll/Dragon",
                "type": "folder",
                "itemCount": 4,
                "previewPath": "Pub/Coll/Dragon/dragon.png",
                "matchReason": "Has tags: 32mm",
            }
        ]

    def test_repeated_tags_are_combined_with_and(self, client):
        response = client.get("/search", params=[("tag", "fantasy"), ("tag", "32mm")])

        assert [hit["path"] for hit in response.json()] == ["Pub/Coll/Dragon"]

    def test_all_criteria_match_reason(self, client):
        response = client.get(
            "/search",
            params={"query": "dragon", "tag": "32mm", "fileType": "Model"},
        )

        results = response.json()
        assert len(results) == 1
        assert results[0]["matchReason"] == (
            'Matches "dragon", Has tags: 32mm, Type: Model'
        )

    def test_file_result_fields(self, client):
        response = client.get("/search", params={"fileType": "Document"})

        [hit] = response.json()
        assert hit["type"] == "file"
        assert hit["path"] == "Pub/readme.pdf"
        assert hit["extension"] == "pdf"
        assert hit["size"] == 0
        assert "modified" in hit
        assert "itemCount" not in hit

    def test_invalid_file_type_rejected(self, client):
        response = client.get("/search", params={"fileType": "Spaceship"})
        assert response.status_code == 422

    def test_store_failure_returns_500(self, client, tag_repository):
        item_repository = AsyncMock()
        item_repository.find_paths_by_text.side_effect = OperationalError(
            "SELECT", {}, Exception("unable to open database")
        )
        app.dependency_overrides[get_search_service] = lambda: SearchService(
            item_repository, tag_repository
        )

        response = client.get("/search", params={"query": "dragon"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Search failed"}


class TestMetadataEndpoints:
    def test_get_metadata(self, client, library):
        response = client.get("/metadata/Pub/Coll/Dragon")

        assert response.status_code == 200
        data = response.json()
        assert data["filePath"] == "Pub/Coll/Dragon"
        assert data["fileName"] == "Dragon"
        assert data["fileType"] == "Model"
        assert data["parentFolderId"] == library["Pub/Coll"]
        assert data["tags"] == ["32mm"]
        assert data["supportsNeeded"] is False

    def test_get_missing_metadata(self, client):
        response = client.get("/metadata/Pub/Coll/Orc")
        assert response.status_code == 404

    def test_put_creates_and_makes_item_searchable(self, client, library):
        response = client.put(
            "/metadata/Pub/Coll/Orc",
            json={
                "category": "Model",
                "description": "Orc warboss",
                "tags": ["32mm"],
                "supportsNeeded": True,
                "layerHeight": 0.05,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["fileType"] == "Model"
        assert data["parentFolderId"] == library["Pub/Coll"]
        assert data["supportsNeeded"] is True
        assert data["layerHeight"] == 0.05

        search = client.get("/search", params={"tags": "32mm"})
        assert [hit["path"] for hit in search.json()] == [
            "Pub/Coll/Dragon",
            "Pub/Coll/Orc",
        ]

    def test_put_invalid_category(self, client):
        response = client.put("/metadata/Pub/Coll/Orc", json={"category": "Spaceship"})
        assert response.status_code == 422

    def test_put_blank_name(self, client):
        response = client.put("/metadata/Pub/Coll/Orc", json={"fileName": "   "})
        assert response.status_code == 400

    def test_post_with_path_in_body(self, client):
        response = client.post(
            "/metadata",
            json={
                "filePath": "Pub/Coll/Goblin/goblin.stl",
                "printSettings": {"exposureTime": 2.5, "bottomLayers": 6},
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["fileType"] == "STL File"
        assert data["printSettings"]["exposureTime"] == 2.5
        assert data["printSettings"]["bottomLayers"] == 6

    def test_hierarchy(self, client):
        response = client.get("/hierarchy/Pub/Coll/Dragon/body.stl")

        assert response.status_code == 200
        assert [entry["path"] for entry in response.json()] == [
            "Pub",
            "Pub/Coll",
            "Pub/Coll/Dragon",
        ]
        assert response.json()[-1]["fileType"] == "Model"

    def test_hierarchy_missing_item(self, client):
        response = client.get("/hierarchy/Nope")
        assert response.status_code == 404

    def test_file_types(self, client):
        response = client.get("/file-types")

        assert response.status_code == 200
        assert "Model" in response.json()
        assert "STL File" in response.json()

    def test_query_metadata_by_tags(self, client):
        response = client.get("/metadata", params=[("tag", "32mm"), ("tag", "fantasy")])

        assert response.status_code == 200
        assert [item["filePath"] for item in response.json()] == [
            "Pub/Coll",
            "Pub/Coll/Dragon",
        ]

    def test_query_metadata_by_category_search_and_folder(self, client):
        response = client.get(
            "/metadata",
            params={"category": "Image", "search": "png", "parentFolder": "Pub/Coll/Dragon"},
        )

        assert response.status_code == 200
        assert [item["filePath"] for item in response.json()] == [
            "Pub/Coll/Dragon/dragon.png"
        ]

    def test_query_metadata_invalid_category(self, client):
        response = client.get("/metadata", params={"category": "Spaceship"})
        assert response.status_code == 422

    def test_batch_update_counts_failures(self, client):
        response = client.post(
            "/metadata/batch",
            json={
                "items": [
                    {"path": "Pub/Coll/Dragon/body.stl", "name": "body.stl"},
                    {"path": "Pub/Coll/Dragon/head.stl"},
                    {"path": "Pub/Coll/Goblin/goblin.lys", "name": "   "},
                    {"path": "Pub/readme.pdf", "name": "readme.pdf"},
                ],
                "updates": {"resin": "Grey", "supportsNeeded": True, "tags": ["batched"]},
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["totalProcessed"] == 4
        assert data["successCount"] == 2
        assert data["errorCount"] == 2
        assert data["failedPaths"] == [
            "Pub/Coll/Dragon/head.stl",
            "Pub/Coll/Goblin/goblin.lys",
        ]
        assert data["message"] == "Processed 2 items successfully, 2 items failed"

        saved = client.get("/metadata/Pub/readme.pdf").json()
        assert saved["resin"] == "Grey"
        assert saved["supportsNeeded"] is True
        assert saved["tags"] == ["batched"]
        assert saved["fileType"] == "Document"
        assert client.get("/metadata/Pub/Coll/Dragon/head.stl").json()["resin"] is None

    def test_batch_requires_items_and_updates(self, client):
        response = client.post("/metadata/batch", json={"items": []})
        assert response.status_code == 422


class TestTagEndpoints:
    def test_list_tags(self, client):
        response = client.get("/tags")

        assert response.status_code == 200
        assert [tag["name"] for tag in response.json()] == ["32mm", "fantasy"]

    def test_create_and_get_tag(self, client):
        created = client.post("/tags", json={"name": "Bases"})
        assert created.status_code == 201

        tag_id = created.json()["id"]
        response = client.get(f"/tags/{tag_id}")
        assert response.json() == {"id": tag_id, "name": "Bases"}

    def test_create_duplicate_tag(self, client):
        response = client.post("/tags", json={"name": "32MM"})
        assert response.status_code == 400

    def test_get_missing_tag(self, client):
        assert client.get("/tags/999").status_code == 404

    def test_delete_tag_in_use(self, client):
        tag_id = next(
            tag["id"] for tag in client.get("/tags").json() if tag["name"] == "32mm"
        )

        response = client.delete(f"/tags/{tag_id}")
        assert response.status_code == 409

    def test_delete_unused_tag(self, client):
        tag_id = client.post("/tags", json={"name": "unused"}).json()["id"]

        assert client.delete(f"/tags/{tag_id}").status_code == 204
        assert client.delete(f"/tags/{tag_id}").status_code == 404

    def test_tag_store_failure_returns_500(self, client):
        tag_service = AsyncMock()
        tag_service.get_all_tags.side_effect = RuntimeError("database is locked")
        app.dependency_overrides[get_tag_service] = lambda: tag_service

        response = client.get("/tags")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to retrieve tags"}
