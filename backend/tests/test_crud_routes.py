"""
CrudHub Backend — CRUD Router Endpoint Tests
==============================================

What:  HTTP-level tests of create_crud_router as mounted by create_app.
How:   HTTPX AsyncClient over ASGITransport; memory-backed teas and a
       SQLite-backed games resource.

What we test:
    ✅ Create → Index / Show round trips
    ✅ Destroy → Show is 404
    ✅ Update replaces exactly the targeted item
    ✅ Deleting the first seeded tea leaves the other four unchanged
    ✅ Non-object, malformed or missing payloads → 400 envelope
    ✅ Identical behaviour over the document store
    ✅ Request ID and CORS headers
"""

import pytest

from crudhub.collections.memory import MemoryCollection
from crudhub.config import Settings
from crudhub.main import create_app
from crudhub.resources import ResourceRegistry
from crudhub.routes.crud import create_crud_router
from crudhub.seeds import TEAS


class TestCrudRoutesMemory:

    @pytest.mark.asyncio
    async def test_index_returns_seeded_teas(self, test_client):
        response = await test_client.get("/api/teas")

        assert response.status_code == 200
        names = [tea["name"] for tea in response.json()]
        assert names == [tea["name"] for tea in TEAS]

    @pytest.mark.asyncio
    async def test_create_then_index_includes_item(self, test_client):
        response = await test_client.post("/api/teas", json={"name": "Chai", "brand": "Yogi"})

        assert response.status_code == 200
        created = response.json()
        assert created["name"] == "Chai"
        assert created["brand"] == "Yogi"
        assert created["_id"]

        index = (await test_client.get("/api/teas")).json()
        assert created in index
        assert len(index) == len(TEAS) + 1

    @pytest.mark.asyncio
    async def test_create_then_show_returns_same_item(self, test_client):
        created = (await test_client.post("/api/biscuits", json={"name": "Bourbon"})).json()

        response = await test_client.get(f"/api/biscuits/{created['_id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_destroy_then_show_is_not_found(self, test_client):
        created = (await test_client.post("/api/teas", json={"name": "Chai"})).json()

        deleted = await test_client.delete(f"/api/teas/{created['_id']}")
        shown = await test_client.get(f"/api/teas/{created['_id']}")

        assert deleted.status_code == 200
        assert deleted.json() == created
        assert shown.status_code == 404
        assert shown.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_delete_first_tea_keeps_remaining_ids(self, test_client):
        before = (await test_client.get("/api/teas")).json()
        assert len(before) == 5

        await test_client.delete(f"/api/teas/{before[0]['_id']}")
        after = (await test_client.get("/api/teas")).json()

        assert len(after) == 4
        assert before[0] not in after
        assert after == before[1:]

    @pytest.mark.asyncio
    async def test_put_third_tea_replaces_exactly_that_item(self, test_client):
        before = (await test_client.get("/api/teas")).json()
        third_id = before[2]["_id"]
        new_body = {"name": "Lapsang Souchong", "brand": "Twinings"}

        updated = await test_client.put(f"/api/teas/{third_id}", json=new_body)
        shown = (await test_client.get(f"/api/teas/{third_id}")).json()
        after = (await test_client.get("/api/teas")).json()

        assert updated.status_code == 200
        assert shown == {"_id": third_id, **new_body}
        assert after[:2] == before[:2]
        assert after[3:] == before[3:]

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_not_found(self, test_client):
        response = await test_client.put("/api/teas/does-not-exist", json={"name": "x"})

        assert response.status_code == 404
        assert "does-not-exist" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_delete_unknown_id_is_not_found(self, test_client):
        response = await test_client.delete("/api/teas/does-not-exist")

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [["Chai"], "Chai", 42])
    async def test_non_object_payload_rejected(self, test_client, payload):
        response = await test_client.post("/api/teas", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "body"
        assert len((await test_client.get("/api/teas")).json()) == len(TEAS)

    @pytest.mark.asyncio
    async def test_malformed_json_body_rejected(self, test_client):
        response = await test_client.post(
            "/api/teas",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "body"
        assert body["request_id"] == response.headers["X-Request-ID"]
        assert "detail" not in body
        assert len((await test_client.get("/api/teas")).json()) == len(TEAS)

    @pytest.mark.asyncio
    async def test_missing_body_rejected_on_create(self, test_client):
        response = await test_client.post("/api/teas")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["request_id"]
        assert body["details"]["errors"]

    @pytest.mark.asyncio
    async def test_missing_body_rejected_on_update(self, test_client):
        first = (await test_client.get("/api/teas")).json()[0]

        response = await test_client.put(f"/api/teas/{first['_id']}")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert (await test_client.get(f"/api/teas/{first['_id']}")).json() == first

    @pytest.mark.asyncio
    async def test_payload_content_not_validated(self, test_client):
        """Any JSON object is accepted as-is, whatever its fields."""
        payload = {"anything": {"nested": [1, 2, 3]}, "flag": None}

        created = (await test_client.post("/api/teas", json=payload)).json()

        assert created == {"_id": created["_id"], **payload}

    @pytest.mark.asyncio
    async def test_resources_are_independent(self, test_client):
        await test_client.post("/api/teas", json={"name": "Chai"})

        biscuits = (await test_client.get("/api/biscuits")).json()

        assert all(biscuit.get("name") != "Chai" for biscuit in biscuits)

    @pytest.mark.asyncio
    async def test_unmounted_resource_is_404(self, test_client):
        response = await test_client.get("/api/games")

        assert response.status_code == 404


class TestCrudRoutesDocumentStore:

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, document_client):
        created = (await document_client.post("/api/games", json={"name": "Chess"})).json()
        game_id = created["_id"]

        assert (await document_client.get("/api/games")).json() == [created]

        updated = await document_client.put(f"/api/games/{game_id}", json={"name": "Go"})
        assert updated.json() == {"_id": game_id, "name": "Go"}

        deleted = await document_client.delete(f"/api/games/{game_id}")
        assert deleted.json() == {"_id": game_id, "name": "Go"}

        assert (await document_client.get(f"/api/games/{game_id}")).status_code == 404
        assert (await document_client.get("/api/games")).json() == []

    @pytest.mark.asyncio
    async def test_memory_and_document_resources_side_by_side(self, document_client):
        teas = await document_client.get("/api/teas")
        games = await document_client.get("/api/games")

        assert teas.status_code == 200
        assert len(teas.json()) == len(TEAS)
        assert games.status_code == 200
        assert games.json() == []


class TestCrudRouterFactory:

    def test_routes_are_generic(self):
        router = create_crud_router(MemoryCollection("widgets"))

        routes = {(route.path, tuple(sorted(route.methods))) for route in router.routes}

        assert routes == {
            ("", ("GET",)),
            ("", ("POST",)),
            ("/{item_id}", ("GET",)),
            ("/{item_id}", ("PUT",)),
            ("/{item_id}", ("DELETE",)),
        }

    @pytest.mark.asyncio
    async def test_custom_prefix_and_injected_registry(self):
        from httpx import ASGITransport, AsyncClient

        registry = ResourceRegistry()
        registry.add(MemoryCollection("widgets", initial=[{"name": "sprocket"}]))
        await registry.connect_all()
        app = create_app(
            Settings(memory_resources="", document_resources="", api_prefix="/v2/"),
            registry=registry,
        )

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/v2/widgets")

        assert response.status_code == 200
        assert response.json()[0]["name"] == "sprocket"


class TestCrossCuttingHeaders:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/teas")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_propagated_into_errors(self, test_client):
        response = await test_client.get(
            "/api/teas/missing", headers={"X-Request-ID": "trace-123"}
        )

        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_any_origin_allowed(self, test_client):
        response = await test_client.get(
            "/api/teas", headers={"Origin": "http://localhost:3000"}
        )

        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_preflight_allowed(self, test_client):
        response = await test_client.options(
            "/api/teas",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "DELETE",
            },
        )

        assert response.status_code == 200
