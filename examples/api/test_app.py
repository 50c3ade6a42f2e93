"""Tests for the API example -- discovery, hooks, module trees, proxy."""

from wren.testing import TestClient


class TestGlobalRoutes:
    async def test_health(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/health")
            assert response.status == 200
            assert response.json()["status"] == "ok"

    async def test_health_is_get_only(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/health")
            assert response.status == 405
            assert response.header("allow") == "GET"

    async def test_wildcard_route(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/files/docs/guide/intro.md")
            assert response.json() == {"path": "docs/guide/intro.md"}


class TestHookedRoute:
    async def test_response_hooks_decorate_result(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/test/42?verbose=1")
            assert response.status == 200
            data = response.json()
            assert data["id"] == "42"
            assert data["query"] == {"verbose": "1"}
            assert data["timestamp"].endswith("Z")
            assert data["meta"]["path"] == "/test/42"
            assert data["meta"]["method"] == "GET"

    async def test_error_hook_formats_forbidden(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/test/forbidden")
            assert response.status == 403
            assert response.json()["code"] == "FORBIDDEN"

    async def test_rate_limit(self, example_app) -> None:
        async with TestClient(example_app, client_address="10.1.2.3") as client:
            statuses = [(await client.get("/test/1")).status for _ in range(11)]
            assert statuses[:10] == [200] * 10
            assert statuses[10] == 429
            last = await client.get("/test/1")
            assert last.json()["code"] == "RATE_LIMIT_EXCEEDED"


class TestItems:
    async def test_create_and_fetch(self, example_app) -> None:
        async with TestClient(example_app) as client:
            created = await client.post("/items", json={"title": "Write docs"})
            assert created.status == 201
            item_id = created.json()["data"]["id"]

            response = await client.get(f"/items/{item_id}")
            assert response.json()["data"]["title"] == "Write docs"

            listed = await client.get("/items")
            assert len(listed.json()["data"]) == 1

    async def test_create_requires_title(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/items", json={})
            assert response.status == 400
            body = response.json()
            assert body["error"] == "Validation failed"
            assert body["details"][0]["field"] == "title"

    async def test_non_integer_id_is_rejected(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/items/abc")
            assert response.status == 400
            assert response.json()["error"] == "Invalid URL parameters"

    async def test_update_and_delete(self, example_app) -> None:
        async with TestClient(example_app) as client:
            created = await client.post("/items", json={"title": "Draft"})
            item_id = created.json()["data"]["id"]

            updated = await client.put(f"/items/{item_id}", json={"done": True})
            assert updated.json()["data"]["done"] is True

            deleted = await client.delete(f"/items/{item_id}")
            assert deleted.status == 204

            missing = await client.get(f"/items/{item_id}")
            assert missing.status == 404


class TestAdmin:
    async def test_missing_token(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/admin/stats")
            assert response.status == 401
            assert response.json()["code"] == "AUTH_REQUIRED"

    async def test_non_admin_token(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get(
                "/admin/stats", headers={"Authorization": "Bearer user-token"}
            )
            assert response.status == 403

    async def test_admin_token(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get(
                "/admin/stats", headers={"Authorization": "Bearer admin-token"}
            )
            assert response.status == 200
            assert response.json() == {"items": 0}


class TestModules:
    async def test_module_routes_are_mounted_under_api(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/api/users/2")
            assert response.json() == {"id": "2", "name": "Grace"}

    async def test_default_export_answers_every_verb(self, example_app) -> None:
        async with TestClient(example_app) as client:
            for method in ("GET", "POST", "DELETE"):
                response = await client.request(method, "/api/orders")
                assert response.json() == {"module": "orders", "method": method}


class TestGateway:
    async def test_forwards_to_existing_module(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/gateway/users/7/profile")
            assert response.json() == {
                "module": "users",
                "path": "/7/profile",
                "method": "POST",
            }

    async def test_module_without_routes_still_resolves(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/gateway/billing")
            assert response.json()["path"] == "/"

    async def test_unknown_module_lists_available(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/gateway/nope/x")
            assert response.status == 404
            body = response.json()
            assert body["success"] is False
            assert body["message"] == "Module 'nope' not found"
            assert body["availableModules"] == ["billing", "orders", "users"]
