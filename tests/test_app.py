"""Tests for wren.app -- registration, decorators, lifespan, and discovery."""

from pathlib import Path

import pytest

from wren import App, AppConfig, create_app
from wren.errors import ClientError, RegistrationError
from wren.middleware import status_error_handler
from wren.testing import TestClient


class TestAddRoute:
    def test_unknown_method(self) -> None:
        app = App()
        with pytest.raises(RegistrationError, match="unsupported HTTP method"):
            app.add_route("FETCH", "/x", lambda req, res: None)

    def test_method_is_case_insensitive(self) -> None:
        app = App()
        app.add_route("get", "/x", lambda req, res: None)
        assert app.routes[0].methods == frozenset({"GET"})

    def test_source_is_recorded(self) -> None:
        app = App()
        app.add_route("GET", "/x", lambda req, res: None, source="routes/x.get.py")
        assert app.routes[0].source == "routes/x.get.py"

    def test_duplicate_raises_at_call_site(self) -> None:
        app = App()
        app.add_route("GET", "/x", lambda req, res: None)
        with pytest.raises(RegistrationError):
            app.add_route("GET", "/x", lambda req, res: None)

    async def test_frozen_after_first_request(self) -> None:
        app = App()
        app.add_route("GET", "/x", lambda req, res: None)
        async with TestClient(app):
            pass
        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.add_route("POST", "/x", lambda req, res: None)


class TestRouteDecorator:
    async def test_plain_handler(self) -> None:
        app = App()

        @app.route("/items/:id")
        def show(ctx):
            return {"id": ctx.params["id"]}

        async with TestClient(app) as client:
            response = await client.get("/items/3")
        assert response.json() == {"id": "3"}

    async def test_multiple_methods(self) -> None:
        app = App()

        @app.route("/echo", methods=["POST", "PUT"])
        async def echo(ctx):
            return {"method": ctx.method, "body": ctx.body}

        async with TestClient(app) as client:
            posted = await client.post("/echo", json={"a": 1})
            put = await client.put("/echo", json={"b": 2})
        assert posted.json() == {"method": "POST", "body": {"a": 1}}
        assert put.json() == {"method": "PUT", "body": {"b": 2}}

    async def test_with_hooks(self) -> None:
        app = App()

        def deny(ctx):
            raise ClientError(429, "slow down")

        @app.route("/limited", on_request=deny, on_error=status_error_handler)
        def limited(ctx):
            return {"never": True}

        async with TestClient(app) as client:
            response = await client.get("/limited")
        assert response.status == 429
        assert response.json()["code"] == "RATE_LIMIT_EXCEEDED"

    def test_returns_original_function(self) -> None:
        app = App()

        def handler(ctx):
            return {}

        assert app.route("/h")(handler) is handler


class TestSubstrate:
    async def test_unknown_path_is_404(self) -> None:
        async with TestClient(App()) as client:
            response = await client.get("/missing")
        assert response.status == 404
        assert "error" in response.json()

    async def test_wrong_method_is_405_with_allow(self) -> None:
        app = App()
        app.add_route("GET", "/x", lambda req, res: None)
        async with TestClient(app) as client:
            response = await client.post("/x")
        assert response.status == 405
        assert response.header("allow") == "GET"

    async def test_raw_endpoint_error_is_500(self) -> None:
        async def broken(request, response):
            raise RuntimeError("raw failure")

        app = App()
        app.add_route("GET", "/x", broken)
        async with TestClient(app) as client:
            response = await client.get("/x")
        assert response.status == 500
        assert response.json() == {"error": "Internal Server Error"}

    async def test_client_status_on_plain_exception_is_kept(self) -> None:
        class Conflict(Exception):
            status = 409

        app = App()

        @app.route("/plain")
        def plain(ctx):
            raise Conflict("already exists")

        async with TestClient(app) as client:
            response = await client.get("/plain")
        assert response.status == 409
        assert response.json() == {"error": "already exists"}

    async def test_server_status_on_plain_exception_is_generic(self) -> None:
        class Unavailable(Exception):
            status = 503

        app = App()

        @app.route("/plain")
        def plain(ctx):
            raise Unavailable("backend down")

        async with TestClient(app) as client:
            response = await client.get("/plain")
        assert response.status == 500
        assert response.json() == {"error": "Internal Server Error"}

    async def test_raw_endpoint_return_value_is_sent(self) -> None:
        async def raw(request, response):
            return {"path": request.path}

        app = App()
        app.add_route("GET", "/raw", raw)
        async with TestClient(app) as client:
            response = await client.get("/raw")
        assert response.json() == {"path": "/raw"}

    async def test_head_sends_no_body(self) -> None:
        app = App()

        @app.route("/x", methods=["HEAD"])
        def head(ctx):
            return {"ignored": True}

        async with TestClient(app) as client:
            response = await client.head("/x")
        assert response.status == 200
        assert response.body == b""

    async def test_head_is_answered_by_get_route(self) -> None:
        app = App()

        @app.route("/items")
        def list_items(ctx):
            return [{"id": 1}]

        async with TestClient(app) as client:
            response = await client.head("/items")
        assert response.status == 200
        assert response.body == b""


class TestLifespan:
    async def test_startup_and_shutdown_hooks(self) -> None:
        app = App()
        events: list[str] = []

        @app.on_startup
        async def start():
            events.append("start")

        @app.on_shutdown
        def stop():
            events.append("stop")

        async with TestClient(app):
            assert events == ["start"]
        assert events == ["start", "stop"]

    async def test_asgi_lifespan_protocol(self) -> None:
        app = App()
        events: list[str] = []
        app.on_startup(lambda: events.append("start"))
        messages = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent: list[str] = []

        async def receive():
            return next(messages)

        async def send(message):
            sent.append(message["type"])

        await app({"type": "lifespan"}, receive, send)
        assert events == ["start"]
        assert sent == ["lifespan.startup.complete", "lifespan.shutdown.complete"]

    async def test_failing_startup_hook(self) -> None:
        app = App()

        @app.on_startup
        def fail():
            raise RuntimeError("no database")

        sent: list[dict] = []

        async def receive():
            return {"type": "lifespan.startup"}

        async def send(message):
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)
        assert sent == [{"type": "lifespan.startup.failed", "message": "no database"}]


class TestMountRoutes:
    def test_mounts_global_and_module_routes(self, write_route, tmp_path: Path) -> None:
        write_route("routes/health.get.py", "def default(ctx): return {'ok': True}\n")
        write_route("modules/users/routes/[id].get.py", "def get(ctx): return {}\n")
        app = App()

        registered = app.mount_routes(tmp_path / "routes", tmp_path / "modules")

        assert [(r.http_method, r.url_pattern) for r in registered] == [
            ("GET", "/health"),
            ("GET", "/api/users/:id"),
        ]
        assert registered[1].module_prefix == "users"

    def test_custom_mount_prefix(self, write_route, tmp_path: Path) -> None:
        write_route("modules/users/routes/index.get.py", "def get(ctx): return {}\n")
        app = App(AppConfig(module_mount_prefix="/v2"))
        registered = app.mount_routes(tmp_path / "missing", tmp_path / "modules")
        assert [r.url_pattern for r in registered] == ["/v2/users"]

    def test_missing_directories_register_nothing(self, tmp_path: Path) -> None:
        app = App()
        assert app.mount_routes(tmp_path / "a", tmp_path / "b") == []

    async def test_create_app_mounts_from_config(self, write_route, tmp_path: Path) -> None:
        write_route("routes/ping.get.py", "def default(ctx): return 'pong'\n")
        app = create_app(
            AppConfig(routes_dir=tmp_path / "routes", modules_dir=tmp_path / "modules")
        )
        async with TestClient(app) as client:
            response = await client.get("/ping")
        assert response.text == "pong"

    def test_create_app_without_mount(self, tmp_path: Path) -> None:
        app = create_app(AppConfig(routes_dir=tmp_path), mount=False)
        assert app.routes == []
