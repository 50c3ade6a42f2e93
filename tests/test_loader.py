"""Tests for wren.discovery.loader -- importing route files into ModuleExports."""

import pytest

from wren.discovery.loader import exports_from_module, load_exports
from wren.discovery.types import HttpMethod
from wren.errors import LoadError


class TestLoadExports:
    def test_verb_exports(self, write_route) -> None:
        path = write_route(
            "routes/items.py",
            """
            def get(ctx):
                return "get"

            async def post(ctx):
                return "post"
            """,
        )
        exports = load_exports(path)
        assert set(exports.handlers) == {HttpMethod.GET, HttpMethod.POST}
        assert exports.default is None
        assert exports.source == path

    def test_upper_case_verb_exports(self, write_route) -> None:
        path = write_route(
            "routes/items.py",
            """
            def GET(ctx):
                return "get"
            """,
        )
        assert set(load_exports(path).handlers) == {HttpMethod.GET}

    def test_default_and_handler(self, write_route) -> None:
        path = write_route(
            "routes/[module].py",
            """
            def default(ctx):
                return "default"

            def handler(ctx):
                return "handler"
            """,
        )
        exports = load_exports(path)
        assert exports.default.__name__ == "default"
        assert exports.proxy_handler is exports.default

    def test_for_method_falls_back_to_default(self, write_route) -> None:
        path = write_route("routes/a.get.py", "def default(ctx): return 1\n")
        exports = load_exports(path)
        assert exports.for_method(HttpMethod.GET) is exports.default

    def test_hooks_are_normalized(self, write_route) -> None:
        path = write_route(
            "routes/a.get.py",
            """
            def check(ctx): pass
            def stamp(ctx, result): return result
            def recover(ctx, error): return None

            on_request = check
            on_before_response = [stamp, stamp]
            on_error = (recover,)

            def get(ctx): return {}
            """,
        )
        hooks = load_exports(path).middleware
        assert len(hooks.on_request) == 1
        assert len(hooks.on_before_response) == 2
        assert len(hooks.on_error) == 1

    def test_camel_case_hooks_accepted(self, write_route) -> None:
        path = write_route(
            "routes/a.get.py",
            """
            def check(ctx): pass
            onRequest = [check]
            def get(ctx): return {}
            """,
        )
        assert len(load_exports(path).middleware.on_request) == 1

    def test_same_file_names_do_not_collide(self, write_route) -> None:
        first = write_route("routes/a/index.py", "def get(ctx): return 'a'\n")
        second = write_route("routes/b/index.py", "def get(ctx): return 'b'\n")
        a = load_exports(first).handlers[HttpMethod.GET]
        b = load_exports(second).handlers[HttpMethod.GET]
        assert a(None) == "a"
        assert b(None) == "b"


class TestLoadErrors:
    def test_syntax_error(self, write_route) -> None:
        path = write_route("routes/broken.py", "def get(ctx)\n    return 1\n")
        with pytest.raises(LoadError) as exc_info:
            load_exports(path)
        assert exc_info.value.path == str(path)
        assert "SyntaxError" in exc_info.value.reason

    def test_import_time_exception(self, write_route) -> None:
        path = write_route("routes/boom.py", "raise RuntimeError('nope')\n")
        with pytest.raises(LoadError, match="RuntimeError: nope"):
            load_exports(path)

    def test_non_callable_verb(self, write_route) -> None:
        path = write_route("routes/bad.py", "get = 42\n")
        with pytest.raises(LoadError, match="'get' must be callable"):
            load_exports(path)

    def test_non_callable_hook(self, write_route) -> None:
        path = write_route(
            "routes/bad.py",
            """
            on_request = ["not a function"]
            def get(ctx): return {}
            """,
        )
        with pytest.raises(LoadError, match="on_request"):
            load_exports(path)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(LoadError):
            load_exports(tmp_path / "missing.py")


class TestExportsFromModule:
    def test_plain_object(self) -> None:
        class Exports:
            @staticmethod
            def put(ctx):
                return "put"

        exports = exports_from_module(Exports, "virtual.py")
        assert set(exports.handlers) == {HttpMethod.PUT}
