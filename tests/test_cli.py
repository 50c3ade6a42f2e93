"""Tests for wren.cli -- argument parsing, route listing, and app resolution."""

from pathlib import Path

import pytest

from wren.app import App
from wren.cli import main
from wren.cli._resolve import resolve_app

APP_SOURCE = """
from wren import App

app = App()
app.add_route("GET", "/ping", lambda request, response: None, source="ping-endpoint")


def create_app():
    return app


def not_an_app():
    return 42
"""


@pytest.fixture
def app_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """A throwaway importable module with an app, under a unique name."""
    name = f"cli_app_{tmp_path.name.replace('-', '_')}"
    (tmp_path / f"{name}.py").write_text(APP_SOURCE, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0

    def test_run_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run"])
        assert exc_info.value.code == 2

    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "wren" in capsys.readouterr().out


class TestRoutesCommand:
    def test_lists_scanned_routes(
        self, write_route, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        write_route("routes/health.get.py", "def default(ctx): return {}\n")
        write_route("modules/users/routes/[id].get.py", "def get(ctx): return {}\n")

        main([
            "routes",
            "--routes-dir", str(tmp_path / "routes"),
            "--modules-dir", str(tmp_path / "modules"),
        ])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "SOURCE"]
        assert lines[2].split()[:2] == ["GET", "/health"]
        assert lines[3].split()[:2] == ["GET", "/api/users/:id"]
        assert lines[3].endswith("[id].get.py")

    def test_no_routes(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "--routes-dir", str(tmp_path / "a"), "--modules-dir", str(tmp_path / "b")])
        assert capsys.readouterr().out.strip() == "No routes registered."

    def test_lists_app_routes(self, app_module: str, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "--app", f"{app_module}:app"])
        out = capsys.readouterr().out
        assert "/ping" in out
        assert "ping-endpoint" in out

    def test_bad_app_exits_one(self, app_module: str, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--app", f"{app_module}:missing"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


class TestRunCommand:
    def test_runs_resolved_app(self, app_module: str, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr(App, "run", lambda self, host=None, port=None: calls.append((host, port)))
        main(["run", app_module, "--host", "0.0.0.0", "--port", "9000"])
        assert calls == [("0.0.0.0", 9000)]

    def test_missing_server_extra(
        self,
        app_module: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        def no_server(self, host=None, port=None):
            raise ImportError("No module named 'pounce'")

        monkeypatch.setattr(App, "run", no_server)
        with pytest.raises(SystemExit) as exc_info:
            main(["run", app_module])
        assert exc_info.value.code == 1
        assert "wren[server]" in capsys.readouterr().err


class TestResolveApp:
    def test_default_attribute(self, app_module: str) -> None:
        assert isinstance(resolve_app(app_module), App)

    def test_factory(self, app_module: str) -> None:
        assert isinstance(resolve_app(f"{app_module}:create_app"), App)

    def test_factory_returning_wrong_type(self, app_module: str) -> None:
        with pytest.raises(TypeError, match="not a wren.App"):
            resolve_app(f"{app_module}:not_an_app")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("definitely_not_a_module_xyz:app")
