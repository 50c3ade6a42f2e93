"""Shared pytest configuration for wren examples.

Provides the ``example_app`` fixture that loads a fresh App instance
from the ``app.py`` file in the same directory as the test. The example
directory is put on ``sys.path`` so route files can import sibling
helper modules, and those helpers are re-imported for every test so
in-memory state starts empty.
"""

import importlib.util
import sys
from pathlib import Path

import pytest

_HELPERS = ("store",)


@pytest.fixture
def example_app(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch):
    """Load a fresh App from the sibling app.py next to the test file."""
    example_dir = Path(request.path).parent
    monkeypatch.syspath_prepend(str(example_dir))
    for name in _HELPERS:
        sys.modules.pop(name, None)

    app_path = example_dir / "app.py"
    module_name = f"example_{example_dir.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.app


@pytest.fixture(autouse=True)
def _reset_rate_limit():
    from wren.middleware.rate_limit import default_store

    default_store.reset()
    yield
    default_store.reset()
