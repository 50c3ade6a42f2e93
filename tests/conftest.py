"""Shared fixtures: throwaway route trees written under ``tmp_path``."""

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from wren.middleware.rate_limit import default_store

type WriteRoute = Callable[[str, str], Path]


@pytest.fixture
def write_route(tmp_path: Path) -> WriteRoute:
    """Write ``source`` (dedented) to ``tmp_path / relpath`` and return the path."""

    def write(relpath: str, source: str = "") -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return write


@pytest.fixture(autouse=True)
def _reset_rate_limit():
    default_store.reset()
    yield
    default_store.reset()
