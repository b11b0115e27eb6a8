"""Fixtures for running Ferry's example apps as tests.

Every example directory holds an ``app.py`` that builds its own renderer from
the ``templates/`` directory beside it. ``example_app`` imports that file under
a per-directory module name and unregisters it afterwards, so each test gets a
renderer whose template set was compiled from scratch. ``example_client``
serves the module's Starlette ``app`` through Starlette's TestClient.
"""

from __future__ import annotations

import importlib.util
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

import pytest


def _load_app(directory: Path) -> ModuleType:
    module_name = f"ferry_example_{directory.name}"
    spec = importlib.util.spec_from_file_location(module_name, directory / "app.py")
    if spec is None or spec.loader is None:
        raise ImportError(f"No app.py in example directory {directory}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[module_name]
        raise
    return module


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> Iterator[ModuleType]:
    """The ``app.py`` module next to the requesting test file."""
    module = _load_app(Path(request.path).parent)
    yield module
    sys.modules.pop(module.__name__, None)


@pytest.fixture
def example_client(example_app: ModuleType):
    """TestClient over the example's Starlette ``app`` (skips without starlette)."""
    pytest.importorskip("starlette")
    pytest.importorskip("httpx")
    from starlette.testclient import TestClient

    if example_app.app is None:
        pytest.skip("example app was not built")
    return TestClient(example_app.app)
