"""Fixtures for the runnable examples.

Every example directory holds an ``app.py`` and a ``test_*.py`` that
checks what it prints or returns.
"""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest


def _exec_app(app_path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(
        f"curly_example_{app_path.parent.name}", app_path
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load {app_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> ModuleType:
    """The ``app.py`` beside the requesting test, executed from scratch."""
    return _exec_app(Path(request.path).parent / "app.py")
