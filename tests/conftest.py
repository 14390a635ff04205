"""Test fixtures for the Juli runtime test suite."""
import importlib
import pytest
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from juli.runtime.context import RuntimeContext
from juli.runtime.module import Module
from juli.runtime.registry import ModuleRegistry


class CallCounter:
    """Zero-argument native function that counts its invocations."""

    def __init__(self):
        self.count = 0

    def __call__(self):
        self.count += 1


@pytest.fixture
def counter() -> CallCounter:
    """Fresh invocation counter."""
    return CallCounter()


@pytest.fixture
def registry() -> ModuleRegistry:
    """Empty module registry."""
    return ModuleRegistry()


@pytest.fixture
def context() -> RuntimeContext:
    """Runtime context with an empty registry."""
    return RuntimeContext()


@pytest.fixture
def counted_context(context: RuntimeContext, counter: CallCounter) -> RuntimeContext:
    """Context with module ``m`` exported as "M", exposing ``f`` -> counter."""
    m = Module("m")
    m.define_function("f", counter)
    context.registry.export("M", m.snapshot())
    return context


@pytest.fixture
def sample_program() -> List[Dict[str, Any]]:
    """Program that calls M.f, exits with 3, then calls M.f again."""
    return [
        {"type": "call", "name": "M.f"},
        {"type": "jexit", "code": 3},
        {"type": "call", "name": "M.f"},
    ]


@pytest.fixture
def write_program(tmp_path):
    """Write a program to a JSON file and return its path."""
    def _write(program: Any, name: str = "program.json") -> str:
        path = tmp_path / name
        with open(path, "w") as f:
            json.dump(program, f)
        return str(path)
    return _write


@pytest.fixture
def plugin_factory(tmp_path, monkeypatch):
    """Create an importable plugin module from source and return its name."""
    monkeypatch.syspath_prepend(str(tmp_path))
    created = []

    def _create(name: str, source: str) -> str:
        (tmp_path / f"{name}.py").write_text(source)
        importlib.invalidate_caches()
        created.append(name)
        return name

    yield _create

    for name in created:
        sys.modules.pop(name, None)
