"""
Pytest configuration and shared fixtures for the Extendables tests.

Every test gets its own search folder under tmp_path and its own registry,
so no module state leaks between tests.
"""

import logging
import sys
import pytest
from pathlib import Path
from typing import Any, Dict, List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from extendables.module_system import ModuleRegistry, PathResolver
from extendables.utils.log_buffer import BufferedLog

from tests.test_utils import TEST_LOGGER_NAME


@pytest.fixture
def search_dir(tmp_path) -> Path:
    """Empty search-path folder."""
    path = tmp_path / "packages"
    path.mkdir()
    return path


@pytest.fixture
def calls() -> List[str]:
    """Shared list modules append to, to count executions."""
    return []


@pytest.fixture
def test_logger() -> logging.Logger:
    return logging.getLogger(TEST_LOGGER_NAME)


@pytest.fixture
def make_registry(search_dir, calls, test_logger):
    """
    Factory: build and populate a registry over ``search_dir``.

    The registry's log is attached to ``tests.extendables`` so caplog sees
    load failures immediately; ``calls`` is in every module's scope.
    """
    def _make_registry(
        search_path: Optional[List[Any]] = None,
        shared_scope: Optional[Dict[str, Any]] = None,
    ) -> ModuleRegistry:
        scope = {"calls": calls}
        scope.update(shared_scope or {})
        registry = ModuleRegistry(
            PathResolver(base=search_dir.parent),
            log=BufferedLog(test_logger),
            shared_scope=scope,
        )
        return registry.populate(search_path if search_path is not None else [search_dir])

    return _make_registry


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
