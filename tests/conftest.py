"""
Global test configuration and fixtures
"""

import pytest

from codegraph_depgraph.config import get_settings
from codegraph_depgraph.logging import setup_logging
from codegraph_depgraph.parsing.registry import get_grammar_cache
from codegraph_depgraph.sources import SourceFile


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Warnings and above only, on stderr"""
    setup_logging("WARNING", "console")


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Settings are cached; tests that patch the environment need a clean cache"""
    for name in ("DEPGRAPH_MAX_WORKERS", "DEPGRAPH_FORCE_PORTABLE", "DEPGRAPH_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def grammar_cache():
    """Shared grammar cache (grammars load once per test session)"""
    return get_grammar_cache()


@pytest.fixture
def source():
    """Build a SourceFile from a path and text"""

    def _make(path: str, content: str) -> SourceFile:
        return SourceFile(path=path, content=content)

    return _make


# Pytest hooks
def pytest_configure(config):
    """Register markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (git, filesystem, CLI)")


def pytest_collection_modifyitems(config, items):
    """Add markers from the test path"""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
