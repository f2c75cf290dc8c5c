"""Shared pytest fixtures for bindwire tests."""

import pytest

from bindwire.container import Container
from bindwire.dependencies import DependenciesExtractor
from bindwire.lock_mode import LockMode


@pytest.fixture()
def container() -> Container:
    """Default container with cycle detection and thread locks."""
    return Container()


@pytest.fixture()
def container_no_cycle_detection() -> Container:
    """Container that recurses until RecursionError on cycles."""
    return Container(detect_cycles=False)


@pytest.fixture()
def container_no_locks() -> Container:
    """Container that skips singleton locking."""
    return Container(lock_mode=LockMode.NONE)


@pytest.fixture()
def dependencies_extractor() -> DependenciesExtractor:
    """DependenciesExtractor instance."""
    return DependenciesExtractor()
