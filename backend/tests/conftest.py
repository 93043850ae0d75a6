"""Shared fixtures for the test suite."""

import pytest

from riftcoach.core.cache import analysis_store, benchmark_cache
from tests.builders import (
    build_benchmark,
    build_match,
    build_normalized,
    build_participant,
)


@pytest.fixture
def make_participant():
    return build_participant


@pytest.fixture
def make_match():
    return build_match


@pytest.fixture
def make_normalized():
    return build_normalized


@pytest.fixture
def make_benchmark():
    return build_benchmark


@pytest.fixture(autouse=True)
def clear_process_caches():
    """Process-wide caches must not leak between tests."""
    benchmark_cache.clear()
    analysis_store._cache.clear()
    yield
    benchmark_cache.clear()
    analysis_store._cache.clear()
