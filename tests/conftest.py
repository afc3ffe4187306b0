"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from nscache.core.config.settings import Settings  # noqa: E402
from nscache.core.interfaces.cache import InMemoryBackend  # noqa: E402
from nscache.infrastructure.cache.facade import CacheFacade, reset_cache  # noqa: E402
from tests.test_fixtures import CacheTestFactory  # noqa: E402

TEST_NAMESPACE = "app1"
TEST_SERVERS = [("localhost", 11211)]


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def test_settings():
    """
    Settings isolated from the developer's environment and .env file.
    """
    return Settings(
        _env_file=None,
        CACHE_NAMESPACE=TEST_NAMESPACE,
        CACHE_SERVERS=["localhost:6379"],
        CACHE_BENCHMARK_ENABLED=False,
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


# ============================================================================
# Environment-Based Integration Toggles
# ============================================================================


@pytest.fixture(scope="session")
def use_real_redis():
    """Check if real Redis should be used for integration tests."""
    return os.getenv("USE_REAL_REDIS", "0").lower() in ("1", "true", "yes")


# ============================================================================
# Backend Fixtures
# ============================================================================


@pytest.fixture
def in_memory_backend():
    """Connected in-memory backend."""
    backend = InMemoryBackend()
    backend.connect(TEST_SERVERS)
    return backend


@pytest.fixture
def spy_backend():
    """In-memory backend with call recording."""
    return CacheTestFactory.spy_backend()


# ============================================================================
# Facade Fixtures
# ============================================================================


@pytest.fixture
def uninitialized_cache():
    """Facade that has not been initialized (no namespace)."""
    return CacheFacade(InMemoryBackend())


@pytest.fixture
def cache():
    """Facade initialized with namespace 'app1' over an in-memory backend."""
    facade = CacheFacade(InMemoryBackend())
    facade.initialize(TEST_NAMESPACE, TEST_SERVERS)
    return facade


@pytest.fixture
def spy_cache(spy_backend):
    """Initialized facade whose backend calls can be asserted on."""
    facade = CacheFacade(spy_backend)
    facade.initialize(TEST_NAMESPACE, TEST_SERVERS)
    return facade


@pytest.fixture
def benchmark_cache():
    """Initialized facade with benchmarking enabled."""
    facade = CacheFacade(InMemoryBackend())
    facade.initialize(TEST_NAMESPACE, TEST_SERVERS, benchmark_enabled=True)
    return facade


@pytest.fixture(autouse=True)
def clean_global_cache():
    """Drop the process-wide facade after every test."""
    yield
    reset_cache()
