"""
Unit tests for Redis client and connection pooling.
"""

import pytest
from unittest.mock import MagicMock, patch

from fhir_gate.config import Settings
from fhir_gate.persistence.redis_client import RedisClient


@pytest.fixture
def mock_settings():
    """Mock settings for testing."""
    settings = MagicMock(spec=Settings)
    settings.REDIS_URL = "redis://localhost:6379/0"
    settings.WORKER_CONCURRENCY = 8
    return settings


@pytest.fixture(autouse=True)
def reset_pool():
    """Reset connection pool before each test."""
    RedisClient._pool = None
    yield
    RedisClient._pool = None


def test_get_client_creates_pool_once(mock_settings):
    """Pool is created on first call and shared afterwards."""
    with patch("fhir_gate.persistence.redis_client.ConnectionPool") as mock_pool, \
            patch("fhir_gate.persistence.redis_client.Redis") as mock_redis:
        mock_pool.from_url.return_value = MagicMock()

        RedisClient.get_client(mock_settings)
        RedisClient.get_client(mock_settings)

        mock_pool.from_url.assert_called_once_with(
            mock_settings.REDIS_URL,
            max_connections=16,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
        )
        assert mock_redis.call_count == 2
        mock_redis.assert_called_with(connection_pool=mock_pool.from_url.return_value)


def test_pool_size_has_floor(mock_settings):
    mock_settings.WORKER_CONCURRENCY = 1
    with patch("fhir_gate.persistence.redis_client.ConnectionPool") as mock_pool, \
            patch("fhir_gate.persistence.redis_client.Redis"):
        RedisClient.get_client(mock_settings)

        assert mock_pool.from_url.call_args.kwargs["max_connections"] == 4


def test_close_pool():
    """Closing disconnects and forgets the pool."""
    mock_pool = MagicMock()
    RedisClient._pool = mock_pool

    RedisClient.close_pool()

    mock_pool.disconnect.assert_called_once()
    assert RedisClient._pool is None


def test_close_pool_when_not_initialized():
    """Closing without a pool is a no-op."""
    RedisClient.close_pool()

    assert RedisClient._pool is None
