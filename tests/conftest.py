"""Shared test fixtures and configuration for all tests.

This conftest.py provides a provider stack wired onto the scripted mock
platform, so unit tests exercise the real executor, engine and pollers
without any network access.
"""

import pytest
import pytest_asyncio

from platform_provider.config import Settings
from platform_provider.context import OperationContext
from platform_provider.diagnostics import Diagnostics
from platform_provider.resource import ProviderData
from tests.fixtures import MockPlatform


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with millisecond backoff so polling tests run fast.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.RATE_LIMIT_RETRIES = 1
    """
    return Settings(
        # === Application ===
        APP_NAME="Platform Provider (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Platform API ===
        PLATFORM_API="http://platform.test",
        PLATFORM_USERNAME=None,
        PLATFORM_PASSWORD=None,

        # === Rate Limiting ===
        RATE_LIMIT_RETRIES=3,
        RATE_LIMIT_DEFAULT_DELAY=0.001,
        RATE_LIMIT_JITTER=0.0,

        # === Status Polling ===
        RETRY_INITIAL_DELAY=0.001,
        RETRY_MAX_DELAY=0.005,
        RETRY_BACKOFF_FACTOR=2.0,
        RETRY_MAX_DURATION=5.0,
        RETRY_MAX_ATTEMPTS=0,
    )


@pytest.fixture
def mock_platform() -> MockPlatform:
    return MockPlatform()


@pytest_asyncio.fixture
async def provider(test_settings: Settings, mock_platform: MockPlatform):
    """ProviderData whose client talks to mock_platform."""
    data = ProviderData.from_settings(test_settings, transport=mock_platform.transport)
    yield data
    await data.aclose()


@pytest.fixture
def ctx() -> OperationContext:
    return OperationContext()


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics()
