"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (in-memory repository, mocked event bus, HTTP via TestClient)
    - unit/       : Unit tests (pure functions, no I/O)
    - contracts/  : Test data factories shared by the layers above
"""
import os
import sys
from datetime import datetime
from typing import Any, Dict

import pytest

# Set testing environment BEFORE any service imports read settings
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"
os.environ["NATS_ENABLED"] = "false"
os.environ["GROUP_GIFT_REPOSITORY"] = "memory"
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)


# =============================================================================
# Test Configuration
# =============================================================================

class TestConfig:
    """Centralized test configuration"""

    SERVICES = {
        "group_gift_service": 8240,
    }

    POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT = int(os.getenv("POSTGRES_PORT", "5432"))
    NATS_URL = os.getenv("NATS_URL", "nats://localhost:4222")

    @classmethod
    def get_service_url(cls, service_name: str) -> str:
        port = cls.SERVICES.get(service_name)
        if not port:
            raise ValueError(f"Unknown service: {service_name}")
        return f"http://localhost:{port}"


@pytest.fixture(scope="session")
def test_config() -> TestConfig:
    """Provide test configuration"""
    return TestConfig()


# =============================================================================
# Test Data Generators
# =============================================================================

class TestDataGenerator:
    """Generate unique test data"""

    _counter = 0

    @classmethod
    def _next_id(cls) -> str:
        cls._counter += 1
        return f"{datetime.now().strftime('%Y%m%d%H%M%S')}_{cls._counter:04d}"

    @classmethod
    def email(cls) -> str:
        return f"test_{cls._next_id()}@example.com"

    @classmethod
    def creator(cls) -> str:
        return f"creator_{cls._next_id()}@example.com"


@pytest.fixture
def generate() -> TestDataGenerator:
    """Provide test data generator"""
    return TestDataGenerator()


@pytest.fixture
def sample_contributor(generate: TestDataGenerator) -> Dict[str, Any]:
    """Generate a sample contributor dict"""
    return {
        "name": "Test Contributor",
        "email": generate.email(),
    }
