"""Test configuration."""

import os
from pathlib import Path
from typing import List

import pytest
from pytest import Config

# Settings are read at import time; keep the suite off real Firestore
os.environ.setdefault("TESTING", "true")

from app.core.logging import configure_logging  # noqa: E402

# Load .env.test for tests when present
try:
    from dotenv import load_dotenv

    env_test_file = Path(__file__).parent.parent / ".env.test"
    if env_test_file.exists():
        load_dotenv(env_test_file, override=True)
except ImportError:
    # dotenv not available, skip loading
    pass

fixture = pytest.fixture


@fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


pytest_plugins: List[str] = [
    "tests.fixtures.content_store",
    "tests.fixtures.api",
]


def pytest_configure(config: Config) -> None:
    """Configure pytest.

    Args:
        config: Pytest configuration object
    """
    configure_logging(testing=True)
    config.addinivalue_line("markers", "integration: mark test as an integration test")
