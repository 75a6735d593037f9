"""
Configuration file for pytest.
"""
import sys
import os

import pytest

# Add the project root to Python path so tests can import modules
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from exchanges.signing import BitcoinDeCredentials  # noqa: E402


@pytest.fixture
def credentials() -> BitcoinDeCredentials:
    """Create test credentials."""
    return BitcoinDeCredentials(api_key="test-api-key", api_secret="super-secret")
