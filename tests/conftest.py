"""
Shared test fixtures — FastAPI test client.
"""

import os
import pytest
from fastapi.testclient import TestClient

# Pin the tax rate before importing app modules
os.environ["TAX_RATE"] = "0.10"

from estimator.main import app


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)
