import io
import os
import random
import sys

# Ensure project root is in path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, PROJECT_ROOT)

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from pvinspect.main import create_app
from pvinspect.panel_data import SHOWCASE_CATALOG
from pvinspect.services.result_aggregator import ResultAggregator

@pytest.fixture
def client():
    """
    Test client for a fresh app instance, so uploads never leak between tests.
    """
    return TestClient(create_app())

@pytest.fixture
def aggregator():
    """Aggregator over the bundled showcase catalog with a seeded random source."""
    return ResultAggregator(SHOWCASE_CATALOG, rng=random.Random(1234))

@pytest.fixture
def png_bytes():
    """A small in-memory PNG, 64x32."""
    buffered = io.BytesIO()
    Image.new('RGB', (64, 32), color='blue').save(buffered, format="PNG")
    return buffered.getvalue()
