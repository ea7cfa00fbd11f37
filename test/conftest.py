import sys
import logging
from pathlib import Path

import pytest

# Make src/ importable, and test/ for the shared helpers module
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from helpers import OTHER_SECRET, SECRET


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure logging for tests."""
    logging.basicConfig(level=logging.INFO)


@pytest.fixture
def secret() -> bytes:
    return SECRET


@pytest.fixture
def other_secret() -> bytes:
    return OTHER_SECRET
