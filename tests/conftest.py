import os
import sys
from datetime import datetime, timedelta

import pytest


TESTS_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(TESTS_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def base_time():
    """Fixed naive UTC start instant."""
    return datetime(2020, 1, 1, 0, 0, 0)


@pytest.fixture
def market_open():
    """9:30 session open."""
    return datetime(2024, 1, 1, 9, 30, 0)


@pytest.fixture
def seconds(base_time):
    """base_time + n seconds."""
    return lambda n: base_time + timedelta(seconds=n)


@pytest.fixture
def days(base_time):
    """base_time + n days."""
    return lambda n: base_time + timedelta(days=n)
