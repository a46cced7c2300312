# ABOUTME: Shared test fixtures for the weatherapp test suite.
# ABOUTME: Provides a fresh store and a canned /weather payload.

import pytest

from tests.helpers import current_payload
from weatherapp.store import WeatherStore


@pytest.fixture
def store() -> WeatherStore:
    return WeatherStore()


@pytest.fixture
def ok_current() -> dict:
    return current_payload()
