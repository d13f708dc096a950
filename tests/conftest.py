import os
import time

import pytest

from kraamweek.data_service import DataService
from kraamweek.storage import JsonFileStore


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def service(store):
    return DataService(store)


@pytest.fixture
def dutch_local_time():
    """Local time is CET/CEST (UTC+1 in January) for the duration of the test."""
    old = os.environ.get("TZ")
    os.environ["TZ"] = "CET-1CEST,M3.5.0,M10.5.0/3"
    time.tzset()
    yield
    if old is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = old
    time.tzset()
