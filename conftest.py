import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_snapshot_cache():
    # Snapshots are cached across calls; every test starts cold
    cache.clear()
    yield
    cache.clear()
