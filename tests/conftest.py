"""Pytest fixtures for dupass tests."""

import pytest

from dupass.ingestion.graphql_client import QueryExecutionError


@pytest.fixture
def sleeps():
    """Records requested inter-request delays instead of sleeping."""
    recorded = []
    return recorded

@pytest.fixture
def fake_sleep(sleeps):
    return sleeps.append

@pytest.fixture
def permission_error():
    return QueryExecutionError("GraphQL request denied with HTTP 403",
                               status_code=403, permission_related=True)

@pytest.fixture(autouse=True)
def clear_falcon_env(monkeypatch):
    """Keep developer credentials out of the tests."""
    for name in ("FALCON_CLIENT_ID", "FALCON_CLIENT_SECRET", "FALCON_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
