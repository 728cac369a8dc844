"""Pytest configuration and fixtures for backend tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from elixhauser.main import app
from elixhauser.services.elixhauser_scores import (
    REQUIRED_COMORBIDITIES,
    reset_elixhauser_score_service,
)


@pytest.fixture
def empty_row() -> dict[str, int]:
    """A row with every required comorbidity absent."""
    return {name: 0 for name in REQUIRED_COMORBIDITIES}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client against the ASGI app.

    The score service singleton is reset so each test starts cold.
    """
    reset_elixhauser_score_service()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
