"""API test fixtures: the real app wired to the in-memory test services."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from maintenix.api.deps import get_attachment_service, get_maintenance_service


@pytest.fixture
def app(maintenance_service, attachment_service) -> FastAPI:
    from maintenix.main import create_app

    app = create_app()
    app.dependency_overrides[get_maintenance_service] = lambda: maintenance_service
    app.dependency_overrides[get_attachment_service] = lambda: attachment_service
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(creator) -> dict[str, str]:
    """Identity header as forwarded by the gateway."""
    return {"X-User-Id": str(creator.id)}
