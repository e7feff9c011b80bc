import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_root(test_client: AsyncClient):
    response = await test_client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


@pytest.mark.asyncio
async def test_health_check(test_client: AsyncClient):
    response = await test_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "healthy"}


@pytest.mark.asyncio
async def test_request_id_is_generated(test_client: AsyncClient):
    response = await test_client.get("/")

    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(test_client: AsyncClient):
    response = await test_client.get("/", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
