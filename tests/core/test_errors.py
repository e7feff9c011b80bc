"""
Tests for the error envelope and storage error translation.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.content.models import Course
from app.core.exceptions import (
    NotFoundError,
    StorageError,
    register_exception_handlers,
)
from app.core.repository import BaseRepository


@pytest.fixture
def error_app():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Course not found", resource="course")

    @app.get("/storage")
    async def storage():
        raise StorageError(operation="save_position")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    return app


@pytest.fixture
async def error_client(error_app):
    transport = ASGITransport(app=error_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_app_error_envelope(error_client: AsyncClient):
    response = await error_client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {
            "code": "NOT_FOUND",
            "message": "Course not found",
            "details": {"resource": "course"},
        },
    }


@pytest.mark.asyncio
async def test_storage_error_is_internal(error_client: AsyncClient):
    response = await error_client.get("/storage")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL"


@pytest.mark.asyncio
async def test_unhandled_error_is_internal(error_client: AsyncClient):
    response = await error_client.get("/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INTERNAL"


def test_repository_translates_database_errors():
    db = MagicMock()
    repo = BaseRepository(db, Course)

    with pytest.raises(StorageError) as exc_info:
        with repo.storage_errors("list_track_course_ids"):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    db.rollback.assert_called_once()
    assert exc_info.value.details == {"operation": "list_track_course_ids"}
    assert isinstance(exc_info.value.__cause__, OperationalError)
