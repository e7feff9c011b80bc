from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env.test"
load_dotenv(env_file)

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db import base as _models  # noqa: E402, F401
from app.core.security import create_access_token  # noqa: E402
from app.db.session import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from tests.utils.factories import (  # noqa: E402
    create_entitlement_factory,
    create_subscription_factory,
    create_user_factory,
)


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="session")
def test_session_local(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(test_session_local):
    session = test_session_local()

    session.commit = session.flush

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
async def test_app(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture
def test_user(db_session):
    return create_user_factory(db_session, email="test@example.com", role="learner")


@pytest.fixture
def test_admin(db_session):
    return create_user_factory(db_session, email="admin@example.com", role="admin")


@pytest.fixture
def test_subscription(db_session, test_user):
    return create_subscription_factory(
        db_session,
        user=test_user,
        current_period_end=datetime.now(UTC) + timedelta(days=30),
    )


@pytest.fixture
def test_entitlement(db_session, test_user):
    return create_entitlement_factory(db_session, user=test_user)


@pytest.fixture
def test_user_token(test_user):
    return create_access_token(
        {"sub": str(test_user.id), "email": test_user.email, "role": test_user.role}
    )


@pytest.fixture
def test_admin_token(test_admin):
    return create_access_token(
        {"sub": str(test_admin.id), "email": test_admin.email, "role": test_admin.role}
    )
