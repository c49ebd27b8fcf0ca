import os
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")

from membership.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from membership.auth import get_password_hash  # noqa: E402
from membership.database import Base, SessionLocal, engine  # noqa: E402
from membership.models import LiveModeEnum, RoleEnum, User  # noqa: E402
from services.api.app import app  # noqa: E402

PASSWORD = "password123"
_PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def api_client() -> Generator[TestClient, None, None]:
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def make_user(db_session) -> Callable[..., int]:
    """Insert a user directly and return its id."""

    def _make(username: str, role: RoleEnum = RoleEnum.MEMBER, incharge_id: int | None = None, **extra) -> int:
        user = User(
            username=username,
            password=_PASSWORD_HASH,
            contact_number=extra.pop("contact_number", "+100000"),
            live_mode=extra.pop("live_mode", LiveModeEnum.AUDIO),
            role=role,
            incharge_id=incharge_id,
            **extra,
        )
        db_session.add(user)
        db_session.commit()
        user_id = user.id
        db_session.expunge(user)
        return user_id

    return _make


def auth_header(client: TestClient, username: str, password: str = PASSWORD) -> dict[str, str]:
    response = client.post("/auth/login", json={"username": username, "password": password})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def login(api_client) -> Callable[..., dict[str, str]]:
    def _login(username: str, password: str = PASSWORD) -> dict[str, str]:
        return auth_header(api_client, username, password)

    return _login
