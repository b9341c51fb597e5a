from collections.abc import Iterator

import pytest
from dishka import AsyncContainer, Scope
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.app import create_app
from app.services.seeder import DatabaseSeeder
from app.settings.app import AppSettings
from app.settings.db import DatabaseSettings

from tests.support import ADMIN, JOHN, JWT_SECRET, login


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        jwt_secret=JWT_SECRET,
        env="test",
        bcrypt_rounds=4,
        db_synchronize=True,
    )


@pytest.fixture
def db_settings(tmp_path) -> DatabaseSettings:
    return DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")


@pytest.fixture
def app(app_settings, db_settings) -> FastAPI:
    return create_app(app_settings, db_settings)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


async def seed_users(container: AsyncContainer) -> None:
    async with container(scope=Scope.REQUEST) as request_container:
        seeder = await request_container.get(DatabaseSeeder)
        await seeder.seed()


@pytest.fixture
def seeded_client(app, client) -> TestClient:
    client.portal.call(seed_users, app.state.dishka_container)
    return client


@pytest.fixture
def admin_headers(seeded_client) -> dict[str, str]:
    return login(seeded_client, *ADMIN)


@pytest.fixture
def user_headers(seeded_client) -> dict[str, str]:
    return login(seeded_client, *JOHN)

