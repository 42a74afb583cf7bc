"""Shared fixtures: on-disk SQLite database, fake provider and storage, test client."""

import pytest
from fastapi.testclient import TestClient

from artswipe.core import lifespan as lifespan_module
from artswipe.core.database import AsyncDBPool
from artswipe.core.dependencies import get_generation_service
from artswipe.main import create_app
from artswipe.main_config import DatabaseConfig, StorageConfig
from artswipe.services.generation_service import GenerationService
from tests.fakes import FakeImageClient, MemoryStorage


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def db_config(tmp_path) -> DatabaseConfig:
    return DatabaseConfig(dsn=f"sqlite+aiosqlite:///{tmp_path / 'artswipe.db'}")


@pytest.fixture
async def database(db_config):
    """Initialized AsyncDBPool with tables, for async tests."""
    await AsyncDBPool.init(db_config)
    await AsyncDBPool.create_tables()
    yield AsyncDBPool
    await AsyncDBPool.dispose()


@pytest.fixture
def image_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def generation_service(image_client, storage) -> GenerationService:
    return GenerationService(image_client, storage, batch_size=3, max_images=10)


@pytest.fixture
def app(tmp_path, monkeypatch, db_config, generation_service):
    monkeypatch.setattr(lifespan_module, "database_config", db_config)
    monkeypatch.setattr(
        lifespan_module, "storage_config", StorageConfig(directory=str(tmp_path / "generated"))
    )
    test_app = create_app()
    test_app.dependency_overrides[get_generation_service] = lambda: generation_service
    return test_app


@pytest.fixture
def client(app) -> TestClient:
    """Test client with the lifespan running (database initialized)."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
