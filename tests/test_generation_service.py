"""Tests for single-image generation and batch fan-out."""

import asyncio
import random

import pytest

from artswipe.core.database import AsyncDBPool
from artswipe.repository.image_repository import ImageRepository
from artswipe.services.generation_service import (
    BatchGenerationError,
    CapacityReachedError,
    GenerationError,
    GenerationService,
)
from artswipe.services.image_client import NoImageInResponseError
from tests.fakes import FakeImageClient, MemoryStorage

pytestmark = pytest.mark.anyio


def make_service(client: FakeImageClient, storage=None, **kwargs) -> GenerationService:
    kwargs.setdefault("rng", random.Random(0))
    return GenerationService(client, storage or MemoryStorage(), **kwargs)


async def run_batch(service: GenerationService):
    async with AsyncDBPool.get_session() as session:
        return await service.generate_batch(ImageRepository(session))


async def count_images() -> int:
    async with AsyncDBPool.get_session() as session:
        return await ImageRepository(session).total_count()


async def test_generate_image_stores_download_under_fresh_name() -> None:
    storage = MemoryStorage()
    service = make_service(FakeImageClient(content=b"jpeg-bytes", content_type="image/jpeg"), storage)

    first = await service.generate_image("a prompt")
    second = await service.generate_image("a prompt")

    assert first != second
    assert first.startswith("/generated/") and first.endswith(".jpg")
    assert list(storage.files.values()) == [b"jpeg-bytes", b"jpeg-bytes"]


async def test_generate_image_wraps_provider_failure() -> None:
    service = make_service(FakeImageClient(fail_all=True))

    with pytest.raises(GenerationError) as exc_info:
        await service.generate_image("a prompt")

    assert exc_info.value.prompt == "a prompt"
    assert "provider unavailable" in exc_info.value.reason


async def test_generate_image_wraps_missing_image() -> None:
    class NoImageClient(FakeImageClient):
        async def generate(self, prompt: str) -> str:
            raise NoImageInResponseError("No image URL in generation response")

    with pytest.raises(GenerationError, match="No image URL"):
        await make_service(NoImageClient()).generate_image("a prompt")


async def test_generate_image_rejects_empty_download() -> None:
    with pytest.raises(GenerationError, match="empty"):
        await make_service(FakeImageClient(content=b"")).generate_image("a prompt")


async def test_generate_image_wraps_storage_failure() -> None:
    class BrokenStorage(MemoryStorage):
        async def save(self, data: bytes, filename: str) -> str:
            raise OSError("disk full")

    with pytest.raises(GenerationError, match="disk full"):
        await make_service(FakeImageClient(), BrokenStorage()).generate_image("a prompt")


async def test_batch_creates_all_images(database) -> None:
    client = FakeImageClient()
    result = await run_batch(make_service(client, batch_size=3, max_images=10))

    assert len(result.created) == 3
    assert result.errors == []
    assert [image.prompt for image in result.created] == client.prompts
    assert all(image.model == "fake/flux" for image in result.created)
    assert await count_images() == 3


async def test_batch_tolerates_partial_failure(database) -> None:
    result = await run_batch(make_service(FakeImageClient(fail_on={1}), batch_size=3))

    assert len(result.created) == 2
    assert len(result.errors) == 1
    assert "provider unavailable" in result.errors[0]
    assert await count_images() == 2


async def test_batch_fails_when_every_attempt_fails(database) -> None:
    with pytest.raises(BatchGenerationError) as exc_info:
        await run_batch(make_service(FakeImageClient(fail_all=True), batch_size=3))

    assert len(exc_info.value.errors) == 3
    assert await count_images() == 0


async def test_batch_is_shrunk_to_remaining_capacity(database) -> None:
    client = FakeImageClient()
    service = make_service(client, batch_size=3, max_images=4)

    await run_batch(service)
    result = await run_batch(service)

    assert len(result.created) == 1
    assert len(client.prompts) == 4
    assert await count_images() == 4


async def test_batch_refused_at_capacity(database) -> None:
    client = FakeImageClient()
    service = make_service(client, batch_size=3, max_images=3)
    await run_batch(service)

    with pytest.raises(CapacityReachedError) as exc_info:
        await run_batch(service)

    assert (exc_info.value.count, exc_info.value.limit) == (3, 3)
    assert len(client.prompts) == 3
    assert await count_images() == 3


async def test_capacity_reports_count_and_limit(database) -> None:
    service = make_service(FakeImageClient(), batch_size=3, max_images=5)
    await run_batch(service)

    async with AsyncDBPool.get_session() as session:
        capacity = await service.capacity(ImageRepository(session))

    assert (capacity.count, capacity.limit, capacity.remaining) == (3, 5, 2)
    assert capacity.can_generate is True


async def test_concurrent_batches_share_the_cap(database) -> None:
    client = FakeImageClient(delay=0.05)
    service = make_service(client, batch_size=3, max_images=3)

    outcomes = await asyncio.gather(run_batch(service), run_batch(service), return_exceptions=True)

    refused = [outcome for outcome in outcomes if isinstance(outcome, CapacityReachedError)]
    completed = [outcome for outcome in outcomes if not isinstance(outcome, Exception)]
    assert len(refused) == 1
    assert len(completed[0].created) == 3
    assert len(client.prompts) == 3
    assert await count_images() == 3


async def test_failed_insert_removes_stored_files(database) -> None:
    class BrokenRepository(ImageRepository):
        async def add_generated(self, items, model):
            raise RuntimeError("insert failed")

    storage = MemoryStorage()
    service = make_service(FakeImageClient(fail_on={1}), storage, batch_size=3)

    async with AsyncDBPool.get_session() as session:
        with pytest.raises(RuntimeError, match="insert failed"):
            await service.generate_batch(BrokenRepository(session))

    assert storage.files == {}
    assert await count_images() == 0
