"""Tests for the fal.ai client and local blob storage."""

import json

import httpx
import pytest

from artswipe.core.rest_api import HttpxRestClientPool
from artswipe.main_config import GenerationConfig, StorageConfig
from artswipe.services.blob_storage import LocalBlobStorage
from artswipe.services.image_client import FalImageClient, NoImageInResponseError

pytestmark = pytest.mark.anyio


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def provider_response() -> dict:
    return {"images": [{"url": "https://cdn.fal.test/out.jpg", "content_type": "image/jpeg"}]}


@pytest.fixture
async def mock_pool(monkeypatch, requests_seen, provider_response):
    """Route the shared HTTP pool through an in-process transport."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        if request.url.host == "cdn.fal.test":
            return httpx.Response(200, content=b"jpeg-bytes", headers={"content-type": "image/jpeg"})
        if request.url.path.endswith("/broken"):
            return httpx.Response(503, json={"detail": "overloaded"})
        return httpx.Response(200, json=provider_response)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    monkeypatch.setattr(HttpxRestClientPool, "_client", client)
    yield client
    await client.aclose()


def make_client(**overrides) -> FalImageClient:
    config = GenerationConfig(fal_key="secret-key", base_url="https://fal.test/", **overrides)
    return FalImageClient(config)


async def test_generate_posts_prompt_and_returns_url(mock_pool, requests_seen) -> None:
    url = await make_client().generate("a red fox, watercolor painting, serene mood")

    assert url == "https://cdn.fal.test/out.jpg"
    (request,) = requests_seen
    assert request.method == "POST"
    assert str(request.url) == "https://fal.test/fal-ai/flux/schnell"
    assert request.headers["Authorization"] == "Key secret-key"
    assert json.loads(request.content) == {
        "prompt": "a red fox, watercolor painting, serene mood",
        "image_size": "square",
        "num_images": 1,
        "num_inference_steps": 4,
    }


async def test_generate_without_image_raises(mock_pool, provider_response) -> None:
    provider_response["images"] = []

    with pytest.raises(NoImageInResponseError):
        await make_client().generate("a prompt")


async def test_generate_propagates_http_errors(mock_pool) -> None:
    with pytest.raises(httpx.HTTPStatusError):
        await make_client(model="broken").generate("a prompt")


async def test_download_returns_bytes_and_content_type(mock_pool) -> None:
    content, content_type = await make_client().download("https://cdn.fal.test/out.jpg")

    assert content == b"jpeg-bytes"
    assert content_type == "image/jpeg"


async def test_local_storage_writes_file(tmp_path) -> None:
    storage = LocalBlobStorage(StorageConfig(directory=str(tmp_path / "images"), url_prefix="media/"))

    path = await storage.save(b"png-bytes", "abc.png")

    assert path == "/media/abc.png"
    assert (tmp_path / "images" / "abc.png").read_bytes() == b"png-bytes"


async def test_local_storage_rejects_nested_names(tmp_path) -> None:
    storage = LocalBlobStorage(StorageConfig(directory=str(tmp_path)))

    with pytest.raises(ValueError):
        await storage.save(b"data", "../escape.png")


async def test_local_storage_deletes_saved_file(tmp_path) -> None:
    storage = LocalBlobStorage(StorageConfig(directory=str(tmp_path)))
    path = await storage.save(b"png-bytes", "abc.png")

    await storage.delete(path)

    assert not (tmp_path / "abc.png").exists()


async def test_local_storage_delete_rejects_foreign_urls(tmp_path) -> None:
    storage = LocalBlobStorage(StorageConfig(directory=str(tmp_path)))

    with pytest.raises(ValueError):
        await storage.delete("https://cdn.fal.test/out.jpg")
