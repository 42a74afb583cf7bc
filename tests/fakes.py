"""Test doubles for the image provider and blob storage."""

import asyncio
import itertools


class FakeImageClient:
    """Stands in for the text-to-image provider.

    Calls whose zero-based index is in ``fail_on`` raise, every other call
    returns a fake remote URL.
    """

    model = "fake/flux"

    def __init__(
        self, fail_on=(), fail_all=False, content=b"\x89PNG fake", content_type="image/png", delay=0.0
    ):
        self.fail_on = set(fail_on)
        self.fail_all = fail_all
        self.content = content
        self.content_type = content_type
        self.delay = delay
        self.prompts: list[str] = []
        self._counter = itertools.count()

    async def generate(self, prompt: str) -> str:
        index = next(self._counter)
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_all or index in self.fail_on:
            raise RuntimeError(f"provider unavailable (call {index})")
        return f"https://cdn.example.com/{index}.png"

    async def download(self, url: str) -> tuple[bytes, str | None]:
        return self.content, self.content_type


class MemoryStorage:
    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    async def save(self, data: bytes, filename: str) -> str:
        self.files[filename] = data
        return f"/generated/{filename}"

    async def delete(self, url: str) -> None:
        self.files.pop(url.rsplit("/", 1)[-1], None)
