"""
HTTP client connection pool with httpx.

This module provides a singleton HTTP client pool for calls to the image
generation provider and for downloading the generated assets.

Key Features:
    - Connection pooling for efficient resource usage
    - HTTP/2 support for multiplexing requests
    - Configurable timeouts (connect, read, write, pool)
    - Optional transport-level retry on connection failures (off by default)
    - Redirect following (provider asset URLs redirect to a CDN)

Usage:
    # In the application lifespan
    await HttpxRestClientPool.get_client()
    ...
    await HttpxRestClientPool.dispose()

    # Anywhere else
    data = await fetch_url("https://api.example.com/data")
"""

import asyncio
from typing import Any

import httpx
from pydantic import BaseModel, Field

__all__ = [
    "ClientConfig",
    "HttpxRestClientPool",
    "fetch_url",
]


class TimeoutConfig(BaseModel):
    """HTTP client timeout settings."""

    connect: float = Field(default=5.0, description="Connection timeout (seconds)")
    # Image generation holds the request open until the image is ready
    read: float = Field(default=120.0, description="Read timeout (seconds)")
    write: float = Field(default=30.0, description="Write timeout (seconds)")
    pool: float = Field(default=30.0, description="Pool timeout (seconds)")

    def to_httpx_timeout(self) -> httpx.Timeout:
        """Convert to httpx.Timeout."""
        return httpx.Timeout(**self.model_dump())


class PoolConfig(BaseModel):
    """Connection pool settings."""

    max_connections: int = Field(default=100, description="Max total connections")
    max_keepalive: int = Field(default=20, description="Max idle connections")
    keepalive_expiry: float = Field(default=30.0, description="Idle connection TTL (seconds)")


class RetryConfig(BaseModel):
    """Retry settings for failed connection attempts."""

    max_retries: int = Field(default=0, description="Connection retry attempts")


class ClientConfig(BaseModel):
    """HTTP client configuration."""

    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    http2: bool = Field(default=True, description="Enable HTTP/2")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow redirects")


class HttpxRestClientPool:
    """Singleton HTTP client pool with connection reuse."""

    _client: httpx.AsyncClient | None = None
    _config: ClientConfig = ClientConfig()
    _lock: asyncio.Lock | None = None

    @classmethod
    def _get_lock(cls) -> asyncio.Lock:
        """Get or create lock for current event loop."""
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    def configure(cls, config: ClientConfig | None = None) -> None:
        """Set custom client configuration."""
        if config is not None:
            cls._config = config

    @classmethod
    async def get_client(cls) -> httpx.AsyncClient:
        """Get shared HTTP client (async-safe)."""
        if cls._client is None:
            async with cls._get_lock():
                if cls._client is None:
                    limits = httpx.Limits(
                        max_connections=cls._config.pool.max_connections,
                        max_keepalive_connections=cls._config.pool.max_keepalive,
                        keepalive_expiry=cls._config.pool.keepalive_expiry,
                    )

                    transport = httpx.AsyncHTTPTransport(
                        retries=cls._config.retry.max_retries,
                        http2=cls._config.http2,
                    )

                    cls._client = httpx.AsyncClient(
                        transport=transport,
                        limits=limits,
                        timeout=cls._config.timeout.to_httpx_timeout(),
                        verify=cls._config.verify_ssl,
                        follow_redirects=cls._config.follow_redirects,
                    )
        return cls._client

    @classmethod
    async def dispose(cls) -> None:
        """Close client and release resources."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None
            cls._lock = None


async def fetch_url(
    url: str,
    method: str = "GET",
    raise_for_status: bool = True,
    return_json: bool = True,
    **kwargs: Any,
) -> Any:
    """Make HTTP request using the shared connection pool.

    Args:
        url: Request URL.
        method: HTTP method (default: GET).
        raise_for_status: Raise on 4xx/5xx (default: True).
        return_json: Parse response as JSON (default: True).
        **kwargs: Passed to httpx.request().

    Returns:
        JSON dict if return_json=True, else httpx.Response.

    Raises:
        httpx.HTTPStatusError: On 4xx/5xx if raise_for_status=True.
        httpx.RequestError: On network errors.
    """
    client = await HttpxRestClientPool.get_client()
    response = await client.request(method, url, **kwargs)

    if raise_for_status:
        response.raise_for_status()

    if return_json:
        return response.json()

    return response
