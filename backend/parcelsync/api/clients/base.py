"""
Base class for outbound service clients
"""

from typing import Optional
import httpx

from parcelsync.core.config import settings


class BaseClient:
    """Shared httpx plumbing for the store, resolver and registry clients"""

    def __init__(
        self,
        service_name: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.service_name = service_name
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily create the client so it binds to the running event loop"""
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport
            )
        return self.client

    async def close(self):
        """Close API connection"""
        if self.client:
            await self.client.aclose()
            self.client = None


def describe_http_error(error: Exception) -> str:
    """One-line description of an httpx failure, keeping the upstream message"""
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}: {error.response.text[:200]}"
    return f"{type(error).__name__}: {error}"
