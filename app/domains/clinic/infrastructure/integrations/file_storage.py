# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Clinic)
# Description: Object storage client for treatment attachments.
# ============================================================================
"""Object storage client."""

import logging

import httpx

from app.core.domain import IntegrationException
from app.domains.clinic.application.ports.integrations import IFileStorage

logger = logging.getLogger(__name__)


class StorageFileClient(IFileStorage):
    """
    Uploads attachments to a storage bucket and returns their public URL.

    Objects are written with POST {base}/object/{bucket}/{path} and served
    from {base}/object/public/{bucket}/{path}.
    """

    def __init__(
        self,
        base_url: str,
        bucket: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.bucket = bucket
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/object/public/{self.bucket}/{path}"

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}/object/{self.bucket}/{path}",
                content=content,
                headers={"Content-Type": content_type or "application/octet-stream"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise IntegrationException("file-storage", f"upload of {path} failed", e) from e

        logger.info(f"Uploaded {len(content)} bytes to {self.bucket}/{path}")
        return self.public_url(path)
