"""
HTTP client for the remote destination API.

Implements the ``DestinationAPI`` contract over a JSON/multipart REST API.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from destination_editor.exceptions import DestinationAPIError
from destination_editor.schemas.record import (
    DestinationPayload,
    DestinationUpdatePayload,
    Record,
)

logger = logging.getLogger(__name__)


class DestinationAPIClient:
    """
    Async HTTP client for destination records.

    Features:
    - Lazily created, reusable connection pool
    - Optional bearer token authentication
    - Failures surfaced as ``DestinationAPIError`` with a readable message
    """

    RESOURCE = "/destinations"

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def headers(self) -> dict[str, str]:
        """Get default headers for API requests."""
        headers = {
            "Accept": "application/json",
            "User-Agent": "Destination-Editor/1.0",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_all_records(self) -> list[Record]:
        """
        List every destination.

        Entries that do not parse as a record are logged and skipped so one
        bad sibling cannot hide the rest of the collection.

        Returns:
            Records in the order the API returned them
        """
        data = await self._request("GET", self.RESOURCE)
        if isinstance(data, dict):
            data = data.get("data", data.get("items", []))
        if not isinstance(data, list):
            raise DestinationAPIError("Unexpected response when listing destinations")

        records = []
        for index, item in enumerate(data):
            try:
                records.append(Record.model_validate(item))
            except ValidationError as e:
                item_id = item.get("id") if isinstance(item, dict) else None
                logger.warning(
                    f"Skipping malformed destination at index {index} (id={item_id!r}): "
                    f"{e.error_count()} validation error(s)"
                )
        return records

    async def create_record(self, payload: DestinationPayload) -> Record:
        """
        Create a destination.

        Args:
            payload: Validated form values

        Returns:
            The stored record, including its assigned id
        """
        data, files = self._encode(payload)
        result = await self._request("POST", self.RESOURCE, data=data, files=files)
        return Record.model_validate(result)

    async def update_record(self, payload: DestinationUpdatePayload) -> Record:
        """
        Replace the destination identified by ``payload.id``.

        Returns:
            The updated record
        """
        data, files = self._encode(payload)
        result = await self._request(
            "PUT", f"{self.RESOURCE}/{payload.id}", data=data, files=files
        )
        return Record.model_validate(result)

    def _encode(
        self, payload: DestinationPayload
    ) -> tuple[dict[str, str], dict[str, tuple[str, bytes, str]] | None]:
        """
        Encode a payload as multipart form fields.

        The image is uploaded when its content is available, otherwise its
        remote URL is sent as a plain field.
        """
        data = {
            "destination": payload.destination,
            "description": payload.description,
            "price": payload.price,
            "rating": str(payload.rating),
        }
        image = payload.image
        if image.content is not None:
            files = {
                "image": (
                    image.filename or "image",
                    image.content,
                    image.content_type or "application/octet-stream",
                )
            }
            return data, files

        data["image"] = image.url or ""
        return data, None

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.warning(f"{method} {path} failed with {e.response.status_code}: {message}")
            raise DestinationAPIError(message, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise DestinationAPIError(str(e) or type(e).__name__) from e

        try:
            return response.json()
        except ValueError as e:
            raise DestinationAPIError("Invalid JSON in destination API response") from e

    async def __aenter__(self) -> "DestinationAPIClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


def _error_message(response: httpx.Response) -> str:
    """Pick the most readable error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    if isinstance(body, str) and body.strip():
        return body

    if body is None:
        text = response.text.strip()
        if text and len(text) <= 200:
            return text
    return f"Request failed with status code {response.status_code}"
