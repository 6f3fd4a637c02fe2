"""
Client for the remote B2B commerce API.

The API is the system of record for factors, factor logs, users and tags.
Every call carries the caller's bearer token; this service never holds
credentials of its own.

Response envelope: {"status": int, "message": str, "data": ...}
List payloads:     data = {"data": [...], "details": {"count": int}}
"""

import logging
from typing import Any, Dict, Optional

import httpx

from backoffice.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed call to the remote API. `message` is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class B2BApiClient:
    def __init__(self, base_url: str = None, timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.base_url = base_url or settings.API_BASE_URL
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json"}
            )
        return self._client

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        endpoint: str,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Any] = None
    ) -> Dict[str, Any]:
        """
        Make a single request and return the parsed envelope.

        Raises ApiError on transport failure or any non-2xx response. There are
        no automatic retries: the user re-triggers the action.
        """
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = await self.client.request(method.upper(), endpoint, params=params, json=json_body, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"B2B API {method.upper()} {endpoint} failed: {e}")
            raise ApiError(f"Network error: {e}") from e

        if not resp.is_success:
            try:
                message = resp.json().get("message")
            except ValueError:
                message = None
            logger.warning(f"B2B API {method.upper()} {endpoint} returned {resp.status_code}: {message}")
            raise ApiError(message or f"HTTP error! status: {resp.status_code}", status_code=resp.status_code)

        if not resp.content:
            return {}
        return resp.json()


def unwrap_entity(envelope: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Single-entity payloads come back either as `data` or as `data.data`."""
    data = envelope.get("data")
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        return data["data"]
    return data


def unwrap_list(envelope: Dict[str, Any]) -> tuple:
    """Return (items, count) from a paginated envelope."""
    data = envelope.get("data") or {}
    items = data.get("data") or []
    count = (data.get("details") or {}).get("count", len(items))
    return items, count
