from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar
from backoffice.models.base import ApiModel
from backoffice.tools.b2b_api import B2BApiClient, unwrap_entity, unwrap_list

T = TypeVar("T", bound=ApiModel)

class BaseRepository(Generic[T]):
    """CRUD over one REST resource of the remote API (e.g. /factor)."""

    def __init__(self, client: B2BApiClient, resource: str, model_cls: type[T]):
        self.client = client
        self.resource = resource
        self.model_cls = model_cls

    async def get(self, id: str, token: str) -> Optional[T]:
        """Get a record by ID."""
        envelope = await self.client.request("GET", f"/{self.resource}/{id}", token=token)
        return self.model_cls.from_api(unwrap_entity(envelope))

    async def list(self, token: str, page_size: int = 10, page_index: int = 0) -> Tuple[List[T], int]:
        """List records with pagination. Returns (items, total count)."""
        envelope = await self.client.request(
            "GET", f"/{self.resource}", token=token,
            params={"pageSize": page_size, "pageIndex": page_index}
        )
        items, count = unwrap_list(envelope)
        return [self.model_cls.from_api(item) for item in items], count

    async def filter(self, token: str, filter: Dict[str, Any], page_size: int = 10, page_index: int = 0, **params) -> Tuple[List[T], int]:
        """Server-side filter. Extra keyword args become query parameters."""
        envelope = await self.client.request(
            "POST", f"/{self.resource}/filter", token=token,
            params={"pageSize": page_size, "pageIndex": page_index, **params},
            json_body=filter
        )
        items, count = unwrap_list(envelope)
        return [self.model_cls.from_api(item) for item in items], count

    async def create(self, data: Dict[str, Any], token: str) -> Optional[Dict[str, Any]]:
        """Create a record. Returns the raw created payload."""
        envelope = await self.client.request("POST", f"/{self.resource}", token=token, json_body=data)
        return unwrap_entity(envelope)

    async def update(self, id: str, data: Dict[str, Any], token: str) -> Optional[Dict[str, Any]]:
        """Partial update by ID."""
        envelope = await self.client.request("PUT", f"/{self.resource}/{id}", token=token, json_body=data)
        return unwrap_entity(envelope)
