import logging
from typing import List

from backoffice.models.user import ActorRole
from backoffice.tools.b2b_api import ApiError, B2BApiClient

logger = logging.getLogger(__name__)

class UserRepository:
    """Manager and customer-relation lookups used to resolve the acting user."""

    def __init__(self, client: B2BApiClient):
        self.client = client

    async def get_role(self, user_id: str, token: str) -> ActorRole:
        """
        Resolve a user's role via /manager-user/filter.
        Anyone without a manager record (or on lookup failure) is a customer.
        """
        try:
            envelope = await self.client.request(
                "POST", "/manager-user/filter", token=token, json_body={"userId": int(user_id)}
            )
        except ApiError as e:
            logger.warning(f"Role lookup failed for user {user_id}, defaulting to customer: {e.message}")
            return ActorRole.CUSTOMER

        payload = (envelope.get("data") or {}).get("data")
        if isinstance(payload, list):
            payload = payload[0] if payload else None

        if not payload or not payload.get("role"):
            return ActorRole.CUSTOMER

        role_name = payload["role"].get("name")
        role = ActorRole.from_name(role_name)
        if role == ActorRole.CUSTOMER and role_name != ActorRole.CUSTOMER.value:
            logger.warning(f"Unknown role {role_name} for user {user_id}")
        return role

    async def get_related_customer_ids(self, user_id: str, token: str) -> List[int]:
        """Customers assigned to a marketer."""
        envelope = await self.client.request(
            "POST", "/customer-relation/filter", token=token,
            params={"pageSize": 100, "pageIndex": 0},
            json_body={"userId": int(user_id)}
        )
        relations = (envelope.get("data") or {}).get("data") or []
        return [int(r["customer"]["personal"]["userId"]) for r in relations]
