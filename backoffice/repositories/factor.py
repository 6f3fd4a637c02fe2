from typing import Optional
from backoffice.repositories.base import BaseRepository
from backoffice.models.factor import Factor, FactorStatus

class FactorRepository(BaseRepository[Factor]):

    async def update_status(self, factor_id: str, status: FactorStatus, creator_user_id: str, token: str) -> Optional[dict]:
        """
        PUT /factor/{id} with {status, creatorUserId}.
        The API records the matching factor-log entry in the same operation.
        """
        return await self.update(factor_id, {"status": status.value, "creatorUserId": creator_user_id}, token)
