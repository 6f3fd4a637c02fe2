from typing import List
from backoffice.config import settings
from backoffice.repositories.base import BaseRepository
from backoffice.models.audit import FactorLog

class FactorLogRepository(BaseRepository[FactorLog]):

    async def get_for_factor(self, factor_id: str, token: str) -> List[FactorLog]:
        """All log entries of one factor, oldest first."""
        logs, _ = await self.filter(
            token, {"factorId": factor_id},
            page_size=settings.FACTOR_LOG_PAGE_SIZE, sortColumn="createdAt"
        )
        return sorted(logs, key=lambda log: log.created_at)
