import logging
from backoffice.tools.b2b_api import B2BApiClient
from backoffice.repositories.factor import FactorRepository
from backoffice.repositories.audit import FactorLogRepository
from backoffice.repositories.user import UserRepository
from backoffice.repositories.tag import TagRepository
from backoffice.models.factor import Factor, Tag
from backoffice.models.audit import FactorLog

logger = logging.getLogger(__name__)

class RemoteApi:
    client: B2BApiClient = None

    # Repositories
    factors: FactorRepository = None
    factor_logs: FactorLogRepository = None
    users: UserRepository = None
    tags: TagRepository = None

    def connect(self, client: B2BApiClient = None):
        """Initialize the shared HTTP client and repositories."""
        self.client = client or B2BApiClient()

        self.factors = FactorRepository(self.client, "factor", Factor)
        self.factor_logs = FactorLogRepository(self.client, "factor-log", FactorLog)
        self.users = UserRepository(self.client)
        self.tags = TagRepository(self.client, "tag", Tag)

        logger.info(f"Remote API client ready for {self.client.base_url}")

    async def close(self):
        """Close the shared HTTP client."""
        if self.client:
            await self.client.close()
            logger.info("Remote API client closed")

remote = RemoteApi()
