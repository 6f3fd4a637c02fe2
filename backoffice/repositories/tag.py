from typing import List
from backoffice.repositories.base import BaseRepository
from backoffice.models.factor import Tag

class TagRepository(BaseRepository[Tag]):

    async def list_all(self, token: str) -> List[Tag]:
        tags, _ = await self.list(token, page_size=1000)
        return tags
