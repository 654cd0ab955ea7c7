"""
Session-scoped stores for analysis history and the shopping list.
"""

from typing import List, Optional
import structlog
from pydantic import ValidationError

from foodbuddy.cache.redis_client import redis_client, RedisClient, CacheKeys, CacheTTL
from foodbuddy.core.config import settings
from foodbuddy.models.analysis import HistoryItem

logger = structlog.get_logger(__name__)


class HistoryStore:
    """Capped, most-recent-first list of past analyses for one session."""

    def __init__(self, session_id: str, client: Optional[RedisClient] = None, limit: Optional[int] = None):
        self.session_id = session_id
        self.redis = client or redis_client
        self.limit = limit or settings.history_limit
        self.key = CacheKeys.history(session_id)

    async def add(self, item: HistoryItem) -> bool:
        stored = await self.redis.push_capped(
            self.key,
            item.model_dump(mode="json", by_alias=True),
            limit=self.limit,
            ttl=CacheTTL.HISTORY
        )
        if stored:
            logger.debug("History entry stored", session_id=self.session_id, history_id=item.id)
        return stored

    async def list(self) -> List[HistoryItem]:
        items = []
        for entry in await self.redis.get_list(self.key):
            try:
                items.append(HistoryItem.model_validate(entry))
            except ValidationError:
                logger.warning("Dropping malformed history entry", session_id=self.session_id)
        return items[:self.limit]

    async def get(self, history_id: str) -> Optional[HistoryItem]:
        for item in await self.list():
            if item.id == history_id:
                return item
        return None

    async def clear(self) -> bool:
        await self.redis.delete(self.key)
        logger.info("History cleared", session_id=self.session_id)
        return True


class ShoppingListStore:
    """Ordered shopping list for one session; duplicate items are ignored."""

    def __init__(self, session_id: str, client: Optional[RedisClient] = None):
        self.session_id = session_id
        self.redis = client or redis_client
        self.key = CacheKeys.shopping_list(session_id)

    async def list(self) -> List[str]:
        return [str(item) for item in await self.redis.get_list(self.key)]

    async def add(self, item: str) -> bool:
        """Append an item. Returns False when it is already on the list."""
        item = item.strip()
        if not item or item in await self.list():
            return False
        return await self.redis.append(self.key, item, ttl=CacheTTL.SHOPPING_LIST)

    async def remove(self, item: str) -> bool:
        return await self.redis.remove_value(self.key, item) > 0

    async def clear(self) -> bool:
        await self.redis.delete(self.key)
        logger.info("Shopping list cleared", session_id=self.session_id)
        return True
