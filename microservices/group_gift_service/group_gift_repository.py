"""
Group Gift Service Data Repository

Data access layer for campaigns. Implements GroupGiftRepositoryProtocol from
protocols.py with two backends:
- InMemoryGroupGiftRepository: dict store for tests and local runs
- PostgresGroupGiftRepository: asyncpg, one row per campaign, JSONB for the
  owned contribution and invitation lists
"""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import asyncpg

from core.config import InfraConfig
from core.postgres_client import PostgresClientWrapper

from .models import Contribution, GroupGift, Invitation
from .protocols import CampaignNotFoundError, RepositoryError

logger = logging.getLogger(__name__)

T = TypeVar("T")

BACKEND_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _newest_first(campaigns: List[GroupGift]) -> List[GroupGift]:
    return sorted(campaigns, key=lambda c: c.group_gift_id, reverse=True)


def _not_found(group_gift_id: int) -> CampaignNotFoundError:
    return CampaignNotFoundError(
        f"Group gift not found: {group_gift_id}", group_gift_id=group_gift_id
    )


# ====================
# In-memory backend
# ====================


class InMemoryGroupGiftRepository:
    """
    Campaign store kept in process memory.

    Campaigns are copied on the way in and out, so callers never hold a
    reference to stored state. apply() calls for the same id are serialized by
    a per-id asyncio.Lock; different ids run independently.
    """

    def __init__(self):
        self._campaigns: Dict[int, GroupGift] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._last_id = 0
        self._version = 0

    async def initialize(self):
        logger.info("Group gift repository initialized (in-memory)")

    async def close(self):
        logger.info("Group gift repository closed (in-memory)")

    def _lock_for(self, group_gift_id: int) -> asyncio.Lock:
        # Locks exist only for stored campaigns and are dropped on delete
        if group_gift_id not in self._campaigns:
            raise _not_found(group_gift_id)
        return self._locks.setdefault(group_gift_id, asyncio.Lock())

    def _store(self, campaign: GroupGift) -> GroupGift:
        campaign.version += 1
        self._version += 1
        self._campaigns[campaign.group_gift_id] = campaign.model_copy(deep=True)
        return campaign

    async def create(self, campaign: GroupGift) -> GroupGift:
        self._last_id += 1
        stored = campaign.model_copy(deep=True, update={"group_gift_id": self._last_id, "version": 0})
        return self._store(stored).model_copy(deep=True)

    async def get_by_id(self, group_gift_id: int) -> GroupGift:
        campaign = self._campaigns.get(group_gift_id)
        if campaign is None:
            raise _not_found(group_gift_id)
        return campaign.model_copy(deep=True)

    async def get_all(self) -> List[GroupGift]:
        return _newest_first([c.model_copy(deep=True) for c in self._campaigns.values()])

    async def get_by_recipient(self, recipient_id: int) -> List[GroupGift]:
        return [c for c in await self.get_all() if c.recipient_id == recipient_id]

    async def get_by_creator(self, created_by: str) -> List[GroupGift]:
        return [c for c in await self.get_all() if c.created_by == created_by]

    async def update(self, campaign: GroupGift) -> GroupGift:
        async with self._lock_for(campaign.group_gift_id):
            if campaign.group_gift_id not in self._campaigns:
                raise _not_found(campaign.group_gift_id)
            return self._store(campaign.model_copy(deep=True)).model_copy(deep=True)

    async def delete(self, group_gift_id: int) -> bool:
        async with self._lock_for(group_gift_id):
            if self._campaigns.pop(group_gift_id, None) is None:
                raise _not_found(group_gift_id)
            self._locks.pop(group_gift_id, None)
            self._version += 1
            return True

    async def apply(
        self, group_gift_id: int, mutation: Callable[[GroupGift], T]
    ) -> Tuple[GroupGift, T]:
        async with self._lock_for(group_gift_id):
            current = self._campaigns.get(group_gift_id)
            if current is None:
                raise _not_found(group_gift_id)

            working = current.model_copy(deep=True)
            result = mutation(working)
            stored = self._store(working)
            return stored.model_copy(deep=True), result

    async def get_version(self) -> int:
        return self._version


# ====================
# PostgreSQL backend
# ====================


class PostgresGroupGiftRepository:
    """Group gift repository - PostgreSQL (asyncpg)"""

    def __init__(
        self,
        db: Optional[PostgresClientWrapper] = None,
        config: Optional[InfraConfig] = None,
    ):
        self.db = db or PostgresClientWrapper("group_gift_service", config=config)
        self.schema = "group_gift"
        self.table = "group_gifts"
        self.version_sequence = "write_version_seq"

    @property
    def _qualified(self) -> str:
        return f"{self.schema}.{self.table}"

    async def initialize(self):
        """Connect and create schema objects if missing"""
        try:
            await self.db.connect()
            async with self.db.acquire() as conn:
                await conn.execute(f"CREATE SCHEMA IF NOT EXISTS {self.schema}")
                await conn.execute(f'''
                    CREATE TABLE IF NOT EXISTS {self._qualified} (
                        id BIGSERIAL PRIMARY KEY,
                        title TEXT NOT NULL,
                        description TEXT NOT NULL DEFAULT '',
                        occasion_type TEXT NOT NULL DEFAULT 'General',
                        recipient_id BIGINT NOT NULL,
                        gift_id BIGINT,
                        target_amount NUMERIC(12, 2) NOT NULL CHECK (target_amount > 0),
                        current_amount NUMERIC(12, 2) NOT NULL DEFAULT 0,
                        status TEXT NOT NULL DEFAULT 'active',
                        deadline DATE NOT NULL,
                        created_by TEXT NOT NULL,
                        created_at TIMESTAMPTZ NOT NULL,
                        contributors JSONB NOT NULL DEFAULT '[]'::jsonb,
                        invited_contributors JSONB NOT NULL DEFAULT '[]'::jsonb,
                        next_contribution_id INTEGER NOT NULL DEFAULT 1,
                        version INTEGER NOT NULL DEFAULT 0
                    )
                ''')
                await conn.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_group_gifts_recipient ON {self._qualified} (recipient_id)"
                )
                await conn.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_group_gifts_creator ON {self._qualified} (created_by)"
                )
                await conn.execute(
                    f"CREATE SEQUENCE IF NOT EXISTS {self.schema}.{self.version_sequence}"
                )
            logger.info("Group gift repository initialized with PostgreSQL")
        except BACKEND_ERRORS as e:
            logger.error(f"Error initializing group gift schema: {e}", exc_info=True)
            raise RepositoryError(f"Failed to initialize repository: {e}", operation="initialize") from e

    async def close(self):
        await self.db.close()
        logger.info("Group gift repository database connection closed")

    # ====================
    # Reads
    # ====================

    async def get_by_id(self, group_gift_id: int) -> GroupGift:
        try:
            async with self.db.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT * FROM {self._qualified} WHERE id = $1", group_gift_id
                )
        except BACKEND_ERRORS as e:
            logger.error(f"Error getting group gift {group_gift_id}: {e}", exc_info=True)
            raise RepositoryError(f"Failed to get group gift: {e}", operation="get_by_id") from e

        if row is None:
            raise _not_found(group_gift_id)
        return self._row_to_group_gift(row)

    async def get_all(self) -> List[GroupGift]:
        return await self._select("get_all", "", [])

    async def get_by_recipient(self, recipient_id: int) -> List[GroupGift]:
        return await self._select("get_by_recipient", "WHERE recipient_id = $1", [recipient_id])

    async def get_by_creator(self, created_by: str) -> List[GroupGift]:
        return await self._select("get_by_creator", "WHERE created_by = $1", [created_by])

    async def _select(self, operation: str, where: str, params: List[Any]) -> List[GroupGift]:
        query = f"SELECT * FROM {self._qualified} {where} ORDER BY id DESC"
        try:
            async with self.db.acquire() as conn:
                rows = await conn.fetch(query, *params)
        except BACKEND_ERRORS as e:
            logger.error(f"Error in {operation}: {e}", exc_info=True)
            raise RepositoryError(f"Failed to list group gifts: {e}", operation=operation) from e
        return [self._row_to_group_gift(row) for row in rows]

    async def get_version(self) -> int:
        try:
            async with self.db.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT last_value, is_called FROM {self.schema}.{self.version_sequence}"
                )
        except BACKEND_ERRORS as e:
            raise RepositoryError(f"Failed to read version: {e}", operation="get_version") from e
        return int(row["last_value"]) if row["is_called"] else 0

    # ====================
    # Writes
    # ====================

    async def create(self, campaign: GroupGift) -> GroupGift:
        query = f'''
            INSERT INTO {self._qualified} (
                title, description, occasion_type, recipient_id, gift_id,
                target_amount, current_amount, status, deadline, created_by,
                created_at, contributors, invited_contributors,
                next_contribution_id, version
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12::jsonb, $13::jsonb, $14, 1)
            RETURNING *
        '''
        params = [
            campaign.title,
            campaign.description,
            campaign.occasion_type,
            campaign.recipient_id,
            campaign.gift_id,
            campaign.target_amount,
            campaign.current_amount,
            campaign.status.value,
            campaign.deadline,
            campaign.created_by,
            campaign.created_at,
            self._dump_list(campaign.contributors),
            self._dump_list(campaign.invited_contributors),
            campaign.next_contribution_id,
        ]
        try:
            async with self.db.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(query, *params)
                    await self._bump_version(conn)
        except BACKEND_ERRORS as e:
            logger.error(f"Error creating group gift: {e}", exc_info=True)
            raise RepositoryError(f"Failed to create group gift: {e}", operation="create") from e
        return self._row_to_group_gift(row)

    async def update(self, campaign: GroupGift) -> GroupGift:
        try:
            async with self.db.acquire() as conn:
                async with conn.transaction():
                    row = await self._write(conn, campaign)
        except BACKEND_ERRORS as e:
            logger.error(f"Error updating group gift {campaign.group_gift_id}: {e}", exc_info=True)
            raise RepositoryError(f"Failed to update group gift: {e}", operation="update") from e

        if row is None:
            raise _not_found(campaign.group_gift_id)
        return self._row_to_group_gift(row)

    async def delete(self, group_gift_id: int) -> bool:
        try:
            async with self.db.acquire() as conn:
                async with conn.transaction():
                    deleted = await conn.fetchval(
                        f"DELETE FROM {self._qualified} WHERE id = $1 RETURNING id", group_gift_id
                    )
                    if deleted is not None:
                        await self._bump_version(conn)
        except BACKEND_ERRORS as e:
            logger.error(f"Error deleting group gift {group_gift_id}: {e}", exc_info=True)
            raise RepositoryError(f"Failed to delete group gift: {e}", operation="delete") from e

        if deleted is None:
            raise _not_found(group_gift_id)
        return True

    async def apply(
        self, group_gift_id: int, mutation: Callable[[GroupGift], T]
    ) -> Tuple[GroupGift, T]:
        try:
            async with self.db.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        f"SELECT * FROM {self._qualified} WHERE id = $1 FOR UPDATE", group_gift_id
                    )
                    if row is None:
                        raise _not_found(group_gift_id)

                    campaign = self._row_to_group_gift(row)
                    # Raising here rolls the transaction back
                    result = mutation(campaign)
                    stored = await self._write(conn, campaign)
        except BACKEND_ERRORS as e:
            logger.error(f"Error applying change to group gift {group_gift_id}: {e}", exc_info=True)
            raise RepositoryError(f"Failed to apply change: {e}", operation="apply") from e

        return self._row_to_group_gift(stored), result

    async def _write(self, conn, campaign: GroupGift):
        row = await conn.fetchrow(f'''
            UPDATE {self._qualified} SET
                title = $2, description = $3, occasion_type = $4,
                current_amount = $5, status = $6,
                contributors = $7::jsonb, invited_contributors = $8::jsonb,
                next_contribution_id = $9, version = version + 1
            WHERE id = $1
            RETURNING *
        ''',
            campaign.group_gift_id,
            campaign.title,
            campaign.description,
            campaign.occasion_type,
            campaign.current_amount,
            campaign.status.value,
            self._dump_list(campaign.contributors),
            self._dump_list(campaign.invited_contributors),
            campaign.next_contribution_id,
        )
        if row is not None:
            await self._bump_version(conn)
        return row

    async def _bump_version(self, conn) -> None:
        await conn.fetchval(f"SELECT nextval('{self.schema}.{self.version_sequence}')")

    # ====================
    # Row mapping
    # ====================

    @staticmethod
    def _dump_list(items) -> str:
        return json.dumps([item.model_dump(mode="json") for item in items])

    @staticmethod
    def _load_list(value) -> List[Dict[str, Any]]:
        if value is None:
            return []
        if isinstance(value, str):
            return json.loads(value)
        return list(value)

    def _row_to_group_gift(self, row) -> GroupGift:
        return GroupGift(
            group_gift_id=row["id"],
            title=row["title"],
            description=row["description"],
            occasion_type=row["occasion_type"],
            recipient_id=row["recipient_id"],
            gift_id=row["gift_id"],
            target_amount=row["target_amount"],
            current_amount=row["current_amount"],
            status=row["status"],
            deadline=row["deadline"],
            created_by=row["created_by"],
            created_at=row["created_at"],
            contributors=[Contribution(**c) for c in self._load_list(row["contributors"])],
            invited_contributors=[Invitation(**i) for i in self._load_list(row["invited_contributors"])],
            next_contribution_id=row["next_contribution_id"],
            version=row["version"],
        )


__all__ = ["InMemoryGroupGiftRepository", "PostgresGroupGiftRepository"]
