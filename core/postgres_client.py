"""
PostgreSQL Client Wrapper

Thin wrapper around an asyncpg connection pool.
Provides configuration-driven initialization, connect retries and health checks.

Usage:
    from core.postgres_client import PostgresClientWrapper

    db = PostgresClientWrapper("group_gift_service")
    await db.connect()

    async with db.acquire() as conn:
        row = await conn.fetchrow("SELECT * FROM group_gift.group_gifts WHERE id = $1", 1)
"""

import logging
from typing import Dict, Optional

import asyncpg
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.config import InfraConfig, get_settings

logger = logging.getLogger(__name__)


class PostgresClientWrapper:
    """
    PostgreSQL client wrapper.

    Wraps an asyncpg pool and provides:
    - Environment-driven host/port/credentials
    - Exponential back-off on the initial connect
    - Consistent health check shape
    """

    def __init__(
        self,
        service_name: str,
        config: Optional[InfraConfig] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        database: Optional[str] = None,
    ):
        """
        Initialize PostgreSQL client wrapper.

        Args:
            service_name: Name of the service using this client
            config: Infrastructure config (defaults to global settings)
            host: PostgreSQL host override
            port: PostgreSQL port override
            database: Database name override
        """
        if config is None:
            config = get_settings().infrastructure

        self.service_name = service_name
        self.config = config
        self.host = host or config.postgres_host
        self.port = port or config.postgres_port
        self.database = database or config.postgres_db
        self._pool: Optional[asyncpg.Pool] = None

        logger.info(f"PostgreSQL client initialized for {service_name}: {self.host}:{self.port}/{self.database}")

    @property
    def pool(self) -> asyncpg.Pool:
        """Get underlying pool (connect() must have been awaited)"""
        if self._pool is None:
            raise RuntimeError("PostgreSQL pool is not connected")
        return self._pool

    async def connect(self) -> None:
        """Create the connection pool, retrying transient connection failures"""
        if self._pool is not None:
            return

        attempts = max(1, self.config.postgres_connect_retries)

        @retry(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
            retry=retry_if_exception_type((OSError, asyncpg.exceptions.CannotConnectNowError)),
            reraise=True,
        )
        async def _create_pool() -> asyncpg.Pool:
            return await asyncpg.create_pool(
                host=self.host,
                port=self.port,
                user=self.config.postgres_user,
                password=self.config.postgres_password,
                database=self.database,
                min_size=self.config.postgres_pool_min,
                max_size=self.config.postgres_pool_max,
                command_timeout=self.config.postgres_command_timeout,
            )

        self._pool = await _create_pool()
        logger.info(f"PostgreSQL pool ready for {self.service_name}")

    def acquire(self):
        """Acquire a connection from the pool (async context manager)"""
        return self.pool.acquire()

    async def health_check(self) -> Optional[Dict]:
        """Check database health"""
        try:
            async with self.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return {"healthy": True, "database": self.database}
        except Exception as e:
            logger.warning(f"PostgreSQL health check failed: {e}")
            return {"healthy": False, "error": str(e)}

    async def close(self):
        """Close the pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info(f"PostgreSQL pool closed for {self.service_name}")


__all__ = ["PostgresClientWrapper"]
