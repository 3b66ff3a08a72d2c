"""
PostgreSQL connection pool for the DNS gateway.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from shared.errors import GatewayException
from shared.logging import get_logger


class ConnectionPool:
    """Bounded asyncpg pool; each request checks out its own connection."""

    def __init__(self, dsn: str, min_size: int = 1, max_size: int = 10, command_timeout: float = 30.0):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.logger = get_logger("dns_gateway.persistence.pool")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Open the pool."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )
            self.logger.info(
                "PostgreSQL pool started",
                min_size=self.min_size,
                max_size=self.max_size
            )
        except Exception as e:
            self.logger.error("Failed to start PostgreSQL pool", error=str(e))
            raise GatewayException("POSTGRES_START_FAILED", str(e))

    async def stop(self):
        """Close the pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL pool stopped")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Check out one connection; it is released on every exit path."""
        if self.pool is None:
            raise RuntimeError("Database pool is not started")
        async with self.pool.acquire() as conn:
            yield conn
