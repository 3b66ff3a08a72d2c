"""
PostgreSQL-backed DNS service facade.

Stores domains and records locally. Provider calls are left to other
``DNSService`` implementations; records keep the provider name they were
written for.
"""

import json
from typing import Any, Dict

import asyncpg

from shared.logging import get_logger
from .service import DNSService


class PostgresDNSService(DNSService):
    """DNS service facade bound to a single pooled connection."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn
        self.logger = get_logger("dns_gateway.service.postgres")

    async def install(self) -> None:
        async with self.conn.transaction():
            await self.conn.execute("""
                CREATE TABLE dns_domains (
                    id BIGSERIAL PRIMARY KEY,
                    client_id BIGINT NOT NULL,
                    domain_name VARCHAR(255) NOT NULL UNIQUE,
                    config JSONB NOT NULL DEFAULT '{}',
                    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
                );
            """)
            await self.conn.execute("""
                CREATE TABLE dns_records (
                    id BIGSERIAL PRIMARY KEY,
                    domain_id BIGINT NOT NULL REFERENCES dns_domains(id) ON DELETE CASCADE,
                    name VARCHAR(255) NOT NULL,
                    type VARCHAR(16) NOT NULL,
                    value TEXT NOT NULL,
                    ttl INTEGER NOT NULL,
                    provider VARCHAR(64) NOT NULL,
                    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
                );
            """)
            await self.conn.execute("""
                CREATE INDEX idx_dns_records_domain ON dns_records(domain_id);
            """)
        self.logger.info("Database structure installed")

    async def uninstall(self) -> None:
        async with self.conn.transaction():
            await self.conn.execute("DROP TABLE dns_records;")
            await self.conn.execute("DROP TABLE dns_domains;")
        self.logger.info("Database structure uninstalled")

    async def create_domain(self, order: Dict[str, Any]) -> int:
        config = self._decode_config(order["config"])
        domain_name = config.get("domain_name")
        if not domain_name:
            raise ValueError("config.domain_name is required")

        domain_id = await self.conn.fetchval(
            """
            INSERT INTO dns_domains (client_id, domain_name, config)
            VALUES ($1, $2, $3::jsonb)
            RETURNING id
            """,
            order["client_id"], domain_name, order["config"]
        )
        self.logger.info("Domain created", domain_id=domain_id, domain_name=domain_name)
        return domain_id

    async def delete_domain(self, order: Dict[str, Any]) -> None:
        config = self._decode_config(order["config"])
        domain_name = config.get("domain_name")
        if not domain_name:
            raise ValueError("config.domain_name is required")

        deleted = await self.conn.fetchval(
            "DELETE FROM dns_domains WHERE domain_name = $1 RETURNING id",
            domain_name
        )
        if deleted is None:
            raise LookupError(f"Domain {domain_name} not found")
        self.logger.info("Domain deleted", domain_id=deleted, domain_name=domain_name)

    async def add_record(self, order: Dict[str, Any]) -> int:
        async with self.conn.transaction():
            domain_id = await self._domain_id(order["domain_name"])
            record_id = await self.conn.fetchval(
                """
                INSERT INTO dns_records (domain_id, name, type, value, ttl, provider)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING id
                """,
                domain_id, str(order["record_name"]), str(order["record_type"]).upper(),
                str(order["record_value"]), order["record_ttl"], order["provider"]
            )
        self.logger.info("DNS record added", record_id=record_id, domain_name=order["domain_name"])
        return record_id

    async def update_record(self, order: Dict[str, Any]) -> None:
        record_id = self._record_id(order["record_id"])
        async with self.conn.transaction():
            domain_id = await self._domain_id(order["domain_name"])
            updated = await self.conn.fetchval(
                """
                UPDATE dns_records
                SET name = $3, type = $4, value = $5, ttl = $6, provider = $7, updated_at = NOW()
                WHERE id = $1 AND domain_id = $2
                RETURNING id
                """,
                record_id, domain_id, str(order["record_name"]), str(order["record_type"]).upper(),
                str(order["record_value"]), order["record_ttl"], order["provider"]
            )
        if updated is None:
            raise LookupError(f"DNS record {record_id} not found")
        self.logger.info("DNS record updated", record_id=record_id)

    async def del_record(self, order: Dict[str, Any]) -> None:
        record_id = self._record_id(order["record_id"])
        async with self.conn.transaction():
            domain_id = await self._domain_id(order["domain_name"])
            deleted = await self.conn.fetchval(
                "DELETE FROM dns_records WHERE id = $1 AND domain_id = $2 RETURNING id",
                record_id, domain_id
            )
        if deleted is None:
            raise LookupError(f"DNS record {record_id} not found")
        self.logger.info("DNS record deleted", record_id=record_id)

    async def _domain_id(self, domain_name: Any) -> int:
        domain_id = await self.conn.fetchval(
            "SELECT id FROM dns_domains WHERE domain_name = $1",
            str(domain_name)
        )
        if domain_id is None:
            raise LookupError(f"Domain {domain_name} not found")
        return domain_id

    @staticmethod
    def _decode_config(raw: str) -> Dict[str, Any]:
        config = json.loads(raw)
        if not isinstance(config, dict):
            raise ValueError("config must be an object")
        return config

    @staticmethod
    def _record_id(value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError("Invalid record_id")
