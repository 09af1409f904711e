"""Neo4j client over the async driver's pooled sessions."""

import logging
from typing import Optional

from neo4j import AsyncGraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from family_tree.config import Neo4jSettings, settings
from family_tree.graph.errors import StoreError
from family_tree.graph.store.base import Record

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = [
    "CREATE CONSTRAINT family_tree_id IF NOT EXISTS "
    "FOR (ft:FamilyTree) REQUIRE ft.familyTreeId IS UNIQUE",
    "CREATE CONSTRAINT user_in_tree IF NOT EXISTS "
    "FOR (u:User) REQUIRE (u.familyTreeId, u.userId) IS UNIQUE",
]


async def _collect(result) -> list[Record]:
    return [dict(record.items()) async for record in result]


class Neo4jClient:
    """QueryExecutor backed by a Neo4j database."""

    def __init__(self, config: Optional[Neo4jSettings] = None, driver=None):
        self.config = config or settings.neo4j
        self.driver = driver or AsyncGraphDatabase.driver(
            self.config.uri,
            auth=(self.config.user, self.config.password),
            max_connection_pool_size=self.config.max_connection_pool_size,
            connection_timeout=self.config.connection_timeout,
        )

    async def execute(self, template: str, parameters: dict) -> list[Record]:
        """Execute a read query (MATCH ... RETURN)."""
        try:
            async with self.driver.session(database=self.config.database) as session:
                result = await session.run(template, parameters)
                return await _collect(result)
        except (Neo4jError, DriverError, OSError) as e:
            raise StoreError(f"Query failed: {e}") from e

    async def execute_write(self, template: str, parameters: dict) -> list[Record]:
        """Execute a statement in one write transaction, retried on transient errors."""

        async def work(tx) -> list[Record]:
            result = await tx.run(template, parameters)
            return await _collect(result)

        try:
            async with self.driver.session(database=self.config.database) as session:
                return await session.execute_write(work)
        except (Neo4jError, DriverError, OSError) as e:
            raise StoreError(f"Write failed: {e}") from e

    async def init_schema(self) -> bool:
        """Create uniqueness constraints for trees and members."""
        for statement in SCHEMA_STATEMENTS:
            try:
                await self.execute_write(statement, {})
            except StoreError:
                logger.exception("Could not apply schema statement")
                return False
        return True

    async def verify(self) -> bool:
        """Check the database answers a trivial query."""
        try:
            records = await self.execute("RETURN 1 AS ok", {})
        except StoreError:
            logger.exception("Neo4j connection check failed")
            return False
        return bool(records) and records[0].get("ok") == 1

    async def close(self) -> None:
        await self.driver.close()
