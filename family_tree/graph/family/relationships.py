"""Relationship operations: reading edges and replacing reciprocal pairs."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from family_tree.graph.errors import StoreError
from family_tree.graph.labels import DEFAULT_LINK_TYPE, normalize_label, reciprocal_label
from family_tree.graph.models import FailureReason, GraphResult, RelationshipRecord
from family_tree.graph.repository.base import FamilyRepository

logger = logging.getLogger(__name__)


class RelationshipGraphReader:
    """Lists the directed RELATES_TO edges of a tree."""

    def __init__(self, repository: FamilyRepository):
        self.repository = repository

    async def get_family_relationships_result(self, family_tree_id: str) -> GraphResult:
        logger.info("Fetching family relationships for tree: %s", family_tree_id)
        try:
            edges = await self.repository.list_edges(family_tree_id)
        except StoreError as e:
            logger.exception("Error fetching family relationships for tree %s", family_tree_id)
            return GraphResult.fail(FailureReason.STORE_ERROR, str(e))

        records = [
            RelationshipRecord(
                source=edge.source_id,
                target=edge.target_id,
                type=normalize_label(edge.relationship) or DEFAULT_LINK_TYPE,
                source_name=edge.source_name,
                target_name=edge.target_name,
            )
            for edge in edges
        ]
        logger.info("Found %d relationships", len(records))
        return GraphResult.ok(records)

    async def get_family_relationships(self, family_tree_id: str) -> list[dict]:
        result = await self.get_family_relationships_result(family_tree_id)
        return [record.to_dict() for record in result.unwrap_or([])]


class PairLocks:
    """One asyncio.Lock per unordered member pair, dropped once idle."""

    def __init__(self):
        self._locks: dict[tuple, asyncio.Lock] = {}
        self._users: dict[tuple, int] = {}

    @staticmethod
    def key(family_tree_id: str, user_id1: str, user_id2: str) -> tuple:
        return (family_tree_id, *sorted((user_id1, user_id2)))

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, family_tree_id: str, user_id1: str, user_id2: str):
        key = self.key(family_tree_id, user_id1, user_id2)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


class RelationshipSynchronizer:
    """
    Sole writer of RELATES_TO edges.

    A pair of members always gets both directions replaced together:
    if A is B's father, B is A's son.
    """

    def __init__(self, repository: FamilyRepository, locks: Optional[PairLocks] = None):
        self.repository = repository
        self.locks = locks or PairLocks()

    async def replace_pair(
        self,
        family_tree_id: str,
        user_id1: str,
        user_id2: str,
        relationship1: str,
        relationship2: str,
    ) -> GraphResult:
        """
        Replace the reciprocal edges between two members.

        Args:
            family_tree_id: Tree both members belong to
            user_id1, user_id2: The two members
            relationship1: Label for user_id1 -> user_id2 (e.g. "Father")
            relationship2: Label for user_id2 -> user_id1 (e.g. "Son")

        Returns:
            GraphResult with data True when both edges were created
        """
        if user_id1 == user_id2:
            return GraphResult.fail(FailureReason.INVALID_INPUT, "A member cannot relate to themselves")
        if not (relationship1 or "").strip() or not (relationship2 or "").strip():
            return GraphResult.fail(FailureReason.INVALID_INPUT, "Both relationship labels are required")

        async with self.locks.hold(family_tree_id, user_id1, user_id2):
            try:
                for user_id in (user_id1, user_id2):
                    if await self.repository.find_member(family_tree_id, user_id) is None:
                        return GraphResult.fail(
                            FailureReason.NOT_FOUND,
                            f"No member {user_id} in {family_tree_id}",
                        )
                created = await self.repository.replace_edge_pair(
                    family_tree_id, user_id1, user_id2, relationship1, relationship2
                )
            except StoreError as e:
                logger.exception("Error creating reciprocal relationship %s <-> %s", user_id1, user_id2)
                return GraphResult.fail(FailureReason.STORE_ERROR, str(e))

        if created < 2:
            logger.warning(
                "Only %d of 2 relationship edges created for %s <-> %s", created, user_id1, user_id2
            )
            if created == 0:
                return GraphResult.fail(FailureReason.NOT_FOUND, "Members disappeared before the edges were written")
            return GraphResult.fail(FailureReason.PARTIAL_SUCCESS, f"{created} of 2 edges created")

        logger.info(
            "Related %s -[%s]-> %s and %s -[%s]-> %s",
            user_id1, relationship1, user_id2, user_id2, relationship2, user_id1,
        )
        return GraphResult.ok(True)

    async def create_reciprocal_relationship(
        self,
        family_tree_id: str,
        user_id1: str,
        user_id2: str,
        relationship1: str,
        relationship2: str,
    ) -> bool:
        result = await self.replace_pair(family_tree_id, user_id1, user_id2, relationship1, relationship2)
        return result.unwrap_or(False)

    async def relate(
        self,
        family_tree_id: str,
        user_id1: str,
        user_id2: str,
        relationship: str,
        gender: Optional[str] = None,
    ) -> GraphResult:
        """Relate two members, deriving the inverse label (gender is user_id2's)."""
        inverse = reciprocal_label(relationship, gender)
        return await self.replace_pair(family_tree_id, user_id1, user_id2, relationship, inverse)
