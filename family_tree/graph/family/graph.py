"""Main FamilyTreeGraph facade combining all operations."""

import logging
from typing import Optional

from family_tree.config import Settings, settings as default_settings
from family_tree.graph.family.members import MemberDirectory
from family_tree.graph.family.projections import PersonalViewProjector, VisualizationProjector
from family_tree.graph.family.registry import TreeRegistry
from family_tree.graph.family.relationships import RelationshipGraphReader, RelationshipSynchronizer
from family_tree.graph.models import GraphResult
from family_tree.graph.repository.base import FamilyRepository

logger = logging.getLogger(__name__)


class FamilyTreeGraph:
    """
    Main interface for family tree operations.

    Combines registry, member, relationship and projection operations
    over one repository.

    Usage:
        graph = FamilyTreeGraph(SQLiteRepository("data/family_tree.db"))
        await graph.create_family_tree({"familyTreeId": "t1", "createdBy": "u0"})
        await graph.create_reciprocal_relationship("t1", "u1", "u2", "Father", "Son")
        view = await graph.get_family_tree_visualization_data("t1")
    """

    def __init__(self, repository: FamilyRepository):
        self.repository = repository

        # Compose operations
        self.registry = TreeRegistry(repository)
        self.members = MemberDirectory(repository)
        self.reader = RelationshipGraphReader(repository)
        self.synchronizer = RelationshipSynchronizer(repository)
        self.visualization = VisualizationProjector(repository)
        self.personal_view = PersonalViewProjector(repository)

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "FamilyTreeGraph":
        """Build a graph over the configured store backend."""
        config = config or default_settings
        if config.database.backend == "sqlite":
            from family_tree.graph.repository.sqlite import SQLiteRepository
            config.database.ensure_dirs()
            return cls(SQLiteRepository(config.database.sqlite_path, config.database.sqlite_timeout))

        from family_tree.graph.repository.cypher import CypherRepository
        from family_tree.graph.store.neo4j_client import Neo4jClient
        return cls(CypherRepository(Neo4jClient(config.neo4j)))

    async def open(self) -> bool:
        """Prepare the store before serving; logs and returns False when it is not ready."""
        ready = await self.repository.init()
        if not ready:
            logger.error("Family tree store is not ready; uniqueness constraints may be missing")
        return ready

    async def close(self) -> None:
        await self.repository.close()

    # ─────────────────────────────────────────
    # Tree operations (delegated)
    # ─────────────────────────────────────────

    async def create_family_tree(self, data: dict) -> dict:
        return await self.registry.create_family_tree(data)

    async def get_family_tree(self, family_tree_id: str) -> Optional[dict]:
        return await self.registry.get_family_tree(family_tree_id)

    # ─────────────────────────────────────────
    # Member operations (delegated)
    # ─────────────────────────────────────────

    async def get_family_members(self, family_tree_id: str) -> list[dict]:
        return await self.members.get_family_members(family_tree_id)

    async def invite_member(self, family_tree_id: str, user_id: str, name: str, **kwargs) -> GraphResult:
        return await self.members.invite_member(family_tree_id, user_id, name, **kwargs)

    async def register_member(self, family_tree_id: str, user_id: str, name: str, **kwargs) -> GraphResult:
        return await self.members.register_member(family_tree_id, user_id, name, **kwargs)

    async def update_profile(self, family_tree_id: str, user_id: str, **profile) -> GraphResult:
        return await self.members.update_profile(family_tree_id, user_id, **profile)

    async def set_member_status(self, family_tree_id: str, user_id: str, status: str) -> GraphResult:
        return await self.members.set_status(family_tree_id, user_id, status)

    async def get_member_summary(self, family_tree_id: str, viewer_id: Optional[str] = None) -> dict:
        return await self.members.get_member_summary(family_tree_id, viewer_id)

    # ─────────────────────────────────────────
    # Relationship operations (delegated)
    # ─────────────────────────────────────────

    async def get_family_relationships(self, family_tree_id: str) -> list[dict]:
        return await self.reader.get_family_relationships(family_tree_id)

    async def create_reciprocal_relationship(
        self,
        family_tree_id: str,
        user_id1: str,
        user_id2: str,
        relationship1: str,
        relationship2: str,
    ) -> bool:
        return await self.synchronizer.create_reciprocal_relationship(
            family_tree_id, user_id1, user_id2, relationship1, relationship2
        )

    async def relate(self, family_tree_id: str, user_id1: str, user_id2: str,
                     relationship: str, gender: Optional[str] = None) -> GraphResult:
        return await self.synchronizer.relate(family_tree_id, user_id1, user_id2, relationship, gender)

    # ─────────────────────────────────────────
    # Projections (delegated)
    # ─────────────────────────────────────────

    async def get_family_tree_visualization_data(self, family_tree_id: str) -> dict:
        return await self.visualization.get_family_tree_visualization_data(family_tree_id)

    async def get_user_personal_family_view(self, user_id: str, family_tree_id: str) -> list[dict]:
        return await self.personal_view.get_user_personal_family_view(user_id, family_tree_id)
