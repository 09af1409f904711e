"""Tree Registry - creates and fetches FamilyTree root entities."""

import logging
from typing import Optional

from family_tree.graph.errors import CreationError, StoreError
from family_tree.graph.models import FailureReason, FamilyTree, GraphResult, utc_now
from family_tree.graph.repository.base import FamilyRepository

logger = logging.getLogger(__name__)

REQUIRED_TREE_FIELDS = ("familyTreeId", "createdBy")


class TreeRegistry:
    """Operations on FamilyTree entities."""

    def __init__(self, repository: FamilyRepository):
        self.repository = repository

    async def create_family_tree(self, data: dict) -> dict:
        """
        Create a family tree.

        Args:
            data: familyTreeId and createdBy (required), createdAt (optional)

        Returns:
            The stored tree's properties

        Raises:
            ValueError: a required field is missing
            CreationError: the store created nothing
        """
        missing = [key for key in REQUIRED_TREE_FIELDS if not data.get(key)]
        if missing:
            raise ValueError(f"Missing family tree fields: {', '.join(missing)}")

        tree = FamilyTree(
            family_tree_id=data["familyTreeId"],
            created_by=data["createdBy"],
            created_at=data.get("createdAt") or utc_now(),
        )
        try:
            created = await self.repository.create_tree(tree)
        except StoreError as e:
            raise CreationError(f"Failed to create family tree {tree.family_tree_id}") from e

        if created is None:
            raise CreationError(f"Failed to create family tree {tree.family_tree_id}")

        logger.info("Created family tree %s", created.family_tree_id)
        return created.to_dict()

    async def get_family_tree_result(self, family_tree_id: str) -> GraphResult:
        try:
            tree = await self.repository.get_tree(family_tree_id)
        except StoreError as e:
            logger.exception("Error fetching family tree %s", family_tree_id)
            return GraphResult.fail(FailureReason.STORE_ERROR, str(e))

        if tree is None:
            return GraphResult.fail(FailureReason.NOT_FOUND, f"No family tree {family_tree_id}")
        return GraphResult.ok(tree.to_dict())

    async def get_family_tree(self, family_tree_id: str) -> Optional[dict]:
        """Get a tree's properties, or None when absent."""
        result = await self.get_family_tree_result(family_tree_id)
        return result.unwrap_or(None)
