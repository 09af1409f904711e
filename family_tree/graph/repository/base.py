"""Repository interface the family tree core depends on."""

from abc import ABC, abstractmethod
from typing import Optional

from family_tree.graph.models import FamilyTree, Member, RelationshipEdge

# Member fields a profile update may change
EDITABLE_MEMBER_FIELDS = {"name", "email", "status", "profile_picture", "my_relationship"}


class FamilyRepository(ABC):
    """
    Storage operations for trees, members and RELATES_TO edges.

    Every method raises StoreError when the store fails.
    Absence is reported as None / empty, never as an exception.
    """

    @abstractmethod
    async def create_tree(self, tree: FamilyTree) -> Optional[FamilyTree]:
        """Store a new tree; None if the store created nothing."""

    @abstractmethod
    async def get_tree(self, family_tree_id: str) -> Optional[FamilyTree]:
        ...

    @abstractmethod
    async def add_member(self, member: Member) -> Optional[Member]:
        """Store a new member; None if the id is already taken in the tree."""

    @abstractmethod
    async def update_member(self, family_tree_id: str, user_id: str, **fields) -> Optional[Member]:
        """Apply EDITABLE_MEMBER_FIELDS; None if the member does not exist."""

    @abstractmethod
    async def find_member(self, family_tree_id: str, user_id: str) -> Optional[Member]:
        ...

    @abstractmethod
    async def list_members(self, family_tree_id: str) -> list[Member]:
        ...

    @abstractmethod
    async def find_edge(self, family_tree_id: str, source_id: str, target_id: str) -> Optional[RelationshipEdge]:
        ...

    @abstractmethod
    async def replace_edge_pair(
        self,
        family_tree_id: str,
        user_id1: str,
        user_id2: str,
        label1: str,
        label2: str,
    ) -> int:
        """
        Replace both directed edges between two members in one transaction.

        Deletes user_id1->user_id2 and user_id2->user_id1 if present, then
        creates them labelled label1 and label2.

        Returns:
            Number of edges created (2 on success, 0 if a member is missing)
        """

    @abstractmethod
    async def list_edges(self, family_tree_id: str) -> list[RelationshipEdge]:
        """Edges whose source and target both belong to the tree, oldest first."""

    async def init(self) -> bool:
        """Prepare the store (schema, connectivity). True when it is ready."""
        return True

    async def close(self) -> None:
        """Release store resources."""
