"""Graph package - family tree relationships over a graph store."""

from family_tree.graph.errors import CreationError, FamilyTreeError, StoreError
from family_tree.graph.models import (
    FailureReason,
    FamilyTree,
    GraphResult,
    Member,
    MemberStatus,
    RelationshipEdge,
)
from family_tree.graph.family.graph import FamilyTreeGraph

__all__ = [
    "CreationError",
    "FamilyTreeError",
    "StoreError",
    "FailureReason",
    "FamilyTree",
    "GraphResult",
    "Member",
    "MemberStatus",
    "RelationshipEdge",
    "FamilyTreeGraph",
]
