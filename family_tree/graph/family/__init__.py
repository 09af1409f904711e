"""Family tree operations package."""
from family_tree.graph.family.registry import TreeRegistry
from family_tree.graph.family.members import MemberDirectory
from family_tree.graph.family.relationships import (
    PairLocks,
    RelationshipGraphReader,
    RelationshipSynchronizer,
)
from family_tree.graph.family.projections import PersonalViewProjector, VisualizationProjector
from family_tree.graph.family.graph import FamilyTreeGraph

__all__ = [
    "TreeRegistry",
    "MemberDirectory",
    "PairLocks",
    "RelationshipGraphReader",
    "RelationshipSynchronizer",
    "PersonalViewProjector",
    "VisualizationProjector",
    "FamilyTreeGraph",
]
