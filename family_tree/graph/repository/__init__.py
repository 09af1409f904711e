"""Storage backends for the family tree."""
from family_tree.graph.repository.base import FamilyRepository
from family_tree.graph.repository.cypher import CypherRepository
from family_tree.graph.repository.sqlite import SQLiteRepository

__all__ = ["FamilyRepository", "CypherRepository", "SQLiteRepository"]
