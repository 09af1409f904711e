"""Graph store client package."""
from family_tree.graph.store.base import QueryExecutor, Record
from family_tree.graph.store.parser import RecordParser
from family_tree.graph.store.neo4j_client import Neo4jClient

__all__ = ["QueryExecutor", "Record", "RecordParser", "Neo4jClient"]
