"""Convert store records into plain values."""

from typing import Any, Optional

from family_tree.graph.models import FamilyTree, Member, RelationshipEdge
from family_tree.graph.store.base import Record


class RecordParser:
    """Turn query records and node-like values into models."""

    @staticmethod
    def properties_of(value: Any) -> Optional[dict]:
        """
        Property mapping of a node-like value.

        Accepts plain dicts, driver nodes (anything with items()),
        and wrappers exposing a `properties` mapping.
        """
        if value is None:
            return None
        if isinstance(value, dict):
            return dict(value)
        properties = getattr(value, "properties", None)
        if isinstance(properties, dict):
            return dict(properties)
        if callable(getattr(value, "items", None)):
            return dict(value.items())
        raise TypeError(f"Not a node-like value: {type(value).__name__}")

    @staticmethod
    def to_tree(props: dict) -> FamilyTree:
        created_at = props.get("createdAt")
        return FamilyTree(
            family_tree_id=props["familyTreeId"],
            created_by=props["createdBy"],
            created_at=str(created_at) if created_at is not None else "",
        )

    @staticmethod
    def to_member(props: dict) -> Member:
        return Member(
            user_id=props["userId"],
            family_tree_id=props.get("familyTreeId", ""),
            name=props.get("name") or "",
            email=props.get("email"),
            status=props.get("status") or "",
            profile_picture=props.get("profilePicture"),
            my_relationship=props.get("myRelationship"),
        )

    @staticmethod
    def to_edge(record: Record, family_tree_id: str) -> RelationshipEdge:
        return RelationshipEdge(
            family_tree_id=family_tree_id,
            source_id=record.get("source"),
            target_id=record.get("target"),
            relationship=record.get("type"),
            source_name=record.get("sourceName"),
            target_name=record.get("targetName"),
        )

    @classmethod
    def first_node(cls, records: list[Record], alias: str) -> Optional[dict]:
        """Properties of `alias` in the first record, if any."""
        if records:
            return cls.properties_of(records[0].get(alias))
        return None
