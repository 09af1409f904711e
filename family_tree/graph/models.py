"""
Shared data models for the family tree graph.

Models:
- FamilyTree: Root entity grouping members
- Member: A person in a tree (stored as a User node)
- RelationshipEdge: Directed RELATES_TO edge between two members
- MemberRecord / RelationshipRecord / PersonalViewEntry: read views
- VisualizationData: node/link graph for the dashboard
- GraphResult: data or a typed failure reason

These are pure data structures - NO database logic here.
to_dict() emits the camelCase schema the dashboard consumes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class MemberStatus(str, Enum):
    """Known member lifecycle states."""
    ACTIVE = "active"
    INVITED = "invited"


class FailureReason(str, Enum):
    """Why an operation produced no data."""
    STORE_ERROR = "store_error"
    NOT_FOUND = "not_found"
    PARTIAL_SUCCESS = "partial_success"
    INVALID_INPUT = "invalid_input"


@dataclass
class FamilyTree:
    """Root entity of a family tree."""
    family_tree_id: str
    created_by: str
    created_at: str = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "familyTreeId": self.family_tree_id,
            "createdBy": self.created_by,
            "createdAt": self.created_at,
        }


@dataclass
class Member:
    """A member of a family tree."""
    user_id: str
    family_tree_id: str
    name: str = ""
    email: Optional[str] = None
    status: str = MemberStatus.INVITED.value
    profile_picture: Optional[str] = None
    my_relationship: Optional[str] = None  # relation to the tree creator, not an edge

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "familyTreeId": self.family_tree_id,
            "name": self.name,
            "email": self.email,
            "status": self.status,
            "profilePicture": self.profile_picture,
            "myRelationship": self.my_relationship,
        }


@dataclass
class RelationshipEdge:
    """Directed RELATES_TO edge as stored (label case preserved)."""
    family_tree_id: str
    source_id: str
    target_id: Optional[str]
    relationship: Optional[str] = None
    source_name: Optional[str] = None
    target_name: Optional[str] = None


@dataclass
class MemberRecord:
    """Member directory row: a member plus one inbound relationship."""
    user_id: str
    name: str
    email: Optional[str]
    status: str
    my_relationship: Optional[str]
    relationship: Optional[str]
    created_by: Optional[str]
    profile_picture: Optional[str]

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "name": self.name,
            "email": self.email,
            "status": self.status,
            "myRelationship": self.my_relationship,
            "relationship": self.relationship,
            "createdBy": self.created_by,
            "profilePicture": self.profile_picture,
        }


@dataclass
class RelationshipRecord:
    """Relationship reader row."""
    source: str
    target: str
    type: str
    source_name: Optional[str]
    target_name: Optional[str]

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "sourceName": self.source_name,
            "targetName": self.target_name,
        }


@dataclass
class VisualizationNode:
    id: str
    name: str
    status: str
    my_relationship: Optional[str]
    profile_picture: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "myRelationship": self.my_relationship,
            "profilePicture": self.profile_picture,
        }


@dataclass
class VisualizationLink:
    source: str
    target: str
    type: str

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target, "type": self.type}


@dataclass
class VisualizationData:
    """Node/link graph for rendering."""
    nodes: list[VisualizationNode] = field(default_factory=list)
    links: list[VisualizationLink] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


@dataclass
class PersonalViewEntry:
    """A member as seen by one viewer."""
    user_id: str
    name: str
    email: Optional[str]
    status: str
    profile_picture: Optional[str]
    relationship: Optional[str]  # viewer's outgoing label, None if no edge

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "name": self.name,
            "email": self.email,
            "status": self.status,
            "profilePicture": self.profile_picture,
            "relationship": self.relationship,
        }


@dataclass
class GraphFailure:
    """Typed failure payload within a GraphResult."""
    reason: FailureReason
    message: str = ""


@dataclass
class GraphResult(Generic[T]):
    """Result of a graph operation: data, or a reason there is none."""
    success: bool
    data: Optional[T] = None
    error: Optional[GraphFailure] = None

    @classmethod
    def ok(cls, data: Any = None) -> "GraphResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, reason: FailureReason, message: str = "") -> "GraphResult":
        return cls(success=False, error=GraphFailure(reason, message))

    @property
    def reason(self) -> Optional[FailureReason]:
        return self.error.reason if self.error else None

    def unwrap_or(self, default: Any) -> Any:
        """Return data on success, otherwise the default (fail-soft adapter)."""
        return self.data if self.success else default
