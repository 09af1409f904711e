"""FamilyRepository implemented with Cypher over a QueryExecutor."""

import logging
from typing import Optional

from family_tree.graph.models import FamilyTree, Member, RelationshipEdge, utc_now
from family_tree.graph.repository.base import EDITABLE_MEMBER_FIELDS, FamilyRepository
from family_tree.graph.store.base import QueryExecutor
from family_tree.graph.store.parser import RecordParser

logger = logging.getLogger(__name__)

CREATE_TREE = """
CREATE (ft:FamilyTree {
  familyTreeId: $familyTreeId,
  createdBy: $createdBy,
  createdAt: $createdAt
})
RETURN ft
"""

GET_TREE = """
MATCH (ft:FamilyTree {familyTreeId: $familyTreeId})
RETURN ft
"""

ADD_MEMBER = """
OPTIONAL MATCH (existing:User {familyTreeId: $familyTreeId, userId: $userId})
WITH existing WHERE existing IS NULL
CREATE (u:User {
  familyTreeId: $familyTreeId,
  userId: $userId,
  name: $name,
  email: $email,
  status: $status,
  profilePicture: $profilePicture,
  myRelationship: $myRelationship
})
RETURN u
"""

UPDATE_MEMBER = """
MATCH (u:User {familyTreeId: $familyTreeId, userId: $userId})
SET u += $properties
RETURN u
"""

FIND_MEMBER = """
MATCH (u:User {familyTreeId: $familyTreeId, userId: $userId})
RETURN u
"""

LIST_MEMBERS = """
MATCH (u:User {familyTreeId: $familyTreeId})
RETURN u
ORDER BY u.name, u.userId
"""

FIND_EDGE = """
MATCH (u1:User {familyTreeId: $familyTreeId, userId: $sourceId})
      -[r:RELATES_TO]->(u2:User {familyTreeId: $familyTreeId, userId: $targetId})
RETURN u1.userId AS source, u2.userId AS target, r.relationship AS type,
       u1.name AS sourceName, u2.name AS targetName
LIMIT 1
"""

# Setting a property on both members takes their write locks first, so two
# replacements of the same pair run one after the other.
REPLACE_EDGE_PAIR = """
MATCH (u1:User {familyTreeId: $familyTreeId, userId: $userId1})
MATCH (u2:User {familyTreeId: $familyTreeId, userId: $userId2})
SET u1.relationshipsUpdatedAt = $updatedAt, u2.relationshipsUpdatedAt = $updatedAt
WITH u1, u2
OPTIONAL MATCH (u1)-[old:RELATES_TO]-(u2)
DELETE old
WITH DISTINCT u1, u2
CREATE (u1)-[r1:RELATES_TO {relationship: $relationship1, createdAt: $updatedAt}]->(u2)
CREATE (u2)-[r2:RELATES_TO {relationship: $relationship2, createdAt: $updatedAt}]->(u1)
RETURN count(r1) + count(r2) AS created
"""

LIST_EDGES = """
MATCH (u1:User {familyTreeId: $familyTreeId})-[r:RELATES_TO]->(u2:User {familyTreeId: $familyTreeId})
RETURN u1.userId AS source, u2.userId AS target, r.relationship AS type,
       u1.name AS sourceName, u2.name AS targetName
ORDER BY r.createdAt, u1.userId
"""

# Python field name -> stored property name
MEMBER_PROPERTIES = {
    "name": "name",
    "email": "email",
    "status": "status",
    "profile_picture": "profilePicture",
    "my_relationship": "myRelationship",
}


class CypherRepository(FamilyRepository):
    """Runs the family tree operations as Cypher queries."""

    def __init__(self, executor: QueryExecutor):
        self.executor = executor
        self.parser = RecordParser()

    async def create_tree(self, tree: FamilyTree) -> Optional[FamilyTree]:
        records = await self.executor.execute_write(CREATE_TREE, tree.to_dict())
        props = self.parser.first_node(records, "ft")
        return self.parser.to_tree(props) if props else None

    async def get_tree(self, family_tree_id: str) -> Optional[FamilyTree]:
        records = await self.executor.execute(GET_TREE, {"familyTreeId": family_tree_id})
        props = self.parser.first_node(records, "ft")
        return self.parser.to_tree(props) if props else None

    async def add_member(self, member: Member) -> Optional[Member]:
        records = await self.executor.execute_write(ADD_MEMBER, member.to_dict())
        props = self.parser.first_node(records, "u")
        return self.parser.to_member(props) if props else None

    async def update_member(self, family_tree_id: str, user_id: str, **fields) -> Optional[Member]:
        properties = {
            MEMBER_PROPERTIES[key]: value
            for key, value in fields.items()
            if key in EDITABLE_MEMBER_FIELDS
        }
        if not properties:
            return await self.find_member(family_tree_id, user_id)

        records = await self.executor.execute_write(UPDATE_MEMBER, {
            "familyTreeId": family_tree_id,
            "userId": user_id,
            "properties": properties,
        })
        props = self.parser.first_node(records, "u")
        return self.parser.to_member(props) if props else None

    async def find_member(self, family_tree_id: str, user_id: str) -> Optional[Member]:
        records = await self.executor.execute(FIND_MEMBER, {
            "familyTreeId": family_tree_id,
            "userId": user_id,
        })
        props = self.parser.first_node(records, "u")
        return self.parser.to_member(props) if props else None

    async def list_members(self, family_tree_id: str) -> list[Member]:
        records = await self.executor.execute(LIST_MEMBERS, {"familyTreeId": family_tree_id})
        return [self.parser.to_member(self.parser.properties_of(r["u"])) for r in records]

    async def find_edge(self, family_tree_id: str, source_id: str, target_id: str) -> Optional[RelationshipEdge]:
        records = await self.executor.execute(FIND_EDGE, {
            "familyTreeId": family_tree_id,
            "sourceId": source_id,
            "targetId": target_id,
        })
        return self.parser.to_edge(records[0], family_tree_id) if records else None

    async def replace_edge_pair(
        self,
        family_tree_id: str,
        user_id1: str,
        user_id2: str,
        label1: str,
        label2: str,
    ) -> int:
        records = await self.executor.execute_write(REPLACE_EDGE_PAIR, {
            "familyTreeId": family_tree_id,
            "userId1": user_id1,
            "userId2": user_id2,
            "relationship1": label1,
            "relationship2": label2,
            "updatedAt": utc_now(),
        })
        if not records:
            return 0
        return int(records[0].get("created") or 0)

    async def list_edges(self, family_tree_id: str) -> list[RelationshipEdge]:
        records = await self.executor.execute(LIST_EDGES, {"familyTreeId": family_tree_id})
        return [self.parser.to_edge(r, family_tree_id) for r in records]

    async def init(self) -> bool:
        if not await self.executor.verify():
            logger.warning("Graph store did not answer; schema not applied")
            return False
        return await self.executor.init_schema()

    async def close(self) -> None:
        await self.executor.close()
