"""Member Directory - lists members and manages their lifecycle."""

import logging
from typing import Optional

from family_tree.graph.errors import StoreError
from family_tree.graph.labels import normalize_label
from family_tree.graph.models import (
    FailureReason,
    GraphResult,
    Member,
    MemberRecord,
    MemberStatus,
)
from family_tree.graph.repository.base import FamilyRepository

logger = logging.getLogger(__name__)

# camelCase profile keys accepted from callers -> Member fields
PROFILE_FIELDS = {
    "name": "name",
    "email": "email",
    "profilePicture": "profile_picture",
    "myRelationship": "my_relationship",
}


class MemberDirectory:
    """Member listing and profile operations."""

    def __init__(self, repository: FamilyRepository):
        self.repository = repository

    async def get_family_members_result(self, family_tree_id: str) -> GraphResult:
        """Members of a tree, each with at most one inbound relationship."""
        logger.info("Fetching family members for tree: %s", family_tree_id)
        try:
            members = await self.repository.list_members(family_tree_id)
            edges = await self.repository.list_edges(family_tree_id)
        except StoreError as e:
            logger.exception("Error fetching family members for tree %s", family_tree_id)
            return GraphResult.fail(FailureReason.STORE_ERROR, str(e))

        # First inbound edge wins
        inbound = {}
        for edge in edges:
            inbound.setdefault(edge.target_id, edge)

        records = []
        seen = set()
        for member in members:
            if member.user_id in seen:
                continue
            seen.add(member.user_id)
            edge = inbound.get(member.user_id)
            records.append(MemberRecord(
                user_id=member.user_id,
                name=member.name,
                email=member.email,
                status=member.status,
                my_relationship=member.my_relationship,
                relationship=normalize_label(edge.relationship) if edge else None,
                created_by=edge.source_id if edge else None,
                profile_picture=member.profile_picture,
            ))

        logger.info("Found %d family members", len(records))
        return GraphResult.ok(records)

    async def get_family_members(self, family_tree_id: str) -> list[dict]:
        result = await self.get_family_members_result(family_tree_id)
        return [record.to_dict() for record in result.unwrap_or([])]

    # ─────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────

    async def _add(self, member: Member) -> GraphResult:
        try:
            created = await self.repository.add_member(member)
        except StoreError as e:
            logger.exception("Error adding member %s", member.user_id)
            return GraphResult.fail(FailureReason.STORE_ERROR, str(e))

        if created is None:
            return GraphResult.fail(
                FailureReason.INVALID_INPUT,
                f"Member {member.user_id} already exists in {member.family_tree_id}",
            )
        return GraphResult.ok(created)

    async def invite_member(
        self,
        family_tree_id: str,
        user_id: str,
        name: str,
        email: Optional[str] = None,
        my_relationship: Optional[str] = None,
        profile_picture: Optional[str] = None,
    ) -> GraphResult:
        """Add a member who has been invited but not yet joined."""
        return await self._add(Member(
            user_id=user_id,
            family_tree_id=family_tree_id,
            name=name,
            email=email,
            status=MemberStatus.INVITED.value,
            profile_picture=profile_picture,
            my_relationship=my_relationship,
        ))

    async def register_member(
        self,
        family_tree_id: str,
        user_id: str,
        name: str,
        email: Optional[str] = None,
        my_relationship: Optional[str] = None,
        profile_picture: Optional[str] = None,
    ) -> GraphResult:
        """Add a member who joined directly (status active)."""
        return await self._add(Member(
            user_id=user_id,
            family_tree_id=family_tree_id,
            name=name,
            email=email,
            status=MemberStatus.ACTIVE.value,
            profile_picture=profile_picture,
            my_relationship=my_relationship,
        ))

    async def _update(self, family_tree_id: str, user_id: str, **fields) -> GraphResult:
        try:
            member = await self.repository.update_member(family_tree_id, user_id, **fields)
        except StoreError as e:
            logger.exception("Error updating member %s", user_id)
            return GraphResult.fail(FailureReason.STORE_ERROR, str(e))

        if member is None:
            return GraphResult.fail(FailureReason.NOT_FOUND, f"No member {user_id} in {family_tree_id}")
        return GraphResult.ok(member)

    async def update_profile(self, family_tree_id: str, user_id: str, **profile) -> GraphResult:
        """
        Update profile fields.

        Accepts name, email, profilePicture and myRelationship;
        other keys are rejected.
        """
        unknown = set(profile) - set(PROFILE_FIELDS)
        if unknown:
            return GraphResult.fail(
                FailureReason.INVALID_INPUT,
                f"Cannot update: {', '.join(sorted(unknown))}",
            )
        fields = {PROFILE_FIELDS[key]: value for key, value in profile.items()}
        return await self._update(family_tree_id, user_id, **fields)

    async def set_status(self, family_tree_id: str, user_id: str, status: str) -> GraphResult:
        """Move a member to a new lifecycle status (e.g. invited -> active)."""
        if not status or not status.strip():
            return GraphResult.fail(FailureReason.INVALID_INPUT, "Status required")
        return await self._update(family_tree_id, user_id, status=status.strip().lower())

    async def get_member_summary(self, family_tree_id: str, viewer_id: Optional[str] = None) -> dict:
        """Dashboard counts: members, active, pending invites, relations."""
        records = (await self.get_family_members_result(family_tree_id)).unwrap_or([])

        relations = [
            r.to_dict() for r in records
            if r.relationship and r.user_id != viewer_id
        ]
        return {
            "totalMembers": len(records),
            "activeMembers": sum(1 for r in records if r.status == MemberStatus.ACTIVE.value),
            "pendingInvites": sum(1 for r in records if r.status == MemberStatus.INVITED.value),
            "relations": relations,
        }
