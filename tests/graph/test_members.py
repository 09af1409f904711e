"""Test member directory operations."""

import asyncio

from family_tree.graph.models import FailureReason, MemberStatus

TREE_ID = "t1"


def _by_id(records):
    return {r["userId"]: r for r in records}


class TestGetFamilyMembers:
    """Tests for listing members."""

    def test_lists_every_member_without_relationships(self, seeded):
        members = asyncio.run(seeded.get_family_members(TREE_ID))
        assert {m["userId"] for m in members} == {"u0", "u1", "u2", "u3"}
        assert all(m["relationship"] is None for m in members)
        assert all(m["createdBy"] is None for m in members)

    def test_record_schema(self, seeded):
        members = _by_id(asyncio.run(seeded.get_family_members(TREE_ID)))
        assert members["u1"] == {
            "userId": "u1",
            "name": "Suresh",
            "email": "suresh@example.com",
            "status": "active",
            "myRelationship": "Brother",
            "relationship": None,
            "createdBy": None,
            "profilePicture": None,
        }

    def test_inbound_label_lower_cased_with_creator(self, seeded):
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u0", "u2", "Uncle", "Niece"))
        members = _by_id(asyncio.run(seeded.get_family_members(TREE_ID)))
        assert members["u2"]["relationship"] == "uncle"
        assert members["u2"]["createdBy"] == "u0"
        assert members["u0"]["relationship"] == "niece"
        assert members["u0"]["createdBy"] == "u2"

    def test_each_member_once_with_many_inbound_edges(self, seeded):
        """Should not repeat a member for multiple inbound edges."""
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u0", "u3", "Father", "Son"))
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u1", "u3", "Uncle", "Nephew"))
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u2", "u3", "Cousin", "Cousin"))

        members = asyncio.run(seeded.get_family_members(TREE_ID))
        ids = [m["userId"] for m in members]
        assert len(ids) == len(set(ids)) == 4
        arjun = _by_id(members)["u3"]
        assert arjun["relationship"] in {"father", "uncle", "cousin"}

    def test_other_tree_not_listed(self, seeded):
        asyncio.run(seeded.register_member("t2", "x1", "Outsider"))
        members = asyncio.run(seeded.get_family_members(TREE_ID))
        assert "x1" not in {m["userId"] for m in members}

    def test_store_failure_returns_empty(self, failing_graph):
        """Should degrade to [] instead of raising."""
        assert asyncio.run(failing_graph.get_family_members(TREE_ID)) == []

    def test_store_failure_distinguishable_in_result(self, failing_graph):
        result = asyncio.run(failing_graph.members.get_family_members_result(TREE_ID))
        assert not result.success
        assert result.reason == FailureReason.STORE_ERROR


class TestMemberLifecycle:
    """Tests for invites, profile updates and status changes."""

    def test_invite_sets_invited_status(self, graph):
        result = asyncio.run(graph.invite_member(TREE_ID, "u9", "New Person", email="new@example.com"))
        assert result.success
        assert result.data.status == MemberStatus.INVITED.value

    def test_duplicate_member_rejected(self, seeded):
        result = asyncio.run(seeded.invite_member(TREE_ID, "u1", "Again"))
        assert not result.success
        assert result.reason == FailureReason.INVALID_INPUT

    def test_update_profile(self, seeded):
        result = asyncio.run(seeded.update_profile(
            TREE_ID, "u2", name="Priya S", profilePicture="avatars/u2.png"
        ))
        assert result.success
        assert result.data.name == "Priya S"
        assert result.data.profile_picture == "avatars/u2.png"
        assert result.data.email == "priya@example.com"

    def test_update_profile_rejects_unknown_fields(self, seeded):
        result = asyncio.run(seeded.update_profile(TREE_ID, "u2", status="active"))
        assert result.reason == FailureReason.INVALID_INPUT

    def test_update_missing_member(self, seeded):
        result = asyncio.run(seeded.update_profile(TREE_ID, "ghost", name="Nobody"))
        assert result.reason == FailureReason.NOT_FOUND

    def test_accepting_invite_activates(self, seeded):
        result = asyncio.run(seeded.set_member_status(TREE_ID, "u2", "Active"))
        assert result.success
        assert result.data.status == "active"

    def test_summary_counts(self, seeded):
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u0", "u1", "Brother", "Brother"))
        summary = asyncio.run(seeded.get_member_summary(TREE_ID, viewer_id="u0"))
        assert summary["totalMembers"] == 4
        assert summary["activeMembers"] == 2
        assert summary["pendingInvites"] == 2
        assert [r["userId"] for r in summary["relations"]] == ["u1"]

    def test_summary_store_failure(self, failing_graph):
        summary = asyncio.run(failing_graph.get_member_summary(TREE_ID))
        assert summary == {"totalMembers": 0, "activeMembers": 0, "pendingInvites": 0, "relations": []}
