"""
Seed script for Family Tree - Populates the configured store with a sample tree.

This script:
1. Creates the "demo" family tree (skipped if it already exists)
2. Adds sample members, some active and some invited
3. Links them with reciprocal relationships

Run this script to get sample data for the dashboard:
    python seed_data.py
"""

import asyncio

from family_tree.config import configure_logging
from family_tree.graph import CreationError, FamilyTreeGraph

TREE_ID = "demo"

SAMPLE_MEMBERS = [
    # user_id, name, email, my_relationship, status
    ("u-sanjay", "Sanjay Kawthalkar", "sanjay.k@example.com", None, "active"),
    ("u-anjali", "Anjali Kawthalkar", "anjali.k@example.com", "Wife", "active"),
    ("u-tejas", "Tejas Kawthalkar", "tejas@example.com", "Son", "active"),
    ("u-priya", "Priya Kawthalkar", "priya.k@example.com", "Daughter-in-law", "invited"),
    ("u-aarav", "Aarav Kawthalkar", "aarav.k@example.com", "Grandson", "invited"),
]

SAMPLE_RELATIONSHIPS = [
    # user_id1, user_id2, label of 1 -> 2, label of 2 -> 1
    ("u-sanjay", "u-anjali", "Husband", "Wife"),
    ("u-sanjay", "u-tejas", "Father", "Son"),
    ("u-anjali", "u-tejas", "Mother", "Son"),
    ("u-tejas", "u-priya", "Husband", "Wife"),
    ("u-tejas", "u-aarav", "Father", "Son"),
    ("u-sanjay", "u-aarav", "Grandfather", "Grandson"),
]


async def seed_sample_data(graph: FamilyTreeGraph):
    """Create the demo tree, its members and relationships."""
    print("=" * 80)
    print("SEEDING SAMPLE FAMILY TREE")
    print("=" * 80)

    try:
        await graph.create_family_tree({"familyTreeId": TREE_ID, "createdBy": "u-sanjay"})
        print(f"✅ Created tree {TREE_ID}")
    except CreationError:
        print(f"⚠️  Tree {TREE_ID} already exists")

    for user_id, name, email, my_relationship, status in SAMPLE_MEMBERS:
        add = graph.register_member if status == "active" else graph.invite_member
        result = await add(TREE_ID, user_id, name, email=email, my_relationship=my_relationship)
        marker = "✅" if result.success else "⚠️ "
        print(f"  {marker} {name} ({status})")

    print()
    for user_id1, user_id2, label1, label2 in SAMPLE_RELATIONSHIPS:
        ok = await graph.create_reciprocal_relationship(TREE_ID, user_id1, user_id2, label1, label2)
        marker = "✅" if ok else "❌"
        print(f"  {marker} {user_id1} -[{label1}]-> {user_id2} / -[{label2}]->")

    summary = await graph.get_member_summary(TREE_ID)
    viz = await graph.get_family_tree_visualization_data(TREE_ID)

    print("\n" + "=" * 80)
    print("SEED DATA SUMMARY")
    print("=" * 80)
    print(f"\n✅ Members: {summary['totalMembers']} "
          f"({summary['activeMembers']} active, {summary['pendingInvites']} invited)")
    print(f"✅ Links: {len(viz['links'])}")


async def main():
    """Main function."""
    configure_logging()
    graph = FamilyTreeGraph.from_settings()
    try:
        if not await graph.open():
            print("⚠️  Store is not ready, seeding anyway")
        await seed_sample_data(graph)
    finally:
        await graph.close()


if __name__ == "__main__":
    asyncio.run(main())
