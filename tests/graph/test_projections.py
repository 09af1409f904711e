"""Test visualization and personal view projections."""

import asyncio

TREE_ID = "t1"


class TestVisualization:
    """Tests for the node/link graph."""

    def test_nodes_for_members_without_edges(self, seeded):
        data = asyncio.run(seeded.get_family_tree_visualization_data(TREE_ID))
        assert {n["id"] for n in data["nodes"]} == {"u0", "u1", "u2", "u3"}
        assert data["links"] == []

    def test_node_schema(self, seeded):
        data = asyncio.run(seeded.get_family_tree_visualization_data(TREE_ID))
        node = next(n for n in data["nodes"] if n["id"] == "u2")
        assert node == {
            "id": "u2",
            "name": "Priya",
            "status": "invited",
            "myRelationship": "Niece",
            "profilePicture": None,
        }

    def test_one_link_per_outgoing_edge(self, seeded):
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u0", "u1", "Brother", "Brother"))
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u0", "u2", "Uncle", "Niece"))
        data = asyncio.run(seeded.get_family_tree_visualization_data(TREE_ID))

        links = sorted((link["source"], link["target"], link["type"]) for link in data["links"])
        assert links == [
            ("u0", "u1", "brother"),
            ("u0", "u2", "uncle"),
            ("u1", "u0", "brother"),
            ("u2", "u0", "niece"),
        ]

    def test_every_link_endpoint_is_a_node(self, seeded):
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u0", "u1", "Father", "Son"))
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u1", "u3", "Father", "Son"))
        data = asyncio.run(seeded.get_family_tree_visualization_data(TREE_ID))

        ids = {n["id"] for n in data["nodes"]}
        assert data["links"]
        for link in data["links"]:
            assert link["source"] in ids
            assert link["target"] in ids

    def test_store_failure_returns_empty_graph(self, failing_graph):
        data = asyncio.run(failing_graph.get_family_tree_visualization_data(TREE_ID))
        assert data == {"nodes": [], "links": []}


class TestPersonalView:
    """Tests for a viewer's own relationships."""

    def test_no_edge_is_none(self, seeded):
        view = asyncio.run(seeded.get_user_personal_family_view("u0", TREE_ID))
        assert {e["userId"] for e in view} == {"u0", "u1", "u2", "u3"}
        assert all(e["relationship"] is None for e in view)

    def test_only_viewer_outgoing_edges(self, seeded):
        """The view shows what the viewer said, not what others said."""
        asyncio.run(seeded.create_reciprocal_relationship(TREE_ID, "u0", "u2", "Uncle", "Niece"))
        view = {e["userId"]: e for e in asyncio.run(seeded.get_user_personal_family_view("u0", TREE_ID))}
        assert view["u2"]["relationship"] == "uncle"
        assert view["u1"]["relationship"] is None
        assert view["u0"]["relationship"] is None

        other = {e["userId"]: e for e in asyncio.run(seeded.get_user_personal_family_view("u2", TREE_ID))}
        assert other["u0"]["relationship"] == "niece"

    def test_entry_schema(self, seeded):
        view = asyncio.run(seeded.get_user_personal_family_view("u0", TREE_ID))
        entry = next(e for e in view if e["userId"] == "u1")
        assert entry == {
            "userId": "u1",
            "name": "Suresh",
            "email": "suresh@example.com",
            "status": "active",
            "profilePicture": None,
            "relationship": None,
        }

    def test_unknown_viewer_is_empty(self, seeded):
        assert asyncio.run(seeded.get_user_personal_family_view("ghost", TREE_ID)) == []

    def test_store_failure_returns_empty(self, failing_graph):
        assert asyncio.run(failing_graph.get_user_personal_family_view("u0", TREE_ID)) == []
