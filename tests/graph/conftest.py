"""Pytest fixtures for graph tests."""

import asyncio

import pytest

from family_tree.graph.errors import StoreError
from family_tree.graph.family.graph import FamilyTreeGraph
from family_tree.graph.repository.base import FamilyRepository
from family_tree.graph.repository.sqlite import SQLiteRepository

TREE_ID = "t1"


class FailingRepository(FamilyRepository):
    """Every store call fails, as if the database were unreachable."""

    def __init__(self):
        self.calls = 0

    async def _fail(self, *args, **kwargs):
        self.calls += 1
        raise StoreError("connection refused")

    create_tree = get_tree = add_member = update_member = _fail
    find_member = list_members = find_edge = replace_edge_pair = list_edges = _fail


class RecordingExecutor:
    """QueryExecutor double that records queries and replays canned records."""

    def __init__(self, responses=None, reachable=True):
        self.responses = list(responses or [])
        self.calls = []
        self.closed = False
        self.reachable = reachable
        self.schema_applied = False

    async def _respond(self, kind, template, parameters):
        self.calls.append((kind, template, parameters))
        return self.responses.pop(0) if self.responses else []

    async def execute(self, template, parameters):
        return await self._respond("read", template, parameters)

    async def execute_write(self, template, parameters):
        return await self._respond("write", template, parameters)

    async def init_schema(self):
        self.schema_applied = True
        return True

    async def verify(self):
        return self.reachable

    async def close(self):
        self.closed = True


class FakeNode:
    """Node-like wrapper exposing a properties mapping."""

    def __init__(self, **properties):
        self.properties = properties


@pytest.fixture
def repository(tmp_path):
    """SQLite repository in a temporary directory."""
    return SQLiteRepository(db_path=str(tmp_path / "family.db"))


@pytest.fixture
def graph(repository):
    """FamilyTreeGraph over the temporary repository."""
    return FamilyTreeGraph(repository)


@pytest.fixture
def seeded(graph):
    """Tree t1 created by u0 with members u0..u3 and no relationships."""

    async def seed():
        await graph.create_family_tree({"familyTreeId": TREE_ID, "createdBy": "u0"})
        await graph.register_member(TREE_ID, "u0", "Ramesh", email="ramesh@example.com")
        await graph.register_member(TREE_ID, "u1", "Suresh", email="suresh@example.com", my_relationship="Brother")
        await graph.invite_member(TREE_ID, "u2", "Priya", email="priya@example.com", my_relationship="Niece")
        await graph.invite_member(TREE_ID, "u3", "Arjun", email="arjun@example.com")

    asyncio.run(seed())
    return graph


@pytest.fixture
def failing_graph():
    """FamilyTreeGraph whose store always fails."""
    return FamilyTreeGraph(FailingRepository())
